"""
Fechamento de conta.

- Comanda de mesa: um ou mais pagamentos parciais que precisam somar o total
  da comanda (tolerância de R$ 0,01).
- Pedido avulso: um único meio de pagamento; dinheiro pode informar
  `troco_para`.

Aqui só existe a aritmética de conferência e a gravação do fechamento. Não
há captura nem liquidação de pagamento.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from restaurante.api.empresas.repositories.repo_empresa import EmpresaRepository
from restaurante.api.mesas.repositories.repo_mesas import MesaRepository
from restaurante.api.mesas.services.service_comanda import ComandaResumo, aggregate_tab, total as total_comanda
from restaurante.api.pedidos.models.model_pedido import PedidoModel
from restaurante.api.pedidos.repositories.repo_pedidos import PedidoRepository
from restaurante.api.pedidos.services.service_pedido_helpers import _dec
from restaurante.api.shared.schemas.schema_shared_enums import MeioPagamentoEnum
from restaurante.core.exceptions import (
    ContaJaFechada,
    MeioPagamentoInvalido,
    PagamentoInvalido,
    ReconciliationMismatch,
)
from restaurante.utils.logger import logger

TOLERANCIA = Decimal("0.01")

MEIOS_PAGAMENTO = frozenset(m.value for m in MeioPagamentoEnum)


@dataclass(frozen=True)
class Pagamento:
    metodo: str
    valor: Decimal


@dataclass(frozen=True)
class ResultadoReconciliacao:
    alvo: Decimal
    pago: Decimal
    restante: Decimal


@dataclass
class ResultadoFechamento:
    comanda: ComandaResumo
    reconciliacao: ResultadoReconciliacao
    pagamentos: list[Pagamento]


def reconciliar(alvo, pagamentos: Iterable[Pagamento]) -> ResultadoReconciliacao:
    """
    restante = alvo − Σ valores. Aceita se |restante| ≤ 0,01; senão levanta
    ReconciliationMismatch (restante > 0 falta, < 0 excesso).
    """
    alvo = _dec(alvo)
    pago = Decimal("0.00")
    for pagamento in pagamentos:
        valor = _dec(pagamento.valor)
        if valor < 0:
            raise PagamentoInvalido(f"Valor de pagamento negativo: {valor}")
        pago += valor

    restante = alvo - pago
    if abs(restante) > TOLERANCIA:
        raise ReconciliationMismatch(restante)
    return ResultadoReconciliacao(alvo=alvo, pago=pago, restante=restante)


def validar_meios_pagamento(metodos: Iterable[str], habilitados: set[str]) -> None:
    for metodo in metodos:
        if metodo not in MEIOS_PAGAMENTO:
            raise MeioPagamentoInvalido(f"Meio de pagamento desconhecido: '{metodo}'")
        if metodo not in habilitados:
            raise MeioPagamentoInvalido(f"Meio de pagamento '{metodo}' não está habilitado para esta loja")


class FechamentoService:
    def __init__(self, db: Session):
        self.db = db
        self.repo_mesa = MesaRepository(db)
        self.repo_pedido = PedidoRepository(db)
        self.repo_empresa = EmpresaRepository(db)

    def reconcile_and_close(self, mesa_id: int, pagamentos: Sequence[Pagamento]) -> ResultadoFechamento:
        """Confere os pagamentos contra o total da comanda e fecha a mesa."""
        mesa = self.repo_mesa.get_or_404(mesa_id)
        if not mesa.is_aberta:
            raise ContaJaFechada(f"A comanda da mesa {mesa.numero} já está fechada")

        empresa = self.repo_empresa.get_or_404(mesa.empresa_id)
        validar_meios_pagamento((p.metodo for p in pagamentos), empresa.meios_pagamento_habilitados)

        reconciliacao = reconciliar(total_comanda(mesa), pagamentos)

        mesa = self.repo_mesa.fechar_comanda(
            mesa_id,
            [(p.metodo, _dec(p.valor)) for p in pagamentos],
            alvo=reconciliacao.alvo,
        )
        logger.info(
            f"[Fechamento] Mesa {mesa.numero} (id={mesa_id}) fechada: total={reconciliacao.alvo} "
            f"pago={reconciliacao.pago} pagamentos={len(pagamentos)}"
        )
        return ResultadoFechamento(
            comanda=aggregate_tab(mesa),
            reconciliacao=reconciliacao,
            pagamentos=list(pagamentos),
        )

    def fechar_conta_pedido(
        self,
        pedido_id: int,
        meio_pagamento: str,
        troco_para: Optional[Decimal] = None,
    ) -> PedidoModel:
        """Fecha a conta de um pedido avulso com um único meio de pagamento."""
        pedido = self.repo_pedido.get(pedido_id)
        if pedido.mesa_id is not None:
            raise HTTPException(
                status.HTTP_400_BAD_REQUEST,
                "Pedido faz parte da comanda de uma mesa; feche a conta pela mesa",
            )
        if pedido.is_cancelado():
            raise HTTPException(status.HTTP_400_BAD_REQUEST, "Pedido cancelado não tem conta a fechar")
        if not pedido.conta_aberta:
            raise ContaJaFechada(f"A conta do pedido {pedido_id} já está fechada")

        empresa = self.repo_empresa.get_or_404(pedido.empresa_id)
        validar_meios_pagamento([meio_pagamento], empresa.meios_pagamento_habilitados)

        total = _dec(pedido.valor_total)
        if troco_para is not None:
            if meio_pagamento != MeioPagamentoEnum.DINHEIRO.value:
                raise MeioPagamentoInvalido("Troco só se aplica a pagamento em dinheiro")
            troco_para = _dec(troco_para)
            if troco_para < total:
                raise ReconciliationMismatch(total - troco_para)

        pedido = self.repo_pedido.fechar_conta(
            pedido_id,
            meio_pagamento=meio_pagamento,
            valor=total,
            troco_para=troco_para,
        )
        logger.info(f"[Fechamento] Pedido {pedido_id} fechado: {meio_pagamento} total={total}")
        return pedido
