from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

from fastapi import HTTPException, status
from sqlalchemy import func, update
from sqlalchemy.orm import Session, selectinload

from restaurante.api.pedidos.models.model_pedido import PedidoModel, StatusPedido
from restaurante.api.pedidos.models.model_pedido_item import PedidoItemModel
from restaurante.api.pedidos.models.model_pedido_historico import PedidoHistoricoModel
from restaurante.api.mesas.models.model_pagamento_fechamento import PagamentoFechamentoModel
from restaurante.core.exceptions import ContaJaFechada, InvalidTransition
from restaurante.utils.database_utils import now_trimmed


class PedidoRepository:
    """
    Acesso a pedidos. Métodos com formato de retorno fixo (sem joins montados
    pelo chamador).
    """

    def __init__(self, db: Session):
        self.db = db

    # ----------------- Leitura -----------------
    def get_pedido(self, pedido_id: int) -> Optional[PedidoModel]:
        return (
            self.db.query(PedidoModel)
            .options(
                selectinload(PedidoModel.itens),
                selectinload(PedidoModel.historico),
            )
            .filter(PedidoModel.id == pedido_id)
            .first()
        )

    def get(self, pedido_id: int) -> PedidoModel:
        pedido = self.get_pedido(pedido_id)
        if not pedido:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Pedido não encontrado")
        return pedido

    def get_historico(self, pedido_id: int) -> list[PedidoHistoricoModel]:
        return (
            self.db.query(PedidoHistoricoModel)
            .filter(PedidoHistoricoModel.pedido_id == pedido_id)
            .order_by(PedidoHistoricoModel.created_at.asc(), PedidoHistoricoModel.id.asc())
            .all()
        )

    def list_by_mesa(self, mesa_id: int) -> list[PedidoModel]:
        """Todos os pedidos da comanda (inclusive cancelados), do mais antigo ao mais novo."""
        return (
            self.db.query(PedidoModel)
            .options(selectinload(PedidoModel.itens))
            .filter(PedidoModel.mesa_id == mesa_id)
            .order_by(PedidoModel.created_at.asc(), PedidoModel.id.asc())
            .all()
        )

    def list_kanban(self, empresa_id: int, inicio: datetime, fim: datetime, limit: int = 500) -> list[PedidoModel]:
        return (
            self.db.query(PedidoModel)
            .options(selectinload(PedidoModel.itens))
            .filter(
                PedidoModel.empresa_id == empresa_id,
                PedidoModel.created_at >= inicio,
                PedidoModel.created_at < fim,
            )
            .order_by(PedidoModel.created_at.desc())
            .limit(limit)
            .all()
        )

    def list_concluidos_com_historico(
        self,
        empresa_id: int,
        *,
        desde: datetime,
        status: Iterable[str],
    ) -> list[PedidoModel]:
        """Pedidos criados a partir de `desde` já prontos (ou além), com histórico carregado."""
        return (
            self.db.query(PedidoModel)
            .options(selectinload(PedidoModel.historico))
            .filter(
                PedidoModel.empresa_id == empresa_id,
                PedidoModel.created_at >= desde,
                PedidoModel.status.in_(list(status)),
            )
            .all()
        )

    def proximo_numero(self, empresa_id: int) -> int:
        atual = (
            self.db.query(func.max(PedidoModel.numero_pedido))
            .filter(PedidoModel.empresa_id == empresa_id)
            .scalar()
        )
        return (atual or 0) + 1

    # ----------------- Escrita -----------------
    def criar_pedido(self, *, itens: list[dict], **dados) -> PedidoModel:
        """Cria pedido + itens + histórico inicial numa única transação."""
        pedido = PedidoModel(**dados)
        pedido.numero_pedido = self.proximo_numero(pedido.empresa_id)
        pedido.status = StatusPedido.PENDENTE.value
        for item in itens:
            pedido.itens.append(PedidoItemModel(**item))

        pedido.subtotal = pedido.subtotal_calc
        pedido.valor_total = pedido.valor_total_calc

        self.db.add(pedido)
        self.db.flush()
        self.add_status_historico(pedido.id, StatusPedido.PENDENTE.value, motivo="Pedido criado")
        self.db.commit()
        self.db.refresh(pedido)
        return pedido

    def add_status_historico(self, pedido_id: int, status: str, motivo: str | None = None):
        hist = PedidoHistoricoModel(pedido_id=pedido_id, status=status, motivo=motivo)
        self.db.add(hist)

    def atualizar_status(
        self,
        pedido_id: int,
        *,
        status_esperado: str,
        novo_status: str,
        motivo: str | None = None,
    ) -> PedidoModel:
        """
        Grava o novo status só se o atual ainda for `status_esperado`.

        Duas requisições concorrentes sobre o mesmo pedido: a segunda não
        encontra mais o status esperado e recebe InvalidTransition.
        """
        result = self.db.execute(
            update(PedidoModel)
            .where(PedidoModel.id == pedido_id, PedidoModel.status == status_esperado)
            .values(status=novo_status, updated_at=now_trimmed())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self.db.rollback()
            raise InvalidTransition(
                status_esperado,
                novo_status,
                "O status do pedido foi alterado por outra operação; recarregue e tente novamente",
            )
        self.add_status_historico(pedido_id, novo_status, motivo=motivo)
        self.db.commit()

        pedido = self.get(pedido_id)
        self.db.refresh(pedido)
        return pedido

    def fechar_conta(
        self,
        pedido_id: int,
        *,
        meio_pagamento: str,
        valor: Decimal,
        troco_para: Decimal | None = None,
    ) -> PedidoModel:
        """Fecha a conta de um pedido avulso (um único meio de pagamento)."""
        agora = now_trimmed()
        try:
            result = self.db.execute(
                update(PedidoModel)
                .where(PedidoModel.id == pedido_id, PedidoModel.conta_aberta.is_(True))
                .values(
                    meio_pagamento=meio_pagamento,
                    troco_para=troco_para,
                    pago=True,
                    conta_aberta=False,
                    fechado_em=agora,
                    updated_at=agora,
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise ContaJaFechada(f"A conta do pedido {pedido_id} já está fechada")
            self.db.add(
                PagamentoFechamentoModel(pedido_id=pedido_id, ordem=0, metodo=meio_pagamento, valor=valor)
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        pedido = self.get(pedido_id)
        self.db.refresh(pedido)
        return pedido
