from __future__ import annotations

from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Optional
from zoneinfo import ZoneInfo

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from restaurante.api.empresas.repositories.repo_empresa import EmpresaRepository
from restaurante.api.loja.services.service_loja import construir_disponibilidade
from restaurante.api.mesas.repositories.repo_mesas import MesaRepository
from restaurante.api.pedidos.models.model_pedido import PedidoModel, TipoPedido
from restaurante.api.pedidos.repositories.repo_pedidos import PedidoRepository
from restaurante.api.pedidos.schemas.schema_pedido import (
    KanbanColunaResponse,
    KanbanResponse,
    PedidoCreateRequest,
    PedidoResponse,
)
from restaurante.api.pedidos.schemas.schema_pedido_status_historico import (
    HistoricoDoPedidoResponse,
    PedidoStatusHistoricoOut,
)
from restaurante.api.pedidos.services.service_pedido_helpers import (
    _dec,
    calcular_total_item,
    snapshot_adicionais,
)
from restaurante.api.pedidos.services.status_flow import (
    PROXIMA_ACAO_LABELS,
    STATUS_LABELS,
    agrupar_kanban,
    get_next_status,
)
from restaurante.api.shared.schemas.schema_shared_enums import MeioPagamentoEnum, PedidoStatusEnum
from restaurante.core.exceptions import MeioPagamentoInvalido, NoAvailableSlots
from restaurante.utils.database_utils import now_trimmed
from restaurante.utils.logger import logger


def montar_pedido_response(pedido: PedidoModel) -> PedidoResponse:
    proximo = get_next_status(pedido)
    resp = PedidoResponse.model_validate(pedido)
    return resp.model_copy(
        update={
            "status_label": STATUS_LABELS.get(pedido.status),
            "proximo_status": PedidoStatusEnum(proximo) if proximo else None,
            "proxima_acao": PROXIMA_ACAO_LABELS.get(proximo) if proximo else None,
        }
    )


class PedidoService:
    """Criação e leitura de pedidos (delivery, retirada e consumo no local)."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = PedidoRepository(db)
        self.repo_empresa = EmpresaRepository(db)
        self.repo_mesa = MesaRepository(db)

    # ---------------- Criação ----------------
    def criar_pedido(self, payload: PedidoCreateRequest, *, agora: Optional[datetime] = None) -> PedidoModel:
        empresa = self.repo_empresa.get_or_404(payload.empresa_id)
        agora = agora or now_trimmed(tz_name=empresa.timezone)
        disponibilidade = construir_disponibilidade(empresa, agora)

        agendado_para = None
        if payload.agendado_para is not None:
            if not empresa.permite_agendamento:
                raise NoAvailableSlots("Esta loja não aceita pedidos agendados")
            agendado_para = disponibilidade.validar_agendamento(payload.agendado_para)
        elif not disponibilidade.is_open_now():
            proxima = disponibilidade.next_open_time()
            mensagem = "Loja fechada no momento"
            if disponibilidade.fechado_temporariamente:
                mensagem = "Loja temporariamente fechada"
            elif proxima is not None:
                mensagem += f"; próxima abertura: {proxima.dia} às {proxima.horario}"
            raise NoAvailableSlots(mensagem)

        meio = payload.meio_pagamento.value if payload.meio_pagamento else None
        if meio is not None and meio not in empresa.meios_pagamento_habilitados:
            raise MeioPagamentoInvalido(f"Meio de pagamento '{meio}' não está habilitado para esta loja")

        is_delivery = payload.tipo_pedido.value == TipoPedido.DELIVERY.value
        taxa_entrega = _dec(empresa.taxa_entrega) if is_delivery else Decimal("0")

        itens = []
        subtotal = Decimal("0")
        for item in payload.itens:
            subtotal += calcular_total_item(item.preco_unitario, item.quantidade, item.adicionais)
            itens.append(
                {
                    "produto_nome": item.produto_nome,
                    "preco_unitario": _dec(item.preco_unitario),
                    "quantidade": item.quantidade,
                    "adicionais_snapshot": snapshot_adicionais(item.adicionais),
                    "observacao": item.observacao,
                }
            )

        troco_para = None
        if payload.troco_para is not None and meio == MeioPagamentoEnum.DINHEIRO.value:
            troco_para = _dec(payload.troco_para)
            if troco_para < subtotal + taxa_entrega:
                raise HTTPException(
                    status.HTTP_400_BAD_REQUEST,
                    "O valor para troco deve ser maior ou igual ao total do pedido",
                )

        mesa_id = None
        if payload.tipo_pedido.value == TipoPedido.NO_LOCAL.value:
            mesa = self.repo_mesa.get_aberta_por_numero(empresa.id, payload.mesa_numero)
            if mesa is None:
                mesa = self.repo_mesa.abrir(empresa.id, payload.mesa_numero, cliente_nome=payload.cliente_nome)
            mesa_id = mesa.id

        pedido = self.repo.criar_pedido(
            itens=itens,
            empresa_id=empresa.id,
            tipo_pedido=payload.tipo_pedido.value,
            mesa_id=mesa_id,
            cliente_nome=payload.cliente_nome,
            cliente_telefone=payload.cliente_telefone,
            endereco_entrega=payload.endereco_entrega if is_delivery else None,
            observacoes=payload.observacoes,
            agendado_para=agendado_para,
            taxa_entrega=taxa_entrega,
            meio_pagamento=meio,
            troco_para=troco_para,
        )
        logger.info(
            f"[Pedidos] Pedido criado id={pedido.id} numero={pedido.numero_pedido} "
            f"tipo={pedido.tipo_pedido} empresa_id={empresa.id} total={pedido.valor_total}"
        )
        return pedido

    # ---------------- Leitura ----------------
    def obter_pedido(self, pedido_id: int) -> PedidoModel:
        return self.repo.get(pedido_id)

    def obter_historico(self, pedido_id: int) -> HistoricoDoPedidoResponse:
        self.repo.get(pedido_id)
        return HistoricoDoPedidoResponse(
            pedido_id=pedido_id,
            historicos=[PedidoStatusHistoricoOut.model_validate(h) for h in self.repo.get_historico(pedido_id)],
        )

    def listar_kanban(
        self,
        empresa_id: int,
        data: date,
        *,
        limit: int = 500,
        incluir_cancelados: bool = False,
    ) -> KanbanResponse:
        empresa = self.repo_empresa.get_or_404(empresa_id)
        tz = ZoneInfo(empresa.timezone)
        inicio = datetime.combine(data, time.min, tzinfo=tz)
        fim = inicio + timedelta(days=1)

        pedidos = self.repo.list_kanban(empresa_id, inicio, fim, limit=limit)
        colunas = agrupar_kanban(pedidos, incluir_cancelados=incluir_cancelados)
        return KanbanResponse(
            data=data,
            colunas=[
                KanbanColunaResponse(
                    chave=c.chave,
                    label=c.label,
                    total=len(c.pedidos),
                    pedidos=[montar_pedido_response(p) for p in c.pedidos],
                )
                for c in colunas
            ],
        )
