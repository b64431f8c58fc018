"""
Router admin de pedidos: criação, consulta, avanço de status e Kanban.
Todos os tipos (delivery, retirada, consumo no local) passam por aqui.
"""
from datetime import date

from fastapi import APIRouter, Depends, Path, Query, status

from restaurante.api.mesas.schemas import FecharContaPedidoRequest
from restaurante.api.mesas.services.dependencies import get_fechamento_service
from restaurante.api.mesas.services.service_fechamento import FechamentoService
from restaurante.api.pedidos.schemas import (
    AvancarStatusRequest,
    FluxoStatusResponse,
    HistoricoDoPedidoResponse,
    KanbanResponse,
    PedidoCreateRequest,
    PedidoResponse,
    TransicaoStatusResponse,
)
from restaurante.api.pedidos.services.dependencies import (
    get_pedido_service,
    get_pedido_status_service,
)
from restaurante.api.pedidos.services.service_pedido import PedidoService, montar_pedido_response
from restaurante.api.pedidos.services.service_pedido_status import PedidoStatusService
from restaurante.api.pedidos.services.status_flow import STATUS_LABELS, get_status_flow
from restaurante.api.shared.schemas.schema_shared_enums import TipoPedidoEnum
from restaurante.utils.logger import logger

router = APIRouter(prefix="/api/pedidos/admin", tags=["Admin - Pedidos"])


# ======================================================================
# ============================ FLUXOS ==================================
# ======================================================================
@router.get("/fluxos/{tipo_pedido}", response_model=FluxoStatusResponse)
def obter_fluxo_status(tipo_pedido: TipoPedidoEnum):
    fluxo = get_status_flow(tipo_pedido)
    return FluxoStatusResponse(
        tipo_pedido=tipo_pedido,
        fluxo=fluxo,
        labels={s: STATUS_LABELS[s] for s in fluxo},
    )


# ======================================================================
# ============================ KANBAN ==================================
# ======================================================================
@router.get("/kanban", response_model=KanbanResponse, status_code=status.HTTP_200_OK)
def listar_pedidos_kanban(
    date_filter: date = Query(..., description="Data dos pedidos (YYYY-MM-DD)"),
    empresa_id: int = Query(..., gt=0),
    limit: int = Query(500, ge=1, le=1000),
    incluir_cancelados: bool = Query(False),
    svc: PedidoService = Depends(get_pedido_service),
):
    """
    Pedidos do dia agrupados nas colunas do painel. Status equivalentes
    entre tipos (ex.: ready / ready_for_pickup / ready_to_serve) caem na
    mesma coluna.
    """
    logger.info(f"[Pedidos] Listar Kanban - empresa_id={empresa_id}, date_filter={date_filter}")
    return svc.listar_kanban(empresa_id, date_filter, limit=limit, incluir_cancelados=incluir_cancelados)


# ======================================================================
# ====================== PEDIDOS GERAIS ================================
# ======================================================================
@router.post("", response_model=PedidoResponse, status_code=status.HTTP_201_CREATED)
def criar_pedido(
    payload: PedidoCreateRequest,
    svc: PedidoService = Depends(get_pedido_service),
):
    """
    Cria um pedido. Pedido imediato exige a loja aberta; pedido agendado
    exige um dos horários oferecidos em `/api/loja/{empresa_id}/agendamento/horarios`.
    Pedidos `dine_in` entram na comanda aberta da mesa (ou abrem uma nova).
    """
    pedido = svc.criar_pedido(payload)
    return montar_pedido_response(pedido)


@router.get("/{pedido_id}", response_model=PedidoResponse, status_code=status.HTTP_200_OK)
def get_pedido(
    pedido_id: int = Path(..., description="ID do pedido", gt=0),
    svc: PedidoService = Depends(get_pedido_service),
):
    logger.info(f"[Pedidos] Buscar pedido - pedido_id={pedido_id}")
    return montar_pedido_response(svc.obter_pedido(pedido_id))


@router.get("/{pedido_id}/historico", response_model=HistoricoDoPedidoResponse, status_code=status.HTTP_200_OK)
def obter_historico_pedido(
    pedido_id: int = Path(..., description="ID do pedido", gt=0),
    svc: PedidoService = Depends(get_pedido_service),
):
    logger.info(f"[Pedidos] Obter histórico - pedido_id={pedido_id}")
    return svc.obter_historico(pedido_id)


@router.put("/{pedido_id}/status", response_model=TransicaoStatusResponse, status_code=status.HTTP_200_OK)
async def atualizar_status_pedido(
    payload: AvancarStatusRequest,
    pedido_id: int = Path(..., description="ID do pedido", gt=0),
    svc: PedidoStatusService = Depends(get_pedido_status_service),
):
    """
    Avança o pedido para o próximo status do fluxo do seu tipo, ou cancela.
    Qualquer outro destino retorna 409 (TRANSICAO_INVALIDA).
    """
    logger.info(f"[Pedidos] Atualizar status - pedido_id={pedido_id} → {payload.status.value}")
    resultado = await svc.avancar_status(pedido_id, payload.status, motivo=payload.motivo)
    return TransicaoStatusResponse(
        pedido=montar_pedido_response(resultado.pedido),
        impresso=resultado.impresso,
        aviso_impressao=resultado.aviso_impressao,
        recibo_texto=resultado.recibo_texto,
    )


@router.post("/{pedido_id}/fechar-conta", response_model=PedidoResponse, status_code=status.HTTP_200_OK)
def fechar_conta_pedido(
    payload: FecharContaPedidoRequest,
    pedido_id: int = Path(..., description="ID do pedido", gt=0),
    svc: FechamentoService = Depends(get_fechamento_service),
):
    """Fecha a conta de um pedido avulso (delivery/retirada) com um único meio de pagamento."""
    logger.info(f"[Pedidos] Fechar conta - pedido_id={pedido_id} meio={payload.meio_pagamento.value}")
    pedido = svc.fechar_conta_pedido(
        pedido_id,
        payload.meio_pagamento.value,
        troco_para=payload.troco_para,
    )
    return montar_pedido_response(pedido)
