from .schema_pedido import (
    AdicionalItemRequest,
    AvancarStatusRequest,
    FluxoStatusResponse,
    ItemPedidoRequest,
    ItemPedidoResponse,
    KanbanColunaResponse,
    KanbanResponse,
    PedidoCreateRequest,
    PedidoResponse,
    TransicaoStatusResponse,
)
from .schema_pedido_status_historico import HistoricoDoPedidoResponse, PedidoStatusHistoricoOut

__all__ = [
    "AdicionalItemRequest",
    "AvancarStatusRequest",
    "FluxoStatusResponse",
    "HistoricoDoPedidoResponse",
    "ItemPedidoRequest",
    "ItemPedidoResponse",
    "KanbanColunaResponse",
    "KanbanResponse",
    "PedidoCreateRequest",
    "PedidoResponse",
    "PedidoStatusHistoricoOut",
    "TransicaoStatusResponse",
]
