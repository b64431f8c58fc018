"""
Schemas compartilhados entre diferentes domínios
"""

from restaurante.api.shared.schemas.schema_shared_enums import (
    PedidoStatusEnum,
    TipoPedidoEnum,
    MeioPagamentoEnum,
    ModoTempoPreparoEnum,
)

__all__ = [
    "PedidoStatusEnum",
    "TipoPedidoEnum",
    "MeioPagamentoEnum",
    "ModoTempoPreparoEnum",
]
