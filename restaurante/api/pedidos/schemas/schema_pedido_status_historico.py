from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from restaurante.api.shared.schemas.schema_shared_enums import PedidoStatusEnum


class PedidoStatusHistoricoOut(BaseModel):
    id: int
    pedido_id: int
    status: PedidoStatusEnum
    motivo: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class HistoricoDoPedidoResponse(BaseModel):
    pedido_id: int
    historicos: List[PedidoStatusHistoricoOut]

    model_config = ConfigDict(from_attributes=True)
