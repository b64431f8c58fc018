from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, condecimal

from restaurante.api.pedidos.schemas.schema_pedido import PedidoResponse
from restaurante.api.shared.schemas.schema_shared_enums import MeioPagamentoEnum


class PagamentoRequest(BaseModel):
    metodo: MeioPagamentoEnum
    valor: condecimal(max_digits=18, decimal_places=2, ge=0)


class FecharComandaRequest(BaseModel):
    pagamentos: List[PagamentoRequest] = Field(default_factory=list)


class FecharContaPedidoRequest(BaseModel):
    meio_pagamento: MeioPagamentoEnum
    troco_para: Optional[condecimal(max_digits=18, decimal_places=2, ge=0)] = None


class ContagemItensResponse(BaseModel):
    pending: int = 0
    preparing: int = 0
    ready: int = 0
    delivered: int = 0


class ComandaResumoResponse(BaseModel):
    mesa_id: int
    numero: str
    label: str
    status: str
    aberta_em: Optional[datetime] = None
    cliente_nome: Optional[str] = None
    total: float
    pedidos_ativos: int
    contagem_itens: ContagemItensResponse


class ComandaDetalheResponse(ComandaResumoResponse):
    pedidos: List[PedidoResponse] = Field(default_factory=list)


class PagamentoResponse(BaseModel):
    metodo: MeioPagamentoEnum
    valor: float

    model_config = ConfigDict(from_attributes=True)


class FechamentoResponse(BaseModel):
    comanda: ComandaResumoResponse
    total: float
    pago: float
    restante: float
    pagamentos: List[PagamentoResponse]
