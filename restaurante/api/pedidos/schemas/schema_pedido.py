from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, condecimal, model_validator

from restaurante.api.shared.schemas.schema_shared_enums import (
    MeioPagamentoEnum,
    PedidoStatusEnum,
    TipoPedidoEnum,
)


# ======================================================================
# ============================ REQUESTS ================================
# ======================================================================
class AdicionalItemRequest(BaseModel):
    nome: str = Field(..., min_length=1, max_length=100)
    preco_unitario: condecimal(max_digits=18, decimal_places=2, ge=0) = 0
    quantidade: int = Field(1, ge=1)


class ItemPedidoRequest(BaseModel):
    produto_nome: str = Field(..., min_length=1, max_length=150)
    preco_unitario: condecimal(max_digits=18, decimal_places=2, ge=0)
    quantidade: int = Field(1, ge=1)
    adicionais: List[AdicionalItemRequest] = Field(default_factory=list)
    observacao: Optional[str] = Field(None, max_length=255)


class PedidoCreateRequest(BaseModel):
    empresa_id: int = Field(..., gt=0)
    tipo_pedido: TipoPedidoEnum
    itens: List[ItemPedidoRequest] = Field(..., min_length=1)

    cliente_nome: Optional[str] = Field(None, max_length=100)
    cliente_telefone: Optional[str] = Field(None, max_length=30)
    endereco_entrega: Optional[str] = Field(None, max_length=255)
    observacoes: Optional[str] = Field(None, max_length=500)

    agendado_para: Optional[datetime] = None
    meio_pagamento: Optional[MeioPagamentoEnum] = None
    troco_para: Optional[condecimal(max_digits=18, decimal_places=2, ge=0)] = None

    # Consumo no local: número da mesa (abre a comanda se ainda não houver uma aberta)
    mesa_numero: Optional[str] = Field(None, max_length=10)

    @model_validator(mode="after")
    def _validar_por_tipo(self):
        if self.tipo_pedido == TipoPedidoEnum.NO_LOCAL and not self.mesa_numero:
            raise ValueError("mesa_numero é obrigatório para pedidos dine_in")
        if self.tipo_pedido == TipoPedidoEnum.DELIVERY and not self.endereco_entrega:
            raise ValueError("endereco_entrega é obrigatório para pedidos delivery")
        if self.troco_para is not None and self.meio_pagamento != MeioPagamentoEnum.DINHEIRO:
            raise ValueError("troco_para só se aplica a pagamento em dinheiro")
        return self


class AvancarStatusRequest(BaseModel):
    status: PedidoStatusEnum
    motivo: Optional[str] = Field(None, max_length=255)


# ======================================================================
# ============================ RESPONSES ===============================
# ======================================================================
class ItemPedidoResponse(BaseModel):
    id: int
    produto_nome: str
    preco_unitario: float
    quantidade: int
    adicionais_snapshot: Optional[list[dict]] = None
    observacao: Optional[str] = None
    total: float

    model_config = ConfigDict(from_attributes=True)


class PedidoResponse(BaseModel):
    id: int
    empresa_id: int
    numero_pedido: int
    tipo_pedido: TipoPedidoEnum
    status: PedidoStatusEnum
    status_label: Optional[str] = None
    proximo_status: Optional[PedidoStatusEnum] = None
    proxima_acao: Optional[str] = None
    mesa_id: Optional[int] = None
    cliente_nome: Optional[str] = None
    cliente_telefone: Optional[str] = None
    endereco_entrega: Optional[str] = None
    observacoes: Optional[str] = None
    agendado_para: Optional[datetime] = None
    subtotal: float
    taxa_entrega: float
    valor_total: float
    meio_pagamento: Optional[MeioPagamentoEnum] = None
    troco_para: Optional[float] = None
    pago: bool
    conta_aberta: bool
    created_at: datetime
    itens: List[ItemPedidoResponse] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class TransicaoStatusResponse(BaseModel):
    """Resultado de um avanço de status. `recibo_texto` vem preenchido quando a impressão falhou."""
    pedido: PedidoResponse
    impresso: bool = False
    aviso_impressao: Optional[str] = None
    recibo_texto: Optional[str] = None


class KanbanColunaResponse(BaseModel):
    chave: str
    label: str
    total: int
    pedidos: List[PedidoResponse]


class KanbanResponse(BaseModel):
    data: date
    colunas: List[KanbanColunaResponse]


class FluxoStatusResponse(BaseModel):
    tipo_pedido: TipoPedidoEnum
    fluxo: List[PedidoStatusEnum]
    labels: dict[str, str]
