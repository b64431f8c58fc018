# restaurante/api/pedidos/models/model_pedido.py
from decimal import Decimal
import enum

from sqlalchemy import (
    Column, Integer, String, DateTime, ForeignKey, Numeric, Enum as SAEnum,
    UniqueConstraint, Index, Boolean,
)
from sqlalchemy.orm import relationship

from restaurante.database.db_connection import Base
from restaurante.database.infrastructure.enums import MeioPagamentoSAEnum
from restaurante.utils.database_utils import now_trimmed


class StatusPedido(enum.Enum):
    """Status possíveis para um pedido.

    Cada tipo de pedido percorre apenas parte destes status (ver status_flow):
    - delivery: pending → confirmed → preparing → ready → out_for_delivery → delivered
    - pickup:   pending → confirmed → preparing → ready_for_pickup → picked_up
    - dine_in:  pending → confirmed → preparing → ready_to_serve → served
    - cancelled: estado lateral, alcançável de qualquer status não terminal
    """
    PENDENTE = "pending"
    CONFIRMADO = "confirmed"
    PREPARANDO = "preparing"
    PRONTO = "ready"
    SAIU_PARA_ENTREGA = "out_for_delivery"
    ENTREGUE = "delivered"
    PRONTO_PARA_RETIRADA = "ready_for_pickup"
    RETIRADO = "picked_up"
    PRONTO_PARA_SERVIR = "ready_to_serve"
    SERVIDO = "served"
    CANCELADO = "cancelled"


class TipoPedido(enum.Enum):
    """Modalidade do pedido."""
    DELIVERY = "delivery"
    RETIRADA = "pickup"
    NO_LOCAL = "dine_in"


StatusPedidoEnum = SAEnum(
    *[s.value for s in StatusPedido],
    name="pedido_status_enum",
    native_enum=False,
)

TipoPedidoEnum = SAEnum(
    *[t.value for t in TipoPedido],
    name="tipo_pedido_enum",
    native_enum=False,
)


class PedidoModel(Base):
    """
    Pedido de qualquer modalidade (delivery, retirada, consumo no local).

    O status só muda por transições validadas (PedidoStatusService). Depois de
    chegar a um status terminal o pedido não muda mais, exceto pelo histórico.
    """
    __tablename__ = "pedidos"
    __table_args__ = (
        UniqueConstraint("empresa_id", "numero_pedido", name="uq_pedidos_empresa_numero"),
        Index("idx_pedidos_empresa_status", "empresa_id", "status"),
        Index("idx_pedidos_empresa_created_at", "empresa_id", "created_at"),
        Index("idx_pedidos_mesa", "mesa_id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)

    empresa_id = Column(Integer, ForeignKey("empresas.id", ondelete="RESTRICT"), nullable=False)
    empresa = relationship("EmpresaModel", lazy="select")

    # Número sequencial por empresa
    numero_pedido = Column(Integer, nullable=False)

    tipo_pedido = Column(TipoPedidoEnum, nullable=False)
    status = Column(StatusPedidoEnum, nullable=False, default=StatusPedido.PENDENTE.value)

    # Comanda (apenas dine_in em mesa)
    mesa_id = Column(Integer, ForeignKey("mesas.id", ondelete="SET NULL"), nullable=True)
    mesa = relationship("MesaModel", back_populates="pedidos", lazy="select")

    cliente_nome = Column(String(100), nullable=True)
    cliente_telefone = Column(String(30), nullable=True)
    endereco_entrega = Column(String(255), nullable=True)
    observacoes = Column(String(500), nullable=True)

    agendado_para = Column(DateTime(timezone=True), nullable=True)

    # Valores
    subtotal = Column(Numeric(18, 2), nullable=False, default=0)
    taxa_entrega = Column(Numeric(18, 2), nullable=False, default=0)
    valor_total = Column(Numeric(18, 2), nullable=False, default=0)
    meio_pagamento = Column(MeioPagamentoSAEnum, nullable=True)
    troco_para = Column(Numeric(18, 2), nullable=True)

    # Fechamento de conta
    pago = Column(Boolean, nullable=False, default=False)
    conta_aberta = Column(Boolean, nullable=False, default=True)
    fechado_em = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), default=now_trimmed, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=now_trimmed, onupdate=now_trimmed, nullable=False)

    itens = relationship(
        "PedidoItemModel",
        back_populates="pedido",
        cascade="all, delete-orphan",
        order_by="PedidoItemModel.id",
    )
    historico = relationship(
        "PedidoHistoricoModel",
        back_populates="pedido",
        cascade="all, delete-orphan",
        order_by="PedidoHistoricoModel.id",
    )

    # ---- PROPRIEDADES CALCULADAS ----
    @property
    def subtotal_calc(self) -> Decimal:
        """Calcula o subtotal baseado nos itens do pedido."""
        return sum((item.total for item in self.itens), Decimal("0"))

    @property
    def valor_total_calc(self) -> Decimal:
        """Subtotal + taxa de entrega (só delivery cobra taxa)."""
        taxa = Decimal(str(self.taxa_entrega or 0)) if self.is_delivery() else Decimal("0")
        return self.subtotal_calc + taxa

    @property
    def troco(self) -> Decimal | None:
        if self.troco_para is None:
            return None
        troco = Decimal(str(self.troco_para)) - Decimal(str(self.valor_total or 0))
        return troco if troco > 0 else None

    def is_delivery(self) -> bool:
        return self.tipo_pedido == TipoPedido.DELIVERY.value

    def is_cancelado(self) -> bool:
        return self.status == StatusPedido.CANCELADO.value
