# restaurante/api/pedidos/models/model_pedido_historico.py
from sqlalchemy import Column, Integer, DateTime, ForeignKey, Text, Index
from sqlalchemy.orm import relationship

from restaurante.database.db_connection import Base
from restaurante.utils.database_utils import now_trimmed
from .model_pedido import StatusPedidoEnum


class PedidoHistoricoModel(Base):
    """
    Histórico de status do pedido (somente inserção).

    Uma linha por status percorrido; usado pelo estimador de tempo de preparo
    para medir confirmed → ready.
    """
    __tablename__ = "pedidos_historico"
    __table_args__ = (
        Index("idx_pedidos_historico_pedido_created_at", "pedido_id", "created_at"),
        Index("idx_pedidos_historico_status", "status"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    pedido_id = Column(Integer, ForeignKey("pedidos.id", ondelete="CASCADE"), nullable=False)
    pedido = relationship("PedidoModel", back_populates="historico")

    status = Column(StatusPedidoEnum, nullable=False)
    motivo = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=now_trimmed, nullable=False)
