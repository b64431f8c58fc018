# restaurante/api/mesas/models/model_pagamento_fechamento.py
from sqlalchemy import Column, Integer, DateTime, ForeignKey, Numeric
from sqlalchemy.orm import relationship

from restaurante.database.db_connection import Base
from restaurante.utils.database_utils import now_trimmed
from restaurante.database.infrastructure.enums import MeioPagamentoSAEnum


class PagamentoFechamentoModel(Base):
    """
    Registro dos pagamentos declarados no fechamento de uma conta.

    Só existe como parte de um fechamento aplicado (mesa ou pedido avulso);
    não há captura/liquidação aqui.
    """
    __tablename__ = "pagamentos_fechamento"

    id = Column(Integer, primary_key=True, autoincrement=True)
    mesa_id = Column(Integer, ForeignKey("mesas.id", ondelete="CASCADE"), nullable=True, index=True)
    mesa = relationship("MesaModel", back_populates="pagamentos")
    pedido_id = Column(Integer, ForeignKey("pedidos.id", ondelete="CASCADE"), nullable=True, index=True)

    ordem = Column(Integer, nullable=False, default=0)
    metodo = Column(MeioPagamentoSAEnum, nullable=False)
    valor = Column(Numeric(18, 2), nullable=False)

    created_at = Column(DateTime(timezone=True), default=now_trimmed, nullable=False)
