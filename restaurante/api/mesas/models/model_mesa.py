# restaurante/api/mesas/models/model_mesa.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.types import TypeDecorator, String as SATypeString
import enum

from restaurante.database.db_connection import Base
from restaurante.utils.database_utils import now_trimmed


class StatusMesa(str, enum.Enum):
    """Status da comanda de uma mesa"""
    ABERTA = "open"
    FECHADA = "closed"

    @classmethod
    def _missing_(cls, value):
        if value is None:
            return None
        normalized = str(value).lower().strip()
        alias_map = {
            "open": cls.ABERTA,
            "aberta": cls.ABERTA,
            "closed": cls.FECHADA,
            "fechada": cls.FECHADA,
        }
        return alias_map.get(normalized, None)


class StatusMesaType(TypeDecorator):
    """Grava o valor do enum e aceita os apelidos em português na leitura."""

    impl = SATypeString(10)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, StatusMesa):
            return value.value
        alias = StatusMesa._missing_(value)
        if alias is None:
            raise ValueError(f"Status de mesa inválido: {value}")
        return alias.value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        alias = StatusMesa._missing_(value)
        if alias is None:
            raise LookupError(f"Valor de status de mesa desconhecido no banco: {value}")
        return alias


class MesaModel(Base):
    """
    Comanda de uma mesa: existe do primeiro pedido até o fechamento da conta.

    Uma mesa física pode ter várias comandas ao longo do tempo, mas no máximo
    uma aberta por vez.
    """
    __tablename__ = "mesas"
    __table_args__ = (
        Index("idx_mesas_empresa_numero_status", "empresa_id", "numero", "status"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    empresa_id = Column(Integer, ForeignKey("empresas.id", ondelete="CASCADE"), nullable=False)
    empresa = relationship("EmpresaModel", lazy="select")

    numero = Column(String(10), nullable=False)
    status = Column(StatusMesaType(), nullable=False, default=StatusMesa.ABERTA)
    cliente_nome = Column(String(100), nullable=True)

    aberta_em = Column(DateTime(timezone=True), default=now_trimmed, nullable=False)
    fechada_em = Column(DateTime(timezone=True), nullable=True)

    pedidos = relationship(
        "PedidoModel",
        back_populates="mesa",
        order_by="PedidoModel.created_at",
    )
    pagamentos = relationship(
        "PagamentoFechamentoModel",
        back_populates="mesa",
        cascade="all, delete-orphan",
    )

    @property
    def label(self) -> str:
        return f"Mesa {self.numero}"

    @property
    def is_aberta(self) -> bool:
        return self.status == StatusMesa.ABERTA
