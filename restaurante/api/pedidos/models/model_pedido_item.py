# restaurante/api/pedidos/models/model_pedido_item.py
from decimal import Decimal

from sqlalchemy import Column, Integer, String, ForeignKey, Numeric, JSON
from sqlalchemy.orm import relationship

from restaurante.database.db_connection import Base


class PedidoItemModel(Base):
    """
    Item de pedido. Criado junto com o pedido e nunca alterado depois.

    `adicionais_snapshot` congela os adicionais escolhidos:
    [{"nome": "Bacon", "preco_unitario": "4.00", "quantidade": 1}]
    """
    __tablename__ = "pedidos_itens"

    id = Column(Integer, primary_key=True, autoincrement=True)
    pedido_id = Column(Integer, ForeignKey("pedidos.id", ondelete="CASCADE"), nullable=False, index=True)
    pedido = relationship("PedidoModel", back_populates="itens")

    produto_nome = Column(String(150), nullable=False)
    preco_unitario = Column(Numeric(18, 2), nullable=False)
    quantidade = Column(Integer, nullable=False, default=1)
    adicionais_snapshot = Column(JSON, nullable=True)
    observacao = Column(String(255), nullable=True)

    @property
    def total_adicionais(self) -> Decimal:
        """Soma dos adicionais de UMA unidade do item."""
        total = Decimal("0")
        for adicional in self.adicionais_snapshot or []:
            preco = Decimal(str(adicional.get("preco_unitario", 0) or 0))
            total += preco * int(adicional.get("quantidade", 1) or 1)
        return total

    @property
    def total(self) -> Decimal:
        """(preço unitário + adicionais) × quantidade."""
        preco = Decimal(str(self.preco_unitario or 0))
        return (preco + self.total_adicionais) * (self.quantidade or 0)
