"""
Agregação da comanda de uma mesa: total, contagem de itens por situação e
número de pedidos. Pedidos cancelados ficam fora de tudo.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Iterable, Optional

from sqlalchemy.orm import Session

from restaurante.api.mesas.repositories.repo_mesas import MesaRepository
from restaurante.api.pedidos.models.model_pedido import StatusPedido
from restaurante.api.pedidos.services.service_pedido_helpers import _dec

BUCKET_PENDENTE = "pending"
BUCKET_PREPARANDO = "preparing"
BUCKET_PRONTO = "ready"
BUCKET_ENTREGUE = "delivered"

# Item herda a situação do pedido
BUCKET_POR_STATUS: dict[str, str] = {
    StatusPedido.PENDENTE.value: BUCKET_PENDENTE,
    StatusPedido.CONFIRMADO.value: BUCKET_PENDENTE,
    StatusPedido.PREPARANDO.value: BUCKET_PREPARANDO,
    StatusPedido.PRONTO.value: BUCKET_PRONTO,
    StatusPedido.PRONTO_PARA_RETIRADA.value: BUCKET_PRONTO,
    StatusPedido.PRONTO_PARA_SERVIR.value: BUCKET_PRONTO,
    StatusPedido.SAIU_PARA_ENTREGA.value: BUCKET_PRONTO,
    StatusPedido.ENTREGUE.value: BUCKET_ENTREGUE,
    StatusPedido.RETIRADO.value: BUCKET_ENTREGUE,
    StatusPedido.SERVIDO.value: BUCKET_ENTREGUE,
}


@dataclass
class ComandaResumo:
    mesa_id: int
    numero: str
    label: str
    status: str
    aberta_em: Optional[datetime]
    total: Decimal
    pedidos_ativos: int
    contagem_itens: dict[str, int] = field(default_factory=dict)
    cliente_nome: Optional[str] = None


def _status(pedido: Any) -> str:
    return getattr(pedido.status, "value", pedido.status)


def pedidos_ativos(pedidos: Iterable[Any]) -> list[Any]:
    return [p for p in pedidos if _status(p) != StatusPedido.CANCELADO.value]


def total(mesa: Any) -> Decimal:
    return sum((_dec(p.valor_total) for p in pedidos_ativos(mesa.pedidos)), Decimal("0.00"))


def item_status_counts(mesa: Any) -> dict[str, int]:
    contagem = {BUCKET_PENDENTE: 0, BUCKET_PREPARANDO: 0, BUCKET_PRONTO: 0, BUCKET_ENTREGUE: 0}
    for pedido in pedidos_ativos(mesa.pedidos):
        bucket = BUCKET_POR_STATUS.get(_status(pedido), BUCKET_PENDENTE)
        contagem[bucket] += len(pedido.itens or [])
    return contagem


def order_count(mesa: Any) -> int:
    return len(pedidos_ativos(mesa.pedidos))


def aggregate_tab(mesa: Any) -> ComandaResumo:
    return ComandaResumo(
        mesa_id=mesa.id,
        numero=mesa.numero,
        label=mesa.label,
        status=getattr(mesa.status, "value", mesa.status),
        aberta_em=mesa.aberta_em,
        total=total(mesa),
        pedidos_ativos=order_count(mesa),
        contagem_itens=item_status_counts(mesa),
        cliente_nome=mesa.cliente_nome,
    )


class ComandaService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = MesaRepository(db)

    def resumo(self, mesa_id: int) -> ComandaResumo:
        return aggregate_tab(self.repo.get_or_404(mesa_id))

    def listar_abertas(self, empresa_id: int) -> list[ComandaResumo]:
        return [aggregate_tab(m) for m in self.repo.list_abertas(empresa_id)]
