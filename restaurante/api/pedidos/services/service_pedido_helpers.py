from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable


def _dec(value: float | Decimal | int | str | None) -> Decimal:
    """Converte valor para Decimal com precisão de 2 casas decimais."""
    return Decimal(str(value or 0)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def snapshot_adicionais(adicionais: Iterable[Any]) -> list[dict] | None:
    """Congela os adicionais do item num formato serializável em JSON."""
    snapshot = [
        {
            "nome": a.nome,
            "preco_unitario": str(_dec(a.preco_unitario)),
            "quantidade": int(a.quantidade),
        }
        for a in adicionais or []
    ]
    return snapshot or None


def calcular_total_item(preco_unitario, quantidade: int, adicionais: Iterable[Any] = ()) -> Decimal:
    """(preço unitário + adicionais por unidade) × quantidade, igual a PedidoItemModel.total."""
    extra = sum((_dec(a.preco_unitario) * int(a.quantidade) for a in adicionais or []), Decimal("0"))
    return (_dec(preco_unitario) + extra) * int(quantidade)
