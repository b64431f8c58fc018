"""
Fluxos de status por tipo de pedido.

Funções puras sobre configuração estática: não tocam banco nem relógio.
A única mutação de status fica em PedidoStatusService.avancar_status, que
valida a transição aqui antes de gravar.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from restaurante.api.pedidos.models.model_pedido import StatusPedido, TipoPedido
from restaurante.core.exceptions import InvalidTransition
from restaurante.utils.logger import logger

CANCELADO = StatusPedido.CANCELADO.value

FLUXOS_POR_TIPO: dict[str, list[str]] = {
    TipoPedido.DELIVERY.value: [
        StatusPedido.PENDENTE.value,
        StatusPedido.CONFIRMADO.value,
        StatusPedido.PREPARANDO.value,
        StatusPedido.PRONTO.value,
        StatusPedido.SAIU_PARA_ENTREGA.value,
        StatusPedido.ENTREGUE.value,
    ],
    TipoPedido.RETIRADA.value: [
        StatusPedido.PENDENTE.value,
        StatusPedido.CONFIRMADO.value,
        StatusPedido.PREPARANDO.value,
        StatusPedido.PRONTO_PARA_RETIRADA.value,
        StatusPedido.RETIRADO.value,
    ],
    TipoPedido.NO_LOCAL.value: [
        StatusPedido.PENDENTE.value,
        StatusPedido.CONFIRMADO.value,
        StatusPedido.PREPARANDO.value,
        StatusPedido.PRONTO_PARA_SERVIR.value,
        StatusPedido.SERVIDO.value,
    ],
}

# Status equivalentes a "pronto" em cada fluxo
STATUS_PRONTOS = frozenset({
    StatusPedido.PRONTO.value,
    StatusPedido.PRONTO_PARA_RETIRADA.value,
    StatusPedido.PRONTO_PARA_SERVIR.value,
})

# "pronto ou depois" em qualquer fluxo
STATUS_CONCLUIDOS_PREPARO = frozenset({
    StatusPedido.PRONTO.value,
    StatusPedido.SAIU_PARA_ENTREGA.value,
    StatusPedido.ENTREGUE.value,
    StatusPedido.PRONTO_PARA_RETIRADA.value,
    StatusPedido.RETIRADO.value,
    StatusPedido.PRONTO_PARA_SERVIR.value,
    StatusPedido.SERVIDO.value,
})

STATUS_FINALIZADOS = frozenset({
    StatusPedido.ENTREGUE.value,
    StatusPedido.RETIRADO.value,
    StatusPedido.SERVIDO.value,
    StatusPedido.CANCELADO.value,
})

STATUS_LABELS: dict[str, str] = {
    StatusPedido.PENDENTE.value: "Pendente",
    StatusPedido.CONFIRMADO.value: "Confirmado",
    StatusPedido.PREPARANDO.value: "Preparando",
    StatusPedido.PRONTO.value: "Pronto",
    StatusPedido.PRONTO_PARA_RETIRADA.value: "Pronto para Retirada",
    StatusPedido.PRONTO_PARA_SERVIR.value: "Pronto para Servir",
    StatusPedido.SAIU_PARA_ENTREGA.value: "Saiu para Entrega",
    StatusPedido.ENTREGUE.value: "Entregue",
    StatusPedido.RETIRADO.value: "Retirado",
    StatusPedido.SERVIDO.value: "Servido",
    StatusPedido.CANCELADO.value: "Cancelado",
}

# Texto do botão que leva o pedido PARA o status
PROXIMA_ACAO_LABELS: dict[str, str] = {
    StatusPedido.CONFIRMADO.value: "Confirmar Pedido",
    StatusPedido.PREPARANDO.value: "Iniciar Preparo",
    StatusPedido.PRONTO.value: "Marcar como Pronto",
    StatusPedido.PRONTO_PARA_RETIRADA.value: "Pronto p/ Retirada",
    StatusPedido.PRONTO_PARA_SERVIR.value: "Pronto p/ Servir",
    StatusPedido.SAIU_PARA_ENTREGA.value: "Saiu para Entrega",
    StatusPedido.ENTREGUE.value: "Marcar como Entregue",
    StatusPedido.RETIRADO.value: "Marcar como Retirado",
    StatusPedido.SERVIDO.value: "Marcar como Servido",
    StatusPedido.CANCELADO.value: "Cancelar",
}


def _valor(v: Any) -> Optional[str]:
    """Aceita enum ou string."""
    if v is None:
        return None
    return getattr(v, "value", v)


def get_status_flow(tipo_pedido: Any) -> list[str]:
    """
    Sequência de status do tipo de pedido.

    Tipo desconhecido cai no fluxo de delivery (comportamento herdado, logado).
    """
    tipo = _valor(tipo_pedido)
    fluxo = FLUXOS_POR_TIPO.get(tipo)
    if fluxo is None:
        logger.warning(f"[StatusFlow] Tipo de pedido desconhecido '{tipo}', usando fluxo de delivery")
        fluxo = FLUXOS_POR_TIPO[TipoPedido.DELIVERY.value]
    return list(fluxo)


def get_next_status(pedido: Any) -> Optional[str]:
    """Próximo status do fluxo, ou None se o pedido já está no último status (ou fora do fluxo)."""
    fluxo = get_status_flow(pedido.tipo_pedido)
    atual = _valor(pedido.status)
    if atual not in fluxo:
        return None
    idx = fluxo.index(atual)
    if idx >= len(fluxo) - 1:
        return None
    return fluxo[idx + 1]


def is_status_terminal(pedido: Any) -> bool:
    """Cancelado, último status do fluxo ou status desconhecido."""
    if _valor(pedido.status) == CANCELADO:
        return True
    return get_next_status(pedido) is None


def is_status_finalizado(status: Any) -> bool:
    return _valor(status) in STATUS_FINALIZADOS


def validar_transicao(pedido: Any, status_destino: Any) -> str:
    """
    Retorna o status de destino normalizado se a transição for válida.

    Válido: destino é o próximo status do fluxo, ou é `cancelled` com o pedido
    ainda não terminal. Qualquer outro destino levanta InvalidTransition.
    """
    destino = _valor(status_destino)
    atual = _valor(pedido.status)

    if destino == CANCELADO:
        if is_status_terminal(pedido):
            raise InvalidTransition(
                atual, destino, f"Pedido em status '{atual}' não pode mais ser cancelado"
            )
        return destino

    proximo = get_next_status(pedido)
    if proximo is None:
        raise InvalidTransition(atual, destino, f"Pedido em status '{atual}' não tem próximo status")
    if destino != proximo:
        raise InvalidTransition(
            atual, destino, f"Transição inválida: {atual} → {destino} (esperado: {proximo})"
        )
    return destino


# ------------------------------------------------------------------
# Kanban: colunas virtuais que juntam status equivalentes entre tipos
# ------------------------------------------------------------------
@dataclass(frozen=True)
class ColunaKanbanDef:
    chave: str
    label: str
    status: tuple[str, ...]


COLUNAS_KANBAN: tuple[ColunaKanbanDef, ...] = (
    ColunaKanbanDef("pendentes", "Pendentes", (StatusPedido.PENDENTE.value,)),
    ColunaKanbanDef("confirmados", "Confirmados", (StatusPedido.CONFIRMADO.value,)),
    ColunaKanbanDef("preparando", "Preparando", (StatusPedido.PREPARANDO.value,)),
    ColunaKanbanDef("prontos", "Prontos", tuple(sorted(STATUS_PRONTOS))),
    ColunaKanbanDef("em_entrega", "Em Entrega", (StatusPedido.SAIU_PARA_ENTREGA.value,)),
    ColunaKanbanDef(
        "concluidos",
        "Concluídos",
        (StatusPedido.ENTREGUE.value, StatusPedido.RETIRADO.value, StatusPedido.SERVIDO.value),
    ),
    ColunaKanbanDef("cancelados", "Cancelados", (StatusPedido.CANCELADO.value,)),
)


@dataclass
class ColunaKanban:
    chave: str
    label: str
    pedidos: list[Any] = field(default_factory=list)


def agrupar_kanban(pedidos: Iterable[Any], *, incluir_cancelados: bool = False) -> list[ColunaKanban]:
    """Projeção dos pedidos nas colunas virtuais do painel. Não altera nada."""
    definicoes = [c for c in COLUNAS_KANBAN if incluir_cancelados or c.chave != "cancelados"]
    colunas = {c.chave: ColunaKanban(chave=c.chave, label=c.label) for c in definicoes}
    coluna_por_status = {s: c.chave for c in definicoes for s in c.status}

    for pedido in pedidos:
        chave = coluna_por_status.get(_valor(pedido.status))
        if chave is not None:
            colunas[chave].pedidos.append(pedido)
    return [colunas[c.chave] for c in definicoes]
