"""
Renderização do recibo de cozinha/cliente em texto puro para impressora
térmica (32 colunas na bobina de 58mm, 48 na de 80mm).
"""
from __future__ import annotations

from decimal import Decimal
from typing import Optional

from restaurante.api.pedidos.models.model_pedido import TipoPedido
from restaurante.config import settings

TIPO_LABELS = {
    TipoPedido.DELIVERY.value: "DELIVERY",
    TipoPedido.RETIRADA.value: "RETIRADA",
    TipoPedido.NO_LOCAL.value: "CONSUMO NO LOCAL",
}

MEIO_PAGAMENTO_LABELS = {
    "cash": "Dinheiro",
    "pix": "PIX",
    "credit": "Crédito",
    "debit": "Débito",
}


def formatar_moeda(valor) -> str:
    valor = Decimal(str(valor or 0)).quantize(Decimal("0.01"))
    inteiro, _, centavos = f"{valor:,.2f}".partition(".")
    return f"R$ {inteiro.replace(',', '.')},{centavos}"


def _linha_valor(rotulo: str, valor: str, largura: int) -> str:
    espaco = largura - len(rotulo) - len(valor)
    if espaco < 1:
        return f"{rotulo[: largura - len(valor) - 1]} {valor}"
    return f"{rotulo}{' ' * espaco}{valor}"


def _quebrar(texto: str, largura: int, recuo: str = "") -> list[str]:
    linhas: list[str] = []
    atual = recuo
    for palavra in texto.split():
        candidato = f"{atual} {palavra}" if atual.strip() else f"{recuo}{palavra}"
        if len(candidato) > largura and atual.strip():
            linhas.append(atual)
            atual = f"{recuo}{palavra}"
        else:
            atual = candidato
    if atual.strip():
        linhas.append(atual)
    return linhas


def renderizar_recibo(pedido, empresa_nome: Optional[str] = None, largura: Optional[int] = None) -> str:
    largura = largura or settings.LARGURA_RECIBO_COLUNAS
    separador = "-" * largura
    tipo = getattr(pedido.tipo_pedido, "value", pedido.tipo_pedido)

    linhas: list[str] = []
    if empresa_nome:
        linhas.append(empresa_nome[:largura].center(largura).rstrip())
    linhas.append(f"PEDIDO #{pedido.numero_pedido}".center(largura).rstrip())
    linhas.append(TIPO_LABELS.get(tipo, str(tipo).upper()).center(largura).rstrip())
    if pedido.created_at:
        linhas.append(pedido.created_at.strftime("%d/%m/%Y %H:%M"))
    if pedido.agendado_para:
        linhas.append(f"Agendado: {pedido.agendado_para.strftime('%d/%m %H:%M')}")
    mesa = getattr(pedido, "mesa", None)
    if mesa is not None:
        linhas.append(mesa.label)
    if pedido.cliente_nome:
        linhas.append(f"Cliente: {pedido.cliente_nome}"[:largura])
    if pedido.endereco_entrega and tipo == TipoPedido.DELIVERY.value:
        linhas.extend(_quebrar(f"End.: {pedido.endereco_entrega}", largura))
    linhas.append(separador)

    for item in pedido.itens:
        linhas.append(_linha_valor(f"{item.quantidade}x {item.produto_nome}", formatar_moeda(item.total), largura))
        for adicional in item.adicionais_snapshot or []:
            qtd = int(adicional.get("quantidade", 1) or 1)
            linhas.append(f"  + {qtd}x {adicional.get('nome', '')}"[:largura])
        if item.observacao:
            linhas.extend(_quebrar(f"Obs: {item.observacao}", largura, recuo="  "))

    linhas.append(separador)
    linhas.append(_linha_valor("Subtotal", formatar_moeda(pedido.subtotal), largura))
    if tipo == TipoPedido.DELIVERY.value and Decimal(str(pedido.taxa_entrega or 0)) > 0:
        linhas.append(_linha_valor("Taxa de entrega", formatar_moeda(pedido.taxa_entrega), largura))
    linhas.append(_linha_valor("TOTAL", formatar_moeda(pedido.valor_total), largura))

    if pedido.meio_pagamento:
        meio = MEIO_PAGAMENTO_LABELS.get(pedido.meio_pagamento, pedido.meio_pagamento)
        linhas.append(f"Pagamento: {meio}")
    if pedido.troco_para:
        linhas.append(_linha_valor("Troco para", formatar_moeda(pedido.troco_para), largura))
    if pedido.observacoes:
        linhas.append(separador)
        linhas.extend(_quebrar(f"Obs: {pedido.observacoes}", largura))

    return "\n".join(linhas) + "\n"
