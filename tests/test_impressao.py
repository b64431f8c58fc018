import asyncio
import json
from decimal import Decimal
from types import SimpleNamespace

import httpx
import pytest

from restaurante.api.impressao.adapters.agente_impressao_adapter import AgenteImpressaoAdapter
from restaurante.api.impressao.services.gerenciador_conexao import GerenciadorConexaoImpressora
from restaurante.api.impressao.services.service_recibo import formatar_moeda, renderizar_recibo
from restaurante.core.exceptions import PrinterUnavailable


def _adapter(handler):
    return AgenteImpressaoAdapter(base_url="http://agente.local", timeout=1, transport=httpx.MockTransport(handler))


def test_adapter_envia_trabalho_para_o_agente():
    recebidos = []

    def handler(request: httpx.Request):
        recebidos.append((request.url.path, json.loads(request.content)))
        return httpx.Response(200, json={"ok": True})

    gerenciador = GerenciadorConexaoImpressora(_adapter(handler), impressora_padrao="COZINHA")

    async def cenario():
        alvo = gerenciador.abrir_alvo()
        await gerenciador.imprimir(alvo, "teste\n")
        await gerenciador.encerrar()

    asyncio.run(cenario())
    assert recebidos == [("/print", {"printer": "COZINHA", "format": "plain", "data": "teste\n"})]


def test_adapter_erro_http_vira_printer_unavailable():
    adapter = _adapter(lambda request: httpx.Response(404, text="printer not found"))
    gerenciador = GerenciadorConexaoImpressora(adapter, impressora_padrao="BAR")

    async def cenario():
        alvo = gerenciador.abrir_alvo()
        with pytest.raises(PrinterUnavailable):
            await gerenciador.imprimir(alvo, "x")

    asyncio.run(cenario())
    assert adapter.conectado is False
    assert gerenciador.alvos_ativos == []


def test_adapter_agente_fora_do_ar():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    adapter = _adapter(handler)
    adapter.conectar()
    with pytest.raises(PrinterUnavailable):
        asyncio.run(adapter.listar_impressoras())


def test_reusa_conexao_entre_trabalhos():
    gerenciador = GerenciadorConexaoImpressora(
        _adapter(lambda request: httpx.Response(200, json={})),
        impressora_padrao="COZINHA",
    )
    primeiro = gerenciador.abrir_alvo()
    segundo = gerenciador.abrir_alvo()
    assert gerenciador.conexoes == 1
    assert len(gerenciador.alvos_ativos) == 2
    gerenciador.liberar(primeiro)
    gerenciador.liberar(segundo)
    assert gerenciador.alvos_ativos == []


def test_formatar_moeda():
    assert formatar_moeda(Decimal("1234.5")) == "R$ 1.234,50"
    assert formatar_moeda(None) == "R$ 0,00"


def test_recibo_respeita_largura():
    item = SimpleNamespace(
        produto_nome="Pizza Grande Quatro Queijos Especial",
        quantidade=1,
        total=Decimal("79.90"),
        adicionais_snapshot=[{"nome": "Borda recheada", "preco_unitario": "8.00", "quantidade": 1}],
        observacao="sem azeitona",
    )
    pedido = SimpleNamespace(
        numero_pedido=42,
        tipo_pedido="delivery",
        created_at=None,
        agendado_para=None,
        cliente_nome="Bruno",
        endereco_entrega="Rua das Flores, 123 - Centro",
        itens=[item],
        subtotal=Decimal("79.90"),
        taxa_entrega=Decimal("5.00"),
        valor_total=Decimal("84.90"),
        meio_pagamento="cash",
        troco_para=Decimal("100.00"),
        observacoes=None,
    )
    texto = renderizar_recibo(pedido, empresa_nome="Cantina", largura=32)
    linhas = texto.splitlines()
    assert all(len(linha) <= 32 for linha in linhas)
    assert "PEDIDO #42" in texto
    assert "DELIVERY" in texto
    assert "Taxa de entrega" in texto
    assert "Pagamento: Dinheiro" in texto
    assert any(linha.endswith("R$ 84,90") for linha in linhas)
