import asyncio
import warnings
from decimal import Decimal

import pytest

from restaurante.api.impressao.services.gerenciador_conexao import GerenciadorConexaoImpressora
from restaurante.api.pedidos.repositories.repo_pedidos import PedidoRepository
from restaurante.api.pedidos.schemas import PedidoCreateRequest
from restaurante.api.pedidos.services.service_pedido import PedidoService, montar_pedido_response
from restaurante.api.pedidos.services.service_pedido_status import PedidoStatusService
from restaurante.api.pedidos.services.status_flow import get_next_status
from restaurante.api.shared.schemas.schema_shared_enums import PedidoStatusEnum
from restaurante.core.exceptions import InvalidTransition, NoAvailableSlots

from tests.conftest import FakeImpressoraAdapter


def _criar_pedido(db, empresa, **extra):
    dados = {
        "empresa_id": empresa.id,
        "tipo_pedido": "dine_in",
        "mesa_numero": "12",
        "cliente_nome": "Ana",
        "itens": [
            {
                "produto_nome": "X-Burguer",
                "preco_unitario": "22.00",
                "quantidade": 2,
                "adicionais": [{"nome": "Bacon", "preco_unitario": "4.00"}],
            },
            {"produto_nome": "Refrigerante", "preco_unitario": "6.50", "quantidade": 1},
        ],
    }
    dados.update(extra)
    return PedidoService(db).criar_pedido(PedidoCreateRequest(**dados))


def _avancar(svc, pedido_id, destino):
    return asyncio.run(svc.avancar_status(pedido_id, destino))


def test_criacao_calcula_totais_e_historico(db, empresa):
    pedido = _criar_pedido(db, empresa)
    assert pedido.numero_pedido == 1
    assert pedido.status == "pending"
    assert pedido.subtotal == Decimal("58.50")
    assert pedido.valor_total == Decimal("58.50")  # taxa só em delivery
    assert [h.status for h in pedido.historico] == ["pending"]
    assert pedido.mesa.numero == "12"

    delivery = _criar_pedido(db, empresa, tipo_pedido="delivery", mesa_numero=None, endereco_entrega="Rua A, 10")
    assert delivery.numero_pedido == 2
    assert delivery.valor_total == Decimal("63.50")
    assert delivery.mesa_id is None


def test_resposta_traz_proximo_status_como_enum(db, empresa):
    pedido = _criar_pedido(db, empresa, tipo_pedido="pickup", mesa_numero=None)
    resp = montar_pedido_response(pedido)
    assert resp.proximo_status is PedidoStatusEnum.CONFIRMADO
    assert resp.proxima_acao == "Confirmar Pedido"

    with warnings.catch_warnings():
        warnings.simplefilter("error")
        dados = resp.model_dump(mode="json")
    assert dados["proximo_status"] == "confirmed"


def test_fluxo_dine_in_completo(db, empresa, monkeypatch):
    eventos = []
    gerenciador = GerenciadorConexaoImpressora(FakeImpressoraAdapter(eventos), impressora_padrao="COZINHA")

    original = PedidoRepository.atualizar_status

    def gravar_com_registro(self, *args, **kwargs):
        eventos.append(("gravar_status", kwargs["novo_status"], len(gerenciador.alvos_ativos)))
        return original(self, *args, **kwargs)

    monkeypatch.setattr(PedidoRepository, "atualizar_status", gravar_com_registro)

    pedido = _criar_pedido(db, empresa)
    svc = PedidoStatusService(db, gerenciador_impressora=gerenciador)

    resultado = _avancar(svc, pedido.id, "confirmed")
    assert resultado.impresso is True
    assert resultado.recibo_texto is None
    # impressora reservada antes da gravação do status
    assert eventos[:3] == ["conectar", ("gravar_status", "confirmed", 1), "imprimir"]
    assert gerenciador.alvos_ativos == []

    for destino in ("preparing", "ready_to_serve", "served"):
        resultado = _avancar(svc, pedido.id, destino)
        assert resultado.pedido.status == destino
    assert eventos.count("imprimir") == 1

    pedido = resultado.pedido
    assert get_next_status(pedido) is None
    assert [h.status for h in pedido.historico] == [
        "pending", "confirmed", "preparing", "ready_to_serve", "served",
    ]

    for destino in ("cancelled", "served", "pending"):
        with pytest.raises(InvalidTransition):
            _avancar(svc, pedido.id, destino)


def test_pular_status_e_invalido(db, empresa, gerenciador):
    pedido = _criar_pedido(db, empresa)
    svc = PedidoStatusService(db, gerenciador_impressora=gerenciador)
    with pytest.raises(InvalidTransition):
        _avancar(svc, pedido.id, "preparing")
    assert PedidoRepository(db).get(pedido.id).status == "pending"


def test_falha_de_impressao_nao_bloqueia_transicao(db, empresa):
    adapter = FakeImpressoraAdapter(falhar=True)
    gerenciador = GerenciadorConexaoImpressora(adapter, impressora_padrao="COZINHA")
    pedido = _criar_pedido(db, empresa)

    resultado = _avancar(PedidoStatusService(db, gerenciador_impressora=gerenciador), pedido.id, "confirmed")
    assert resultado.pedido.status == "confirmed"
    assert resultado.impresso is False
    assert resultado.aviso_impressao == "Impressora offline"
    assert "PEDIDO #1" in resultado.recibo_texto
    assert "X-Burguer" in resultado.recibo_texto

    # conexão descartada após a falha; a próxima reserva reconecta
    assert adapter.conectado is False
    gerenciador.abrir_alvo()
    assert gerenciador.conexoes == 2


def test_sem_impressora_configurada_devolve_recibo(db, empresa, fake_adapter):
    gerenciador = GerenciadorConexaoImpressora(fake_adapter)
    pedido = _criar_pedido(db, empresa)
    resultado = _avancar(PedidoStatusService(db, gerenciador_impressora=gerenciador), pedido.id, "confirmed")
    assert resultado.pedido.status == "confirmed"
    assert resultado.recibo_texto
    assert fake_adapter.impressos == []


def test_falha_na_gravacao_libera_impressora(db, empresa, gerenciador, monkeypatch):
    pedido = _criar_pedido(db, empresa)

    def falhar(self, *args, **kwargs):
        raise RuntimeError("banco indisponível")

    monkeypatch.setattr(PedidoRepository, "atualizar_status", falhar)
    with pytest.raises(RuntimeError):
        _avancar(PedidoStatusService(db, gerenciador_impressora=gerenciador), pedido.id, "confirmed")
    assert gerenciador.alvos_ativos == []


def test_gravacao_condicional_detecta_alteracao_concorrente(db, empresa, session_factory):
    pedido = _criar_pedido(db, empresa, tipo_pedido="pickup", mesa_numero=None)

    outra = session_factory()
    try:
        PedidoRepository(outra).atualizar_status(pedido.id, status_esperado="pending", novo_status="cancelled")
    finally:
        outra.close()

    with pytest.raises(InvalidTransition):
        PedidoRepository(db).atualizar_status(pedido.id, status_esperado="pending", novo_status="confirmed")


def test_loja_fechada_recusa_pedido_imediato(db, empresa):
    empresa.fechado_temporariamente = True
    db.commit()
    with pytest.raises(NoAvailableSlots):
        _criar_pedido(db, empresa)
