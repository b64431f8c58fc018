from decimal import Decimal
from types import SimpleNamespace

import pytest

from restaurante.api.mesas.models.model_mesa import StatusMesa
from restaurante.api.mesas.models.model_pagamento_fechamento import PagamentoFechamentoModel
from restaurante.api.mesas.repositories.repo_mesas import MesaRepository
from restaurante.api.mesas.services.service_comanda import aggregate_tab, item_status_counts, order_count, total
from restaurante.api.mesas.services import service_fechamento
from restaurante.api.mesas.services.service_fechamento import FechamentoService, Pagamento, reconciliar
from restaurante.api.pedidos.schemas import PedidoCreateRequest
from restaurante.api.pedidos.services.service_pedido import PedidoService
from restaurante.api.pedidos.repositories.repo_pedidos import PedidoRepository
from restaurante.core.exceptions import (
    ContaJaFechada,
    MeioPagamentoInvalido,
    PagamentoInvalido,
    ReconciliationMismatch,
)


# ---------------- Reconciliação ----------------
def test_pagamentos_divididos_que_fecham_o_total():
    resultado = reconciliar(
        Decimal("49.99"),
        [Pagamento("cash", Decimal("30.00")), Pagamento("pix", Decimal("19.99"))],
    )
    assert resultado.restante == Decimal("0.00")
    assert resultado.pago == Decimal("49.99")


def test_pagamentos_faltando():
    with pytest.raises(ReconciliationMismatch) as exc:
        reconciliar(Decimal("49.99"), [Pagamento("cash", Decimal("25.00")), Pagamento("pix", Decimal("20.00"))])
    assert exc.value.restante == Decimal("4.99")
    assert exc.value.sinal == "falta"


def test_pagamentos_em_excesso_e_tolerancia():
    with pytest.raises(ReconciliationMismatch) as exc:
        reconciliar(Decimal("49.99"), [Pagamento("credit", Decimal("50.01"))])
    assert exc.value.sinal == "excesso"
    assert exc.value.restante == Decimal("-0.02")

    assert reconciliar(Decimal("49.99"), [Pagamento("debit", Decimal("49.98"))]).restante == Decimal("0.01")


def test_pagamento_negativo_e_erro_de_dominio():
    with pytest.raises(PagamentoInvalido):
        reconciliar(Decimal("10.00"), [Pagamento("cash", Decimal("15.00")), Pagamento("pix", Decimal("-5.00"))])


# ---------------- Agregação ----------------
def _pedido(valor, status, n_itens):
    return SimpleNamespace(valor_total=Decimal(valor), status=status, itens=[object()] * n_itens)


def test_comanda_ignora_pedidos_cancelados():
    mesa = SimpleNamespace(
        id=1,
        numero="7",
        label="Mesa 7",
        status=StatusMesa.ABERTA,
        aberta_em=None,
        cliente_nome=None,
        pedidos=[
            _pedido("20.00", "preparing", 2),
            _pedido("15.00", "cancelled", 3),
            _pedido("10.00", "served", 1),
        ],
    )
    assert total(mesa) == Decimal("30.00")
    assert order_count(mesa) == 2
    assert item_status_counts(mesa) == {"pending": 0, "preparing": 2, "ready": 0, "delivered": 1}

    resumo = aggregate_tab(mesa)
    assert resumo.status == "open"
    assert resumo.total == Decimal("30.00")


def test_contagem_itens_por_situacao_do_pedido():
    mesa = SimpleNamespace(
        pedidos=[
            _pedido("1", "confirmed", 1),
            _pedido("1", "ready_to_serve", 2),
            _pedido("1", "out_for_delivery", 1),
        ]
    )
    assert item_status_counts(mesa) == {"pending": 1, "preparing": 0, "ready": 3, "delivered": 0}


# ---------------- Fechamento com banco ----------------
def _criar_pedido_mesa(db, empresa, preco, mesa="7"):
    payload = PedidoCreateRequest(
        empresa_id=empresa.id,
        tipo_pedido="dine_in",
        mesa_numero=mesa,
        itens=[{"produto_nome": "Prato", "preco_unitario": preco, "quantidade": 1}],
    )
    return PedidoService(db).criar_pedido(payload)


def test_fechar_comanda_de_mesa(db, empresa):
    p1 = _criar_pedido_mesa(db, empresa, "20.00")
    p2 = _criar_pedido_mesa(db, empresa, "10.00")
    assert p1.mesa_id == p2.mesa_id
    mesa_id = p1.mesa_id

    svc = FechamentoService(db)
    with pytest.raises(ReconciliationMismatch):
        svc.reconcile_and_close(mesa_id, [Pagamento("cash", Decimal("25.00"))])
    assert MesaRepository(db).get_or_404(mesa_id).is_aberta

    resultado = svc.reconcile_and_close(
        mesa_id,
        [Pagamento("cash", Decimal("20.00")), Pagamento("pix", Decimal("10.00"))],
    )
    assert resultado.reconciliacao.alvo == Decimal("30.00")
    assert resultado.comanda.status == "closed"

    mesa = MesaRepository(db).get_or_404(mesa_id)
    assert mesa.fechada_em is not None
    assert all(p.pago and not p.conta_aberta for p in mesa.pedidos)
    registros = db.query(PagamentoFechamentoModel).filter_by(mesa_id=mesa_id).order_by(PagamentoFechamentoModel.ordem).all()
    assert [(r.metodo, r.valor) for r in registros] == [("cash", Decimal("20.00")), ("pix", Decimal("10.00"))]

    # novo pedido na mesma mesa abre outra comanda
    p3 = _criar_pedido_mesa(db, empresa, "5.00")
    assert p3.mesa_id != mesa_id


def test_pedido_cancelado_fica_fora_do_fechamento(db, empresa):
    p1 = _criar_pedido_mesa(db, empresa, "20.00", mesa="8")
    cancelado = _criar_pedido_mesa(db, empresa, "15.00", mesa="8")
    p3 = _criar_pedido_mesa(db, empresa, "10.00", mesa="8")
    PedidoRepository(db).atualizar_status(cancelado.id, status_esperado="pending", novo_status="cancelled")

    resultado = FechamentoService(db).reconcile_and_close(p1.mesa_id, [Pagamento("credit", Decimal("30.00"))])
    assert resultado.reconciliacao.alvo == Decimal("30.00")

    repo = PedidoRepository(db)
    assert repo.get(cancelado.id).pago is False
    assert repo.get(cancelado.id).conta_aberta is True
    assert repo.get(p1.id).pago is True
    assert repo.get(p3.id).pago is True


def test_pedido_lancado_durante_o_fechamento_nao_e_pago(db, empresa, session_factory, monkeypatch):
    pedido = _criar_pedido_mesa(db, empresa, "20.00", mesa="5")
    mesa_id = pedido.mesa_id
    lancados = []
    reconciliar_original = service_fechamento.reconciliar

    def reconciliar_e_lancar_pedido(alvo, pagamentos):
        resultado = reconciliar_original(alvo, pagamentos)
        outra_sessao = session_factory()
        try:
            lancados.append(_criar_pedido_mesa(outra_sessao, empresa, "99.00", mesa="5").id)
        finally:
            outra_sessao.close()
        return resultado

    monkeypatch.setattr(service_fechamento, "reconciliar", reconciliar_e_lancar_pedido)
    svc = FechamentoService(db)
    with pytest.raises(ReconciliationMismatch) as exc:
        svc.reconcile_and_close(mesa_id, [Pagamento("cash", Decimal("20.00"))])
    assert exc.value.restante == Decimal("99.00")
    assert exc.value.sinal == "falta"
    monkeypatch.undo()

    mesa = MesaRepository(db).get_or_404(mesa_id)
    assert mesa.is_aberta
    assert lancados[0] in [p.id for p in mesa.pedidos]
    assert not any(p.pago for p in mesa.pedidos)
    assert db.query(PagamentoFechamentoModel).filter_by(mesa_id=mesa_id).count() == 0

    resultado = svc.reconcile_and_close(mesa_id, [Pagamento("cash", Decimal("119.00"))])
    assert resultado.reconciliacao.alvo == Decimal("119.00")
    assert resultado.comanda.status == "closed"


def test_segundo_fechamento_concorrente_falha(session_factory, empresa, db):
    pedido = _criar_pedido_mesa(db, empresa, "12.50", mesa="3")
    sessao_a, sessao_b = session_factory(), session_factory()
    try:
        FechamentoService(sessao_a).reconcile_and_close(pedido.mesa_id, [Pagamento("debit", Decimal("12.50"))])
        with pytest.raises(ContaJaFechada):
            MesaRepository(sessao_b).fechar_comanda(
                pedido.mesa_id, [("debit", Decimal("12.50"))], alvo=Decimal("12.50")
            )
    finally:
        sessao_a.close()
        sessao_b.close()

    assert db.query(PagamentoFechamentoModel).filter_by(mesa_id=pedido.mesa_id).count() == 1


def test_meio_de_pagamento_desabilitado(db, empresa):
    empresa.pagamento_pix_habilitado = False
    db.commit()
    pedido = _criar_pedido_mesa(db, empresa, "10.00", mesa="9")
    with pytest.raises(MeioPagamentoInvalido):
        FechamentoService(db).reconcile_and_close(pedido.mesa_id, [Pagamento("pix", Decimal("10.00"))])


def test_fechar_conta_pedido_avulso_com_troco(db, empresa):
    payload = PedidoCreateRequest(
        empresa_id=empresa.id,
        tipo_pedido="pickup",
        itens=[{"produto_nome": "Pizza", "preco_unitario": "25.00", "quantidade": 1}],
    )
    pedido = PedidoService(db).criar_pedido(payload)
    svc = FechamentoService(db)

    with pytest.raises(ReconciliationMismatch) as exc:
        svc.fechar_conta_pedido(pedido.id, "cash", troco_para=Decimal("20.00"))
    assert exc.value.sinal == "falta"

    fechado = svc.fechar_conta_pedido(pedido.id, "cash", troco_para=Decimal("50.00"))
    assert fechado.pago is True
    assert fechado.conta_aberta is False
    assert fechado.troco == Decimal("25.00")

    with pytest.raises(ContaJaFechada):
        svc.fechar_conta_pedido(pedido.id, "pix")
