from restaurante.utils.database_utils import now_trimmed


def _criar_empresa(client, **extra):
    payload = {"nome": "Cantina da Praça", "taxa_entrega": "5.00", **extra}
    resp = client.post("/api/empresas/admin", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


def _criar_pedido(client, empresa_id, **extra):
    payload = {
        "empresa_id": empresa_id,
        "tipo_pedido": "dine_in",
        "mesa_numero": "4",
        "itens": [{"produto_nome": "Lasanha", "preco_unitario": "32.00", "quantidade": 1}],
        **extra,
    }
    return client.post("/api/pedidos/admin", json=payload)


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_status_da_loja(client):
    empresa = _criar_empresa(client)
    resp = client.get(f"/api/loja/{empresa['id']}/status")
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["aberta"] is True
    assert body["tem_horarios"] is False

    client.put(f"/api/empresas/admin/{empresa['id']}", json={"fechado_temporariamente": True})
    body = client.get(f"/api/loja/{empresa['id']}/status").json()
    assert body["aberta"] is False

    resp = _criar_pedido(client, empresa["id"])
    assert resp.status_code == 422
    assert resp.json()["codigo"] == "SEM_HORARIO_DISPONIVEL"


def test_horarios_de_agendamento(client):
    dias = {d: {"open": "11:00", "close": "15:00"} for d in ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")}
    empresa = _criar_empresa(client, horarios_funcionamento=dias)

    resp = client.get(f"/api/loja/{empresa['id']}/agendamento/dias", params={"quantidade": 3})
    assert resp.status_code == 200, resp.text
    assert len(resp.json()["dias"]) == 3

    resp = client.get(
        f"/api/loja/{empresa['id']}/agendamento/horarios",
        params={"data": "2000-01-01"},
    )
    assert resp.json()["horarios"] == []


def test_empresa_inexistente(client):
    resp = client.get("/api/loja/999/status")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Empresa não encontrada"


def test_fluxo_de_status_pela_api(client, fake_adapter):
    empresa = _criar_empresa(client)
    resp = _criar_pedido(client, empresa["id"])
    assert resp.status_code == 201, resp.text
    pedido = resp.json()
    assert pedido["status"] == "pending"
    assert pedido["proximo_status"] == "confirmed"
    assert pedido["proxima_acao"] == "Confirmar Pedido"
    assert pedido["valor_total"] == 32.0

    url = f"/api/pedidos/admin/{pedido['id']}/status"
    resp = client.put(url, json={"status": "confirmed"})
    assert resp.status_code == 200, resp.text
    assert resp.json()["impresso"] is True
    assert len(fake_adapter.impressos) == 1

    resp = client.put(url, json={"status": "served"})
    assert resp.status_code == 409
    body = resp.json()
    assert body["codigo"] == "TRANSICAO_INVALIDA"
    assert body["status_atual"] == "confirmed"

    historico = client.get(f"/api/pedidos/admin/{pedido['id']}/historico").json()
    assert [h["status"] for h in historico["historicos"]] == ["pending", "confirmed"]

    kanban = client.get(
        "/api/pedidos/admin/kanban",
        params={"empresa_id": empresa["id"], "date_filter": now_trimmed().date().isoformat()},
    )
    assert kanban.status_code == 200, kanban.text
    colunas = {c["chave"]: c for c in kanban.json()["colunas"]}
    assert colunas["confirmados"]["total"] == 1


def test_fluxo_por_tipo(client):
    resp = client.get("/api/pedidos/admin/fluxos/pickup")
    assert resp.json()["fluxo"] == ["pending", "confirmed", "preparing", "ready_for_pickup", "picked_up"]


def test_fechamento_de_comanda_pela_api(client):
    empresa = _criar_empresa(client)
    p1 = _criar_pedido(client, empresa["id"]).json()
    _criar_pedido(client, empresa["id"], itens=[{"produto_nome": "Suco", "preco_unitario": "17.99"}])
    mesa_id = p1["mesa_id"]

    comanda = client.get(f"/api/mesas/admin/{mesa_id}").json()
    assert comanda["total"] == 49.99
    assert comanda["pedidos_ativos"] == 2
    assert comanda["label"] == "Mesa 4"
    assert comanda["contagem_itens"]["pending"] == 2

    resp = client.post(
        f"/api/mesas/admin/{mesa_id}/fechar",
        json={"pagamentos": [{"metodo": "cash", "valor": "25.00"}, {"metodo": "pix", "valor": "20.00"}]},
    )
    assert resp.status_code == 422
    assert resp.json()["sinal"] == "falta"
    assert resp.json()["restante"] == 4.99

    resp = client.post(
        f"/api/mesas/admin/{mesa_id}/fechar",
        json={"pagamentos": [{"metodo": "cash", "valor": "30.00"}, {"metodo": "pix", "valor": "19.99"}]},
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["comanda"]["status"] == "closed"

    resp = client.post(
        f"/api/mesas/admin/{mesa_id}/fechar",
        json={"pagamentos": [{"metodo": "cash", "valor": "49.99"}]},
    )
    assert resp.status_code == 409
    assert resp.json()["codigo"] == "CONTA_JA_FECHADA"

    abertas = client.get("/api/mesas/admin/abertas", params={"empresa_id": empresa["id"]}).json()
    assert abertas == []


def test_tempo_de_preparo_manual(client):
    empresa = _criar_empresa(client, modo_tempo_preparo="manual", tempo_preparo_manual=35, tempo_entrega_manual=25)
    body = client.get(f"/api/loja/{empresa['id']}/tempo-preparo").json()
    assert body["modo"] == "manual"
    assert body["total_minutos"] == 60


def test_listar_impressoras(client):
    resp = client.get("/api/impressao/impressoras")
    assert resp.status_code == 200
    assert resp.json() == {"impressoras": ["COZINHA"], "padrao": "COZINHA"}


def test_validacao_do_payload(client):
    empresa = _criar_empresa(client)
    resp = _criar_pedido(client, empresa["id"], mesa_numero=None)
    assert resp.status_code == 422
    assert resp.json()["codigo"] == "VALIDACAO"
