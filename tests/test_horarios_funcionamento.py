from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from restaurante.core.exceptions import NoAvailableSlots
from restaurante.utils.horarios_funcionamento import DisponibilidadeLoja, _parse_hhmm

SP = ZoneInfo("America/Sao_Paulo")

DIAS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

NOTURNO = {dia: {"open": "18:00", "close": "02:00", "closed": False} for dia in DIAS}

ALMOCO_DIAS_UTEIS = {
    **{dia: {"open": "11:00", "close": "15:00"} for dia in DIAS[:5]},
    "saturday": {"closed": True},
    "sunday": {"closed": True},
}


def _loja(horarios, agora, **kwargs):
    return DisponibilidadeLoja(horarios, agora=agora, timezone="America/Sao_Paulo", **kwargs)


# 2024-10-23 é uma quarta-feira
def _quarta(hora, minuto=0):
    return datetime(2024, 10, 23, hora, minuto, tzinfo=SP)


@pytest.mark.parametrize("hora,aberta", [(23, True), (1, True), (10, False), (18, True), (2, False)])
def test_expediente_que_vira_a_meia_noite(hora, aberta):
    assert _loja(NOTURNO, _quarta(hora)).is_open_now() is aberta


def test_fechamento_temporario_ignora_horarios():
    assert _loja(NOTURNO, _quarta(23), fechado_temporariamente=True).is_open_now() is False
    assert _loja(None, _quarta(12), fechado_temporariamente=True).is_open_now() is False


def test_sem_horarios_configurados_sempre_aberta():
    loja = _loja(None, _quarta(4))
    assert loja.is_open_now() is True
    assert loja.next_open_time() is None


def test_dia_fechado_e_horario_invalido():
    horarios = {**ALMOCO_DIAS_UTEIS, "wednesday": {"open": "25:00", "close": "15:00"}}
    assert _loja(horarios, _quarta(12)).is_open_now() is False
    assert _parse_hhmm("7:30") is None
    assert _parse_hhmm("07:30") == 450


def test_agora_com_fuso_diferente_e_convertido():
    # 02:00 UTC de quinta = 23:00 de quarta em São Paulo
    agora_utc = datetime(2024, 10, 24, 2, 0, tzinfo=timezone.utc)
    loja = _loja(ALMOCO_DIAS_UTEIS, agora_utc)
    assert loja.hoje == date(2024, 10, 23)
    assert loja.is_open_now() is False


def test_proxima_abertura():
    antes_de_abrir = _loja(ALMOCO_DIAS_UTEIS, _quarta(10))
    proxima = antes_de_abrir.next_open_time()
    assert (proxima.dia, proxima.horario) == ("Hoje", "11:00")

    depois_de_fechar = _loja(ALMOCO_DIAS_UTEIS, _quarta(16))
    proxima = depois_de_fechar.next_open_time()
    assert (proxima.dia, proxima.horario) == ("Amanhã", "11:00")

    sexta_a_noite = _loja(ALMOCO_DIAS_UTEIS, datetime(2024, 10, 25, 20, 0, tzinfo=SP))
    proxima = sexta_a_noite.next_open_time()
    assert (proxima.dia, proxima.horario) == ("Segunda", "11:00")


def test_proxima_abertura_nenhum_dia_aberto():
    horarios = {dia: {"closed": True} for dia in DIAS}
    assert _loja(horarios, _quarta(12)).next_open_time() is None


def test_slots_de_hoje_respeitam_antecedencia_e_fechamento():
    loja = _loja(ALMOCO_DIAS_UTEIS, _quarta(11, 7))
    slots = loja.available_schedule_slots(date(2024, 10, 23))
    # 11:07 + 30min = 11:37, arredondado para 11:45
    assert slots[0] == "11:45"
    assert slots[-1] == "14:15"
    assert all("11:45" <= s <= "14:45" for s in slots)


def test_slots_de_outro_dia_comecam_na_abertura():
    loja = _loja(ALMOCO_DIAS_UTEIS, _quarta(11, 7))
    slots = loja.available_schedule_slots(date(2024, 10, 24))
    assert slots == ["11:00", "11:30", "12:00", "12:30", "13:00", "13:30", "14:00", "14:30"]


def test_slots_expediente_noturno_passam_da_meia_noite():
    loja = _loja(NOTURNO, _quarta(12))
    slots = loja.available_schedule_slots(date(2024, 10, 24))
    assert slots[0] == "18:00"
    assert "00:00" in slots
    assert slots[-1] == "01:30"


def test_slots_dia_passado_ou_fechado():
    loja = _loja(ALMOCO_DIAS_UTEIS, _quarta(9))
    assert loja.available_schedule_slots(date(2024, 10, 22)) == []
    assert loja.available_schedule_slots(date(2024, 10, 26)) == []


def test_proximos_dias_disponiveis_pula_hoje_sem_slots_e_fim_de_semana():
    loja = _loja(ALMOCO_DIAS_UTEIS, _quarta(14, 40))
    dias = loja.next_available_days(3)
    assert [d.data for d in dias] == [date(2024, 10, 24), date(2024, 10, 25), date(2024, 10, 28)]
    assert [d.label for d in dias] == ["Amanhã", "Sex 25/10", "Seg 28/10"]
    assert dias[0].dia_semana == "Quinta"


def test_proximos_dias_inclui_hoje_com_slots():
    dias = _loja(ALMOCO_DIAS_UTEIS, _quarta(9)).next_available_days(1)
    assert dias[0].label == "Hoje"
    assert dias[0].data == date(2024, 10, 23)


def test_validar_agendamento():
    loja = _loja(NOTURNO, _quarta(12))
    # 00:30 de quinta pertence ao expediente de quarta
    ok = loja.validar_agendamento(datetime(2024, 10, 24, 0, 30, tzinfo=SP))
    assert ok.hour == 0 and ok.minute == 30

    with pytest.raises(NoAvailableSlots):
        loja.validar_agendamento(datetime(2024, 10, 23, 19, 10, tzinfo=SP))
    with pytest.raises(NoAvailableSlots):
        loja.validar_agendamento(datetime(2024, 10, 23, 12, 0, tzinfo=SP))
