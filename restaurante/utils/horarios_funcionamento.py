from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any, Mapping, Optional
from zoneinfo import ZoneInfo

from restaurante.core.exceptions import NoAvailableSlots
from restaurante.utils.logger import logger

# Política de agendamento
ANTECEDENCIA_MINIMA_MINUTOS = 30
ARREDONDAMENTO_MINUTOS = 15
INTERVALO_SLOT_MINUTOS = 30
MARGEM_FECHAMENTO_MINUTOS = 15
HORIZONTE_DIAS_AGENDAMENTO = 14
HORIZONTE_DIAS_ABERTURA = 7

MINUTOS_DIA = 24 * 60

# date.weekday(): 0=segunda .. 6=domingo
DIAS_SEMANA = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

DIAS_LABELS = {
    "monday": "Segunda",
    "tuesday": "Terça",
    "wednesday": "Quarta",
    "thursday": "Quinta",
    "friday": "Sexta",
    "saturday": "Sábado",
    "sunday": "Domingo",
}

DIAS_LABELS_CURTOS = {
    "monday": "Seg",
    "tuesday": "Ter",
    "wednesday": "Qua",
    "thursday": "Qui",
    "friday": "Sex",
    "saturday": "Sáb",
    "sunday": "Dom",
}


@dataclass(frozen=True)
class HorarioDia:
    abre: int  # minutos desde a meia-noite
    fecha: int
    fechado: bool = False

    @property
    def vira_meia_noite(self) -> bool:
        return self.fecha < self.abre


@dataclass(frozen=True)
class ProximaAbertura:
    dia: str  # "Hoje", "Amanhã" ou nome do dia
    horario: str  # "HH:MM"


@dataclass(frozen=True)
class DiaDisponivel:
    data: date
    label: str
    dia_semana: str


def _parse_hhmm(value: Any) -> Optional[int]:
    """
    Aceita 'HH:MM' (00-23 / 00-59) e devolve minutos desde a meia-noite.
    Retorna None se inválido.
    """
    if not isinstance(value, str):
        return None
    value = value.strip()
    if len(value) != 5 or value[2] != ":":
        return None
    hh, mm = value.split(":")
    if not (hh.isdigit() and mm.isdigit()):
        return None
    h, m = int(hh), int(mm)
    if h < 0 or h > 23 or m < 0 or m > 59:
        return None
    return h * 60 + m


def minutos_para_hhmm(minutos: int) -> str:
    minutos = minutos % MINUTOS_DIA
    return f"{minutos // 60:02d}:{minutos % 60:02d}"


def _arredondar_para_cima(minutos: int, passo: int = ARREDONDAMENTO_MINUTOS) -> int:
    return ((minutos + passo - 1) // passo) * passo


def _to_local(now: datetime, tz: ZoneInfo) -> datetime:
    """
    Converte para o fuso da empresa.
    Datetime naive é tratado como já estando no horário local da empresa.
    """
    if now.tzinfo is None:
        return now.replace(tzinfo=tz)
    return now.astimezone(tz)


def dia_semana_key(d: date) -> str:
    return DIAS_SEMANA[d.weekday()]


def normalizar_horarios(horarios: Any) -> Optional[dict[str, Optional[HorarioDia]]]:
    """
    Converte o JSON/pydantic de horários em {dia: HorarioDia | None}.

    Formato esperado:
      {"monday": {"open": "18:00", "close": "02:00", "closed": false}, ...}
    Dia ausente ou com horário inválido vira None (tratado como fechado).
    None/vazio = sem horário configurado (loja sempre aberta).
    """
    if not horarios:
        return None
    if hasattr(horarios, "model_dump"):
        horarios = horarios.model_dump()
    if not isinstance(horarios, Mapping):
        logger.warning(f"[Horários] Formato de horários inválido: {type(horarios).__name__}")
        return None

    resultado: dict[str, Optional[HorarioDia]] = {}
    for dia in DIAS_SEMANA:
        entrada = horarios.get(dia)
        if not isinstance(entrada, Mapping):
            resultado[dia] = None
            continue
        if entrada.get("closed"):
            resultado[dia] = HorarioDia(abre=0, fecha=0, fechado=True)
            continue
        abre = _parse_hhmm(entrada.get("open"))
        fecha = _parse_hhmm(entrada.get("close"))
        if abre is None or fecha is None:
            logger.warning(f"[Horários] Horário inválido para {dia}: {entrada}")
            resultado[dia] = None
            continue
        resultado[dia] = HorarioDia(abre=abre, fecha=fecha)
    return resultado


class DisponibilidadeLoja:
    """
    Disponibilidade da loja calculada a partir do horário semanal.

    Puro: `agora` e o fuso são injetados, nada lê o relógio do host. Todas as
    contas de minuto são feitas no fuso da empresa.
    """

    def __init__(
        self,
        horarios_funcionamento: Any,
        *,
        agora: datetime,
        timezone: str = "America/Sao_Paulo",
        fechado_temporariamente: bool = False,
    ):
        self.tz = ZoneInfo(timezone)
        self.horarios = normalizar_horarios(horarios_funcionamento)
        self.fechado_temporariamente = bool(fechado_temporariamente)
        self.agora = _to_local(agora, self.tz)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @property
    def hoje(self) -> date:
        return self.agora.date()

    @property
    def minutos_agora(self) -> int:
        return self.agora.hour * 60 + self.agora.minute

    @property
    def tem_horarios(self) -> bool:
        return self.horarios is not None

    def horario_do_dia(self, d: date) -> Optional[HorarioDia]:
        """Horário do dia da semana de `d`. Sem horários configurados = aberto o dia todo."""
        if self.horarios is None:
            return HorarioDia(abre=0, fecha=MINUTOS_DIA)
        return self.horarios.get(dia_semana_key(d))

    def today_hours(self) -> Optional[HorarioDia]:
        if self.horarios is None:
            return None
        return self.horarios.get(dia_semana_key(self.hoje))

    # ------------------------------------------------------------------
    # Aberto agora
    # ------------------------------------------------------------------
    def is_open_now(self) -> bool:
        if self.fechado_temporariamente:
            return False
        if self.horarios is None:
            return True

        horario = self.horario_do_dia(self.hoje)
        if horario is None or horario.fechado:
            return False

        atual = self.minutos_agora
        if horario.vira_meia_noite:
            # ex.: 18:00 até 02:00
            return atual >= horario.abre or atual < horario.fecha
        return horario.abre <= atual < horario.fecha

    def next_open_time(self) -> Optional[ProximaAbertura]:
        """Próxima abertura: hoje (se ainda não abriu) ou um dos próximos 7 dias."""
        if self.horarios is None:
            return None

        horario_hoje = self.horario_do_dia(self.hoje)
        if horario_hoje is not None and not horario_hoje.fechado:
            if self.minutos_agora < horario_hoje.abre:
                return ProximaAbertura(dia="Hoje", horario=minutos_para_hhmm(horario_hoje.abre))

        for offset in range(1, HORIZONTE_DIAS_ABERTURA + 1):
            d = self.hoje + timedelta(days=offset)
            horario = self.horario_do_dia(d)
            if horario is None or horario.fechado:
                continue
            label = "Amanhã" if offset == 1 else DIAS_LABELS[dia_semana_key(d)]
            return ProximaAbertura(dia=label, horario=minutos_para_hhmm(horario.abre))

        return None

    # ------------------------------------------------------------------
    # Agendamento
    # ------------------------------------------------------------------
    def _slots_em_minutos(self, d: date) -> list[int]:
        """
        Slots do dia `d` em minutos a partir da meia-noite de `d`.
        Em expedientes que viram a meia-noite os valores podem passar de 1440.
        """
        if d < self.hoje:
            return []
        horario = self.horario_do_dia(d)
        if horario is None or horario.fechado:
            return []

        fecha = horario.fecha
        if horario.vira_meia_noite:
            fecha += MINUTOS_DIA

        inicio = horario.abre
        if d == self.hoje:
            minimo = _arredondar_para_cima(self.minutos_agora + ANTECEDENCIA_MINIMA_MINUTOS)
            inicio = max(horario.abre, minimo)

        slots = []
        slot = inicio
        while slot < fecha - MARGEM_FECHAMENTO_MINUTOS:
            slots.append(slot)
            slot += INTERVALO_SLOT_MINUTOS
        return slots

    def available_schedule_slots(self, d: date) -> list[str]:
        """Horários ("HH:MM") oferecidos para agendamento no dia `d`."""
        return [minutos_para_hhmm(m) for m in self._slots_em_minutos(d)]

    def available_schedule_datetimes(self, d: date) -> list[datetime]:
        """Mesmos slots como datetime local; slots após a meia-noite caem no dia seguinte."""
        base = datetime.combine(d, time(0, 0), tzinfo=self.tz)
        return [base + timedelta(minutes=m) for m in self._slots_em_minutos(d)]

    def next_available_days(self, count: int) -> list[DiaDisponivel]:
        """Próximos `count` dias com agendamento possível (olhando até 14 dias à frente)."""
        dias: list[DiaDisponivel] = []
        if count <= 0:
            return dias

        for offset in range(HORIZONTE_DIAS_AGENDAMENTO):
            d = self.hoje + timedelta(days=offset)
            horario = self.horario_do_dia(d)
            if horario is None or horario.fechado:
                continue
            if offset == 0 and not self._slots_em_minutos(d):
                continue

            key = dia_semana_key(d)
            if offset == 0:
                label = "Hoje"
            elif offset == 1:
                label = "Amanhã"
            else:
                label = f"{DIAS_LABELS_CURTOS[key]} {d.strftime('%d/%m')}"
            dias.append(DiaDisponivel(data=d, label=label, dia_semana=DIAS_LABELS[key]))
            if len(dias) >= count:
                break
        return dias

    def validar_agendamento(self, agendado_para: datetime) -> datetime:
        """
        Confere se o horário pedido é um dos slots oferecidos.
        Retorna o datetime local normalizado; levanta NoAvailableSlots caso contrário.
        """
        local = _to_local(agendado_para, self.tz).replace(second=0, microsecond=0)
        # o slot pode ter sido gerado pelo expediente do dia anterior (após a meia-noite)
        for d in (local.date(), local.date() - timedelta(days=1)):
            if local in self.available_schedule_datetimes(d):
                return local
        raise NoAvailableSlots(
            f"Horário {local.strftime('%d/%m %H:%M')} não está disponível para agendamento"
        )
