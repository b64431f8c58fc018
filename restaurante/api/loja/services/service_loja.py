from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from sqlalchemy.orm import Session

from restaurante.api.empresas.models.model_empresa import EmpresaModel
from restaurante.api.empresas.repositories.repo_empresa import EmpresaRepository
from restaurante.utils.database_utils import now_trimmed
from restaurante.utils.horarios_funcionamento import (
    DiaDisponivel,
    DisponibilidadeLoja,
    HORIZONTE_DIAS_AGENDAMENTO,
    minutos_para_hhmm,
)
from restaurante.utils.logger import logger


def construir_disponibilidade(empresa: EmpresaModel, agora: Optional[datetime] = None) -> DisponibilidadeLoja:
    return DisponibilidadeLoja(
        empresa.horarios_funcionamento,
        agora=agora or now_trimmed(tz_name=empresa.timezone),
        timezone=empresa.timezone,
        fechado_temporariamente=empresa.fechado_temporariamente,
    )


class LojaService:
    """Consultas públicas de funcionamento/agendamento de uma empresa."""

    def __init__(self, db: Session):
        self.db = db
        self.repo_empresa = EmpresaRepository(db)

    def _disponibilidade(self, empresa_id: int, agora: Optional[datetime]) -> tuple[EmpresaModel, DisponibilidadeLoja]:
        empresa = self.repo_empresa.get_or_404(empresa_id)
        return empresa, construir_disponibilidade(empresa, agora)

    def status_loja(self, empresa_id: int, *, agora: Optional[datetime] = None) -> dict:
        empresa, disp = self._disponibilidade(empresa_id, agora)
        aberta = disp.is_open_now()
        proxima = None if aberta else disp.next_open_time()
        horario = disp.today_hours()

        logger.info(f"[Loja] status empresa_id={empresa_id} aberta={aberta}")
        return {
            "empresa_id": empresa.id,
            "aberta": aberta,
            "fechado_temporariamente": disp.fechado_temporariamente,
            "tem_horarios": disp.tem_horarios,
            "horario_hoje": None if horario is None else {
                "open": None if horario.fechado else minutos_para_hhmm(horario.abre),
                "close": None if horario.fechado else minutos_para_hhmm(horario.fecha),
                "closed": horario.fechado,
            },
            "proxima_abertura": proxima,
            "permite_agendamento": empresa.permite_agendamento,
        }

    def dias_disponiveis(
        self,
        empresa_id: int,
        quantidade: int = HORIZONTE_DIAS_AGENDAMENTO,
        *,
        agora: Optional[datetime] = None,
    ) -> list[DiaDisponivel]:
        empresa, disp = self._disponibilidade(empresa_id, agora)
        if not empresa.permite_agendamento:
            return []
        return disp.next_available_days(quantidade)

    def horarios_disponiveis(self, empresa_id: int, data: date, *, agora: Optional[datetime] = None) -> list[str]:
        empresa, disp = self._disponibilidade(empresa_id, agora)
        if not empresa.permite_agendamento:
            return []
        return disp.available_schedule_slots(data)
