from datetime import date
from typing import List, Optional

from pydantic import BaseModel

from restaurante.api.empresas.schemas.schema_empresa import HorarioDiaSchema


class ProximaAberturaResponse(BaseModel):
    dia: str
    horario: str


class StatusLojaResponse(BaseModel):
    empresa_id: int
    aberta: bool
    fechado_temporariamente: bool
    tem_horarios: bool
    horario_hoje: Optional[HorarioDiaSchema] = None
    proxima_abertura: Optional[ProximaAberturaResponse] = None
    permite_agendamento: bool


class DiaDisponivelResponse(BaseModel):
    data: date
    label: str
    dia_semana: str


class DiasDisponiveisResponse(BaseModel):
    empresa_id: int
    dias: List[DiaDisponivelResponse]


class HorariosDisponiveisResponse(BaseModel):
    empresa_id: int
    data: date
    horarios: List[str]


class TempoPreparoResponse(BaseModel):
    empresa_id: int
    modo: str
    preparo_minutos: int
    entrega_minutos: int
    total_minutos: int
    janela: Optional[str] = None
    amostras: int = 0
