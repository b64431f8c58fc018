# restaurante/api/empresas/schemas/schema_empresa.py
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, condecimal, field_validator

from restaurante.api.shared.schemas.schema_shared_enums import ModoTempoPreparoEnum

HHMM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class HorarioDiaSchema(BaseModel):
    """Expediente de um dia. `close` menor que `open` = vira a meia-noite (ex.: 18:00–02:00)."""
    open: Optional[str] = Field(None, pattern=HHMM_PATTERN)
    close: Optional[str] = Field(None, pattern=HHMM_PATTERN)
    closed: bool = False


class HorariosFuncionamento(BaseModel):
    monday: Optional[HorarioDiaSchema] = None
    tuesday: Optional[HorarioDiaSchema] = None
    wednesday: Optional[HorarioDiaSchema] = None
    thursday: Optional[HorarioDiaSchema] = None
    friday: Optional[HorarioDiaSchema] = None
    saturday: Optional[HorarioDiaSchema] = None
    sunday: Optional[HorarioDiaSchema] = None


class EmpresaBase(BaseModel):
    nome: str = Field(..., min_length=1, max_length=100)
    telefone: Optional[str] = None
    endereco: Optional[str] = None
    timezone: str = "America/Sao_Paulo"
    horarios_funcionamento: Optional[HorariosFuncionamento] = None
    fechado_temporariamente: bool = False
    permite_agendamento: bool = True

    modo_tempo_preparo: ModoTempoPreparoEnum = ModoTempoPreparoEnum.AUTO_DIARIO
    tempo_preparo_manual: Optional[int] = Field(None, gt=0)
    tempo_entrega_manual: Optional[int] = Field(None, ge=0)
    taxa_entrega: condecimal(max_digits=18, decimal_places=2, ge=0) = 0

    pagamento_pix_habilitado: bool = True
    pagamento_credito_habilitado: bool = True
    pagamento_debito_habilitado: bool = True
    pagamento_dinheiro_habilitado: bool = True

    @field_validator("timezone")
    @classmethod
    def _validar_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Fuso horário inválido: {v}")
        return v


class EmpresaCreate(EmpresaBase):
    pass


class EmpresaUpdate(BaseModel):
    nome: Optional[str] = Field(None, min_length=1, max_length=100)
    telefone: Optional[str] = None
    endereco: Optional[str] = None
    horarios_funcionamento: Optional[HorariosFuncionamento] = None
    fechado_temporariamente: Optional[bool] = None
    permite_agendamento: Optional[bool] = None
    modo_tempo_preparo: Optional[ModoTempoPreparoEnum] = None
    tempo_preparo_manual: Optional[int] = Field(None, gt=0)
    tempo_entrega_manual: Optional[int] = Field(None, ge=0)
    taxa_entrega: Optional[condecimal(max_digits=18, decimal_places=2, ge=0)] = None
    pagamento_pix_habilitado: Optional[bool] = None
    pagamento_credito_habilitado: Optional[bool] = None
    pagamento_debito_habilitado: Optional[bool] = None
    pagamento_dinheiro_habilitado: Optional[bool] = None


class EmpresaResponse(EmpresaBase):
    id: int
    taxa_entrega: float

    model_config = ConfigDict(from_attributes=True)
