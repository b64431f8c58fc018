from .schema_loja import (
    DiaDisponivelResponse,
    DiasDisponiveisResponse,
    HorariosDisponiveisResponse,
    ProximaAberturaResponse,
    StatusLojaResponse,
    TempoPreparoResponse,
)

__all__ = [
    "DiaDisponivelResponse",
    "DiasDisponiveisResponse",
    "HorariosDisponiveisResponse",
    "ProximaAberturaResponse",
    "StatusLojaResponse",
    "TempoPreparoResponse",
]
