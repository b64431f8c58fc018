from .schema_empresa import (
    EmpresaCreate,
    EmpresaResponse,
    EmpresaUpdate,
    HorarioDiaSchema,
    HorariosFuncionamento,
)

__all__ = [
    "EmpresaCreate",
    "EmpresaResponse",
    "EmpresaUpdate",
    "HorarioDiaSchema",
    "HorariosFuncionamento",
]
