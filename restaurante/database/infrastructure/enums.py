"""Tipos ENUM compartilhados entre os models (gravados como VARCHAR + CHECK)."""
from sqlalchemy import Enum as SAEnum

from restaurante.api.shared.schemas.schema_shared_enums import MeioPagamentoEnum

MeioPagamentoSAEnum = SAEnum(
    *[m.value for m in MeioPagamentoEnum],
    name="meio_pagamento_enum",
    native_enum=False,
)
