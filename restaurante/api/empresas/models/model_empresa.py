# restaurante/api/empresas/models/model_empresa.py
from sqlalchemy import Column, Integer, String, Boolean, Numeric, JSON

from restaurante.database.db_connection import Base
from restaurante.api.shared.schemas.schema_shared_enums import MeioPagamentoEnum


class EmpresaModel(Base):
    """Configuração do estabelecimento consumida pelo núcleo (somente leitura para ele)."""

    __tablename__ = "empresas"

    id = Column(Integer, primary_key=True, autoincrement=True)
    nome = Column(String(100), nullable=False)
    telefone = Column(String(30), nullable=True)
    endereco = Column(String(255), nullable=True)

    # Horário de funcionamento. Estrutura esperada (JSON):
    # {"monday": {"open": "18:00", "close": "02:00", "closed": false}, ..., "sunday": {...}}
    # Ausente (NULL) = sempre aberta.
    timezone = Column(String(64), nullable=False, default="America/Sao_Paulo")
    horarios_funcionamento = Column(JSON, nullable=True)
    fechado_temporariamente = Column(Boolean, nullable=False, default=False)
    permite_agendamento = Column(Boolean, nullable=False, default=True)

    # Tempo de preparo: "manual" ou "auto_daily"
    modo_tempo_preparo = Column(String(20), nullable=False, default="auto_daily")
    tempo_preparo_manual = Column(Integer, nullable=True)  # minutos
    tempo_entrega_manual = Column(Integer, nullable=True)  # minutos

    taxa_entrega = Column(Numeric(18, 2), nullable=False, default=0)

    # Meios de pagamento habilitados
    pagamento_pix_habilitado = Column(Boolean, nullable=False, default=True)
    pagamento_credito_habilitado = Column(Boolean, nullable=False, default=True)
    pagamento_debito_habilitado = Column(Boolean, nullable=False, default=True)
    pagamento_dinheiro_habilitado = Column(Boolean, nullable=False, default=True)

    @property
    def meios_pagamento_habilitados(self) -> set[str]:
        flags = {
            MeioPagamentoEnum.PIX.value: self.pagamento_pix_habilitado,
            MeioPagamentoEnum.CREDITO.value: self.pagamento_credito_habilitado,
            MeioPagamentoEnum.DEBITO.value: self.pagamento_debito_habilitado,
            MeioPagamentoEnum.DINHEIRO.value: self.pagamento_dinheiro_habilitado,
        }
        return {metodo for metodo, ativo in flags.items() if ativo}
