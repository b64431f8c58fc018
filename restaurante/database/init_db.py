"""Inicialização do banco de dados (criação das tabelas)."""
import logging

from sqlalchemy.engine import Engine

from .db_connection import Base, engine as default_engine

logger = logging.getLogger(__name__)


def importar_models():
    """Registra todos os models no metadata antes do create_all."""
    from restaurante.api.empresas.models.model_empresa import EmpresaModel  # noqa: F401
    from restaurante.api.mesas.models.model_mesa import MesaModel  # noqa: F401
    from restaurante.api.mesas.models.model_pagamento_fechamento import PagamentoFechamentoModel  # noqa: F401
    from restaurante.api.pedidos.models.model_pedido import PedidoModel  # noqa: F401
    from restaurante.api.pedidos.models.model_pedido_item import PedidoItemModel  # noqa: F401
    from restaurante.api.pedidos.models.model_pedido_historico import PedidoHistoricoModel  # noqa: F401


def inicializar_banco(engine: Engine | None = None):
    """Cria as tabelas que ainda não existem."""
    engine = engine or default_engine
    importar_models()
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("✅ Tabelas verificadas/criadas.")
    except Exception as e:
        logger.error(f"❌ Erro ao criar tabelas: {e}")
        raise
