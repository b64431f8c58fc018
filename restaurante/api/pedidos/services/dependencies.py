from fastapi import Depends
from sqlalchemy.orm import Session

from restaurante.api.impressao.services.dependencies import get_gerenciador_impressora
from restaurante.api.impressao.services.gerenciador_conexao import GerenciadorConexaoImpressora
from restaurante.api.pedidos.services.service_pedido import PedidoService
from restaurante.api.pedidos.services.service_pedido_status import PedidoStatusService
from restaurante.api.pedidos.services.service_tempo_preparo import TempoPreparoService
from restaurante.database.db_connection import get_db


def get_pedido_service(db: Session = Depends(get_db)) -> PedidoService:
    return PedidoService(db)


def get_pedido_status_service(
    db: Session = Depends(get_db),
    gerenciador: GerenciadorConexaoImpressora = Depends(get_gerenciador_impressora),
) -> PedidoStatusService:
    return PedidoStatusService(db, gerenciador_impressora=gerenciador)


def get_tempo_preparo_service(db: Session = Depends(get_db)) -> TempoPreparoService:
    return TempoPreparoService(db)
