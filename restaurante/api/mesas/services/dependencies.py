from fastapi import Depends
from sqlalchemy.orm import Session

from restaurante.api.mesas.services.service_comanda import ComandaService
from restaurante.api.mesas.services.service_fechamento import FechamentoService
from restaurante.database.db_connection import get_db


def get_comanda_service(db: Session = Depends(get_db)) -> ComandaService:
    return ComandaService(db)


def get_fechamento_service(db: Session = Depends(get_db)) -> FechamentoService:
    return FechamentoService(db)
