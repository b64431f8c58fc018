"""
Rotas públicas de funcionamento da loja: aberto agora, próxima abertura,
dias/horários de agendamento e tempo estimado de preparo.
"""
from dataclasses import asdict
from datetime import date

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from restaurante.api.loja.schemas import (
    DiaDisponivelResponse,
    DiasDisponiveisResponse,
    HorariosDisponiveisResponse,
    StatusLojaResponse,
    TempoPreparoResponse,
)
from restaurante.api.loja.services.service_loja import LojaService
from restaurante.api.pedidos.services.dependencies import get_tempo_preparo_service
from restaurante.api.pedidos.services.service_tempo_preparo import TempoPreparoService
from restaurante.database.db_connection import get_db
from restaurante.utils.horarios_funcionamento import HORIZONTE_DIAS_AGENDAMENTO

router = APIRouter(prefix="/api/loja", tags=["Loja - Funcionamento"])


def get_loja_service(db: Session = Depends(get_db)) -> LojaService:
    return LojaService(db)


@router.get("/{empresa_id}/status", response_model=StatusLojaResponse)
def status_loja(
    empresa_id: int = Path(..., gt=0),
    svc: LojaService = Depends(get_loja_service),
):
    dados = svc.status_loja(empresa_id)
    if dados["proxima_abertura"] is not None:
        dados["proxima_abertura"] = asdict(dados["proxima_abertura"])
    return StatusLojaResponse(**dados)


@router.get("/{empresa_id}/agendamento/dias", response_model=DiasDisponiveisResponse)
def dias_disponiveis(
    empresa_id: int = Path(..., gt=0),
    quantidade: int = Query(7, ge=1, le=HORIZONTE_DIAS_AGENDAMENTO),
    svc: LojaService = Depends(get_loja_service),
):
    dias = svc.dias_disponiveis(empresa_id, quantidade)
    return DiasDisponiveisResponse(
        empresa_id=empresa_id,
        dias=[DiaDisponivelResponse(**asdict(d)) for d in dias],
    )


@router.get("/{empresa_id}/agendamento/horarios", response_model=HorariosDisponiveisResponse)
def horarios_disponiveis(
    empresa_id: int = Path(..., gt=0),
    data: date = Query(..., description="Dia do agendamento (YYYY-MM-DD)"),
    svc: LojaService = Depends(get_loja_service),
):
    return HorariosDisponiveisResponse(
        empresa_id=empresa_id,
        data=data,
        horarios=svc.horarios_disponiveis(empresa_id, data),
    )


@router.get("/{empresa_id}/tempo-preparo", response_model=TempoPreparoResponse)
def tempo_preparo(
    empresa_id: int = Path(..., gt=0),
    svc: TempoPreparoService = Depends(get_tempo_preparo_service),
):
    resultado = svc.estimate_preparation_time(empresa_id)
    return TempoPreparoResponse(
        empresa_id=empresa_id,
        modo=resultado.modo,
        preparo_minutos=resultado.preparo_minutos,
        entrega_minutos=resultado.entrega_minutos,
        total_minutos=resultado.total_minutos,
        janela=resultado.janela,
        amostras=resultado.amostras,
    )
