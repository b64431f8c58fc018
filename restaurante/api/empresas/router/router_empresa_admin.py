from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from restaurante.api.empresas.schemas import EmpresaCreate, EmpresaResponse, EmpresaUpdate
from restaurante.api.empresas.services.service_empresa import EmpresaService
from restaurante.database.db_connection import get_db

router = APIRouter(prefix="/api/empresas/admin", tags=["Admin - Empresas"])


@router.post("", response_model=EmpresaResponse, status_code=status.HTTP_201_CREATED)
def criar_empresa(payload: EmpresaCreate, db: Session = Depends(get_db)):
    return EmpresaService(db).criar(payload)


@router.get("/{empresa_id}", response_model=EmpresaResponse)
def obter_empresa(empresa_id: int = Path(..., gt=0), db: Session = Depends(get_db)):
    return EmpresaService(db).obter(empresa_id)


@router.put("/{empresa_id}", response_model=EmpresaResponse)
def atualizar_empresa(
    payload: EmpresaUpdate,
    empresa_id: int = Path(..., gt=0),
    db: Session = Depends(get_db),
):
    """Atualiza só os campos enviados (horários, pausa temporária, tempo de preparo, pagamentos...)."""
    return EmpresaService(db).atualizar(empresa_id, payload)
