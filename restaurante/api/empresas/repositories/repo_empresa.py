from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from restaurante.api.empresas.models.model_empresa import EmpresaModel


class EmpresaRepository:
    """Repository para a configuração das empresas."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, empresa_id: int) -> Optional[EmpresaModel]:
        return self.db.query(EmpresaModel).filter_by(id=empresa_id).first()

    def get_or_404(self, empresa_id: int) -> EmpresaModel:
        empresa = self.get_by_id(empresa_id)
        if not empresa:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Empresa não encontrada")
        return empresa

    def criar(self, **dados) -> EmpresaModel:
        empresa = EmpresaModel(**dados)
        self.db.add(empresa)
        self.db.commit()
        self.db.refresh(empresa)
        return empresa

    def atualizar(self, empresa: EmpresaModel, **dados) -> EmpresaModel:
        for campo, valor in dados.items():
            setattr(empresa, campo, valor)
        self.db.commit()
        self.db.refresh(empresa)
        return empresa
