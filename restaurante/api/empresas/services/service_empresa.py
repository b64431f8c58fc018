from sqlalchemy.orm import Session

from restaurante.api.empresas.models.model_empresa import EmpresaModel
from restaurante.api.empresas.repositories.repo_empresa import EmpresaRepository
from restaurante.api.empresas.schemas.schema_empresa import EmpresaCreate, EmpresaUpdate
from restaurante.utils.logger import logger


def _dados_modelo(payload, **kwargs) -> dict:
    dados = payload.model_dump(**kwargs)
    horarios = getattr(payload, "horarios_funcionamento", None)
    if "horarios_funcionamento" in dados:
        dados["horarios_funcionamento"] = horarios.model_dump(exclude_none=True) if horarios else None
    if dados.get("modo_tempo_preparo") is not None:
        dados["modo_tempo_preparo"] = getattr(dados["modo_tempo_preparo"], "value", dados["modo_tempo_preparo"])
    return dados


class EmpresaService:
    def __init__(self, db: Session):
        self.repo = EmpresaRepository(db)

    def criar(self, payload: EmpresaCreate) -> EmpresaModel:
        empresa = self.repo.criar(**_dados_modelo(payload))
        logger.info(f"[Empresas] Empresa criada id={empresa.id} nome={empresa.nome}")
        return empresa

    def obter(self, empresa_id: int) -> EmpresaModel:
        return self.repo.get_or_404(empresa_id)

    def atualizar(self, empresa_id: int, payload: EmpresaUpdate) -> EmpresaModel:
        empresa = self.repo.get_or_404(empresa_id)
        dados = _dados_modelo(payload, exclude_unset=True)
        empresa = self.repo.atualizar(empresa, **dados)
        logger.info(f"[Empresas] Empresa {empresa_id} atualizada: campos={sorted(dados)}")
        return empresa
