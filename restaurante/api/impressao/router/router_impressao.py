from fastapi import APIRouter, Depends, status

from restaurante.api.impressao.services.dependencies import get_gerenciador_impressora
from restaurante.api.impressao.services.gerenciador_conexao import GerenciadorConexaoImpressora
from restaurante.utils.logger import logger

router = APIRouter(prefix="/api/impressao", tags=["Impressão"])


@router.get("/impressoras", status_code=status.HTTP_200_OK)
async def listar_impressoras(
    gerenciador: GerenciadorConexaoImpressora = Depends(get_gerenciador_impressora),
):
    """Impressoras visíveis pelo agente de impressão. 503 se o agente estiver fora do ar."""
    impressoras = await gerenciador.listar_impressoras()
    logger.info(f"[Impressão] {len(impressoras)} impressora(s) disponíveis")
    return {"impressoras": impressoras, "padrao": gerenciador.impressora_padrao}
