from typing import List

from fastapi import APIRouter, Depends, Path, Query, status

from restaurante.api.mesas.schemas import (
    ComandaDetalheResponse,
    ComandaResumoResponse,
    ContagemItensResponse,
    FecharComandaRequest,
    FechamentoResponse,
    PagamentoResponse,
)
from restaurante.api.mesas.services.dependencies import get_comanda_service, get_fechamento_service
from restaurante.api.mesas.services.service_comanda import ComandaResumo, ComandaService, aggregate_tab
from restaurante.api.mesas.services.service_fechamento import FechamentoService, Pagamento
from restaurante.api.pedidos.services.service_pedido import montar_pedido_response
from restaurante.utils.logger import logger

router = APIRouter(prefix="/api/mesas/admin", tags=["Admin - Mesas"])


def _resumo_response(resumo: ComandaResumo) -> dict:
    return {
        "mesa_id": resumo.mesa_id,
        "numero": resumo.numero,
        "label": resumo.label,
        "status": resumo.status,
        "aberta_em": resumo.aberta_em,
        "cliente_nome": resumo.cliente_nome,
        "total": float(resumo.total),
        "pedidos_ativos": resumo.pedidos_ativos,
        "contagem_itens": ContagemItensResponse(**resumo.contagem_itens),
    }


@router.get("/abertas", response_model=List[ComandaResumoResponse], status_code=status.HTTP_200_OK)
def listar_comandas_abertas(
    empresa_id: int = Query(..., gt=0),
    svc: ComandaService = Depends(get_comanda_service),
):
    logger.info(f"[Mesas] Listar comandas abertas - empresa_id={empresa_id}")
    return [ComandaResumoResponse(**_resumo_response(r)) for r in svc.listar_abertas(empresa_id)]


@router.get("/{mesa_id}", response_model=ComandaDetalheResponse, status_code=status.HTTP_200_OK)
def obter_comanda(
    mesa_id: int = Path(..., gt=0),
    svc: ComandaService = Depends(get_comanda_service),
):
    """Resumo da comanda e todos os pedidos da mesa (cancelados aparecem, mas não somam)."""
    mesa = svc.repo.get_or_404(mesa_id)
    resumo = aggregate_tab(mesa)
    return ComandaDetalheResponse(
        **_resumo_response(resumo),
        pedidos=[montar_pedido_response(p) for p in mesa.pedidos],
    )


@router.post("/{mesa_id}/fechar", response_model=FechamentoResponse, status_code=status.HTTP_200_OK)
def fechar_comanda(
    payload: FecharComandaRequest,
    mesa_id: int = Path(..., gt=0),
    svc: FechamentoService = Depends(get_fechamento_service),
):
    """
    Fecha a comanda com um ou mais pagamentos. A soma precisa bater com o
    total (tolerância R$ 0,01); caso contrário 422 com `restante` e `sinal`.
    """
    logger.info(f"[Mesas] Fechar comanda - mesa_id={mesa_id} pagamentos={len(payload.pagamentos)}")
    pagamentos = [Pagamento(metodo=p.metodo.value, valor=p.valor) for p in payload.pagamentos]
    resultado = svc.reconcile_and_close(mesa_id, pagamentos)
    return FechamentoResponse(
        comanda=ComandaResumoResponse(**_resumo_response(resultado.comanda)),
        total=float(resultado.reconciliacao.alvo),
        pago=float(resultado.reconciliacao.pago),
        restante=float(resultado.reconciliacao.restante),
        pagamentos=[PagamentoResponse(metodo=p.metodo, valor=float(p.valor)) for p in resultado.pagamentos],
    )
