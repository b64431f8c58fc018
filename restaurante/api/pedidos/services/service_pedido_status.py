from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from restaurante.api.impressao.contracts.impressora_contract import AlvoImpressao
from restaurante.api.impressao.services.gerenciador_conexao import GerenciadorConexaoImpressora
from restaurante.api.impressao.services.service_recibo import renderizar_recibo
from restaurante.api.pedidos.models.model_pedido import PedidoModel, StatusPedido
from restaurante.api.pedidos.repositories.repo_pedidos import PedidoRepository
from restaurante.api.pedidos.services.status_flow import validar_transicao
from restaurante.core.exceptions import PrinterUnavailable
from restaurante.utils.logger import logger


@dataclass
class ResultadoTransicao:
    pedido: PedidoModel
    impresso: bool = False
    aviso_impressao: Optional[str] = None
    recibo_texto: Optional[str] = None


class PedidoStatusService:
    """
    Único ponto de mutação de status de pedido.

    Confirmar o pedido dispara a impressão do recibo: a impressora é reservada
    antes de aguardar a gravação do status e liberada se a gravação falhar.
    Falha de impressão nunca impede a transição; a resposta leva o recibo em
    texto para impressão manual.
    """

    def __init__(self, db: Session, gerenciador_impressora: Optional[GerenciadorConexaoImpressora] = None):
        self.db = db
        self.repo = PedidoRepository(db)
        self.gerenciador_impressora = gerenciador_impressora

    def _reservar_impressora(self) -> tuple[Optional[AlvoImpressao], Optional[str]]:
        if self.gerenciador_impressora is None:
            return None, "Impressão não configurada"
        try:
            return self.gerenciador_impressora.abrir_alvo(), None
        except PrinterUnavailable as e:
            logger.warning(f"[Pedidos] Impressora indisponível ao confirmar pedido: {e.mensagem}")
            return None, e.mensagem

    async def avancar_status(self, pedido_id: int, status_destino: Any, motivo: Optional[str] = None) -> ResultadoTransicao:
        pedido = self.repo.get(pedido_id)
        status_atual = pedido.status
        destino = validar_transicao(pedido, status_destino)

        alvo = None
        aviso = None
        imprimir = destino == StatusPedido.CONFIRMADO.value
        if imprimir:
            alvo, aviso = self._reservar_impressora()

        try:
            pedido = await run_in_threadpool(
                self.repo.atualizar_status,
                pedido_id,
                status_esperado=status_atual,
                novo_status=destino,
                motivo=motivo,
            )
        except Exception:
            if alvo is not None:
                self.gerenciador_impressora.liberar(alvo)
            raise

        logger.info(f"[Pedidos] Pedido {pedido_id}: {status_atual} → {destino}")
        resultado = ResultadoTransicao(pedido=pedido)
        if not imprimir:
            return resultado

        empresa_nome = pedido.empresa.nome if pedido.empresa else None
        recibo = renderizar_recibo(pedido, empresa_nome=empresa_nome)
        if alvo is not None:
            try:
                await self.gerenciador_impressora.imprimir(alvo, recibo)
                resultado.impresso = True
                return resultado
            except PrinterUnavailable as e:
                logger.warning(f"[Pedidos] Falha ao imprimir pedido {pedido_id}: {e.mensagem}")
                aviso = e.mensagem

        resultado.aviso_impressao = aviso
        resultado.recibo_texto = recibo
        return resultado
