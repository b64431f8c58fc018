from decimal import Decimal
from typing import Optional, Sequence

from fastapi import HTTPException, status
from sqlalchemy import and_, select, update
from sqlalchemy.orm import Session, selectinload

from restaurante.api.mesas.models.model_mesa import MesaModel, StatusMesa
from restaurante.api.mesas.models.model_pagamento_fechamento import PagamentoFechamentoModel
from restaurante.api.pedidos.models.model_pedido import PedidoModel, StatusPedido
from restaurante.core.exceptions import ContaJaFechada, ReconciliationMismatch
from restaurante.utils.database_utils import now_trimmed
from restaurante.utils.logger import logger


class MesaRepository:
    """Repository para as comandas de mesa."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, mesa_id: int) -> Optional[MesaModel]:
        return (
            self.db.query(MesaModel)
            .options(selectinload(MesaModel.pedidos).selectinload(PedidoModel.itens))
            .filter_by(id=mesa_id)
            .first()
        )

    def get_or_404(self, mesa_id: int) -> MesaModel:
        mesa = self.get_by_id(mesa_id)
        if not mesa:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Mesa não encontrada")
        return mesa

    def get_aberta_por_numero(self, empresa_id: int, numero: str) -> Optional[MesaModel]:
        """Comanda aberta da mesa `numero` (no máximo uma por vez)."""
        return (
            self.db.query(MesaModel)
            .filter(
                and_(
                    MesaModel.empresa_id == empresa_id,
                    MesaModel.numero == numero,
                    MesaModel.status == StatusMesa.ABERTA,
                )
            )
            .first()
        )

    def abrir(self, empresa_id: int, numero: str, cliente_nome: str | None = None) -> MesaModel:
        """Abre a comanda da mesa. Não commita: faz parte da transação de criação do pedido."""
        mesa = MesaModel(
            empresa_id=empresa_id,
            numero=numero,
            status=StatusMesa.ABERTA,
            cliente_nome=cliente_nome,
            aberta_em=now_trimmed(),
        )
        self.db.add(mesa)
        self.db.flush()
        logger.info(f"[Mesas] Comanda aberta: empresa_id={empresa_id} mesa={numero} id={mesa.id}")
        return mesa

    def list_abertas(self, empresa_id: int) -> list[MesaModel]:
        return (
            self.db.query(MesaModel)
            .options(selectinload(MesaModel.pedidos).selectinload(PedidoModel.itens))
            .filter(MesaModel.empresa_id == empresa_id, MesaModel.status == StatusMesa.ABERTA)
            .order_by(MesaModel.numero)
            .all()
        )

    def fechar_comanda(
        self,
        mesa_id: int,
        pagamentos: Sequence[tuple[str, Decimal]],
        *,
        alvo: Decimal,
    ) -> MesaModel:
        """
        Aplica o fechamento numa única transação:
        mesa → closed, pedidos não cancelados → pagos, pagamentos registrados.

        A mesa só é atualizada se ainda estiver aberta; quem chegar depois
        recebe ContaJaFechada e nada é gravado. Os pedidos ativos são relidos
        dentro da transação: se o total não for mais o `alvo` conferido
        (pedido novo ou cancelado no meio do caminho), levanta
        ReconciliationMismatch e nada é gravado. Só os pedidos relidos são
        marcados como pagos.
        """
        agora = now_trimmed()
        pago = sum((valor for _, valor in pagamentos), Decimal("0.00"))
        try:
            result = self.db.execute(
                update(MesaModel)
                .where(MesaModel.id == mesa_id, MesaModel.status == StatusMesa.ABERTA)
                .values(status=StatusMesa.FECHADA, fechada_em=agora)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise ContaJaFechada(f"A comanda da mesa {mesa_id} já está fechada")

            ativos = self.db.execute(
                select(PedidoModel.id, PedidoModel.valor_total).where(
                    PedidoModel.mesa_id == mesa_id,
                    PedidoModel.status != StatusPedido.CANCELADO.value,
                )
            ).all()
            total_atual = sum((Decimal(valor or 0) for _, valor in ativos), Decimal("0.00"))
            if total_atual != alvo:
                logger.warning(
                    f"[Mesas] Comanda {mesa_id} mudou durante o fechamento: "
                    f"conferido={alvo} atual={total_atual}"
                )
                raise ReconciliationMismatch(total_atual - pago)

            pedido_ids = [pedido_id for pedido_id, _ in ativos]
            if pedido_ids:
                self.db.execute(
                    update(PedidoModel)
                    .where(PedidoModel.id.in_(pedido_ids))
                    .values(pago=True, conta_aberta=False, fechado_em=agora, updated_at=agora)
                    .execution_options(synchronize_session=False)
                )

            for ordem, (metodo, valor) in enumerate(pagamentos):
                self.db.add(
                    PagamentoFechamentoModel(mesa_id=mesa_id, ordem=ordem, metodo=metodo, valor=valor)
                )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        # UPDATE em massa não sincroniza a sessão; recarrega do banco
        self.db.expire_all()
        return self.get_or_404(mesa_id)
