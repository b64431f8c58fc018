"""
Erros de domínio do núcleo de pedidos.

Todos são recuperáveis pelo chamador; nenhum derruba o processo. Falhas de
persistência/transporte não são encapsuladas aqui e sobem sem modificação.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional

from fastapi import status


class DomainError(Exception):
    """Base dos erros de domínio. `http_status` é usado pelos exception handlers."""

    http_status: int = status.HTTP_400_BAD_REQUEST
    codigo: str = "ERRO_DOMINIO"

    def __init__(self, mensagem: str):
        super().__init__(mensagem)
        self.mensagem = mensagem

    def to_dict(self) -> dict[str, Any]:
        return {"detail": self.mensagem, "codigo": self.codigo}


class InvalidTransition(DomainError):
    """Status solicitado não é o próximo passo do fluxo nem um cancelamento válido."""

    http_status = status.HTTP_409_CONFLICT
    codigo = "TRANSICAO_INVALIDA"

    def __init__(self, status_atual: Optional[str], status_destino: str, mensagem: str | None = None):
        self.status_atual = status_atual
        self.status_destino = status_destino
        super().__init__(
            mensagem
            or f"Transição inválida: {status_atual} → {status_destino}"
        )

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(status_atual=self.status_atual, status_destino=self.status_destino)
        return data


class NoAvailableSlots(DomainError):
    """Não há janela de funcionamento para o dia/horário pedido. O cliente deve escolher outro."""

    http_status = 422
    codigo = "SEM_HORARIO_DISPONIVEL"


class ReconciliationMismatch(DomainError):
    """Pagamentos informados não fecham com o valor devido (fora da tolerância)."""

    http_status = 422
    codigo = "PAGAMENTOS_NAO_CONFEREM"

    FALTA = "falta"
    EXCESSO = "excesso"

    def __init__(self, restante: Decimal):
        self.restante = restante
        # restante > 0: falta pagar; restante < 0: pagou a mais
        self.sinal = self.FALTA if restante > 0 else self.EXCESSO
        if self.sinal == self.FALTA:
            mensagem = f"Faltam R$ {abs(restante):.2f} para fechar a conta"
        else:
            mensagem = f"Pagamentos excedem o total em R$ {abs(restante):.2f}"
        super().__init__(mensagem)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(restante=float(self.restante), sinal=self.sinal)
        return data


class PrinterUnavailable(DomainError):
    """Alvo de impressão indisponível (agente offline, impressora inexistente etc.)."""

    http_status = status.HTTP_503_SERVICE_UNAVAILABLE
    codigo = "IMPRESSORA_INDISPONIVEL"


class ContaJaFechada(DomainError):
    """A conta (comanda da mesa ou pedido avulso) já foi fechada, possivelmente por outra requisição."""

    http_status = status.HTTP_409_CONFLICT
    codigo = "CONTA_JA_FECHADA"


class MeioPagamentoInvalido(DomainError):
    """Meio de pagamento desconhecido ou desabilitado para a empresa."""

    http_status = 422
    codigo = "MEIO_PAGAMENTO_INVALIDO"


class PagamentoInvalido(DomainError):
    """Pagamento com valor inválido (ex.: negativo)."""

    http_status = 422
    codigo = "PAGAMENTO_INVALIDO"
