from .schema_mesa import (
    ComandaDetalheResponse,
    ComandaResumoResponse,
    ContagemItensResponse,
    FecharComandaRequest,
    FecharContaPedidoRequest,
    FechamentoResponse,
    PagamentoRequest,
    PagamentoResponse,
)

__all__ = [
    "ComandaDetalheResponse",
    "ComandaResumoResponse",
    "ContagemItensResponse",
    "FecharComandaRequest",
    "FecharContaPedidoRequest",
    "FechamentoResponse",
    "PagamentoRequest",
    "PagamentoResponse",
]
