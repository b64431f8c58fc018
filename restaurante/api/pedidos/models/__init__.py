# Importa todos os models para registrar no SQLAlchemy antes de qualquer query
from restaurante.api.empresas.models.model_empresa import EmpresaModel
from restaurante.api.pedidos.models.model_pedido import PedidoModel, StatusPedido, TipoPedido
from restaurante.api.pedidos.models.model_pedido_item import PedidoItemModel
from restaurante.api.pedidos.models.model_pedido_historico import PedidoHistoricoModel
from restaurante.api.mesas.models.model_mesa import MesaModel, StatusMesa
from restaurante.api.mesas.models.model_pagamento_fechamento import PagamentoFechamentoModel

__all__ = [
    "EmpresaModel",
    "PedidoModel",
    "StatusPedido",
    "TipoPedido",
    "PedidoItemModel",
    "PedidoHistoricoModel",
    "MesaModel",
    "StatusMesa",
    "PagamentoFechamentoModel",
]
