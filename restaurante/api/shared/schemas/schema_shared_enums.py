from enum import Enum


class PedidoStatusEnum(str, Enum):
    PENDENTE = "pending"
    CONFIRMADO = "confirmed"
    PREPARANDO = "preparing"
    PRONTO = "ready"
    SAIU_PARA_ENTREGA = "out_for_delivery"
    ENTREGUE = "delivered"
    PRONTO_PARA_RETIRADA = "ready_for_pickup"
    RETIRADO = "picked_up"
    PRONTO_PARA_SERVIR = "ready_to_serve"
    SERVIDO = "served"
    CANCELADO = "cancelled"


class TipoPedidoEnum(str, Enum):
    DELIVERY = "delivery"
    RETIRADA = "pickup"
    NO_LOCAL = "dine_in"


class MeioPagamentoEnum(str, Enum):
    DINHEIRO = "cash"
    PIX = "pix"
    CREDITO = "credit"
    DEBITO = "debit"


class ModoTempoPreparoEnum(str, Enum):
    MANUAL = "manual"
    AUTO_DIARIO = "auto_daily"
