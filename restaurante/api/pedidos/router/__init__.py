from .router_pedidos_admin import router as router_pedidos_admin

__all__ = ["router_pedidos_admin"]
