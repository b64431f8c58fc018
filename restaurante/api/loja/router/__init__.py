from .router_loja import router as router_loja

__all__ = ["router_loja"]
