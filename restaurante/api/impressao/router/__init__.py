from .router_impressao import router as router_impressao

__all__ = ["router_impressao"]
