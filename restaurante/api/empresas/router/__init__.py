from .router_empresa_admin import router as router_empresa_admin

__all__ = ["router_empresa_admin"]
