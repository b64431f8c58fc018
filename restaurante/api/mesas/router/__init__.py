from .router_mesas_admin import router as router_mesas_admin

__all__ = ["router_mesas_admin"]
