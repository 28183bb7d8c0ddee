# API endpoints and routers

from .modifier_endpoints import router as modifier_router

__all__ = [
    "modifier_router",
]
