from .account.endpoints import router as account_router  # noqa: F401
from .health.endpoints import router as health_router  # noqa: F401
from .map.endpoints import router as map_router  # noqa: F401

__all__ = ["account_router", "health_router", "map_router"]
