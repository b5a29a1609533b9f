from .diagnostics import diagnostics_router
from .health import health_router
from .trends import trends_router

__all__ = [
    "diagnostics_router",
    "health_router",
    "trends_router",
]
