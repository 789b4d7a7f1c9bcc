from __future__ import annotations

from prepgate.api.routes.external import router as external_router
from prepgate.api.routes.health import router as health_router

__all__ = ["external_router", "health_router"]
