from __future__ import annotations

"""Application factory for the FastAPI app.

Centralizes app construction (metadata, middleware, handlers, routers) so
tests can build isolated instances.
"""

from fastapi import FastAPI

from prepgate import __version__
from prepgate.api.routes import external_router, health_router
from prepgate.core.config import settings
from prepgate.core.exception_handlers import setup_exception_handlers
from prepgate.core.logging import configure_logging
from prepgate.core.middleware import request_id_middleware
from prepgate.core.openapi import apply_openapi_customizations


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance.

    Returns:
        Configured FastAPI app with middleware, handlers, routers and docs.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="prepgate",
        description=(
            "Rate-limited, cached lookups of public coding profiles (GitHub, "
            "Codeforces). Each client gets a fixed-window budget per route; "
            "upstream results are memoized for a few minutes."
        ),
        version=__version__,
        debug=settings.app.debug,
    )

    app.middleware("http")(request_id_middleware)

    setup_exception_handlers(app)

    app.include_router(external_router, prefix="/v1")
    app.include_router(health_router)

    apply_openapi_customizations(app)

    return app
