"""FastAPI application for the Bhraman travel booking API.

This package provides REST endpoints for:
- Health checks
- Public catalog and site content
- Signed-in user profile, bookings and payments
- Admin management of bookings, packages, users and site content
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from mangum import Mangum

from bhraman.config import Settings
from bhraman.models import BhramanError
from bhraman.services.dynamodb import DatabasePool
from bhraman.utils.logging import configure_logging, get_logger
from bhraman_api.exceptions import register_exception_handlers
from bhraman_api.middleware.correlation import CorrelationIdMiddleware
from bhraman_api.routes.admin_bookings import router as admin_bookings_router
from bhraman_api.routes.admin_packages import router as admin_packages_router
from bhraman_api.routes.admin_site import router as admin_site_router
from bhraman_api.routes.admin_users import router as admin_users_router
from bhraman_api.routes.bookings import router as bookings_router
from bhraman_api.routes.health import router as health_router
from bhraman_api.routes.home_config import router as home_config_router
from bhraman_api.routes.packages import router as packages_router
from bhraman_api.routes.payments import router as payments_router
from bhraman_api.routes.users import router as users_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Connect the pool at startup and release it on shutdown.

    A failed startup connection is not fatal; requests retry lazily.
    """
    pool: DatabasePool = app.state.db_pool
    try:
        pool.connect()
    except BhramanError:
        logger.warning("db_startup_connect_failed")
    yield
    pool.shutdown()


def create_app(settings: Settings | None = None, pool: DatabasePool | None = None) -> FastAPI:
    """Build the application.

    Args:
        settings: Runtime settings (default: read from the environment)
        pool: Database pool (default: a new pool for the settings)
    """
    settings = settings or Settings.from_env()
    configure_logging()

    app = FastAPI(
        title="Bhraman API",
        description="REST API for travel packages, bookings and site administration",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db_pool = pool or DatabasePool(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(CorrelationIdMiddleware)

    register_exception_handlers(app)

    # Routers live under /api, matching the CloudFront /api/* behaviour
    for router in (
        health_router,
        packages_router,
        home_config_router,
        users_router,
        bookings_router,
        payments_router,
        admin_site_router,
        admin_bookings_router,
        admin_packages_router,
        admin_users_router,
    ):
        app.include_router(router, prefix="/api")

    @app.get("/api/ping")
    async def ping() -> dict[str, Any]:
        """Liveness probe; does not touch the database."""
        return {
            "status": "ok",
            "timestamp": datetime.now(UTC).isoformat(),
            "service": "bhraman-api",
        }

    return app


app = create_app()

# Lambda handler - Mangum wraps FastAPI for AWS Lambda + API Gateway
handler = Mangum(app, lifespan="off")


def run_server(host: str = "0.0.0.0", port: int = 8080, reload: bool = True) -> None:
    """Run the FastAPI server.

    Args:
        host: Host to bind to (default: 0.0.0.0)
        port: Port to listen on (default: 8080)
        reload: Enable hot reload for development (default: True)
    """
    import uvicorn

    if reload:
        # Use string reference for reload mode (uvicorn requirement)
        uvicorn.run("bhraman_api.main:app", host=host, port=port, reload=True, reload_dirs=["src"])
    else:
        uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run_server()
