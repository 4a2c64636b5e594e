"""FastAPI application factory.

create_app() returns a configured FastAPI instance. Lifespan logs startup
and disposes the database engine on shutdown. Middleware, CORS, error
handlers and routers are all registered here.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from todoserver import __version__
from todoserver.api import api_router
from todoserver.api.errors import register_error_handlers
from todoserver.config import settings

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    logger.info(
        "todoserver.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    yield

    logger.info("todoserver.shutdown")

    from todoserver.db.engine import engine
    await engine.dispose()


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title="Todo Server",
        description="Per-user todo list API with JWT bearer authentication",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Middleware stack ──────────────────────────────────────
    # Starlette middleware executes in reverse order of registration.
    # Request flow: CORS → RequestId → Security → handler

    from todoserver.middleware.request_id import RequestIdMiddleware
    from todoserver.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
    )

    register_error_handlers(app)
    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: todoserver.main:app)
app = create_app()
