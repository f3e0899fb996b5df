"""
FastAPI application entry point.

Initializes FastAPI app, registers routers, adds middleware, and configures lifespan.

Dependencies: fastapi, signflow.api, signflow.observability, signflow.configs
System role: Application initialization and configuration
"""

from contextlib import asynccontextmanager
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from signflow.configs import get_settings
from signflow.api import api_router
from signflow.api.deps import get_service_cache
from signflow.api.routers import notifications_router
from signflow.boundary.db.create_tables import create_all_tables
from signflow.observability.logger import configure_logging
from signflow.observability.middleware import RequestContextMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events.
    Starts the notification dispatcher that delivers document events.
    """
    # Startup
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Application startup: logging configured")

    if settings.database.is_sqlite:
        # Local development without migrations
        await create_all_tables()
        logger.info("SQLite schema created")

    dispatcher = get_service_cache().dispatcher
    dispatcher.start()
    app.state.dispatcher = dispatcher
    logger.info("Application startup complete")

    yield

    # Shutdown
    await dispatcher.stop()
    logger.info("Application shutdown")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        FastAPI: Configured application instance
    """
    settings = get_settings()
    app = FastAPI(
        title="SignFlow API",
        description="Multi-party document signature workflows",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    # Add observability middleware
    app.add_middleware(RequestContextMiddleware)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register API routes
    app.include_router(api_router, prefix="/api/v1")
    app.include_router(notifications_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "signflow.main:app",
        host="localhost",
        port=8082,
        reload=True,
    )
