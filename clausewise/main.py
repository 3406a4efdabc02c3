import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from clausewise.config import Settings
from clausewise.database import create_engine, create_session_factory
from clausewise.middleware import RequestIDLogFilter, RequestIDMiddleware
from clausewise.services.retention_service import RetentionService
from clausewise.services.storage.factory import create_storage


def configure_logging(log_level: str) -> None:
    """Set up logging with request ID injected into every log line."""
    log_filter = RequestIDLogFilter()
    formatter = logging.Formatter(
        "%(asctime)s [%(request_id)s] %(levelname)s %(name)s: %(message)s"
    )

    # Replace existing handlers on the root logger rather than using basicConfig
    # (basicConfig is a no-op if handlers are already set, which uvicorn does at startup)
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    handler.addFilter(log_filter)
    root_logger.addHandler(handler)


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncGenerator:
    """Build DB engine, storage and the sweeper on startup, dispose the engine on shutdown."""
    settings: Settings = application.state.settings
    engine = create_engine(settings)
    session_factory = create_session_factory(engine)
    storage = create_storage(settings)

    application.state.engine = engine
    application.state.session_factory = session_factory
    application.state.storage = storage
    application.state.retention_service = RetentionService(
        session_factory,
        storage,
        batch_size=settings.SWEEP_BATCH_SIZE,
        time_budget_seconds=settings.SWEEP_TIME_BUDGET_SECONDS,
    )

    yield

    await application.state.engine.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Application factory."""
    settings = settings or Settings()

    application = FastAPI(
        title="ClauseWise",
        description="Operator-assisted contract review",
        version="0.1.0",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )

    application.state.settings = settings

    configure_logging(settings.LOG_LEVEL)
    application.add_middleware(RequestIDMiddleware)

    from clausewise.routers.admin import router as admin_router
    from clausewise.routers.contracts import router as contracts_router
    from clausewise.routers.profile import router as profile_router
    from clausewise.routers.reports import router as reports_router
    from clausewise.routers.retention import router as retention_router

    application.include_router(profile_router, prefix="/api/v1")
    application.include_router(contracts_router, prefix="/api/v1")
    application.include_router(reports_router, prefix="/api/v1")
    application.include_router(admin_router, prefix="/api/v1")
    application.include_router(retention_router)

    @application.get("/health", tags=["Health Check"])
    async def health_check():
        return {"status": "healthy", "version": "0.1.0"}

    return application
