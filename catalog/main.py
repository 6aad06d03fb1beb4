from contextlib import asynccontextmanager

from fastapi import FastAPI

from catalog.core.config import get_settings
from catalog.core.db import check_database_connection, dispose_engines
from catalog.core.errors import register_exception_handlers
from catalog.content.api.v1 import api_router
from catalog.content.clients.identity import get_identity_lookup
from catalog.logging import get_logger, setup_logging

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI application."""
    setup_logging()
    logger.info("Starting catalog content service...")
    yield
    logger.info("Shutting down catalog content service...")
    identity_lookup = get_identity_lookup()
    if identity_lookup is not None:
        await identity_lookup.aclose()
    await dispose_engines()


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
    )
    register_exception_handlers(app)
    app.include_router(api_router, prefix=settings.API_V1_STR)

    @app.get("/health", tags=["Health"])
    async def health_check():
        """
        Kiểm tra trạng thái hoạt động của service và kết nối database.
        """
        database_ok = await check_database_connection()
        return {
            "status": "ok" if database_ok else "degraded",
            "version": settings.APP_VERSION,
            "environment": settings.APP_ENV,
            "database": database_ok,
        }

    return app


app = create_app()
