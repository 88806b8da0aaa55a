import logging
from contextlib import asynccontextmanager
from urllib.parse import urlparse

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from mes_admin.api.exception_handlers import register_exception_handlers
from mes_admin.api.v1.router import api_router
from mes_admin.core.config import settings
from mes_admin.core.logging import configure_logging
from mes_admin.db.base import Database

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    database = Database(settings.database_url)
    app.state.database = database
    logger.info("Database engine ready (%s)", database.engine.url.get_backend_name())
    try:
        yield
    finally:
        database.dispose()
        logger.info("Database engine disposed")


def create_app() -> FastAPI:
    configure_logging(settings.log_level)

    app = FastAPI(title="MES Admin API", lifespan=lifespan)

    if settings.frontend_url:
        parsed = urlparse(settings.frontend_url)
        origin = f"{parsed.scheme}://{parsed.netloc}"
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[origin],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)
    app.include_router(api_router, prefix="/api/v1")

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()
