"""
FastAPI application for the geo webhook.

Endpoints:
- POST /webhook - save a geolocation result for a hostname
- GET /health - storage connectivity probe
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.common.logger import log_info, log_warning
from src.common.constants import TypeMsg
from src.config.loader import Settings
from src.services.geo_webhook.routes import router
from src.storage.base import Storage
from src.storage.postgres import PostgresStorage


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: an injected storage is owned by the caller
    owns_storage = app.state.storage is None
    if owns_storage:
        await log_info("Connecting to PostgreSQL...", type_msg=TypeMsg.INFO)
        app.state.storage = await PostgresStorage.create(app.state.settings.database)
        await log_info("Successfully connected to PostgreSQL", type_msg=TypeMsg.INFO)

    yield

    # Shutdown: uvicorn has stopped accepting connections by now
    if owns_storage:
        await log_info("Closing storage...", type_msg=TypeMsg.INFO)
        await app.state.storage.close()
        app.state.storage = None


async def invalid_body_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    await log_warning(f"Rejected request body on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request body"},
    )


def create_app(settings: Settings | None = None, storage: Storage | None = None) -> FastAPI:
    """
    Builds the application.

    Args:
        settings: Loaded settings (defaults when None)
        storage: Ready storage to use instead of connecting to PostgreSQL
    """
    settings = settings or Settings()

    app = FastAPI(
        title="Geo Storage Service",
        description="Receives geolocation webhooks and stores them in PostgreSQL",
        version=settings.system.VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.storage = storage

    app.add_exception_handler(RequestValidationError, invalid_body_handler)
    app.include_router(router)

    return app
