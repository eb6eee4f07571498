# src/chatline/main.py
"""Main entry point for the Chatline application."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.staticfiles import StaticFiles

from chatline.api.v1 import auth_router, data_router, realtime_router
from chatline.core.exceptions import register_exception_handlers
from chatline.core.logging import setup_logging
from chatline.core.settings import settings
from chatline.db.session import create_tables
from chatline.services.delivery import DeliveryBus
from chatline.services.images import PUBLIC_PREFIX, ImageStorage

logger = logging.getLogger(__name__)


async def on_startup(app: FastAPI) -> None:
    setup_logging(settings.log_level)
    if settings.auto_create_tables:
        create_tables()
    if getattr(app.state, "image_storage", None) is None:
        settings.upload_path.mkdir(parents=True, exist_ok=True)
        app.state.image_storage = ImageStorage(settings.upload_path)
    # Live sessions never survive a restart; every process starts with an empty bus.
    app.state.delivery_bus = DeliveryBus()
    logger.info("%s %s started", settings.app_name, settings.app_version)


async def on_shutdown(app: FastAPI) -> None:
    bus: DeliveryBus | None = getattr(app.state, "delivery_bus", None)
    if bus is not None:
        bus.clear()
    app.state.delivery_bus = None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    await on_startup(app)
    try:
        yield
    finally:
        await on_shutdown(app)


# Initialize FastAPI app
app = FastAPI(
    title="Chatline API",
    description="Profiles, dual-log messaging and realtime delivery",
    version=settings.app_version,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

register_exception_handlers(app)

# Include API routers
app.include_router(auth_router, prefix="/api")
app.include_router(data_router, prefix="/api")
app.include_router(realtime_router, prefix="/api")

# Stored profile images; the directory is created on startup.
app.mount(
    PUBLIC_PREFIX,
    StaticFiles(directory=settings.upload_dir, check_dir=False),
    name="uploads",
)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": "Chatline API",
        "version": settings.app_version,
        "docs": "/docs",
        "realtime": "/api/ws",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("chatline.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
