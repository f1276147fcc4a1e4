# src/somang/main.py
"""Main entry point for the Somang Church web API."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from somang.api.v1 import (
    admin_router,
    auth_router,
    boards_router,
    site_router,
)
from somang.core.logging import configure_logging
from somang.core.settings import settings
from somang.services.backend import get_backend_client

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Somang Church API",
    description="Church boards and administration backed by a hosted service",
    version=settings.app_version,
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

# Include API routers
app.include_router(site_router, prefix="/api/v1")
app.include_router(boards_router, prefix="/api/v1")
app.include_router(auth_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")


@app.on_event("startup")
async def on_startup() -> None:
    configure_logging(settings.log_level)
    if get_backend_client().available:
        logger.info("Backend configured at %s", settings.backend_url)
    else:
        logger.warning("Backend not configured; boards will be empty and writes disabled")


@app.on_event("shutdown")
async def on_shutdown() -> None:
    await get_backend_client().close()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, object]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "backend_available": get_backend_client().available,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("somang.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
