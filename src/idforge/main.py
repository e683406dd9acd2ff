# src/idforge/main.py
"""Main entry point for the idforge service."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from idforge.api.v1 import ids_router, system_router
from idforge.core.settings import settings
from idforge.services.registry import get_id_generator

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="idforge API",
    description="Coordination-free 64-bit identifier service",
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
app.include_router(ids_router, prefix="/api/v1")
app.include_router(system_router, prefix="/api/v1")


@app.on_event("startup")
async def on_startup() -> None:
    # Build eagerly so a bad node identity fails the boot, not the first request.
    generator = get_id_generator()
    logger.info(
        "%s %s serving datacenter=%d worker=%d",
        settings.app_name,
        settings.app_version,
        generator.datacenter_id,
        generator.worker_id,
    )


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": "idforge API",
        "version": settings.app_version,
        "description": "Coordination-free 64-bit identifier service",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "idforge.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level,
    )
