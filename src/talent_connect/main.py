# src/talent_connect/main.py
"""Main entry point for the Talent Connect application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

from talent_connect.api.v1 import (
    admin_router,
    applications_router,
    blocks_router,
    comments_router,
    conversations_router,
    jobs_router,
    notifications_router,
    profiles_router,
    rate_limits_router,
    realtime_router,
)
from talent_connect.core.errors import MarketplaceError, TransportError
from talent_connect.core.logging import configure_logging
from talent_connect.core.settings import settings
from talent_connect.services.realtime import RedisChangeRelay, get_change_feed

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Talent Connect API",
    description="Freelancer and employer marketplace API",
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
app.include_router(profiles_router, prefix="/api/v1")
app.include_router(comments_router, prefix="/api/v1")
app.include_router(conversations_router, prefix="/api/v1")
app.include_router(blocks_router, prefix="/api/v1")
app.include_router(notifications_router, prefix="/api/v1")
app.include_router(rate_limits_router, prefix="/api/v1")
app.include_router(jobs_router, prefix="/api/v1")
app.include_router(applications_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")
app.include_router(realtime_router, prefix="/api/v1")


@app.exception_handler(MarketplaceError)
async def marketplace_error_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content=exc.payload())


@app.exception_handler(OperationalError)
async def storage_error_handler(request: Request, exc: OperationalError) -> JSONResponse:
    logger.error("Storage unavailable during %s %s: %s", request.method, request.url.path, exc)
    error = TransportError()
    return JSONResponse(status_code=error.status_code, content=error.payload())


@app.on_event("startup")
async def on_startup() -> None:
    configure_logging()
    if settings.realtime_backend == "redis":
        relay = RedisChangeRelay(get_change_feed())
        await relay.start()
        app.state.realtime_relay = relay
    else:
        app.state.realtime_relay = None


@app.on_event("shutdown")
async def on_shutdown() -> None:
    relay: RedisChangeRelay | None = getattr(app.state, "realtime_relay", None)
    if relay:
        await relay.stop()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": "Freelancer and employer marketplace API",
        "docs": "/docs",
        "redoc": "/redoc",
    }


def run() -> None:
    """Console entry point."""
    import uvicorn

    uvicorn.run("talent_connect.main:app", host="0.0.0.0", port=8000, reload=settings.debug)


if __name__ == "__main__":
    run()
