"""
Capture Credentials API

Main FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from credential_engine import __version__

from app.config import settings
from app.middleware import ErrorHandlerMiddleware, ServiceError, format_error_response
from app.routes import sign
from app.services.cleanup_scheduler import (
    get_scheduler_status,
    start_cleanup_scheduler,
    stop_cleanup_scheduler,
)
from app.services.signing_service import get_coordinator

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup/shutdown events."""
    # Startup: load the signing identity once, before the first request
    get_coordinator()
    start_cleanup_scheduler()
    yield
    # Shutdown
    stop_cleanup_scheduler()

app = FastAPI(
    title="Capture Credentials API",
    description="Attaches C2PA content credentials to captured photos and movies",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[sign.CREDENTIALS_HEADER, sign.COMPANION_HEADER],
)

# Error handling middleware
app.add_middleware(ErrorHandlerMiddleware)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=format_error_response(exc.status_code, exc.message, exc.details),
    )

# Register routers
app.include_router(sign.router, prefix="/api", tags=["Signing"])


@app.get("/")
async def root():
    """Health check endpoint"""
    return {
        "status": "ok",
        "service": "Capture Credentials API",
        "version": __version__,
    }


@app.get("/health")
async def health_check():
    """
    Detailed health check endpoint.

    Reports whether signing credentials are loaded and the cleanup
    scheduler state. A service without credentials still answers requests
    but returns every asset unsigned.
    """
    coordinator = get_coordinator()
    return {
        "status": "healthy" if coordinator.identity.is_complete else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": __version__,
        "signing": {
            "identityComplete": coordinator.identity.is_complete,
            "embedder": coordinator.embedder.embedder_name,
        },
        "cleanup": get_scheduler_status(),
    }
