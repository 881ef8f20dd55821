"""FastAPI application for the storage booking API."""
from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from sqlalchemy.exc import SQLAlchemyError

from .core.config import settings
from .routers import bookings as bookings_router
from .routers import units as units_router

logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)

STARTED_AT = time.monotonic()

app = FastAPI(title="Storage Booking API", version=settings.app_version)

if settings.cors_allow_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

app.include_router(units_router.router, prefix="/api/units", tags=["units"])
app.include_router(bookings_router.router, prefix="/api/bookings", tags=["bookings"])


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Surface persistence failures as 503 without leaking driver details."""

    logger.exception("Database error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Database unavailable"},
    )


@app.get("/", tags=["meta"])
async def index() -> dict[str, str]:
    """Describe the service and point at the useful endpoints."""

    return {
        "message": "Storage Booking API Server",
        "version": settings.app_version,
        "api": "/api",
        "health": "/api/health",
        "documentation": "/api/info",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/api/health", tags=["meta"])
async def health() -> dict[str, Any]:
    """Simple liveness probe."""

    return {
        "status": "ok",
        "environment": settings.app_env,
        "version": settings.app_version,
        "uptime_seconds": round(time.monotonic() - STARTED_AT, 3),
    }


@app.head("/api/health", tags=["meta"])
async def health_head() -> Response:
    """Allow HEAD for uptime monitors that only need the status code."""

    return Response(status_code=200)


@app.get("/api/info", tags=["meta"])
async def info() -> dict[str, Any]:
    """List the public endpoints."""

    return {
        "name": "Storage Booking API",
        "version": settings.app_version,
        "endpoints": {
            "health": {"method": "GET", "path": "/api/health"},
            "units": {
                "list": {
                    "method": "GET",
                    "path": "/api/units",
                    "query": ["location", "available", "min_price", "max_price", "size"],
                },
                "get": {"method": "GET", "path": "/api/units/{unit_id}"},
                "availability": {
                    "method": "GET",
                    "path": "/api/units/{unit_id}/availability",
                    "query": ["start_date", "end_date"],
                },
            },
            "bookings": {
                "create": {
                    "method": "POST",
                    "path": "/api/bookings",
                    "body": ["user_name", "unit_id", "start_date", "end_date", "user_email", "notes"],
                },
                "list": {"method": "GET", "path": "/api/bookings", "query": ["user_name", "status"]},
                "get": {"method": "GET", "path": "/api/bookings/{booking_id}"},
                "cancel": {"method": "PUT", "path": "/api/bookings/{booking_id}/cancel"},
            },
        },
    }


@app.get("/robots.txt", response_class=PlainTextResponse, include_in_schema=False)
async def robots() -> PlainTextResponse:
    """Serve a minimal robots.txt to avoid 404 noise."""

    return PlainTextResponse("User-agent: *\nDisallow:")
