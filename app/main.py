"""
FastAPI application factory.

Creates and configures the FastAPI application instance.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app.api.v1.router import api_router
from app.coach.coaching import CoachingSessionRegistry
from app.core.config import settings
from app.core.logging import setup_logging

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="Training analytics and coaching: readiness, trends, plateaus, progression and live set advice.",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json")

# One coaching session per athlete, kept for the life of the process
app.state.coaching = CoachingSessionRegistry(history_limit=settings.COACHING_HISTORY_LIMIT)

app.include_router(api_router, prefix="/api/v1")


@app.exception_handler(ValidationError)
async def engine_validation_handler(request: Request, exc: ValidationError):
    """Stored history the engine cannot analyse (out of range, NaN) is a 422."""
    logger.warning(
        "analysis input rejected: %d errors", exc.error_count(),
        extra={"extra_fields": {"method": request.method, "path": request.url.path}},
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": exc.errors(include_url=False, include_context=False)},
    )


@app.get("/")
async def root():
    """Root endpoint - health check."""
    return {
        "message": "RepCoach API",
        "version": settings.VERSION,
        "status": "healthy"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {
        "status": "healthy",
        "service": "repcoach-api",
        "version": settings.VERSION
    }


@app.get("/info")
async def info():
    return {
        "project name": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "authors": settings.AUTHORS,
        "project url": settings.PROJECT_URL,
        "coaching history limit": settings.COACHING_HISTORY_LIMIT,
    }
