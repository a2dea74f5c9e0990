"""
API v1 router.

Aggregates all v1 endpoints.
"""

from fastapi import APIRouter

from app.api.v1.endpoints import analytics, coaching, metrics, performance, settings, users

api_router = APIRouter()

# Include endpoint routers
api_router.include_router(
    users.router, prefix="/users", tags=["Users"]
)
api_router.include_router(
    performance.router, prefix="/performance", tags=["Performance"]
)
api_router.include_router(
    metrics.router, prefix="/metrics", tags=["Daily metrics"]
)
api_router.include_router(
    settings.router, prefix="/settings", tags=["Settings"]
)
api_router.include_router(
    analytics.router, prefix="/analytics", tags=["Analytics"]
)
api_router.include_router(
    coaching.router, prefix="/coaching", tags=["Live coaching"]
)
