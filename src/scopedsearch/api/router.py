"""Main API router aggregating all v1 routes."""

from fastapi import APIRouter

from scopedsearch.api.routes import health, search

# Create main router
api_router = APIRouter()

# Include route modules
api_router.include_router(health.router)
api_router.include_router(search.router)
