"""
API routes for the catalog server.
"""

from fastapi import APIRouter

from rails_expert.api import checks, health, plugins

api_router = APIRouter(prefix="/api")

api_router.include_router(health.router, tags=["health"])
api_router.include_router(plugins.router, tags=["plugins"])
api_router.include_router(checks.router, tags=["checks"])
