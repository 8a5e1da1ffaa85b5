"""
Main API router for v1 endpoints.
"""

from fastapi import APIRouter

from agrofinance.api.v1.endpoints import auth, finance, health

api_router = APIRouter()

# Include endpoint routers
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(finance.router, prefix="/finance", tags=["finance"])
