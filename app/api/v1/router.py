from fastapi import APIRouter

from app.api.v1 import health, opportunities

v1_router = APIRouter(prefix="/api/v1")

v1_router.include_router(opportunities.router, prefix="/opportunities", tags=["opportunities"])
v1_router.include_router(health.router, prefix="/health", tags=["health"])
