from fastapi import APIRouter

from .health import router as health_router
from .roast import router as roast_router


# Public API router; the roast stream needs no authentication
api_router = APIRouter()

api_router.include_router(health_router, tags=["health"])
api_router.include_router(roast_router)
