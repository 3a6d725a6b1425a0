"""
API Router - JSON Endpoints
"""
from fastapi import APIRouter
from datetime import datetime, timezone

from polimarket.core import settings
from polimarket.api.products import router as products_router
from polimarket.api.authorization import router as authorization_router
from polimarket.api.hr import router as hr_router

api_router = APIRouter(tags=["API"])

# Include sub-routers
api_router.include_router(products_router)
api_router.include_router(authorization_router)
api_router.include_router(hr_router)

# ===================== HEALTH & STATUS =====================

@api_router.get("")
async def api_status():
    return {
        "service": f"{settings.APP_NAME} API",
        "version": "1.0.0",
        "status": "running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "documentation": "/docs"
    }
