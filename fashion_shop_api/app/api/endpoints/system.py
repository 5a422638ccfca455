"""
Service-level endpoints: health probe and endpoint index.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Request

from fashion_shop_api.app.core.config import settings

router = APIRouter()

ENDPOINTS = [
    "POST   /api/products - Add product",
    "POST   /api/products/update/:productName - Update product",
    "POST   /api/products/delete/:productName - Delete product",
    "GET    /api/products/season-totals/:season - Season totals",
    "GET    /api/products/high-sales/:season/:minUnits - High sales filter",
    "GET    /api/products/rating/:season/:condition/:value - Rating filter",
    "GET    /api/products - List products",
    "GET    /health - Health check",
]


@router.get("/health", response_model=Dict[str, Any])
async def health(request: Request) -> Dict[str, Any]:
    """Liveness probe that also reports database connectivity."""
    store = getattr(request.app.state, "store", None)
    connected = store is not None and store.ping()
    return {
        "status": "UP",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": "Connected" if connected else "Disconnected",
        "server": settings.project_name,
        "version": settings.api_version,
    }


@router.get("/", response_model=Dict[str, Any])
async def index() -> Dict[str, Any]:
    return {"message": f"{settings.project_name} is running", "endpoints": ENDPOINTS}
