"""
Top-level API router.

Aggregates the domain routers.  Product routes live under
``/api/products``; the health probe and index sit at the root.
"""

from fastapi import APIRouter

from .endpoints import products, system

router = APIRouter()

router.include_router(products.router, prefix="/api/products", tags=["products"])
router.include_router(system.router, tags=["system"])
