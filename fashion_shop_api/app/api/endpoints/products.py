"""
Product endpoints.

Create, update and delete are all ``POST`` routes; update and delete
address the product by its name in the path.  Read routes expose the
bounded product list and the three sales queries (season totals, high
sales, rating filter).  Every successful response is an envelope of the
form ``{"success": true, ...}``; failures are rendered by the handlers
in ``core.errors``.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Query, status

from fashion_shop_api.app.core.db import ProductStore, get_store
from fashion_shop_api.app.schemas.product import ProductCreate, ProductUpdate
from fashion_shop_api.app.services.analytics_service import AnalyticsService, parse_int
from fashion_shop_api.app.services.product_service import ProductService

router = APIRouter()


def get_product_service(store: ProductStore = Depends(get_store)) -> ProductService:
    return ProductService(store)


def get_analytics_service(store: ProductStore = Depends(get_store)) -> AnalyticsService:
    return AnalyticsService(store)


@router.post("", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
async def create_product(
    product_in: ProductCreate,
    service: ProductService = Depends(get_product_service),
) -> Dict[str, Any]:
    """Add a product.  Fails with 400 if the name is already taken."""
    product = await service.create_product(product_in)
    return {"success": True, "message": "Product added successfully", "data": product.to_json()}


@router.get("", response_model=Dict[str, Any])
async def list_products(
    limit: int = Query(10, ge=1, le=1000),
    service: ProductService = Depends(get_product_service),
) -> Dict[str, Any]:
    """Return the first ``limit`` products (10 by default)."""
    products = await service.list_products(limit=limit)
    return {"success": True, "count": len(products), "data": [p.to_json() for p in products]}


@router.post("/update/{product_name}", response_model=Dict[str, Any])
async def update_product(
    product_name: str,
    product_in: ProductUpdate,
    service: ProductService = Depends(get_product_service),
) -> Dict[str, Any]:
    """Update the supplied fields of a product.

    Returns 404 if no product has this name and 400 if the updated
    record would violate a field constraint.
    """
    product = await service.update_product(product_name, product_in)
    return {"success": True, "message": "Product updated successfully", "data": product.to_json()}


@router.post("/delete/{product_name}", response_model=Dict[str, Any])
async def delete_product(
    product_name: str,
    service: ProductService = Depends(get_product_service),
) -> Dict[str, Any]:
    """Delete a product and return the removed record."""
    product = await service.delete_product(product_name)
    return {"success": True, "message": "Product deleted successfully", "data": product.to_json()}


@router.get("/season-totals/{season}", response_model=Dict[str, Any])
async def season_totals(
    season: str,
    service: AnalyticsService = Depends(get_analytics_service),
) -> Dict[str, Any]:
    """Units sold, returns, revenue, average rating and product count for a season."""
    totals = await service.season_totals(season)
    return {
        "success": True,
        "message": "Season totals retrieved",
        "season": season,
        "data": totals,
    }


@router.get("/high-sales/{season}/{min_units}", response_model=Dict[str, Any])
async def high_sales(
    season: str,
    min_units: str,
    service: AnalyticsService = Depends(get_analytics_service),
) -> Dict[str, Any]:
    """Top ten sellers of a season with more than ``min_units`` units sold."""
    threshold = parse_int(min_units, "minUnits")
    products = await service.high_sales(season, threshold)
    return {
        "success": True,
        "message": "High sales products retrieved",
        "season": season,
        "minUnits": threshold,
        "count": len(products),
        "data": [p.to_json() for p in products],
    }


@router.get("/rating/{season}/{condition}/{value}", response_model=Dict[str, Any])
async def rating_filter(
    season: str,
    condition: str,
    value: str,
    service: AnalyticsService = Depends(get_analytics_service),
) -> Dict[str, Any]:
    """Products of a season filtered by customer rating.

    ``condition`` is ``greater`` (rating >= value), ``less``
    (rating <= value) or ``equal``; anything else is rejected with 400.
    """
    rating_value, products = await service.rating_filter(season, condition, value)
    return {
        "success": True,
        "message": "Rating filtered products retrieved",
        "season": season,
        "condition": condition,
        "ratingValue": rating_value,
        "count": len(products),
        "data": [p.to_json() for p in products],
    }
