"""
Service layer for product sales records.

``ProductService`` implements create, update, delete and list on top of
a ``ProductStore``.  Records are addressed by ``product_name``; no
surrogate identifier leaves this layer.  Updates merge the supplied
fields over the stored record and validate the result with the same
schema as creation, so a record is never persisted half-valid.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from pydantic import ValidationError

from fashion_shop_api.app.core.db import ProductStore
from fashion_shop_api.app.core.errors import DuplicateKeyError, NotFoundError, ProductValidationError
from fashion_shop_api.app.schemas.product import (
    ProductCreate,
    ProductRead,
    ProductUpdate,
    collect_field_errors,
)

logger = logging.getLogger(__name__)


class ProductService:
    """CRUD operations for products, bound to one store."""

    def __init__(self, store: ProductStore) -> None:
        self.store = store

    async def create_product(self, data: ProductCreate) -> ProductRead:
        """Insert a new product and return the stored record.

        Raises ``DuplicateKeyError`` if a product with the same name
        already exists; the existing record is left untouched.
        """
        if self.store.find_by_name(data.product_name) is not None:
            raise DuplicateKeyError(f"Product '{data.product_name}' already exists")
        row = self.store.insert(data.model_dump())
        logger.info("Created product %s", data.product_name)
        return ProductRead.model_validate(row)

    async def get_product(self, name: str) -> ProductRead:
        row = self.store.find_by_name(name)
        if row is None:
            raise NotFoundError(f'Product "{name}" not found')
        return ProductRead.model_validate(row)

    async def update_product(self, name: str, data: ProductUpdate) -> ProductRead:
        """Apply the fields present in ``data`` to the product ``name``.

        Raises ``NotFoundError`` if the product does not exist and
        ``ProductValidationError`` if the merged record breaks a
        constraint.
        """
        current = self.store.find_by_name(name)
        if current is None:
            raise NotFoundError(f'Product "{name}" not found')
        changes = data.model_dump(exclude_unset=True)
        merged: Dict[str, Any] = {field: current[field] for field in ProductCreate.model_fields}
        merged.update(changes)
        # Validate under the JSON keys so errors are reported as on create.
        by_alias = {info.alias or field: merged[field] for field, info in ProductCreate.model_fields.items()}
        try:
            validated = ProductCreate.model_validate(by_alias)
        except ValidationError as exc:
            raise ProductValidationError("Validation failed", collect_field_errors(exc.errors())) from exc
        fields = {field: value for field, value in validated.model_dump().items() if field in changes}
        row = self.store.update_by_name(name, fields)
        logger.info("Updated product %s (%s)", name, ", ".join(sorted(fields)) or "no fields")
        return ProductRead.model_validate(row)

    async def delete_product(self, name: str) -> ProductRead:
        row = self.store.delete_by_name(name)
        logger.info("Deleted product %s", name)
        return ProductRead.model_validate(row)

    async def list_products(self, limit: int = 10) -> List[ProductRead]:
        """Return at most ``limit`` products in insertion order."""
        return [ProductRead.model_validate(row) for row in self.store.find(limit=limit)]
