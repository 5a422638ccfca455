"""
Error taxonomy and JSON error rendering.

Services raise the exceptions defined here; route handlers let them
propagate and the handlers installed by ``register_exception_handlers``
turn them into the failure envelope::

    {"success": false, "error": "NotFound", "message": "..."}

Field-level validation failures additionally carry an ``errors``
mapping of field name to violation message.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from fashion_shop_api.app.schemas.product import collect_field_errors

logger = logging.getLogger(__name__)


class ProductAPIError(Exception):
    """Base class for errors that map onto an HTTP failure response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "StoreError"

    def __init__(self, message: str, errors: Optional[Mapping[str, str]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.errors = dict(errors) if errors else None


class ProductValidationError(ProductAPIError):
    """One or more product fields violate their constraints."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "ValidationError"


class DuplicateKeyError(ProductAPIError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "DuplicateKey"


class InvalidArgumentError(ProductAPIError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "InvalidArgument"


class NotFoundError(ProductAPIError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "NotFound"


class StoreError(ProductAPIError):
    """The record store failed in an unexpected way."""


def error_body(error: str, message: str, errors: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "error": error, "message": message}
    if errors:
        body["errors"] = dict(errors)
    return body


async def _product_api_error_handler(request: Request, exc: ProductAPIError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.warning("%s %s rejected (%s): %s", request.method, request.url.path, exc.error, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.error, exc.message, exc.errors),
    )


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = collect_field_errors(exc.errors())
    logger.warning("%s %s rejected (ValidationError): %s", request.method, request.url.path, errors)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("ValidationError", "Validation failed", errors),
    )


async def _unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("InternalError", str(exc) or exc.__class__.__name__),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the JSON error handlers on ``app``."""
    app.add_exception_handler(ProductAPIError, _product_api_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Exception, _unexpected_error_handler)
