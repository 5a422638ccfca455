"""
Pydantic schemas for product sales records.

``ProductBase`` holds the validated fields shared by create and read
payloads.  JSON payloads use camelCase keys (``productName``,
``unitsSold``...) while Python code works with snake_case attributes;
both spellings are accepted on input.  ``ProductUpdate`` makes every
field optional so a partial object can be merged over a stored record
and re-validated with ``ProductCreate``.

Validation messages follow the wording clients already rely on, e.g.
``"Units sold cannot be negative"`` or ``"Autumn is not a valid
season"``.  ``collect_field_errors`` turns pydantic error lists into a
``{field: message}`` mapping.
"""

from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Season(str, Enum):
    spring = "Spring"
    summer = "Summer"
    fall = "Fall"
    winter = "Winter"


# Largest value an SQLite INTEGER column holds.
SQLITE_INT_MAX = 2**63 - 1

_MODEL_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    str_strip_whitespace=True,
    use_enum_values=True,
    allow_inf_nan=False,
)


class ProductBase(BaseModel):
    model_config = _MODEL_CONFIG

    product_category: str = Field(..., min_length=1, examples=["Outerwear"])
    product_name: str = Field(..., min_length=1, examples=["Red Scarf"])
    units_sold: int = Field(..., ge=0, le=SQLITE_INT_MAX, examples=[50])
    returns: int = Field(..., ge=0, le=SQLITE_INT_MAX, examples=[2])
    revenue: float = Field(..., ge=0, examples=[500.0])
    customer_rating: float = Field(..., ge=0, le=5, examples=[4.2])
    stock_level: int = Field(..., ge=0, le=SQLITE_INT_MAX, examples=[20])
    season: Season = Field(..., examples=["Winter"])
    trend_score: float = Field(..., ge=0, le=10, examples=[6.0])


class ProductCreate(ProductBase):
    """Schema for creating a product.  Every field is required."""


class ProductUpdate(BaseModel):
    """Schema for updating a product.

    All fields are optional; only provided values are merged over the
    stored record.  Bounds are checked on the merged result.
    """

    model_config = _MODEL_CONFIG

    product_category: Optional[str] = None
    product_name: Optional[str] = None
    units_sold: Optional[int] = None
    returns: Optional[int] = None
    revenue: Optional[float] = None
    customer_rating: Optional[float] = None
    stock_level: Optional[int] = None
    season: Optional[str] = None
    trend_score: Optional[float] = None


class ProductRead(ProductBase):
    """Schema for a stored product as returned by the API."""

    created_at: str
    updated_at: str

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


# Per-field labels and bound messages.
FIELD_MESSAGES: Dict[str, Dict[str, str]] = {
    "productCategory": {"required": "Product category is required"},
    "productName": {"required": "Product name is required"},
    "unitsSold": {
        "required": "Units sold is required",
        "min": "Units sold cannot be negative",
    },
    "returns": {
        "required": "Returns is required",
        "min": "Returns cannot be negative",
    },
    "revenue": {
        "required": "Revenue is required",
        "min": "Revenue cannot be negative",
    },
    "customerRating": {
        "required": "Customer rating is required",
        "min": "Rating cannot be less than 0",
        "max": "Rating cannot exceed 5",
    },
    "stockLevel": {
        "required": "Stock level is required",
        "min": "Stock level cannot be negative",
    },
    "season": {
        "required": "Season is required",
        "enum": "{value} is not a valid season",
    },
    "trendScore": {
        "required": "Trend score is required",
        "min": "Trend score cannot be less than 0",
        "max": "Trend score cannot exceed 10",
    },
}

_ERROR_KINDS = {
    "missing": "required",
    "string_too_short": "required",
    "greater_than_equal": "min",
    "less_than_equal": "max",
    "enum": "enum",
}


def field_name(loc: Iterable[Any]) -> str:
    """Return the field a pydantic error location points at.

    Request errors are located as ``("body", "unitsSold")`` or
    ``("query", "limit")``; model errors as ``("unitsSold",)``.  An
    error on the whole body keeps the location source as its name.
    """
    parts = [str(part) for part in loc]
    if len(parts) > 1 and parts[0] in {"body", "query", "path"}:
        parts = parts[1:]
    return parts[0] if parts else "body"


def _message_for(field: str, error: Mapping[str, Any]) -> str:
    messages = FIELD_MESSAGES.get(field, {})
    kind = _ERROR_KINDS.get(error.get("type", ""))
    if error.get("input", ...) is None:
        kind = "required"
    template = messages.get(kind) if kind else None
    if template is None:
        return error.get("msg", "Invalid value")
    return template.format(value=error.get("input"))


def collect_field_errors(errors: Iterable[Mapping[str, Any]]) -> Dict[str, str]:
    """Map a list of pydantic errors to ``{field: message}``.

    Only the first error reported for a field is kept.
    """
    result: Dict[str, str] = {}
    for error in errors:
        field = field_name(error.get("loc", ()))
        if field not in result:
            result[field] = _message_for(field, error)
    return result
