"""
Aggregations and filtered queries over product sales records.

The three read models exposed by the API are built here:

* season totals: sums of units sold, returns and revenue, the average
  customer rating and the number of products for one season;
* high sales: the best sellers of a season above a unit threshold;
* rating filter: products of a season whose rating is greater than,
  less than or equal to a value.

Path parameters arrive as strings and are parsed explicitly; input that
is not a finite number is rejected with ``InvalidArgumentError`` rather
than being passed on to the store.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Tuple, Union

from fashion_shop_api.app.core.db import Condition, ProductStore
from fashion_shop_api.app.core.errors import InvalidArgumentError
from fashion_shop_api.app.schemas.product import SQLITE_INT_MAX, ProductRead

logger = logging.getLogger(__name__)

HIGH_SALES_LIMIT = 10

# condition name -> comparison applied to customer_rating
RATING_CONDITIONS = {"greater": "gte", "less": "lte", "equal": "eq"}

SEASON_TOTALS = {
    "totalUnitsSold": ("sum", "units_sold"),
    "totalReturns": ("sum", "returns"),
    "totalRevenue": ("sum", "revenue"),
    "averageRating": ("avg", "customer_rating"),
    "totalProducts": ("count", None),
}


def parse_int(value: str, name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise InvalidArgumentError(f"{name} must be an integer, got {value!r}") from None
    if not -SQLITE_INT_MAX - 1 <= number <= SQLITE_INT_MAX:
        raise InvalidArgumentError(f"{name} is out of range, got {value!r}")
    return number


def parse_float(value: str, name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidArgumentError(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(number):
        raise InvalidArgumentError(f"{name} must be a finite number, got {value!r}")
    return number


class AnalyticsService:
    """Read-only queries and aggregations, bound to one store."""

    def __init__(self, store: ProductStore) -> None:
        self.store = store

    async def season_totals(self, season: str) -> Dict[str, Any]:
        """Return the aggregate figures for ``season``.

        A season without products yields all-zero figures.
        """
        rows = self.store.aggregate([Condition("season", "eq", season)], SEASON_TOTALS)
        totals = rows[0] if rows else {}
        return {name: totals.get(name) or 0 for name in SEASON_TOTALS}

    async def high_sales(self, season: str, min_units: int) -> List[ProductRead]:
        """Return up to ten products of ``season`` selling more than ``min_units``.

        The threshold is exclusive; results are ordered by units sold,
        best seller first.
        """
        rows = self.store.find(
            [Condition("season", "eq", season), Condition("units_sold", "gt", min_units)],
            sort=[("units_sold", True)],
            limit=HIGH_SALES_LIMIT,
        )
        return [ProductRead.model_validate(row) for row in rows]

    async def rating_filter(
        self, season: str, condition: str, value: Union[str, float]
    ) -> Tuple[float, List[ProductRead]]:
        """Return products of ``season`` whose rating satisfies ``condition``.

        ``greater`` and ``less`` include the boundary value.  The
        condition is checked before ``value`` is parsed, so an unknown
        condition is reported whatever the value.  Returns the parsed
        rating value with the matching products, highest rating first.
        """
        op = RATING_CONDITIONS.get(condition.lower())
        if op is None:
            raise InvalidArgumentError("Invalid condition. Use: greater, less, or equal")
        value = parse_float(value, "value") if isinstance(value, str) else float(value)
        rows = self.store.find(
            [Condition("season", "eq", season), Condition("customer_rating", op, value)],
            sort=[("customer_rating", True)],
        )
        logger.debug("Rating filter %s %s %s matched %d products", season, condition, value, len(rows))
        return value, [ProductRead.model_validate(row) for row in rows]
