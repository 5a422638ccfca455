import sys
from pathlib import Path
from typing import Any, Callable, Dict

# Ensure project root is on sys.path to allow `import fashion_shop_api`.
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest
from fastapi.testclient import TestClient

from fashion_shop_api.app.core.db import ProductStore
from fashion_shop_api.app.main import create_app


@pytest.fixture
def make_product() -> Callable[..., Dict[str, Any]]:
    """Factory for valid product payloads in their JSON (camelCase) form."""

    def _make(**overrides: Any) -> Dict[str, Any]:
        payload = {
            "productCategory": "Accessories",
            "productName": "Red Scarf",
            "unitsSold": 50,
            "returns": 2,
            "revenue": 500,
            "customerRating": 4.2,
            "stockLevel": 20,
            "season": "Winter",
            "trendScore": 6,
        }
        payload.update(overrides)
        return payload

    return _make


@pytest.fixture
def store():
    """An initialised in-memory store, closed after the test."""
    s = ProductStore(":memory:")
    s.init_schema()
    yield s
    s.close()


@pytest.fixture
def client():
    """Test client for an app backed by a fresh in-memory database."""
    with TestClient(create_app(database_path=":memory:")) as c:
        yield c
