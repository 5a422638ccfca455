"""
Application package.

``core`` holds configuration, logging, error handling and the record
store; ``schemas`` the pydantic payload models; ``services`` the CRUD
and aggregation logic; ``api`` the FastAPI routers.
"""

from .main import app  # noqa: F401
