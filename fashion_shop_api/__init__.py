"""
Top-level package for the Fashion Shop API.

All functionality lives in submodules under ``app``; run the service
with ``uvicorn fashion_shop_api.app.main:app`` or ``python run.py``.
"""

__all__ = []
