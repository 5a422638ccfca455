"""
Main entrypoint for the Fashion Shop API.

This module assembles the FastAPI application: logging, CORS, error
handlers, routers and the lifespan hook that opens the record store.
The ``create_app`` function builds and configures the app, which is
then instantiated at module import time as ``app``, so it can be
served directly::

    uvicorn fashion_shop_api.app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.router import router
from .core.config import settings
from .core.db import ProductStore, get_database_path
from .core.errors import register_exception_handlers
from .core.logging_config import setup_logging

logger = logging.getLogger(__name__)


def create_app(database_path: Optional[str] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    database_path : Optional[str]
        SQLite database to open at startup.  Defaults to the path
        derived from ``settings.database_url``; tests pass ``":memory:"``.

    Returns
    -------
    FastAPI
        A configured FastAPI instance ready to be served.
    """
    setup_logging(settings.log_level, settings.log_file or None)
    path = get_database_path(database_path)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # One store handle per process, shared by every request.
        store = ProductStore(path)
        store.init_schema()
        app.state.store = store
        logger.info("%s %s started, database at %s", settings.project_name, settings.api_version, path)
        try:
            yield
        finally:
            app.state.store = None
            store.close()
            logger.info("%s shutting down", settings.project_name)

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.include_router(router)
    return app


# Created at import time so uvicorn can discover it without calling
# create_app manually.
app = create_app()
