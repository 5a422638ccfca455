"""Entry point for the Fashion Shop API.

Serves the FastAPI application with Uvicorn.  Host, port and the other
settings are read from environment variables (see
``fashion_shop_api.app.core.config``).

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from fashion_shop_api.app.core.config import settings
from fashion_shop_api.app.main import app


async def main() -> None:
    """Run the API server until interrupted."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
        # Logging is configured by create_app; keep Uvicorn from replacing it.
        log_config=None,
    )
    server = Server(config)
    logging.getLogger(__name__).info("Serving on http://%s:%s", settings.host, settings.port)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
