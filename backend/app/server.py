"""
Tutorials API — Server Entry Point
===================================

What:  Boots the process: logging → database connect (with retry) → HTTP listener.
Why:   The listener must not bind until the database answers; if it never does,
       the process exits with code 1 so a supervisor can see the failure.
How:   Everything runs in one asyncio event loop. The startup connector is
       awaited first, then uvicorn.Server.serve() is awaited in the same loop
       so the engine's pooled connections stay bound to it.

Exit codes:
    0  normal shutdown
    1  database unreachable after all retries
"""

import asyncio
import logging

import uvicorn

from app.config import Settings, settings
from app.connector import connect_or_exit
from app.database import Database
from app.main import create_app, setup_logging

logger = logging.getLogger(__name__)


async def serve(config: Settings = settings) -> None:
    """Connect to the database, then run the HTTP server until shutdown."""
    database = Database.from_settings(config)
    logger.info("Connecting to the database at %s", database.safe_url)

    await connect_or_exit(
        database,
        max_retries=config.connect_max_retries,
        base_delay_ms=config.connect_base_delay_ms,
    )

    app = create_app(database)
    server = uvicorn.Server(
        uvicorn.Config(
            app,
            host=config.host,
            port=config.port,
            log_config=None,  # Keep the logging configured by setup_logging()
        )
    )
    logger.info("Server is running on port %d.", config.port)
    await server.serve()


def main() -> None:
    """Console script entry point (tutorials-api) and `python -m app`."""
    setup_logging(settings.log_level)
    asyncio.run(serve())
