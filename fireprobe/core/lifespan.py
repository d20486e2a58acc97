"""Application lifespan: startup and shutdown.

Only wiring: logging at startup; at shutdown, in-flight operations are
cancelled and the backend session's HTTP pool is closed.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from fireprobe.core.config import get_settings
from fireprobe.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit close the console."""
    settings = get_settings()
    setup_logging()
    logger.info("%s %s starting", settings.app_name, settings.app_version)

    yield

    console = getattr(app.state, "console", None)
    if console is not None:
        await console.close()
        logger.info("Console closed")
