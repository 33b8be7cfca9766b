"""Logfire cloud observability initialization and instrumentation."""

import logging
from typing import TYPE_CHECKING

import logfire

from launchvault import __version__
from launchvault.config import Settings

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = logging.getLogger(__name__)


def initialize_logfire(settings: Settings, service_name: str = "launchvault") -> bool:
    """
    Initialize Logfire and instrument the libraries this process talks through.

    Must be called ONCE at process startup, before any client is created.

    Instruments:
    - PyMongo (Motor rides on it)
    - HTTPX clients (Space-Track API)
    - Python logging (bridges to Logfire)

    Returns:
        True when Logfire was configured, False when it stays off.
    """
    if not settings.logfire_token:
        logger.warning("Logfire token not set - observability disabled")
        return False

    try:
        logfire.configure(
            token=settings.logfire_token,
            service_name=service_name,
            service_version=__version__,
        )

        logfire.instrument_pymongo()
        logfire.instrument_httpx()

        root_logger = logging.getLogger()
        root_logger.addHandler(logfire.LogfireLoggingHandler())

        logger.info("✓ Logfire cloud tracking initialized")
        return True

    except Exception as e:
        logger.warning(f"Failed to initialize Logfire: {e}")
        # Continue running - observability is optional
        return False


def instrument_app(app: "FastAPI", settings: Settings) -> None:
    """Trace FastAPI requests when Logfire is configured."""
    if not settings.logfire_token:
        return
    try:
        logfire.instrument_fastapi(app)
    except Exception as e:
        logger.warning(f"FastAPI instrumentation skipped: {e}")
