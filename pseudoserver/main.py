#!/usr/bin/env python3
"""
Main entry point for the pseudoserver link
"""

import asyncio
import logging
import sys

from . import __version__
from .config import get_configuration, load_settings, print_config_summary, settings_path
from .errors import NetworkError, SettingsLoadError, log_error
from .link import LinkConnection
from .logging_config import LoggerConfigurator
from .logs.logger import logger


async def main() -> None:
    """Load settings, link to the uplink and serve until the link drops.

    There is no reconnect: a transport or framing failure is logged and the
    process exits with status 1.

    Raises:
        SystemExit: If settings cannot be loaded or the link fails.
    """
    logger.log_event("app", "start", version=__version__)
    settings = get_configuration()
    print_config_summary(settings)
    link = LinkConnection(settings)
    try:
        await link.run()
    except asyncio.CancelledError:
        raise
    except NetworkError as e:
        log_error("Link failed", e, context={"server": settings.server_name})
        sys.exit(1)
    finally:
        logging.info("✅ Application shutdown complete")


def health_check() -> int:
    """Validate the settings file without connecting; returns the exit code."""
    logger.log_event("app", "health_mode")
    path = settings_path()
    try:
        settings = load_settings(path)
    except SettingsLoadError as e:
        logger.log_event("app", "health_fail", level=logging.ERROR, error=str(e))
        return 1
    logger.log_event(
        "app",
        "health_pass",
        sid=settings.sid,
        server_name=settings.server_name,
        path=path,
    )
    return 0


def run(argv: list[str] | None = None) -> None:
    """Synchronous entry point for the application.

    Raises:
        SystemExit: With the process exit status.
    """
    args = sys.argv[1:] if argv is None else argv
    LoggerConfigurator().configure()

    if args and args[0] == "--health-check":
        sys.exit(health_check())

    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.log_event("app", "interrupted", level=logging.WARNING)
        sys.exit(0)
    except asyncio.CancelledError:
        sys.exit(0)


if __name__ == "__main__":
    run()
