# -*- coding: utf-8 -*-
"""
podreaper logging configuration.

All output goes through loguru. Console lines are rendered by rich, and
records emitted through the standard library (uvicorn, kubernetes_asyncio,
aiohttp) are intercepted so every line shares one format.

Usage:
    setup_logging()
    log = get_logger("controller")
    log.info("watching namespace: default")
"""
import logging
from typing import Optional

from loguru import logger
from rich.logging import RichHandler

from podreaper.config import settings

LOG_FORMAT = "<cyan>{extra[name]}</cyan> | <level>{message}</level>"

# Libraries that are chatty at INFO and only interesting when something breaks
QUIET_LIBRARIES = {
    "kubernetes_asyncio": "WARNING",
    "aiohttp": "WARNING",
    "uvicorn.access": "WARNING",
}

_configured_level: Optional[str] = None


class InterceptHandler(logging.Handler):
    """
    Intercept standard logging messages and redirect them to Loguru.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).bind(
            name=record.name
        ).log(level, record.getMessage())


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure loguru for console logging and route stdlib logging into it.

    Calling it again with the same level is a no-op.
    """
    global _configured_level

    base_log_level = (level or settings.log_level).upper()
    if _configured_level == base_log_level:
        return

    logger.remove()
    logger.configure(extra={"name": "podreaper"})
    logger.add(
        RichHandler(
            level=base_log_level,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
            log_time_format="%Y-%m-%d %H:%M:%S",
            omit_repeated_times=False,
            enable_link_path=False,
        ),
        format=LOG_FORMAT,
        level=base_log_level,
    )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name, lib_level in QUIET_LIBRARIES.items():
        logging.getLogger(name).setLevel(lib_level)
    # uvicorn attaches its own handlers; let records propagate to ours instead
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).handlers = []
        logging.getLogger(name).propagate = True

    _configured_level = base_log_level
    logger.debug(f"podreaper logging configured at level {base_log_level}")


def get_logger(name: str):
    """
    Get a loguru logger bound to a component name.

    Args:
        name: Component name, prefixed with 'podreaper.' if not already.
    """
    if not name.startswith("podreaper.") and name != "podreaper":
        name = f"podreaper.{name}"
    return logger.bind(name=name)
