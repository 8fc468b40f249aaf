"""
Logging setup for the cakeshop cart.

    from cakeshop.logging import get_logger, session_tag
    logger = get_logger(__name__)
    logger.info(f"Cart {session_tag(session_id)} cleared")

Cart session ids are chosen by the client, so they never reach the logs
verbatim: `session_tag` logs a short digest instead.
"""

import hashlib
import logging
import os
import sys
from functools import cache

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Chatty client libraries (Upstash talks over httpx)
QUIET_LOGGERS = ("httpx", "httpcore", "upstash_redis")

_handler: logging.Handler | None = None


def configure_logging(level: str | None = None) -> None:
    """
    Attach one stdout handler to the root logger and set the level.

    Safe to call repeatedly: the handler is installed once, later calls only
    change the level. Skipped when the host already configured logging.
    """
    global _handler

    level_name = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    numeric_level = getattr(logging, level_name, logging.INFO)
    root = logging.getLogger()

    if _handler is None:
        if root.handlers:
            return
        _handler = logging.StreamHandler(sys.stdout)
        _handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(_handler)
        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    root.setLevel(numeric_level)
    _handler.setLevel(numeric_level)


configure_logging()


@cache
def get_logger(name: str) -> logging.Logger:
    """Module logger, typically get_logger(__name__)."""
    return logging.getLogger(name)


def session_tag(session_id: str | None) -> str:
    """Stable 8-char digest of a cart session id, or "N/A"."""
    if not session_id:
        return "N/A"
    return hashlib.sha256(str(session_id).encode("utf-8")).hexdigest()[:8]


__all__ = [
    "LOG_FORMAT",
    "configure_logging",
    "get_logger",
    "session_tag",
]
