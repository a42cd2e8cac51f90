"""
Logging setup for autoplanner.

Engine modules log through plain logging.getLogger(__name__) and stay
silent by default; the service layer calls setup_logger to attach output.
"""

import logging
import sys
from typing import Optional

from autoplanner.core.config import get_settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Get a configured logger.

    Args:
        name: Logger name (usually __name__)
        level: Explicit level name; falls back to DEBUG when settings.DEBUG
            is on, otherwise settings.LOG_LEVEL

    Returns:
        logging.Logger with a single stream handler attached
    """
    settings = get_settings()
    log = logging.getLogger(name)
    log.setLevel(level or ("DEBUG" if settings.DEBUG else settings.LOG_LEVEL))

    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        log.addHandler(handler)
        log.propagate = False

    return log
