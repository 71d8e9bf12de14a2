"""Logging setup for the storefront service."""

import logging
from typing import Optional, Union

from .config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: Optional[Union[int, str]] = None) -> None:
    """Install a single stream handler on the root logger."""
    root = logging.getLogger()
    root.handlers.clear()
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(level or LOG_LEVEL)
