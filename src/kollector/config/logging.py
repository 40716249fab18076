"""Logging setup for command line and service entry points."""

from __future__ import annotations

import logging
import os
from typing import Final

LOG_FORMAT: Final[str] = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: int | str | None = None, *, force: bool = False) -> None:
    """Configure root logging once; ``KOLLECTOR_LOG_LEVEL`` overrides the default level."""

    resolved = level if level is not None else os.getenv("KOLLECTOR_LOG_LEVEL", "INFO")
    if isinstance(resolved, str):
        resolved = resolved.strip().upper()
    logging.basicConfig(level=resolved, format=LOG_FORMAT, force=force)
