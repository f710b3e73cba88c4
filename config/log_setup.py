"""Process-wide logging setup."""

from __future__ import annotations

import logging
from typing import Optional

from . import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """
    Install a root handler for applications embedding the calculator.

    The library modules only create module-level loggers and never
    configure handlers themselves; the host (a UI, notebook or script)
    calls this once at startup.
    """
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format=LOG_FORMAT,
    )
