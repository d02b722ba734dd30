"""
Process-wide logging setup.

Modules log through `logging.getLogger(__name__)`; this only installs the
handler and level once, from the app lifespan.
"""

from __future__ import annotations

import logging
import sys

from . import config

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_configured = False


def log_level() -> str:
    return config.env_str("LOG_LEVEL", "INFO").upper()


def configure_logging() -> None:
    global _configured
    if _configured:
        return None

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    root = logging.getLogger()
    root.setLevel(log_level())
    root.addHandler(handler)
    _configured = True
