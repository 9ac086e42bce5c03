"""
Application wide logging setup.

Every module asks for its logger through ``get_logger(__name__)``; the first
call installs a single stdout handler on the root logger. The level comes
from the ``LOG_LEVEL`` environment variable (``INFO`` when unset).
"""

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# third party loggers that are too chatty at INFO
QUIET_LOGGERS = ("httpx", "urllib3")

_configured = False


def _configure_root() -> None:
    global _configured
    if _configured:
        return

    level = os.getenv("LOG_LEVEL", "INFO").upper()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))

    root = logging.getLogger()
    root.setLevel(logging.getLevelNamesMapping().get(level, logging.INFO))
    root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    _configure_root()
    return logging.getLogger(name)
