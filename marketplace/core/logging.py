"""Structured logging configuration.

Every module logs through ``logging.getLogger(__name__)`` with snake_case
event names and an ``extra`` dict of identifiers (job_id, bid_id, ...).
``setup_logging`` installs the single stdout handler at start-up.
"""

import logging
import sys

from marketplace.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

# Third-party loggers that chatter at INFO on every Supabase request
_QUIET_LOGGERS = ("httpx", "httpcore", "hpack", "uvicorn.access")


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger.

    *level* overrides ``settings.LOG_LEVEL``; unknown names fall back to INFO.
    Calling it again replaces the handler instead of stacking a second one.
    """
    name = (level or settings.LOG_LEVEL).upper()
    log_level = getattr(logging, name, logging.INFO)

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers.clear()
    root.addHandler(handler)

    for noisy in _QUIET_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)
