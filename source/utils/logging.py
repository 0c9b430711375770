import logging
import sys
from enum import Enum

from core.config import settings
from middlewares.trace_id_middleware import current_trace_id


class RUNTIME(str, Enum):
    STARTUP = "startup"
    HEALTHCHECK = "healthcheck"
    SCRAPE = "scrape"
    LISTING = "listing"
    PAGINATION = "pagination"
    DETAIL = "detail"

    def __str__(self) -> str:
        return self.value


# Attributes every LogRecord carries; anything else came in through `extra`.
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime", "trace_id"}


class ExtraFieldsFormatter(logging.Formatter):
    """Appends `extra={...}` fields to the message as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        record.trace_id = current_trace_id()
        line = super().format(record)
        extras = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        }
        if extras:
            line += " | " + " ".join(f"{key}={value!r}" for key, value in extras.items())
        return line


_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | trace=%(trace_id)s | %(message)s"


def setup_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(ExtraFieldsFormatter(_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(settings.LOG_LEVEL.upper())
        logger.propagate = False
    return logger
