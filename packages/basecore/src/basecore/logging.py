"""
Logging setup for basecore services.

Modules log through ``logging.getLogger(__name__)`` and pass structured
context with ``extra={...}``. The JSON formatter keeps those fields.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from basecore.settings import get_settings

# Attributes every LogRecord has; anything else came from ``extra=``.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()
) | {"message", "asctime"}

TEXT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


class JsonFormatter(logging.Formatter):
    """One JSON object per record, including ``extra`` fields."""

    def __init__(self, service_name: str):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "service": self.service_name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                entry[key] = value

        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def setup_logging(level: str | None = None, fmt: str | None = None) -> None:
    """
    Configure the root logger.

    Safe to call multiple times; only the first call installs a handler.

    Args:
        level: Log level (defaults to LOG_LEVEL setting)
        fmt: "text" or "json" (defaults to LOG_FORMAT setting)
    """
    global _configured

    settings = get_settings()
    level = (level or settings.LOG_LEVEL).upper()
    fmt = (fmt or settings.LOG_FORMAT).lower()

    root = logging.getLogger()
    root.setLevel(level)

    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    if fmt == "json":
        handler.setFormatter(JsonFormatter(settings.SERVICE_NAME))
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    root.addHandler(handler)

    # redis-py is chatty at DEBUG
    logging.getLogger("redis").setLevel(logging.WARNING)

    _configured = True
