"""Logging setup.

Development gets human-readable console lines; every other environment emits
one JSON object per line so log shippers can parse records without regexes.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime"}

CONSOLE_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s%(extras)s"


def _extra_fields(record: logging.LogRecord) -> dict:
    return {k: v for k, v in vars(record).items() if k not in _RESERVED_ATTRS and not k.startswith("_")}


class ConsoleFormatter(logging.Formatter):
    def __init__(self) -> None:
        super().__init__(CONSOLE_FORMAT, datefmt="%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        extras = _extra_fields(record)
        record.extras = "".join(f" {k}={v}" for k, v in extras.items() if k != "extras")
        return super().format(record)


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key, value in _extra_fields(record).items():
            payload[key] = value if isinstance(value, (str, int, float, bool, type(None))) else str(value)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(environment: str = "development", level: str | int = "INFO") -> None:
    """Configure the root logger once for the process."""

    handler = logging.StreamHandler(sys.stdout)
    if environment == "development":
        handler.setFormatter(ConsoleFormatter())
    else:
        handler.setFormatter(JSONFormatter())

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level if isinstance(level, int) else str(level).upper())

    # werkzeug prints its own access line per request; ours already covers it
    logging.getLogger("werkzeug").setLevel(logging.WARNING)
