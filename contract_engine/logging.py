"""Logging setup for applications embedding contract-engine.

The engines only create module loggers under ``contract_engine``; nothing
in the package installs handlers on import. Call ``setup_logging`` once
from the application (the CLI script does this from ``EngineConfig``).
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

ENGINE_LOGGER = "contract_engine"

STANDARD_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

# Record attributes passed through ``extra=`` by the engines
CONTEXT_FIELDS = ("contract_id", "month", "year", "scenario")


def setup_logging(
    level: str = "INFO",
    format_type: str = "standard",
    stream: TextIO | None = None,
) -> None:
    """Configure root and engine logging.

    Parameters
    ----------
    level : str
        Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL). Unknown
        names fall back to INFO.
    format_type : str
        ``"standard"`` for pipe-separated lines or ``"json"`` for one JSON
        object per record.
    stream : TextIO | None
        Destination stream (default ``sys.stdout``).
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if format_type == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(fmt=STANDARD_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    logging.getLogger(ENGINE_LOGGER).setLevel(log_level)

    # Faker logs every provider it loads at DEBUG
    logging.getLogger("faker").setLevel(logging.WARNING)


class JsonFormatter(logging.Formatter):
    """One JSON object per record, with contract context when present."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_data[name] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def get_logger(name: str) -> logging.Logger:
    """Logger under the engine namespace.

    Parameters
    ----------
    name : str
        Dotted name; prefixed with ``contract_engine.`` unless it already
        starts with it.

    Returns
    -------
    logging.Logger
        The named logger.
    """
    if name != ENGINE_LOGGER and not name.startswith(ENGINE_LOGGER + "."):
        name = f"{ENGINE_LOGGER}.{name}"
    return logging.getLogger(name)
