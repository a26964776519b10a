"""Logging setup for parley.

Console output is plain text. An optional rotating file receives one JSON
object per record, keeping ``extra`` fields such as ``control_id`` and
``turn_number`` as keys.
"""

import logging
import logging.config
from collections.abc import MutableMapping
from pathlib import Path
from typing import Any

PACKAGE_LOGGER = "parley"

CONSOLE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
JSON_FIELDS = "%(asctime)s %(name)s %(levelname)s %(message)s"
JSON_FILE_MAX_BYTES = 5 * 1024 * 1024
JSON_FILE_BACKUPS = 3


def _json_file_handler(path: str | Path, level: str) -> dict[str, Any]:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "filename": str(path),
        "maxBytes": JSON_FILE_MAX_BYTES,
        "backupCount": JSON_FILE_BACKUPS,
        "formatter": "json",
        "level": level,
    }


def setup_logging(level: str = "INFO", json_file: str | Path | None = None) -> None:
    """
    Route the ``parley`` logger to the console and, optionally, a JSON file.

    Other libraries stay at WARNING on the root logger.

    Args:
        level: Log level for parley records (DEBUG, INFO, WARNING, ERROR)
        json_file: Optional path of a rotating file receiving JSON records
    """
    handlers = ["console"]
    config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {"format": CONSOLE_FORMAT, "datefmt": "%H:%M:%S"},
            "json": {"()": "pythonjsonlogger.json.JsonFormatter", "format": JSON_FIELDS},
        },
        "handlers": {
            "console": {"class": "logging.StreamHandler", "formatter": "console", "level": level},
        },
        "loggers": {
            PACKAGE_LOGGER: {"handlers": handlers, "level": level, "propagate": False},
        },
        "root": {"handlers": ["console"], "level": "WARNING"},
    }
    if json_file is not None:
        config["handlers"]["json_file"] = _json_file_handler(json_file, level)
        handlers.append("json_file")

    logging.config.dictConfig(config)


class ControlLogAdapter(logging.LoggerAdapter):
    """Tags each record with the id of the control that logged it.

    The id prefixes the message and is also kept as the ``control_id`` extra.
    Call-site ``extra`` values are merged in rather than dropped.
    """

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**(self.extra or {}), **kwargs.get("extra", {})}
        return f"[{kwargs['extra']['control_id']}] {msg}", kwargs


def control_logger(name: str, control_id: str) -> ControlLogAdapter:
    return ControlLogAdapter(logging.getLogger(name), {"control_id": control_id})
