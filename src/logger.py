"""
Logging Configuration Module.

Sets up the application logger. Log calls throughout the code base pass either a
plain string or a dict with a "message" key plus structured context, e.g.

    logger.info({"message": "Analyzing repository", "repository": "org/repo"})

Records are written to stderr (stdout is reserved for the JSON report), either as
``key=value`` text or as one JSON object per line.
"""

import json
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict

LOGGER_NAME = "fab-backlog"


def get_logger(module_name: str) -> logging.Logger:
    """Return a module logger that propagates to the application logger."""
    return logging.getLogger(LOGGER_NAME).getChild(module_name)


def _record_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """Split a log record into a message and its structured context."""
    if isinstance(record.msg, dict):
        fields = dict(record.msg)
        message = str(fields.pop("message", ""))
    else:
        fields = {}
        message = record.getMessage()
    return {"message": message, **fields}


class TextFormatter(logging.Formatter):
    """Formats records as ``time=... level=... msg="..." key=value``."""

    def format(self, record: logging.LogRecord) -> str:
        fields = _record_fields(record)
        message = fields.pop("message")
        timestamp = datetime.fromtimestamp(record.created, timezone.utc).isoformat()
        parts = [
            f"time={timestamp}",
            f"level={record.levelname}",
            f"msg={json.dumps(message)}",
        ]
        for key, value in fields.items():
            if isinstance(value, str) and (" " in value or not value):
                value = json.dumps(value)
            parts.append(f"{key}={value}")
        line = " ".join(parts)
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class JSONFormatter(logging.Formatter):
    """Formats records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        fields = _record_fields(record)
        payload = {
            "time": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": fields.pop("message"),
            **fields,
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class LogManager:
    """
    Builds and owns the application logger.

    Attributes:
        logger (logging.Logger): Configured application logger. Module loggers
            from ``get_logger`` propagate to it.
    """

    def __init__(
        self,
        app_name: str,
        level: int = logging.INFO,
        json_logs: bool = False,
        log_dir: str = None,
        development: bool = False,
    ):
        """Configure the application logger.

        Args:
            app_name (str): Used for the log file name.
            level (int): Minimum level emitted.
            json_logs (bool): Emit JSON lines instead of text.
            log_dir (str): When set, also write records to ``<log_dir>/<app_name>.log``.
            development (bool): Force DEBUG level.
        """
        self.logger = logging.getLogger(LOGGER_NAME)
        self.logger.setLevel(logging.DEBUG if development else level)
        self.logger.propagate = False

        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()

        formatter = JSONFormatter() if json_logs else TextFormatter()

        stream_handler = logging.StreamHandler()  # stderr
        stream_handler.setFormatter(formatter)
        self.logger.addHandler(stream_handler)

        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
            file_handler = logging.FileHandler(
                os.path.join(log_dir, f"{app_name}.log"), encoding="utf-8"
            )
            file_handler.setFormatter(JSONFormatter())
            self.logger.addHandler(file_handler)
