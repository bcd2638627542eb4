# devscript/logging_config.py
"""
Stderr-only logging configuration.

stdout is reserved for command output (compiled prompts, config dumps),
so every handler writes to stderr.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

_LEVELS = {
    "quiet": logging.WARNING,
    "normal": logging.INFO,
    "verbose": logging.DEBUG,
}

_NOISY_LOGGERS = ["httpx", "httpcore", "watchdog", "openai", "anthropic"]


class JsonFormatter(logging.Formatter):
    """Formats log records as JSON for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON line."""
        log_data: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }

        if record.exc_info:
            log_data["exc"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def configure_logging(verbosity: str = "normal", json_output: bool = False) -> None:
    """
    Install a single stderr handler on the root logger.

    Args:
        verbosity:   "quiet" (warnings), "normal" (info) or "verbose" (debug)
        json_output: Emit one JSON object per line instead of readable text
    """
    handler = logging.StreamHandler(sys.stderr)
    if json_output:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s  %(levelname)-7s  %(message)s", datefmt="%H:%M:%S")
        )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(_LEVELS.get(verbosity, logging.INFO))

    # HTTP client libraries log every request at INFO
    for logger_name in _NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)
