"""Log output for the ``dockengine`` logger namespace.

Modules log through ``logging.getLogger(__name__)``. ``configure_logging``
attaches handlers to the package logger only, so an embedding
application's root logging is left untouched.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime
from pathlib import Path

from rich.logging import RichHandler

PACKAGE_LOGGER = "dockengine"

_PLAIN_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Marks handlers installed here, so reconfiguring replaces only those.
_OWNED = "_dockengine_owned"


class JsonFormatter(logging.Formatter):
    """One JSON object per record, for programmatic parsing."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "timestamp": datetime.now().isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_obj)


def configure_logging(
    level: str = "INFO",
    *,
    json_format: bool = False,
    log_file: Path | str | None = None,
) -> logging.Logger:
    """Send dockengine's log records to the console and optionally a file.

    Calling this again replaces the handlers a previous call installed.
    Records stop propagating to the root logger so they are not printed
    twice.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR)
        json_format: Emit JSON lines on stdout instead of rich console output
        log_file: Optional file that also receives every record

    Returns:
        The package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in [h for h in logger.handlers if getattr(h, _OWNED, False)]:
        logger.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = []
    if json_format:
        console: logging.Handler = logging.StreamHandler(sys.stdout)
        console.setFormatter(JsonFormatter())
    else:
        console = RichHandler(rich_tracebacks=True, markup=False, show_path=False)
    handlers.append(console)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(_PLAIN_FORMAT))
        handlers.append(file_handler)

    for handler in handlers:
        setattr(handler, _OWNED, True)
        logger.addHandler(handler)

    logger.setLevel(level.upper())
    logger.propagate = False
    return logger
