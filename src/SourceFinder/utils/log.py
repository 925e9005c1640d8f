"""SourceFinder logging utilities.

The package logs through one named logger. Console lines carry a timestamp and
an abbreviated level; file lines also carry the thread name, since provider
calls run on the fan-out worker threads (``source_0``, ``source_1``, ...).
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Final

_LEVEL_ABBREV: Final[dict[int, str]] = {
    logging.DEBUG: "DEBG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERRO",
    logging.CRITICAL: "ERRO",
}

_CONSOLE_FORMAT: Final = "%(asctime)s [%(levelabbr)s] %(message)s"
_FILE_FORMAT: Final = "%(asctime)s [%(levelabbr)s] (%(threadName)s) %(message)s"
_DATE_FORMAT: Final = "%m-%d %H:%M:%S"

# HTTP stack loggers; their per-connection DEBUG lines drown provider logs.
_HTTP_LOGGERS: Final = ("urllib3",)


class _AbbrevLevelFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 - record is stdlib name
        record.levelabbr = _LEVEL_ABBREV.get(record.levelno, record.levelname[:4])
        return super().format(record)


log = logging.getLogger("SourceFinder")


def configure_logging(
    *,
    level: str = "INFO",
    action: str | None = None,
    log_to_file: bool = False,
    log_dir: str = "log",
    http_debug: bool = False,
) -> None:
    """Configure the SourceFinder logger.

    Console output follows ``level``; the optional per-action log file always
    records DEBUG.

    Args:
        level: Console logging level (e.g., INFO, DEBUG).
        action: CLI action name used to create the log file path.
        log_to_file: Whether to mirror logs to ``<log_dir>/<action>/``.
        log_dir: Base directory for log files.
        http_debug: Let ``urllib3`` connection logs through.
    """
    resolved_level = getattr(logging, (level or "INFO").upper(), logging.INFO)

    handlers: list[logging.Handler] = []

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(resolved_level)
    stream_handler.setFormatter(_AbbrevLevelFormatter(fmt=_CONSOLE_FORMAT, datefmt=_DATE_FORMAT))
    handlers.append(stream_handler)

    if log_to_file and action:
        action_dir = Path(log_dir or "log") / action
        action_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%m%d%H%M%S")
        file_handler = logging.FileHandler(action_dir / f"{action}_{timestamp}.log", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(_AbbrevLevelFormatter(fmt=_FILE_FORMAT, datefmt=_DATE_FORMAT))
        handlers.append(file_handler)

    log.handlers.clear()
    for handler in handlers:
        log.addHandler(handler)
    log.setLevel(logging.DEBUG)
    log.propagate = False

    for name in _HTTP_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if http_debug else logging.WARNING)
