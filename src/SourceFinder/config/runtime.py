"""Runtime domain configuration: the ``log`` section."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from SourceFinder.config.common import (
    expect_bool,
    expect_str,
    get_required_value,
    get_section,
)

_ALLOWED_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """Store validated logging settings.

    Attributes:
        level: Console log level.
        to_file: Mirror logs to a per-action file under ``dir``.
        dir: Base directory for log files.
        http_debug: Show HTTP connection logs from ``urllib3``.
    """

    level: str
    to_file: bool
    dir: str
    http_debug: bool


def load_runtime(raw: Mapping[str, Any]) -> RuntimeConfig:
    """Load the ``log`` section; only ``level`` is required."""
    section = get_section(raw, "log", required=True)
    return RuntimeConfig(
        level=expect_str(get_required_value(section, "level", "log.level"), "log.level").upper(),
        to_file=expect_bool(section.get("to_file", False), "log.to_file"),
        dir=expect_str(section.get("dir", "log"), "log.dir"),
        http_debug=expect_bool(section.get("http_debug", False), "log.http_debug"),
    )


def check_runtime(config: RuntimeConfig) -> None:
    if config.level not in _ALLOWED_LOG_LEVELS:
        raise ValueError(f"log.level must be one of {sorted(_ALLOWED_LOG_LEVELS)}")
    if config.to_file and not config.dir.strip():
        raise ValueError("log.dir must not be empty when log.to_file=true")
