"""Search domain configuration: sources, page size and fan-out tuning."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from SourceFinder.config.common import (
    expect_float,
    expect_int,
    expect_optional_int,
    expect_str_list,
    get_required_value,
    get_section,
)
from SourceFinder.sources.registry import supported_source_names

_ALLOWED_SOURCES = frozenset(supported_source_names())


@dataclass(frozen=True, slots=True)
class SearchConfig:
    """Store validated search behavior and fan-out settings.

    Attributes:
        sources: Enabled source names in registration order.
        max_results: Default page size.
        source_timeout: Per-provider request timeout in seconds.
        request_timeout: Deadline in seconds for one whole search.
        overfetch_factor: Per-source page size multiplier.
        total_multiplier: Scale applied to saturated result counts.
        max_workers: Thread pool size, ``None`` for one thread per source.
    """

    sources: tuple[str, ...]
    max_results: int
    source_timeout: float
    request_timeout: float
    overfetch_factor: float
    total_multiplier: int
    max_workers: int | None


def load_search(raw: Mapping[str, Any]) -> SearchConfig:
    """Load search domain config from raw mapping.

    Raises:
        TypeError: If config types are invalid.
        ValueError: If required keys are missing or a source is unknown.
    """
    section = get_section(raw, "search", required=True)
    return SearchConfig(
        sources=_parse_sources(get_required_value(section, "sources", "search.sources")),
        max_results=expect_int(get_required_value(section, "max_results", "search.max_results"), "search.max_results"),
        source_timeout=expect_float(section.get("source_timeout", 8.0), "search.source_timeout"),
        request_timeout=expect_float(section.get("request_timeout", 20.0), "search.request_timeout"),
        overfetch_factor=expect_float(section.get("overfetch_factor", 1.5), "search.overfetch_factor"),
        total_multiplier=expect_int(section.get("total_multiplier", 3), "search.total_multiplier"),
        max_workers=expect_optional_int(section.get("max_workers"), "search.max_workers"),
    )


def check_search(config: SearchConfig) -> None:
    """Validate search domain constraints.

    Raises:
        ValueError: If values violate search constraints.
    """
    if not config.sources:
        raise ValueError("search.sources must include at least one source")
    if config.max_results <= 0:
        raise ValueError("search.max_results must be positive")
    if config.source_timeout <= 0:
        raise ValueError("search.source_timeout must be positive")
    if config.request_timeout <= 0:
        raise ValueError("search.request_timeout must be positive")
    if config.overfetch_factor < 1:
        raise ValueError("search.overfetch_factor must be >= 1")
    if config.total_multiplier < 1:
        raise ValueError("search.total_multiplier must be >= 1")
    if config.max_workers is not None and config.max_workers <= 0:
        raise ValueError("search.max_workers must be positive or null")


def _parse_sources(value: Any) -> tuple[str, ...]:
    """Parse and normalize configured source names.

    Args:
        value: Raw list value from ``search.sources``.

    Returns:
        Normalized, unique source names in configured order.

    Raises:
        TypeError: If value is not a string list.
        ValueError: If list is empty after normalization or contains unknown sources.
    """
    normalized: list[str] = []
    seen: set[str] = set()
    for item in expect_str_list(value, "search.sources"):
        source = item.strip().lower()
        if not source:
            continue
        if source not in _ALLOWED_SOURCES:
            raise ValueError(f"search.sources has unknown source: {source}")
        if source in seen:
            continue
        seen.add(source)
        normalized.append(source)

    if not normalized:
        raise ValueError("search.sources must include at least one source")
    return tuple(normalized)
