"""Ranking domain configuration."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping

from SourceFinder.config.common import expect_int_mapping, get_section
from SourceFinder.services.ranker import SOURCE_PRIORITY


@dataclass(frozen=True, slots=True)
class RankingConfig:
    """Store the effective source priority table (built-ins plus overrides)."""

    source_priority: Mapping[str, int]


def load_ranking(raw: Mapping[str, Any]) -> RankingConfig:
    section = get_section(raw, "ranking", required=False)
    overrides = expect_int_mapping(section.get("source_priority"), "ranking.source_priority")
    return RankingConfig(source_priority=MappingProxyType({**SOURCE_PRIORITY, **overrides}))


def check_ranking(config: RankingConfig) -> None:
    """Raises ``ValueError`` on a negative priority."""
    for name, priority in config.source_priority.items():
        if priority < 0:
            raise ValueError(f"ranking.source_priority.{name} must not be negative")
