"""Search service layer for SourceFinder.

Provides the router over bibliographic sources, the ranker, identifier lookup,
and factory functions for component creation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from SourceFinder.services.lookup import IdentifierLookup, detect_identifier
from SourceFinder.services.ranker import Ranker, rank_and_dedupe
from SourceFinder.services.search import SourceAdapter, SuggestionRouter, estimate_total

if TYPE_CHECKING:
    from SourceFinder.config import AppConfig


def create_ranker(config: AppConfig) -> Ranker:
    """Create a ranker with configured source priority overrides."""
    return Ranker(source_priority=config.ranking.source_priority)


def create_search_service(config: AppConfig) -> SuggestionRouter:
    """Create a router with configured data sources.

    Args:
        config: Application configuration containing source settings.

    Returns:
        Configured SuggestionRouter instance.

    Raises:
        ValueError: If a configured source is not registered.
    """
    from SourceFinder.sources.registry import build_sources

    return SuggestionRouter(
        sources=tuple(build_sources(config)),
        ranker=create_ranker(config),
        request_timeout=config.search.request_timeout,
        overfetch_factor=config.search.overfetch_factor,
        total_multiplier=config.search.total_multiplier,
        max_workers=config.search.max_workers,
    )


__all__ = [
    "IdentifierLookup",
    "Ranker",
    "SourceAdapter",
    "SuggestionRouter",
    "create_ranker",
    "create_search_service",
    "detect_identifier",
    "estimate_total",
    "rank_and_dedupe",
]
