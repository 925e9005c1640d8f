"""Source registry and builders for search sources."""

from __future__ import annotations

import os
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from SourceFinder.config import AppConfig
    from SourceFinder.services.search import SourceAdapter
    from SourceFinder.sources.http import JsonApiClient

SourceBuilder = Callable[["AppConfig"], "SourceAdapter"]


def build_source(source_name: str, *, config: AppConfig) -> SourceAdapter:
    """Build a source adapter from its registered name.

    Args:
        source_name: Source identifier from ``search.sources``.
        config: Parsed application configuration.

    Returns:
        SourceAdapter: Initialized adapter for the given name.

    Raises:
        ValueError: If ``source_name`` is not registered.
    """
    builder = _source_builders().get(source_name)
    if builder is None:
        raise ValueError(f"Unsupported source in config.search.sources: {source_name}")
    return builder(config)


def build_sources(config: AppConfig) -> list[SourceAdapter]:
    """Build every configured source, in configured order."""
    return [build_source(name, config=config) for name in config.search.sources]


def supported_source_names() -> tuple[str, ...]:
    """Return all source names that can be built by the registry.

    Returns:
        tuple[str, ...]: Source names in registry order.
    """
    return tuple(_source_builders().keys())


def _source_builders() -> dict[str, SourceBuilder]:
    """Return source builder registry."""
    return {
        "openalex": _build_openalex_source,
        "crossref": _build_crossref_source,
        "pubmed": _build_pubmed_source,
        "semantic_scholar": _build_semantic_scholar_source,
        "google_books": _build_google_books_source,
        "openlibrary": _build_openlibrary_source,
        "loc": _build_loc_source,
    }


def _json_client(config: AppConfig) -> JsonApiClient:
    from SourceFinder.sources.http import JsonApiClient

    return JsonApiClient(timeout=config.search.source_timeout, user_agent=config.providers.user_agent)


def _build_openalex_source(config: AppConfig) -> SourceAdapter:
    """Build OpenAlex source."""
    from SourceFinder.sources.openalex.source import OpenAlexSource

    return OpenAlexSource(client=_json_client(config), mailto=config.providers.mailto)


def _build_crossref_source(config: AppConfig) -> SourceAdapter:
    """Build Crossref source."""
    from SourceFinder.sources.crossref.client import CrossrefApiClient
    from SourceFinder.sources.crossref.source import CrossrefSource

    return CrossrefSource(
        client=CrossrefApiClient(timeout=config.search.source_timeout, user_agent=config.providers.user_agent)
    )


def _build_pubmed_source(config: AppConfig) -> SourceAdapter:
    """Build PubMed source."""
    from SourceFinder.sources.pubmed.source import PubmedSource

    return PubmedSource(client=_json_client(config), email=config.providers.mailto)


def _build_semantic_scholar_source(config: AppConfig) -> SourceAdapter:
    """Build Semantic Scholar source."""
    from SourceFinder.sources.semantic_scholar.source import SemanticScholarSource

    return SemanticScholarSource(client=_json_client(config))


def _build_google_books_source(config: AppConfig) -> SourceAdapter:
    """Build Google Books source; the API key is read from the environment."""
    from SourceFinder.sources.google_books.source import GoogleBooksSource

    api_key = os.getenv(config.providers.google_books_api_key_env, "").strip() or None
    return GoogleBooksSource(client=_json_client(config), api_key=api_key)


def _build_openlibrary_source(config: AppConfig) -> SourceAdapter:
    """Build Open Library source."""
    from SourceFinder.sources.openlibrary.source import OpenLibrarySource

    return OpenLibrarySource(client=_json_client(config))


def _build_loc_source(config: AppConfig) -> SourceAdapter:
    """Build Library of Congress source."""
    from SourceFinder.sources.loc.source import LocSource

    return LocSource(client=_json_client(config))
