"""Crossref source adapter."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import ClassVar

from SourceFinder.core.models import Suggestion
from SourceFinder.core.query import ANY, AUTHOR, JOURNAL, PUBLISHER, TITLE, YEAR, SearchRequest
from SourceFinder.sources.base import BaseSource
from SourceFinder.sources.crossref.client import CrossrefApiClient
from SourceFinder.sources.crossref.parser import parse_crossref_items, parse_crossref_work
from SourceFinder.sources.crossref.query import compile_crossref_params

_DOI_URL_PREFIX_RE = re.compile(r"^https?://(dx\.)?doi\.org/", re.IGNORECASE)


@dataclass(slots=True)
class CrossrefSource(BaseSource):
    """Crossref-backed source adapter that returns normalized suggestions."""

    client: CrossrefApiClient

    name: ClassVar[str] = "crossref"
    supported_fields: ClassVar[frozenset[str]] = frozenset({ANY, TITLE, AUTHOR, PUBLISHER, JOURNAL, YEAR})

    def _search(self, request: SearchRequest) -> list[Suggestion]:
        items = self.client.fetch_works(params=compile_crossref_params(request))
        return parse_crossref_items(items)

    def lookup_doi(self, doi: str) -> Suggestion | None:
        """Resolve one DOI to a suggestion; ``None`` when unknown or on failure."""
        return self._lookup("doi", self._fetch_doi, doi)

    def _fetch_doi(self, doi: str) -> Suggestion | None:
        trimmed = _DOI_URL_PREFIX_RE.sub("", doi.strip())
        work = self.client.fetch_work(trimmed)
        return parse_crossref_work(work) if work else None
