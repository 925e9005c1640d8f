"""Semantic Scholar source adapter (Graph API paper search)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from SourceFinder.core.models import Suggestion
from SourceFinder.core.query import ANY, SUBJECT, TITLE, YEAR, SearchRequest, parse_year
from SourceFinder.sources.base import BaseSource
from SourceFinder.sources.semantic_scholar.parser import SOURCE_NAME, parse_s2_papers

S2_SEARCH_URL = "https://api.semanticscholar.org/graph/v1/paper/search"
PAPER_FIELDS = "paperId,title,authors,year,citationCount,venue,externalIds,publicationTypes,journal"


def compile_s2_params(request: SearchRequest) -> dict[str, str]:
    """Compile a search request; only year has a native filter, others are plain queries."""
    params = {
        "query": request.query.strip(),
        "limit": str(request.max_results),
        "offset": str(request.offset),
        "fields": PAPER_FIELDS,
    }
    if request.field == YEAR:
        year = parse_year(request.query)
        if year is not None:
            params["year"] = str(year)
            params["query"] = "*"
    return params


@dataclass(slots=True)
class SemanticScholarSource(BaseSource):
    """Semantic Scholar-backed adapter; author/publisher/journal are not served."""

    name: ClassVar[str] = SOURCE_NAME
    supported_fields: ClassVar[frozenset[str]] = frozenset({ANY, TITLE, SUBJECT, YEAR})

    def _search(self, request: SearchRequest) -> list[Suggestion]:
        payload = self.client.get_json(S2_SEARCH_URL, params=compile_s2_params(request))
        papers = payload.get("data", [])
        return parse_s2_papers(papers if isinstance(papers, list) else [])
