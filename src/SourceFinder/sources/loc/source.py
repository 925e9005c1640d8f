"""Library of Congress source adapter (loc.gov JSON search)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from SourceFinder.core.models import Suggestion
from SourceFinder.core.query import ANY, AUTHOR, SUBJECT, TITLE, YEAR, SearchRequest, parse_year
from SourceFinder.sources.base import BaseSource
from SourceFinder.sources.loc.parser import SOURCE_NAME, parse_loc_results

LOC_SEARCH_URL = "https://www.loc.gov/search/"
MAX_PAGE_SIZE = 25

_FIELD_PREFIXES: dict[str, str] = {
    AUTHOR: "contributor:",
    SUBJECT: "subject:",
    TITLE: "title:",
}


def compile_loc_params(request: SearchRequest) -> dict[str, str]:
    """Compile a search request into loc.gov parameters.

    The page number ``sp`` is derived from the offset and requested size.
    """
    query = request.query.strip()
    params = {
        "fo": "json",
        "c": str(min(request.max_results, MAX_PAGE_SIZE)),
        "sp": str(request.offset // max(request.max_results, 1) + 1),
        "q": f"{_FIELD_PREFIXES.get(request.field, '')}{query}",
    }
    if request.field == YEAR:
        year = parse_year(query)
        if year is not None:
            params["dates"] = f"{year}/{year}"
    return params


@dataclass(slots=True)
class LocSource(BaseSource):
    """Library of Congress-backed adapter."""

    name: ClassVar[str] = SOURCE_NAME
    supported_fields: ClassVar[frozenset[str]] = frozenset({ANY, TITLE, AUTHOR, SUBJECT, YEAR})

    def _search(self, request: SearchRequest) -> list[Suggestion]:
        payload = self.client.get_json(LOC_SEARCH_URL, params=compile_loc_params(request))
        results = payload.get("results", [])
        return parse_loc_results(results if isinstance(results, list) else [])
