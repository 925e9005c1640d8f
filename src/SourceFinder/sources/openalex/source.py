"""OpenAlex source adapter."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from SourceFinder.core.models import Suggestion
from SourceFinder.core.query import (
    ANY,
    AUTHOR,
    FIELD_QUALIFIERS,
    JOURNAL,
    PUBLISHER,
    SUBJECT,
    TITLE,
    YEAR,
    SearchRequest,
    parse_year,
)
from SourceFinder.sources.base import BaseSource
from SourceFinder.sources.openalex.parser import parse_openalex_works

OPENALEX_WORKS_URL = "https://api.openalex.org/works"

_FIELD_TO_FILTER: dict[str, str] = {
    TITLE: "title.search",
    AUTHOR: "authorships.author.display_name.search",
    PUBLISHER: "primary_location.source.host_organization_name.search",
    JOURNAL: "primary_location.source.display_name.search",
    SUBJECT: "keywords.keyword.search",
}


def compile_openalex_params(request: SearchRequest, *, mailto: str | None = None) -> dict[str, str]:
    """Compile a search request into OpenAlex ``/works`` parameters.

    OpenAlex pages by number, so the offset is mapped to the page that
    contains it.
    """
    per_page = max(request.max_results, 1)
    params = {
        "per_page": str(per_page),
        "page": str(request.offset // per_page + 1),
    }
    if mailto:
        params["mailto"] = mailto

    query = request.query.strip()
    filter_value = None
    if request.field == YEAR:
        year = parse_year(query)
        if year is not None:
            filter_value = f"publication_year:{year}"
        else:
            params["search"] = query
    elif request.field in _FIELD_TO_FILTER:
        filter_value = f"{_FIELD_TO_FILTER[request.field]}:{query}"
    if filter_value:
        params["filter"] = filter_value

    if request.field in (ANY, TITLE) or request.field not in FIELD_QUALIFIERS:
        params["search"] = query
    return params


@dataclass(slots=True)
class OpenAlexSource(BaseSource):
    """OpenAlex-backed source adapter; serves every field qualifier."""

    mailto: str | None = None

    name: ClassVar[str] = "openalex"
    supported_fields: ClassVar[frozenset[str]] = frozenset(FIELD_QUALIFIERS)

    def _search(self, request: SearchRequest) -> list[Suggestion]:
        payload = self.client.get_json(OPENALEX_WORKS_URL, params=compile_openalex_params(request, mailto=self.mailto))
        results = payload.get("results", [])
        return parse_openalex_works(results if isinstance(results, list) else [])
