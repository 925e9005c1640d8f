"""Google Books source adapter."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from SourceFinder.core.models import Suggestion
from SourceFinder.core.query import ANY, AUTHOR, PUBLISHER, SUBJECT, TITLE, SearchRequest
from SourceFinder.sources.base import BaseSource
from SourceFinder.sources.google_books.parser import SOURCE_NAME, parse_volumes

GOOGLE_BOOKS_API = "https://www.googleapis.com/books/v1/volumes"
MAX_PAGE_SIZE = 40

_FIELD_PREFIXES: dict[str, str] = {
    AUTHOR: "inauthor:",
    TITLE: "intitle:",
    PUBLISHER: "inpublisher:",
    SUBJECT: "subject:",
}


def build_google_books_query(query: str, field: str) -> str:
    """Prefix the query with the Google Books keyword for ``field``."""
    text = query.strip()
    if not text:
        return ""
    return f"{_FIELD_PREFIXES.get(field, '')}{text}"


def compile_google_books_params(request: SearchRequest, *, api_key: str | None = None) -> dict[str, str]:
    params = {
        "q": build_google_books_query(request.query, request.field),
        "maxResults": str(min(request.max_results, MAX_PAGE_SIZE)),
        "startIndex": str(request.offset),
        "printType": "all",
        "orderBy": "relevance",
    }
    if api_key:
        params["key"] = api_key
    return params


@dataclass(slots=True)
class GoogleBooksSource(BaseSource):
    """Google Books-backed adapter; the API key is optional."""

    api_key: str | None = None

    name: ClassVar[str] = SOURCE_NAME
    supported_fields: ClassVar[frozenset[str]] = frozenset({ANY, TITLE, AUTHOR, PUBLISHER, SUBJECT})

    def _search(self, request: SearchRequest) -> list[Suggestion]:
        params = compile_google_books_params(request, api_key=self.api_key)
        if not params["q"]:
            return []
        payload = self.client.get_json(GOOGLE_BOOKS_API, params=params)
        items = payload.get("items", [])
        return parse_volumes(items if isinstance(items, list) else [])
