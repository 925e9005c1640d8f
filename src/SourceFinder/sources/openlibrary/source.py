"""Open Library source adapter."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import ClassVar
from urllib.parse import quote

import requests

from SourceFinder.core.models import Suggestion
from SourceFinder.core.query import ANY, AUTHOR, SUBJECT, TITLE, SearchRequest
from SourceFinder.sources.base import BaseSource
from SourceFinder.sources.openlibrary.parser import OPENLIBRARY_BASE, parse_isbn_edition, parse_search_docs

SEARCH_FIELDS = "key,title,author_name,first_publish_year,isbn,publisher,number_of_pages_median,language,subject"

_ISBN_SEPARATORS_RE = re.compile(r"[-\s]")
_FIELD_TO_PARAM: dict[str, str] = {
    AUTHOR: "author",
    TITLE: "title",
    SUBJECT: "subject",
}


def compile_openlibrary_params(request: SearchRequest) -> dict[str, str]:
    """Compile a search request into ``/search.json`` parameters."""
    params = {
        "limit": str(request.max_results),
        "offset": str(request.offset),
        "fields": SEARCH_FIELDS,
    }
    params[_FIELD_TO_PARAM.get(request.field, "q")] = request.query.strip()
    return params


def normalize_isbn(isbn: str) -> str:
    """Strip dashes and spaces from an ISBN."""
    return _ISBN_SEPARATORS_RE.sub("", isbn.strip())


@dataclass(slots=True)
class OpenLibrarySource(BaseSource):
    """Open Library-backed adapter for books."""

    name: ClassVar[str] = "openlibrary"
    supported_fields: ClassVar[frozenset[str]] = frozenset({ANY, TITLE, AUTHOR, SUBJECT})

    def _search(self, request: SearchRequest) -> list[Suggestion]:
        payload = self.client.get_json(f"{OPENLIBRARY_BASE}/search.json", params=compile_openlibrary_params(request))
        docs = payload.get("docs", [])
        return parse_search_docs(docs if isinstance(docs, list) else [])

    def lookup_isbn(self, isbn: str) -> Suggestion | None:
        """Resolve one ISBN to a book suggestion; ``None`` when unknown or on failure."""
        return self._lookup("isbn", self._fetch_isbn, normalize_isbn(isbn))

    def _fetch_isbn(self, isbn: str) -> Suggestion | None:
        try:
            edition = self.client.get_json(f"{OPENLIBRARY_BASE}/isbn/{quote(isbn, safe='')}.json")
        except requests.HTTPError as error:
            if error.response is not None and error.response.status_code == 404:
                return None
            raise
        return parse_isbn_edition(edition, isbn)
