"""Open Library payload parsers (search documents and ISBN editions)."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from SourceFinder.core.models import BOOK, Author, EntryMetadata, Suggestion
from SourceFinder.core.query import parse_year
from SourceFinder.sources.common import (
    as_mapping,
    authors_from_names,
    first_text,
    parse_records,
    safe_int,
    safe_str,
)

SOURCE_NAME = "openlibrary"
OPENLIBRARY_BASE = "https://openlibrary.org"


def parse_search_docs(docs: Sequence[Mapping[str, Any]]) -> list[Suggestion]:
    """Parse ``/search.json`` documents into book suggestions."""
    return parse_records(docs, parse_search_doc, source=SOURCE_NAME)


def parse_search_doc(doc: Mapping[str, Any]) -> Suggestion | None:
    title = safe_str(doc.get("title"))
    if not title:
        return None

    key = safe_str(doc.get("key"))
    pages = safe_int(doc.get("number_of_pages_median"))
    metadata = EntryMetadata.from_mapping(
        {
            "isbn": first_text(doc.get("isbn")),
            "publisher": first_text(doc.get("publisher")),
            "pages": str(pages) if pages else None,
            "language": first_text(doc.get("language")),
            "url": f"{OPENLIBRARY_BASE}{key}" if key.startswith("/") else None,
            "subjects": _subjects(doc.get("subject")),
        }
    )

    return Suggestion(
        id=f"ol-{key or title}",
        source=SOURCE_NAME,
        title=title,
        authors=authors_from_names(doc.get("author_name")),
        year=safe_int(doc.get("first_publish_year")),
        entry_type=BOOK,
        metadata=metadata,
    )


def parse_isbn_edition(edition: Mapping[str, Any], isbn: str) -> Suggestion | None:
    """Parse an ``/isbn/{isbn}.json`` edition record.

    Edition author entries are references, so only inline names are kept.
    """
    title = safe_str(edition.get("title"))
    if not title:
        return None

    authors: list[Author] = []
    for author in edition.get("authors") or []:
        name = safe_str(as_mapping(author).get("name"))
        if name:
            authors.append(Author(first_name="", last_name=name))

    pages = safe_int(edition.get("number_of_pages"))
    languages = edition.get("languages")
    language = ""
    if isinstance(languages, list) and languages:
        language = safe_str(as_mapping(languages[0]).get("key")).rsplit("/", 1)[-1]

    metadata = EntryMetadata.from_mapping(
        {
            "isbn": isbn,
            "publisher": first_text(edition.get("publishers")) or safe_str(edition.get("publisher")),
            "pages": str(pages) if pages else None,
            "language": language,
            "edition": safe_str(edition.get("edition_name")),
        }
    )

    return Suggestion(
        id=isbn,
        source=SOURCE_NAME,
        title=title,
        authors=tuple(authors),
        year=parse_year(safe_str(edition.get("publish_date"))),
        entry_type=BOOK,
        metadata=metadata,
    )


def _subjects(value: Any) -> tuple[str, ...] | None:
    if not isinstance(value, list):
        return None
    subjects = tuple(item.strip() for item in value[:10] if isinstance(item, str) and item.strip())
    return subjects or None
