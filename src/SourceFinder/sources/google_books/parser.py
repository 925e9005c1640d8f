"""Google Books volume parser."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from SourceFinder.core.models import BOOK, MAGAZINE_ARTICLE, EntryMetadata, Suggestion
from SourceFinder.core.query import parse_year
from SourceFinder.sources.common import (
    as_mapping,
    authors_from_names,
    parse_records,
    safe_int,
    safe_str,
)

SOURCE_NAME = "google_books"
MAX_ABSTRACT_CHARS = 500


def parse_volumes(items: Sequence[Mapping[str, Any]]) -> list[Suggestion]:
    """Parse ``volumes`` items, skipping entries without a title."""
    return parse_records(items, parse_volume, source=SOURCE_NAME)


def parse_volume(item: Mapping[str, Any]) -> Suggestion | None:
    info = as_mapping(item.get("volumeInfo"))
    title = safe_str(info.get("title"))
    if not title:
        return None
    subtitle = safe_str(info.get("subtitle"))
    if subtitle:
        title = f"{title}: {subtitle}"

    pages = safe_int(info.get("pageCount"))
    description = safe_str(info.get("description"))
    metadata = EntryMetadata.from_mapping(
        {
            "isbn": _isbn(info.get("industryIdentifiers")),
            "publisher": safe_str(info.get("publisher")),
            "pages": str(pages) if pages else None,
            "language": safe_str(info.get("language")),
            "url": safe_str(info.get("infoLink")) or safe_str(info.get("canonicalVolumeLink")),
            "abstract": description[:MAX_ABSTRACT_CHARS],
        }
    )

    volume_id = safe_str(item.get("id"))
    return Suggestion(
        id=f"gbooks-{volume_id or title}",
        source=SOURCE_NAME,
        title=title,
        authors=authors_from_names(info.get("authors")),
        year=parse_year(safe_str(info.get("publishedDate"))),
        entry_type=MAGAZINE_ARTICLE if info.get("printType") == "MAGAZINE" else BOOK,
        metadata=metadata,
    )


def _isbn(identifiers: Any) -> str:
    """Prefer ISBN-13 over ISBN-10."""
    if not isinstance(identifiers, list):
        return ""
    by_type = {}
    for entry in identifiers:
        entry = as_mapping(entry)
        by_type.setdefault(safe_str(entry.get("type")), safe_str(entry.get("identifier")))
    return by_type.get("ISBN_13") or by_type.get("ISBN_10") or ""
