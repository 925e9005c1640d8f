"""Library of Congress search result parser."""

from __future__ import annotations

import re
from typing import Any, Mapping, Sequence

from SourceFinder.core.models import (
    BOOK,
    CUSTOM,
    NEWSPAPER_ARTICLE,
    PODCAST,
    SOFTWARE,
    VIDEO,
    Author,
    EntryMetadata,
    Suggestion,
)
from SourceFinder.core.query import parse_year
from SourceFinder.sources.common import first_text, parse_records, safe_str, split_display_name

SOURCE_NAME = "loc"

# "Caro, Robert A., 1935-2020." -> "Caro, Robert A."
_LIFE_DATES_RE = re.compile(r",?\s*\d{4}-\d{4}\.?$")
_COMMA_RE = re.compile(r",\s*")

# Checked in order; the first keyword found in the joined formats wins.
_FORMAT_TYPES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("book", "text"), BOOK),
    (("map",), CUSTOM),
    (("photo", "image"), CUSTOM),
    (("film", "video"), VIDEO),
    (("audio", "sound"), PODCAST),
    (("software",), SOFTWARE),
    (("manuscript",), CUSTOM),
    (("newspaper",), NEWSPAPER_ARTICLE),
)


def parse_loc_results(results: Sequence[Mapping[str, Any]]) -> list[Suggestion]:
    return parse_records(results, parse_loc_item, source=SOURCE_NAME)


def parse_loc_item(item: Mapping[str, Any]) -> Suggestion | None:
    """Convert one loc.gov search result into a suggestion."""
    title = safe_str(item.get("title")) or first_text(item.get("title_display"))
    if not title:
        return None

    contributor = item.get("contributor")
    item_id = safe_str(item.get("id"))
    metadata = EntryMetadata.from_mapping(
        {
            "url": safe_str(item.get("url")) or item_id,
            "publisher": None if isinstance(contributor, list) else safe_str(contributor),
            "language": first_text(item.get("language")),
        }
    )

    formats = item.get("original_format")
    return Suggestion(
        id=f"loc-{item_id or title}",
        source=SOURCE_NAME,
        title=title,
        authors=parse_contributors(contributor),
        year=parse_year(safe_str(item.get("date"))),
        entry_type=map_loc_format(formats if isinstance(formats, list) else []),
        metadata=metadata,
    )


def parse_contributors(contributors: Any) -> tuple[Author, ...]:
    """Parse catalog-style names ("Last, First, 1900-1980") into authors."""
    if not isinstance(contributors, list):
        return ()
    authors: list[Author] = []
    for name in contributors:
        cleaned = _LIFE_DATES_RE.sub("", safe_str(name)).strip()
        parts = _COMMA_RE.split(cleaned)
        if len(parts) >= 2:
            authors.append(Author(first_name=parts[1].strip(), last_name=parts[0].strip()))
            continue
        author = split_display_name(cleaned)
        if author is not None:
            authors.append(author)
    return tuple(authors)


def map_loc_format(formats: Sequence[Any]) -> str:
    joined = " ".join(safe_str(value) for value in formats).lower()
    for keywords, entry_type in _FORMAT_TYPES:
        if any(keyword in joined for keyword in keywords):
            return entry_type
    return BOOK
