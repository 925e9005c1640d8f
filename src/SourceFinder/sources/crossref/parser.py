"""Crossref payload parser."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from dateutil import parser as dt_parser

from SourceFinder.core.models import (
    BOOK,
    CONFERENCE_PAPER,
    DATASET,
    JOURNAL_ARTICLE,
    REPORT,
    THESIS,
    Author,
    EntryMetadata,
    Suggestion,
)
from SourceFinder.sources.common import first_text, parse_records, safe_int, safe_str, strip_markup

SOURCE_NAME = "crossref"

_DATE_KEYS = ("issued", "published", "published-print", "published-online", "created")


def parse_crossref_items(items: Sequence[Mapping[str, Any]]) -> list[Suggestion]:
    """Parse Crossref work items into suggestions, skipping untitled ones."""
    return parse_records(items, parse_crossref_work, source=SOURCE_NAME)


def parse_crossref_work(work: Mapping[str, Any]) -> Suggestion | None:
    """Convert one Crossref work into a suggestion, or ``None`` without a title."""
    title = first_text(work.get("title"))
    if not title:
        return None

    doi = safe_str(work.get("DOI")) or None
    url = safe_str(work.get("URL")) or None
    metadata = EntryMetadata.from_mapping(
        {
            "doi": doi,
            "url": url,
            "journal": first_text(work.get("container-title")),
            "volume": safe_str(work.get("volume")),
            "issue": safe_str(work.get("issue")),
            "pages": safe_str(work.get("page")),
            "publisher": safe_str(work.get("publisher")),
            "language": first_text(work.get("language")),
            "issn": first_text(work.get("ISSN")),
            "isbn": first_text(work.get("ISBN")),
            "abstract": strip_markup(safe_str(work.get("abstract"))),
            "citation_count": safe_int(work.get("is-referenced-by-count")),
        }
    )

    return Suggestion(
        id=doi or url or title,
        source=SOURCE_NAME,
        title=title,
        authors=_extract_authors(work.get("author")),
        year=_extract_year(work),
        entry_type=_map_entry_type(safe_str(work.get("type"))),
        metadata=metadata,
    )


def _extract_authors(raw_authors: Any) -> tuple[Author, ...]:
    """Parse Crossref author objects (given/family or literal name)."""
    if not isinstance(raw_authors, list):
        return ()

    authors: list[Author] = []
    for author in raw_authors:
        if not isinstance(author, Mapping):
            continue
        given = safe_str(author.get("given"))
        family = safe_str(author.get("family"))
        if family:
            authors.append(Author(first_name=given, last_name=family))
            continue
        literal = safe_str(author.get("name")) or given
        if literal:
            authors.append(Author(first_name="", last_name=literal))
    return tuple(authors)


def _extract_year(work: Mapping[str, Any]) -> int | None:
    """Extract publication year from date-parts, falling back to ISO date-time."""
    for key in _DATE_KEYS:
        section = work.get(key)
        if not isinstance(section, Mapping):
            continue
        date_parts = section.get("date-parts")
        if isinstance(date_parts, list) and date_parts and isinstance(date_parts[0], list) and date_parts[0]:
            year = safe_int(date_parts[0][0])
            if year is not None:
                return year
        date_time = safe_str(section.get("date-time"))
        if date_time:
            try:
                return dt_parser.isoparse(date_time).year
            except (TypeError, ValueError):
                continue
    return None


def _map_entry_type(raw_type: str) -> str:
    """Map a Crossref work type onto the shared entry types."""
    kind = raw_type.lower()
    if "book" in kind or "monograph" in kind:
        return BOOK
    if "dataset" in kind:
        return DATASET
    if "proceedings" in kind or "conference" in kind:
        return CONFERENCE_PAPER
    if "report" in kind:
        return REPORT
    if "dissertation" in kind:
        return THESIS
    return JOURNAL_ARTICLE
