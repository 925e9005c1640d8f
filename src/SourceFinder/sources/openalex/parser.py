"""OpenAlex payload parser."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

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
from SourceFinder.sources.common import as_mapping, parse_records, safe_int, safe_str, split_display_name

SOURCE_NAME = "openalex"
_DOI_PREFIX = "https://doi.org/"


def parse_openalex_works(works: Sequence[Mapping[str, Any]]) -> list[Suggestion]:
    """Parse OpenAlex works into suggestions, skipping untitled ones."""
    return parse_records(works, parse_openalex_work, source=SOURCE_NAME)


def parse_openalex_work(work: Mapping[str, Any]) -> Suggestion | None:
    """Convert an OpenAlex work dict into a suggestion."""
    title = safe_str(work.get("title")) or safe_str(work.get("display_name"))
    if not title:
        return None

    doi = safe_str(work.get("doi"))
    if doi.startswith(_DOI_PREFIX):
        doi = doi[len(_DOI_PREFIX):]

    primary = as_mapping(work.get("primary_location"))
    venue = as_mapping(primary.get("source"))
    biblio = as_mapping(work.get("biblio"))

    metadata = EntryMetadata.from_mapping(
        {
            "doi": doi,
            "url": safe_str(primary.get("landing_page_url")),
            "journal": safe_str(venue.get("display_name")),
            "publisher": safe_str(venue.get("host_organization_name")),
            "issn": safe_str(venue.get("issn_l")),
            "language": safe_str(work.get("language")),
            "citation_count": safe_int(work.get("cited_by_count")),
            "volume": safe_str(biblio.get("volume")),
            "issue": safe_str(biblio.get("issue")),
        }
    )

    return Suggestion(
        id=safe_str(work.get("id")) or doi or title,
        source=SOURCE_NAME,
        title=title,
        authors=_extract_authors(work.get("authorships")),
        year=safe_int(work.get("publication_year")),
        entry_type=_map_entry_type(safe_str(work.get("type"))),
        metadata=metadata,
    )


def _extract_authors(authorships: Any) -> tuple[Author, ...]:
    if not isinstance(authorships, list):
        return ()
    authors: list[Author] = []
    for authorship in authorships:
        if not isinstance(authorship, Mapping):
            continue
        author = split_display_name(as_mapping(authorship.get("author")).get("display_name"))
        if author is not None:
            authors.append(author)
    return tuple(authors)


def _map_entry_type(raw_type: str) -> str:
    kind = raw_type.lower()
    if "book" in kind:
        return BOOK
    if "dataset" in kind:
        return DATASET
    if "proceedings" in kind or "conference" in kind:
        return CONFERENCE_PAPER
    if "report" in kind:
        return REPORT
    if "dissertation" in kind or "thesis" in kind:
        return THESIS
    return JOURNAL_ARTICLE
