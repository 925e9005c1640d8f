"""Semantic Scholar Graph API payload parser."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from SourceFinder.core.models import (
    BOOK,
    CONFERENCE_PAPER,
    DATASET,
    JOURNAL_ARTICLE,
    EntryMetadata,
    Suggestion,
)
from SourceFinder.sources.common import (
    as_mapping,
    authors_from_names,
    parse_records,
    safe_int,
    safe_str,
)

SOURCE_NAME = "semantic_scholar"
S2_PAPER_URL = "https://www.semanticscholar.org/paper/{paper_id}"


def parse_s2_papers(papers: Sequence[Mapping[str, Any]]) -> list[Suggestion]:
    return parse_records(papers, parse_s2_paper, source=SOURCE_NAME)


def parse_s2_paper(paper: Mapping[str, Any]) -> Suggestion | None:
    """Convert one Graph API paper into a suggestion."""
    title = safe_str(paper.get("title"))
    if not title:
        return None

    paper_id = safe_str(paper.get("paperId"))
    external_ids = as_mapping(paper.get("externalIds"))
    journal = as_mapping(paper.get("journal"))
    doi = safe_str(external_ids.get("DOI"))

    metadata = EntryMetadata.from_mapping(
        {
            "doi": doi,
            "url": S2_PAPER_URL.format(paper_id=paper_id) if paper_id else None,
            "journal": safe_str(journal.get("name")) or safe_str(paper.get("venue")),
            "volume": safe_str(journal.get("volume")),
            "pages": safe_str(journal.get("pages")),
            "citation_count": safe_int(paper.get("citationCount")),
        }
    )
    authors = paper.get("authors")
    names = [as_mapping(author).get("name") for author in authors] if isinstance(authors, list) else []

    return Suggestion(
        id=paper_id or doi or title,
        source=SOURCE_NAME,
        title=title,
        authors=authors_from_names(names),
        year=safe_int(paper.get("year")),
        entry_type=_map_entry_type(paper.get("publicationTypes")),
        metadata=metadata,
    )


def _map_entry_type(publication_types: Any) -> str:
    types = set(publication_types) if isinstance(publication_types, list) else set()
    if "Book" in types:
        return BOOK
    if "Conference" in types:
        return CONFERENCE_PAPER
    if "Dataset" in types:
        return DATASET
    return JOURNAL_ARTICLE
