"""PubMed E-utilities esummary parser."""

from __future__ import annotations

import re
from typing import Any, Mapping, Sequence

from dateutil import parser as dt_parser

from SourceFinder.core.models import JOURNAL_ARTICLE, Author, EntryMetadata, Suggestion
from SourceFinder.core.query import parse_year
from SourceFinder.sources.common import first_text, safe_str, strip_markup
from SourceFinder.utils.log import log

SOURCE_NAME = "pubmed"
PUBMED_ARTICLE_URL = "https://pubmed.ncbi.nlm.nih.gov/{pmid}/"

_TRAILING_PERIOD_RE = re.compile(r"\.$")


def parse_esummary(result: Mapping[str, Any], pmids: Sequence[str]) -> list[Suggestion]:
    """Parse an esummary ``result`` block in the order of ``pmids``.

    Records flagged with an ``error`` or lacking a title are skipped.
    """
    suggestions: list[Suggestion] = []
    for pmid in pmids:
        record = result.get(pmid)
        if not isinstance(record, Mapping) or record.get("error"):
            continue
        try:
            suggestion = parse_pubmed_record(pmid, record)
        except (TypeError, ValueError, AttributeError) as error:
            log.debug("Skipping malformed record: source=%s pmid=%s error=%s", SOURCE_NAME, pmid, error)
            continue
        if suggestion is not None:
            suggestions.append(suggestion)
    return suggestions


def parse_pubmed_record(pmid: str, record: Mapping[str, Any]) -> Suggestion | None:
    """Convert one esummary record into a suggestion."""
    title = _TRAILING_PERIOD_RE.sub("", strip_markup(safe_str(record.get("title"))))
    if not title:
        return None

    metadata = EntryMetadata.from_mapping(
        {
            "doi": _article_id(record.get("articleids"), "doi"),
            "url": PUBMED_ARTICLE_URL.format(pmid=pmid),
            "journal": safe_str(record.get("fulljournalname")) or safe_str(record.get("source")),
            "volume": safe_str(record.get("volume")),
            "issue": safe_str(record.get("issue")),
            "pages": safe_str(record.get("pages")),
            "issn": safe_str(record.get("issn")) or safe_str(record.get("essn")),
            "language": first_text(record.get("lang")),
            "pmid": pmid,
        }
    )

    return Suggestion(
        id=f"pmid-{pmid}",
        source=SOURCE_NAME,
        title=title,
        authors=_extract_authors(record.get("authors")),
        year=_extract_year(record),
        entry_type=JOURNAL_ARTICLE,
        metadata=metadata,
    )


def _extract_authors(raw_authors: Any) -> tuple[Author, ...]:
    """Parse MEDLINE-style names ("Caro RA": family name first, then initials)."""
    if not isinstance(raw_authors, list):
        return ()
    authors: list[Author] = []
    for entry in raw_authors:
        if not isinstance(entry, Mapping) or entry.get("authtype", "Author") != "Author":
            continue
        parts = safe_str(entry.get("name")).split()
        if not parts:
            continue
        authors.append(Author(first_name=" ".join(parts[1:]), last_name=parts[0]))
    return tuple(authors)


def _extract_year(record: Mapping[str, Any]) -> int | None:
    """Read the year from ``pubdate`` ("2023 Jan 5"), else from ``sortpubdate``."""
    year = parse_year(safe_str(record.get("pubdate")))
    if year is not None:
        return year
    sort_date = safe_str(record.get("sortpubdate"))
    if not sort_date:
        return None
    try:
        return dt_parser.parse(sort_date).year
    except (OverflowError, ValueError):
        return None


def _article_id(article_ids: Any, id_type: str) -> str:
    if not isinstance(article_ids, list):
        return ""
    for entry in article_ids:
        if isinstance(entry, Mapping) and entry.get("idtype") == id_type:
            return safe_str(entry.get("value"))
    return ""
