"""Deduplication and relevance ranking of pooled suggestions."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping, Sequence

from SourceFinder.core.models import BOOK, Author, Suggestion
from SourceFinder.core.query import ANY, AUTHOR, JOURNAL, PUBLISHER, SUBJECT, TITLE, YEAR
from SourceFinder.utils.log import log

SOURCE_PRIORITY: Mapping[str, int] = MappingProxyType(
    {
        "openalex": 5,
        "crossref": 4,
        "pubmed": 3,
        "semantic_scholar": 2,
        "google_books": 2,
        "openlibrary": 1,
        "loc": 1,
    }
)

TITLE_WEIGHT = 50.0
AUTHOR_WEIGHT = 40.0
TEXT_WEIGHT = 40.0
BOOK_TITLE_BOOST = 5.0
SUBJECT_BONUS = 10.0
YEAR_MATCH_BONUS = 50.0
FUZZY_TITLE_PREFIX = 60

_DOI_PREFIX_RE = re.compile(r"^(?:https?://(?:dx\.)?doi\.org/|doi:)", re.IGNORECASE)
_TITLE_KEY_STRIP_RE = re.compile(r"[^a-z0-9]")
_SURNAME_STRIP_RE = re.compile(r"[^a-z]")
_TITLE_TEXT_STRIP_RE = re.compile(r"[^a-z0-9\s]")
_YEAR_TOKEN_RE = re.compile(r"\d{4}")
_WS_RE = re.compile(r"\s+")

DedupKey = tuple[str, ...]


@dataclass(frozen=True, slots=True)
class Ranker:
    """Collapse duplicate suggestions and order them by relevance.

    Attributes:
        source_priority: Static provider ranking; a higher value marks a source
            with richer, more trustworthy metadata. Unknown sources rank 0.
    """

    source_priority: Mapping[str, int] = field(default_factory=lambda: SOURCE_PRIORITY)

    def rank_and_dedupe(self, query: str, suggestions: Sequence[Suggestion], field: str) -> list[Suggestion]:
        """Deduplicate a pool and sort it by descending score for ``field``.

        Equal scores are ordered by source priority, then by position in the
        deduplicated pool, so the result never depends on sort stability.

        Args:
            query: Raw query text.
            suggestions: Pooled suggestions from all sources.
            field: Field qualifier the query is scoped to.

        Returns:
            Ranked, deduplicated suggestions.
        """
        if not suggestions:
            return []

        unique = self.deduplicate(suggestions)
        scored = [
            (self.score(query, suggestion, field), self._priority(suggestion), position, suggestion)
            for position, suggestion in enumerate(unique)
        ]
        scored.sort(key=lambda item: (-item[0], -item[1], item[2]))
        log.debug(
            "Ranked suggestions: pool=%d unique=%d field=%s",
            len(suggestions),
            len(unique),
            field,
        )
        return [item[3] for item in scored]

    def deduplicate(self, suggestions: Sequence[Suggestion]) -> list[Suggestion]:
        """Merge suggestions that share a DOI key or a fuzzy key.

        Groups keep the pool order of their first member. When a merge gives
        the combined record a key already owned by another group, that group
        is folded in as well, so no two results ever share a key.
        """
        groups: list[Suggestion | None] = []
        index: dict[DedupKey, int] = {}

        for suggestion in suggestions:
            keys = _dedup_keys(suggestion)
            target = next((index[key] for key in keys if key in index), None)
            if target is None:
                target = len(groups)
                groups.append(suggestion)
            else:
                groups[target] = self.pick_richer(_live(groups, target), suggestion)

            pending = keys + _dedup_keys(_live(groups, target))
            while pending:
                key = pending.pop()
                owner = index.get(key)
                if owner == target:
                    continue
                if owner is not None:
                    keep, drop = sorted((owner, target))
                    groups[keep] = self.pick_richer(_live(groups, keep), _live(groups, drop))
                    groups[drop] = None
                    for moved, group_idx in index.items():
                        if group_idx == drop:
                            index[moved] = keep
                    target = keep
                    pending.extend(_dedup_keys(_live(groups, target)))
                index[key] = target

        return [group for group in groups if group is not None]

    def pick_richer(self, left: Suggestion, right: Suggestion) -> Suggestion:
        """Merge two suggestions that describe the same work.

        The higher-priority source is the base (``left`` wins ties); missing
        metadata fields are filled from the other record, the longer author
        list wins, and the base year wins when present.
        """
        if self._priority(left) >= self._priority(right):
            base, other = left, right
        else:
            base, other = right, left

        authors = base.authors if len(base.authors) >= len(other.authors) else other.authors
        return replace(
            base,
            metadata=base.metadata.fill_missing(other.metadata),
            authors=authors,
            year=base.year if base.year is not None else other.year,
        )

    def score(self, query: str, suggestion: Suggestion, field: str) -> float:
        """Compute the relevance score of one suggestion for a field-scoped query."""
        citation = citation_score(suggestion.metadata.citation_count)
        priority = float(self._priority(suggestion))

        if field in (TITLE, ANY):
            boost = BOOK_TITLE_BOOST if suggestion.entry_type == BOOK else 0.0
            return title_similarity(query, suggestion.title) * TITLE_WEIGHT + citation + priority + boost
        if field == AUTHOR:
            return author_relevance(query, suggestion.authors) * AUTHOR_WEIGHT + citation * 2 + priority
        if field == PUBLISHER:
            return text_similarity(query, suggestion.metadata.publisher or "") * TEXT_WEIGHT + citation + priority
        if field == JOURNAL:
            return text_similarity(query, suggestion.metadata.journal or "") * TEXT_WEIGHT + citation + priority
        if field == SUBJECT:
            return citation * 2 + priority + SUBJECT_BONUS
        if field == YEAR:
            years = {int(token) for token in _YEAR_TOKEN_RE.findall(query)}
            bonus = YEAR_MATCH_BONUS if suggestion.year is not None and suggestion.year in years else 0.0
            return bonus + citation + priority
        return citation + priority

    def _priority(self, suggestion: Suggestion) -> int:
        return self.source_priority.get(suggestion.source, 0)


_DEFAULT_RANKER = Ranker()


def rank_and_dedupe(query: str, suggestions: Sequence[Suggestion], field: str) -> list[Suggestion]:
    """Rank a pool with the default source-priority table."""
    return _DEFAULT_RANKER.rank_and_dedupe(query, suggestions, field)


def citation_score(citation_count: int | None) -> float:
    """Log-scaled citation impact: ``log10(count + 1) * 10``."""
    count = max(citation_count or 0, 0)
    return math.log10(count + 1) * 10


def normalize_doi(doi: str | None) -> str:
    """Normalize a DOI for matching across providers."""
    if not doi:
        return ""
    return _DOI_PREFIX_RE.sub("", doi.strip().lower()).strip()


def fuzzy_key(suggestion: Suggestion) -> DedupKey:
    """Build the title-prefix + first-author surname + year key."""
    title = _TITLE_KEY_STRIP_RE.sub("", suggestion.title.lower())[:FUZZY_TITLE_PREFIX]
    surname = ""
    if suggestion.authors:
        surname = _SURNAME_STRIP_RE.sub("", suggestion.authors[0].last_name.lower())
    year = str(suggestion.year) if suggestion.year is not None else ""
    return ("fuzzy", title, surname, year)


def _live(groups: list[Suggestion | None], idx: int) -> Suggestion:
    group = groups[idx]
    if group is None:
        raise RuntimeError(f"dedup group {idx} was already folded")
    return group


def _dedup_keys(suggestion: Suggestion) -> list[DedupKey]:
    keys: list[DedupKey] = []
    doi = normalize_doi(suggestion.metadata.doi)
    if doi:
        keys.append(("doi", doi))
    keys.append(fuzzy_key(suggestion))
    return keys


def title_similarity(query: str, title: str) -> float:
    """Score how well ``query`` matches a title, in [0, 1].

    Exact match scores 1.0, a prefix or suffix match 0.9, otherwise the share
    of query words longer than two characters found in the title.
    """
    q = _normalize_title_text(query)
    t = _normalize_title_text(title)

    if q == t:
        return 1.0
    if q and (t.startswith(q) or t.endswith(q)):
        return 0.9

    q_words = {w for w in q.split() if len(w) > 2}
    t_words = {w for w in t.split() if len(w) > 2}
    if not q_words:
        return 0.0
    return len(q_words & t_words) / len(q_words)


def text_similarity(query: str, text: str) -> float:
    """Score a publisher or journal name against the query, in [0, 1]."""
    if not text:
        return 0.0
    q = query.lower().strip()
    t = text.lower().strip()

    if q == t:
        return 1.0
    if q in t or t in q:
        return 0.8

    q_words = {w for w in q.split() if len(w) > 1}
    t_words = {w for w in t.split() if len(w) > 1}
    if not q_words:
        return 0.0
    return len(q_words & t_words) / len(q_words)


def author_relevance(query: str, authors: Sequence[Author]) -> float:
    """Score the best-matching author against a name query, in [0, 1]."""
    if not authors:
        return 0.0

    q = _WS_RE.sub(" ", query.lower().strip())
    q_parts = {w for w in q.split() if len(w) > 1}

    best = 0.0
    for author in authors:
        full_name = _WS_RE.sub(" ", author.full_name.lower().strip())
        if not full_name:
            continue
        if full_name == q:
            return 1.0
        if q and (q in full_name or full_name in q):
            return 0.9
        name_parts = {w for w in full_name.split() if len(w) > 1}
        if q_parts:
            best = max(best, len(q_parts & name_parts) / len(q_parts))
    return best


def _normalize_title_text(text: str) -> str:
    return _TITLE_TEXT_STRIP_RE.sub("", text.lower()).strip()
