from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from dataclasses import fields
from types import MappingProxyType
from typing import Any, Mapping, Optional, Sequence

BOOK = "book"
JOURNAL_ARTICLE = "journal_article"
CONFERENCE_PAPER = "conference_paper"
THESIS = "thesis"
REPORT = "report"
WEBSITE = "website"
NEWSPAPER_ARTICLE = "newspaper_article"
MAGAZINE_ARTICLE = "magazine_article"
VIDEO = "video"
PODCAST = "podcast"
INTERVIEW = "interview"
LEGAL_DOCUMENT = "legal_document"
PATENT = "patent"
DATASET = "dataset"
SOFTWARE = "software"
CUSTOM = "custom"

ENTRY_TYPES = frozenset(
    {
        BOOK,
        JOURNAL_ARTICLE,
        CONFERENCE_PAPER,
        THESIS,
        REPORT,
        WEBSITE,
        NEWSPAPER_ARTICLE,
        MAGAZINE_ARTICLE,
        VIDEO,
        PODCAST,
        INTERVIEW,
        LEGAL_DOCUMENT,
        PATENT,
        DATASET,
        SOFTWARE,
        CUSTOM,
    }
)


@dataclass(frozen=True, slots=True)
class Author:
    """One contributor of a bibliographic record.

    Attributes:
        first_name: Given name(s); may be empty when a provider only has one token.
        last_name: Family name used for fuzzy matching and display.
    """

    first_name: str
    last_name: str

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part).strip()


@dataclass(frozen=True, slots=True)
class EntryMetadata:
    """Provider-agnostic optional metadata for a suggestion.

    Well-known fields are typed attributes. Anything a provider returns that has
    not been promoted to a first-class field goes into ``extra``.

    Attributes:
        doi: Digital Object Identifier, as returned by the provider.
        isbn: ISBN-10 or ISBN-13.
        issn: ISSN of the containing serial.
        url: Landing page URL.
        abstract: Abstract or description text.
        publisher: Publisher name.
        journal: Journal or container title.
        volume: Volume.
        issue: Issue.
        pages: Page range or page count.
        edition: Edition statement.
        series: Series title.
        language: Language code or name.
        citation_count: Number of citing works known to the provider.
        extra: Extension point for provider-specific fields.
    """

    doi: Optional[str] = None
    isbn: Optional[str] = None
    issn: Optional[str] = None
    url: Optional[str] = None
    abstract: Optional[str] = None
    publisher: Optional[str] = None
    journal: Optional[str] = None
    volume: Optional[str] = None
    issue: Optional[str] = None
    pages: Optional[str] = None
    edition: Optional[str] = None
    series: Optional[str] = None
    language: Optional[str] = None
    citation_count: Optional[int] = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "extra", MappingProxyType(dict(self.extra)))

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> EntryMetadata:
        """Build metadata from a flat mapping, routing unknown keys to ``extra``.

        ``None`` and empty-string values are treated as absent.
        """
        known = {f.name for f in fields(cls) if f.name != "extra"}
        typed: dict[str, Any] = {}
        extra: dict[str, Any] = {}
        for key, value in values.items():
            if value is None or value == "":
                continue
            if key in known:
                typed[key] = value
            else:
                extra[key] = value
        return cls(**typed, extra=extra)

    def as_dict(self) -> dict[str, Any]:
        """Return populated fields only, with ``extra`` flattened in."""
        out: dict[str, Any] = {}
        for f in fields(self):
            if f.name == "extra":
                continue
            value = getattr(self, f.name)
            if value is not None:
                out[f.name] = value
        for key, value in self.extra.items():
            out.setdefault(key, value)
        return out

    def fill_missing(self, other: EntryMetadata) -> EntryMetadata:
        """Return a copy where every field this metadata lacks is taken from ``other``."""
        merged = other.as_dict()
        merged.update(self.as_dict())
        return EntryMetadata.from_mapping(merged)


@dataclass(frozen=True, slots=True)
class Suggestion:
    """Normalized candidate record produced by one provider.

    This is the unified format that every source adapter maps to and that the
    ranker deduplicates and scores. Instances are never mutated; merging two
    suggestions yields a new one.

    Attributes:
        id: Provider-scoped identifier.
        source: Name of the producing provider (e.g. "crossref").
        title: Record title, never empty.
        authors: Ordered authors, possibly empty.
        year: Publication year if known.
        entry_type: One of ``ENTRY_TYPES``.
        metadata: Optional provider-agnostic metadata.
    """

    id: str
    source: str
    title: str
    authors: Sequence[Author] = ()
    year: Optional[int] = None
    entry_type: str = JOURNAL_ARTICLE
    metadata: EntryMetadata = EntryMetadata()

    def __post_init__(self) -> None:
        if not isinstance(self.title, str) or not self.title.strip():
            raise ValueError("Suggestion title must not be empty")
        if self.entry_type not in ENTRY_TYPES:
            raise ValueError(f"Unknown entry type: {self.entry_type}")
        object.__setattr__(self, "authors", tuple(self.authors))


@dataclass(frozen=True, slots=True)
class SearchResult:
    """One ranked page of suggestions.

    ``total`` is an estimate and must not be treated as an exact pagination
    count.
    """

    suggestions: Sequence[Suggestion]
    total: int
    has_more: bool

    @classmethod
    def empty(cls) -> SearchResult:
        return cls(suggestions=(), total=0, has_more=False)
