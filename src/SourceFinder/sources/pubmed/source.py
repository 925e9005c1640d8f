"""PubMed source adapter (NCBI E-utilities, JSON mode)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Sequence

from SourceFinder.core.models import Suggestion
from SourceFinder.core.query import ANY, AUTHOR, JOURNAL, SUBJECT, TITLE, YEAR, SearchRequest
from SourceFinder.sources.base import BaseSource
from SourceFinder.sources.pubmed.parser import parse_esummary

EUTILS_BASE = "https://eutils.ncbi.nlm.nih.gov/entrez/eutils"

_FIELD_TAGS: dict[str, str] = {
    AUTHOR: "AU",
    TITLE: "TI",
    JOURNAL: "TA",
    SUBJECT: "MH",
    YEAR: "DP",
}


def build_pubmed_term(query: str, field: str) -> str:
    """Build an Entrez term with a field tag; unknown fields search all fields."""
    text = query.strip()
    tag = _FIELD_TAGS.get(field)
    return f"{text}[{tag}]" if tag else text


@dataclass(slots=True)
class PubmedSource(BaseSource):
    """PubMed-backed source adapter: esearch for PMIDs, then esummary."""

    tool: str = "sourcefinder"
    email: str | None = None

    name: ClassVar[str] = "pubmed"
    supported_fields: ClassVar[frozenset[str]] = frozenset({ANY, TITLE, AUTHOR, JOURNAL, SUBJECT, YEAR})

    def _search(self, request: SearchRequest) -> list[Suggestion]:
        payload = self.client.get_json(
            f"{EUTILS_BASE}/esearch.fcgi",
            params={
                **self._identity(),
                "db": "pubmed",
                "term": build_pubmed_term(request.query, request.field),
                "retmax": str(request.max_results),
                "retstart": str(request.offset),
                "retmode": "json",
                "sort": "relevance",
            },
        )
        search_result = payload.get("esearchresult", {})
        pmids = search_result.get("idlist", []) if isinstance(search_result, dict) else []
        pmids = [str(pmid) for pmid in pmids if str(pmid).strip()]
        if not pmids:
            return []
        return self._summaries(pmids)

    def lookup_pmid(self, pmid: str) -> Suggestion | None:
        """Resolve one PMID to a suggestion; ``None`` when unknown or on failure."""
        return self._lookup("pmid", self._fetch_pmid, pmid.strip())

    def _fetch_pmid(self, pmid: str) -> Suggestion | None:
        suggestions = self._summaries([pmid])
        return suggestions[0] if suggestions else None

    def _summaries(self, pmids: Sequence[str]) -> list[Suggestion]:
        payload = self.client.get_json(
            f"{EUTILS_BASE}/esummary.fcgi",
            params={**self._identity(), "db": "pubmed", "id": ",".join(pmids), "retmode": "json"},
        )
        result = payload.get("result")
        if not isinstance(result, dict):
            return []
        return parse_esummary(result, pmids)

    def _identity(self) -> dict[str, str]:
        identity = {"tool": self.tool}
        if self.email:
            identity["email"] = self.email
        return identity
