"""Single-record resolution for DOIs, ISBNs and PubMed IDs."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Sequence

from SourceFinder.core.models import Suggestion
from SourceFinder.utils.log import log

DOI = "doi"
ISBN = "isbn"
PMID = "pmid"

_DOI_RE = re.compile(r"^10\.\d{4,9}/\S+$", re.IGNORECASE)
_DOI_URL_RE = re.compile(r"^(?:https?://)?(?:dx\.)?doi\.org/(10\.\d{4,9}/\S+)$", re.IGNORECASE)
_ISBN_RE = re.compile(r"^[0-9Xx]+$")
_ISBN_SEPARATORS_RE = re.compile(r"[-\s]")
_PMID_RE = re.compile(r"^\d{5,12}$")
_PUBMED_URL_RE = re.compile(r"pubmed\.ncbi\.nlm\.nih\.gov/(\d+)", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class Identifier:
    """A recognized identifier.

    Attributes:
        kind: One of ``doi``, ``isbn`` or ``pmid``.
        value: Normalized identifier value (bare DOI, ISBN without separators,
            numeric PMID).
    """

    kind: str
    value: str


def detect_identifier(text: str) -> Identifier | None:
    """Classify ``text`` as a DOI, ISBN or PMID.

    Checks run in that order, so a ten-digit number is read as an ISBN.
    """
    value = text.strip()
    if not value:
        return None

    if _DOI_RE.match(value):
        return Identifier(kind=DOI, value=value)
    match = _DOI_URL_RE.match(value)
    if match:
        return Identifier(kind=DOI, value=match.group(1))

    match = _PUBMED_URL_RE.search(value)
    if match:
        return Identifier(kind=PMID, value=match.group(1))

    numeric = _ISBN_SEPARATORS_RE.sub("", value)
    if len(numeric) in (10, 13) and _ISBN_RE.match(numeric):
        return Identifier(kind=ISBN, value=numeric.upper())

    if _PMID_RE.match(value):
        return Identifier(kind=PMID, value=value)
    return None


_LOOKUP_METHODS = {
    DOI: "lookup_doi",
    ISBN: "lookup_isbn",
    PMID: "lookup_pmid",
}


@dataclass(slots=True)
class IdentifierLookup:
    """Resolve identifiers against the configured sources that can look them up.

    Sources are tried in registration order; the first hit wins.
    """

    sources: Sequence[object]

    def resolve(self, text: str) -> Suggestion | None:
        """Resolve ``text`` to one suggestion.

        Returns:
            The resolved suggestion, or ``None`` when the text is not an
            identifier, no configured source can resolve its kind, or nothing
            was found.
        """
        identifier = detect_identifier(text)
        if identifier is None:
            log.debug("Not an identifier: %r", text)
            return None

        method_name = _LOOKUP_METHODS[identifier.kind]
        resolvers = [source for source in self.sources if callable(getattr(source, method_name, None))]
        if not resolvers:
            log.info("No source can resolve identifier kind=%s", identifier.kind)
            return None

        for source in resolvers:
            suggestion = getattr(source, method_name)(identifier.value)
            if suggestion is not None:
                log.info(
                    "Identifier resolved: kind=%s value=%s source=%s",
                    identifier.kind,
                    identifier.value,
                    getattr(source, "name", "unknown"),
                )
                return suggestion
        log.info("Identifier not found: kind=%s value=%s", identifier.kind, identifier.value)
        return None
