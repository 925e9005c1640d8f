from __future__ import annotations

import re
from dataclasses import dataclass, replace

ANY = "any"
AUTHOR = "author"
TITLE = "title"
PUBLISHER = "publisher"
JOURNAL = "journal"
SUBJECT = "subject"
YEAR = "year"

FIELD_QUALIFIERS: tuple[str, ...] = (ANY, AUTHOR, TITLE, PUBLISHER, JOURNAL, SUBJECT, YEAR)

_YEAR_RE = re.compile(r"(\d{4})")


@dataclass(frozen=True, slots=True)
class SearchRequest:
    """One search call as issued by a caller.

    The field qualifier is not validated here: an unknown qualifier simply
    matches no source and yields an empty result.

    Attributes:
        query: Raw query text.
        field: Field qualifier, one of ``FIELD_QUALIFIERS``.
        max_results: Page size.
        offset: Pagination cursor.
    """

    query: str
    field: str = ANY
    max_results: int = 10
    offset: int = 0

    def with_max_results(self, max_results: int) -> SearchRequest:
        """Return a copy of this request with a different page size."""
        return replace(self, max_results=max_results)


def parse_year(value: str | None) -> int | None:
    """Return the first four-digit number in ``value``, if any."""
    if not value:
        return None
    match = _YEAR_RE.search(str(value))
    if match is None:
        return None
    return int(match.group(1))
