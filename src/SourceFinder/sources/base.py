"""Common adapter behavior for JSON-backed sources."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, ClassVar

from SourceFinder.core.models import Suggestion
from SourceFinder.core.query import SearchRequest
from SourceFinder.sources.http import JsonApiClient
from SourceFinder.utils.log import log


@dataclass(slots=True)
class BaseSource:
    """Base for source adapters that never raise.

    Subclasses implement ``_search``; this class turns any provider failure
    (network error, timeout, non-success status, malformed payload) into an
    empty list and a warning.
    """

    client: JsonApiClient

    name: ClassVar[str] = "unknown"
    supported_fields: ClassVar[frozenset[str]] = frozenset()

    def search(self, request: SearchRequest) -> list[Suggestion]:
        """Search the provider; returns ``[]`` on any failure."""
        try:
            suggestions = self._search(request)
        except Exception as error:  # noqa: BLE001 - provider failure must be isolated
            log.warning("Source search failed: source=%s field=%s error=%s", self.name, request.field, error)
            return []
        log.debug("Source search ok: source=%s field=%s count=%d", self.name, request.field, len(suggestions))
        return suggestions

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self.client.close()

    def _search(self, request: SearchRequest) -> list[Suggestion]:
        raise NotImplementedError

    def _lookup(self, kind: str, func: Callable[..., Suggestion | None], *args: Any) -> Suggestion | None:
        """Run a single-record lookup, returning ``None`` on any failure."""
        try:
            return func(*args)
        except Exception as error:  # noqa: BLE001 - provider failure must be isolated
            log.warning("Source lookup failed: source=%s kind=%s error=%s", self.name, kind, error)
            return None
