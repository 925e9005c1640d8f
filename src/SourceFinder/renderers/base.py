"""Base class for output writers.

Separates command control flow from how results are shown.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from SourceFinder.core.models import SearchResult, Suggestion


class OutputWriter(ABC):
    """Abstract base class for command output writers."""

    @abstractmethod
    def write_search_result(self, result: SearchResult, *, query: str, field: str) -> None:
        """Write one ranked result page.

        Args:
            result: Result page returned by the router.
            query: Query text that produced it.
            field: Field qualifier the query was scoped to.
        """

    @abstractmethod
    def write_lookup_result(self, suggestion: Suggestion | None, *, identifier: str) -> None:
        """Write the outcome of one identifier lookup."""
