"""Crossref API client."""

from __future__ import annotations

from typing import Any, Mapping
from urllib.parse import quote

from SourceFinder.sources.http import JsonApiClient

CROSSREF_API = "https://api.crossref.org"


class CrossrefApiClient(JsonApiClient):
    """HTTP client for the Crossref REST API ``/works`` endpoints."""

    def fetch_works(self, *, params: Mapping[str, str]) -> list[dict[str, Any]]:
        """Fetch work items matching compiled query parameters.

        Args:
            params: Compiled Crossref parameters (``rows``, ``offset``, ``query.*``, ``filter``).

        Returns:
            List of Crossref work item mappings.
        """
        payload = self.get_json(f"{CROSSREF_API}/works", params=params)
        message = payload.get("message", {})
        items = message.get("items", []) if isinstance(message, dict) else []
        if not isinstance(items, list):
            return []
        return [item for item in items if isinstance(item, dict)]

    def fetch_work(self, doi: str) -> dict[str, Any] | None:
        """Fetch a single work by DOI."""
        payload = self.get_json(f"{CROSSREF_API}/works/{quote(doi, safe='')}")
        message = payload.get("message")
        return message if isinstance(message, dict) else None
