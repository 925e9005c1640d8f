"""JSON output renderers.

Renders suggestions and result pages into JSON-serializable objects and writes
them to standard output.
"""

from __future__ import annotations

import json
from typing import Any

import click

from SourceFinder.core.models import SearchResult, Suggestion
from SourceFinder.renderers.base import OutputWriter


def render_suggestion(suggestion: Suggestion) -> dict[str, Any]:
    """Render one suggestion; metadata holds populated fields only."""
    metadata = suggestion.metadata.as_dict()
    for key, value in metadata.items():
        if isinstance(value, tuple):
            metadata[key] = list(value)
    return {
        "id": suggestion.id,
        "source": suggestion.source,
        "title": suggestion.title,
        "authors": [
            {"first_name": author.first_name, "last_name": author.last_name} for author in suggestion.authors
        ],
        "year": suggestion.year,
        "entry_type": suggestion.entry_type,
        "metadata": metadata,
    }


def render_json(result: SearchResult) -> dict[str, Any]:
    """Render a result page into a JSON-serializable dict.

    ``total`` is an estimate, not an exact count.
    """
    return {
        "suggestions": [render_suggestion(suggestion) for suggestion in result.suggestions],
        "total": result.total,
        "has_more": result.has_more,
    }


class JsonStdoutWriter(OutputWriter):
    """Print results as JSON documents on standard output."""

    def __init__(self, indent: int | None = 2) -> None:
        self.indent = indent

    def write_search_result(self, result: SearchResult, *, query: str, field: str) -> None:
        payload = {"query": query, "field": field, **render_json(result)}
        click.echo(json.dumps(payload, ensure_ascii=False, indent=self.indent))

    def write_lookup_result(self, suggestion: Suggestion | None, *, identifier: str) -> None:
        payload = {
            "identifier": identifier,
            "suggestion": render_suggestion(suggestion) if suggestion is not None else None,
        }
        click.echo(json.dumps(payload, ensure_ascii=False, indent=self.indent))
