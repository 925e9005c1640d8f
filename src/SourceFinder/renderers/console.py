"""Console text output renderers.

Renders suggestions into human-friendly text written through the logger.
"""

from __future__ import annotations

from typing import Iterable

from SourceFinder.core.models import SearchResult, Suggestion
from SourceFinder.renderers.base import OutputWriter
from SourceFinder.utils.log import log


def render_text(suggestions: Iterable[Suggestion], *, start: int = 1) -> str:
    """Render suggestions into a human-readable text block.

    Args:
        suggestions: Iterable of suggestions.
        start: Number of the first suggestion (offset + 1 when paging).

    Returns:
        A formatted string ready to be printed.
    """
    lines: list[str] = []
    for idx, suggestion in enumerate(suggestions, start=start):
        meta = suggestion.metadata
        year = f" ({suggestion.year})" if suggestion.year else ""
        lines.append(f"{idx}. {suggestion.title}{year}")
        if suggestion.authors:
            lines.append(f"   Authors: {', '.join(author.full_name for author in suggestion.authors)}")
        lines.append(f"   Type: {suggestion.entry_type}  Source: {suggestion.source}")
        venue = meta.journal or meta.publisher
        if venue:
            lines.append(f"   Venue: {venue}")
        if meta.doi:
            lines.append(f"   DOI: {meta.doi}")
        if meta.isbn:
            lines.append(f"   ISBN: {meta.isbn}")
        if meta.citation_count is not None:
            lines.append(f"   Cited by: {meta.citation_count}")
        if meta.url:
            lines.append(f"   URL: {meta.url}")
        lines.append("")
    return "\n".join(lines).rstrip() + "\n"


class ConsoleOutputWriter(OutputWriter):
    """Write results to console via logging."""

    def write_search_result(self, result: SearchResult, *, query: str, field: str) -> None:
        more = "+" if result.has_more else ""
        log.info("query=%r field=%s shown=%d total~%d%s", query, field, len(result.suggestions), result.total, more)
        if not result.suggestions:
            log.info("No suggestions found")
            return
        for line in render_text(result.suggestions).splitlines():
            log.info(line)

    def write_lookup_result(self, suggestion: Suggestion | None, *, identifier: str) -> None:
        if suggestion is None:
            log.info("Nothing found for identifier: %s", identifier)
            return
        for line in render_text([suggestion]).splitlines():
            log.info(line)
