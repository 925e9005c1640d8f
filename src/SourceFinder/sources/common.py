"""Payload helpers shared by provider parsers."""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any, Iterable, Mapping

from SourceFinder.core.models import Author, Suggestion
from SourceFinder.utils.log import log

_TAG_RE = re.compile(r"<[^>]+>")
_WHITESPACE_RE = re.compile(r"\s+")


def parse_records(
    items: Iterable[Any],
    parse_one: Callable[[Mapping[str, Any]], Suggestion | None],
    *,
    source: str,
) -> list[Suggestion]:
    """Parse a provider batch, skipping records that are malformed or untitled."""
    suggestions: list[Suggestion] = []
    skipped = 0
    for item in items:
        if not isinstance(item, Mapping):
            skipped += 1
            continue
        try:
            suggestion = parse_one(item)
        except (TypeError, ValueError, AttributeError) as error:
            log.debug("Skipping malformed record: source=%s error=%s", source, error)
            suggestion = None
        if suggestion is None:
            skipped += 1
            continue
        suggestions.append(suggestion)
    if skipped:
        log.debug("Skipped records: source=%s count=%d", source, skipped)
    return suggestions


def split_display_name(name: Any) -> Author | None:
    """Split "Given Middle Family" into an author; a single token is a last name."""
    parts = safe_str(name).split()
    if not parts:
        return None
    if len(parts) == 1:
        return Author(first_name="", last_name=parts[0])
    return Author(first_name=" ".join(parts[:-1]), last_name=parts[-1])


def authors_from_names(names: Any) -> tuple[Author, ...]:
    """Map a list of display names to authors, dropping empty entries."""
    if not isinstance(names, list):
        return ()
    authors = (split_display_name(name) for name in names)
    return tuple(author for author in authors if author is not None)


def first_text(value: Any) -> str:
    """Return the first non-empty string from a scalar or list value."""
    if isinstance(value, list):
        for item in value:
            text = safe_str(item)
            if text:
                return text
        return ""
    return safe_str(value)


def strip_markup(text: str) -> str:
    """Remove XML/HTML tags and normalize whitespace."""
    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", _TAG_RE.sub(" ", text)).strip()


def safe_str(value: Any) -> str:
    """Convert a scalar value to a stripped string; other types become ""."""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


def safe_int(value: Any) -> int | None:
    """Return ``value`` when it is a real integer (not a bool)."""
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def as_mapping(value: Any) -> Mapping[str, Any]:
    """Return ``value`` if it is a mapping, else an empty mapping."""
    return value if isinstance(value, Mapping) else {}
