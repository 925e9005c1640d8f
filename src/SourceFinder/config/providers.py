"""Provider domain configuration: identity sent to upstream APIs and keys."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from SourceFinder.config.common import expect_optional_str, expect_str, get_section
from SourceFinder.sources.http import DEFAULT_USER_AGENT


@dataclass(frozen=True, slots=True)
class ProviderConfig:
    """Store provider identity settings.

    Attributes:
        user_agent: User-Agent header for every provider request.
        mailto: Contact address for polite-pool access (OpenAlex, NCBI).
        google_books_api_key_env: Environment variable holding the optional
            Google Books API key.
    """

    user_agent: str
    mailto: str | None
    google_books_api_key_env: str


def load_providers(raw: Mapping[str, Any]) -> ProviderConfig:
    section = get_section(raw, "providers", required=False)
    return ProviderConfig(
        user_agent=expect_str(section.get("user_agent", DEFAULT_USER_AGENT), "providers.user_agent").strip(),
        mailto=expect_optional_str(section.get("mailto"), "providers.mailto"),
        google_books_api_key_env=expect_str(
            section.get("google_books_api_key_env", "GOOGLE_BOOKS_API_KEY"),
            "providers.google_books_api_key_env",
        ).strip(),
    )


def check_providers(config: ProviderConfig) -> None:
    if not config.user_agent:
        raise ValueError("providers.user_agent must not be empty")
    if not config.google_books_api_key_env:
        raise ValueError("providers.google_books_api_key_env must not be empty")
    if config.mailto is not None and "@" not in config.mailto:
        raise ValueError("providers.mailto must be an email address")
