"""Tests for the click command-line interface."""

from __future__ import annotations

import json
import sys
import unittest
from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from SourceFinder.cli import cli
from SourceFinder.core.models import Author, EntryMetadata, Suggestion
from SourceFinder.core.query import FIELD_QUALIFIERS, SearchRequest

QUIET_JSON_CONFIG = "log:\n  level: WARNING\noutput:\n  format: json\n"


def _record(title: str, **metadata) -> Suggestion:
    return Suggestion(
        id=f"id-{title}",
        source="crossref",
        title=title,
        authors=(Author(first_name="Robert", last_name="Caro"),),
        year=1974,
        entry_type="book",
        metadata=EntryMetadata.from_mapping(metadata),
    )


class _StubSource:
    name = "crossref"
    supported_fields = frozenset(FIELD_QUALIFIERS)

    def __init__(self, suggestions: list[Suggestion]) -> None:
        self.suggestions = suggestions
        self.requests: list[SearchRequest] = []
        self.closed = False

    def search(self, request: SearchRequest) -> list[Suggestion]:
        self.requests.append(request)
        return list(self.suggestions)

    def lookup_doi(self, doi: str) -> Suggestion | None:
        return self.suggestions[0] if doi == "10.1000/pb" else None

    def close(self) -> None:
        self.closed = True


class TestCli(unittest.TestCase):
    def setUp(self) -> None:
        self.runner = CliRunner()

    def test_search_prints_ranked_suggestions(self) -> None:
        stub = _StubSource([_record("The Power Broker", doi="10.1000/pb", citation_count=1200)])
        with patch("SourceFinder.sources.registry.build_sources", return_value=[stub]):
            result = self.runner.invoke(cli, ["search", "The Power Broker", "--field", "title"])

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("1. The Power Broker (1974)", result.output)
        self.assertIn("DOI: 10.1000/pb", result.output)
        self.assertTrue(stub.closed)
        self.assertEqual(stub.requests[0].max_results, 15)

    def test_search_json_output(self) -> None:
        stub = _StubSource([_record("The Power Broker", isbn="9780394480763")])
        with self.runner.isolated_filesystem():
            Path("quiet.yml").write_text(QUIET_JSON_CONFIG, encoding="utf-8")
            with patch("SourceFinder.sources.registry.build_sources", return_value=[stub]):
                result = self.runner.invoke(
                    cli,
                    ["--config", "quiet.yml", "search", "power", "--max-results", "4", "--offset", "8"],
                )

        self.assertEqual(result.exit_code, 0, result.output)
        payload = json.loads(result.stdout)
        self.assertEqual(payload["query"], "power")
        self.assertEqual(payload["field"], "any")
        self.assertEqual(payload["total"], 1)
        self.assertFalse(payload["has_more"])
        suggestion = payload["suggestions"][0]
        self.assertEqual(suggestion["authors"], [{"first_name": "Robert", "last_name": "Caro"}])
        self.assertEqual(suggestion["metadata"], {"isbn": "9780394480763"})
        self.assertEqual(stub.requests[0].max_results, 6)
        self.assertEqual(stub.requests[0].offset, 8)

    def test_unknown_field_is_rejected(self) -> None:
        result = self.runner.invoke(cli, ["search", "x", "--field", "abstract"])

        self.assertNotEqual(result.exit_code, 0)

    def test_lookup_resolves_doi(self) -> None:
        stub = _StubSource([_record("The Power Broker")])
        with self.runner.isolated_filesystem():
            Path("quiet.yml").write_text(QUIET_JSON_CONFIG, encoding="utf-8")
            with patch("SourceFinder.sources.registry.build_sources", return_value=[stub]):
                result = self.runner.invoke(cli, ["--config", "quiet.yml", "lookup", "https://doi.org/10.1000/pb"])

        self.assertEqual(result.exit_code, 0, result.output)
        payload = json.loads(result.stdout)
        self.assertEqual(payload["suggestion"]["title"], "The Power Broker")
        self.assertTrue(stub.closed)

    def test_service_failure_aborts(self) -> None:
        with patch("SourceFinder.sources.registry.build_sources", side_effect=ValueError("bad source")):
            result = self.runner.invoke(cli, ["search", "x"])

        self.assertEqual(result.exit_code, 1)
        self.assertIn("Search failed: bad source", result.output)


if __name__ == "__main__":
    unittest.main()
