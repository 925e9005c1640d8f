"""Tests for layered config parsing and validation."""

from __future__ import annotations

import sys
import tempfile
import unittest
from copy import deepcopy
from pathlib import Path
from unittest.mock import patch

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from SourceFinder.config import (
    DEFAULT_CONFIG_PATH,
    load_config_with_defaults,
    merge_config_dicts,
    parse_config_dict,
)
from SourceFinder.services import create_search_service
from SourceFinder.services.ranker import SOURCE_PRIORITY


def _base_raw_config() -> dict:
    return {
        "log": {"level": "info", "to_file": False, "dir": "log"},
        "search": {
            "sources": ["openalex", "crossref"],
            "max_results": 10,
            "source_timeout": 8,
            "request_timeout": 20.0,
            "overfetch_factor": 1.5,
            "total_multiplier": 3,
            "max_workers": None,
        },
        "providers": {"user_agent": "test-agent", "mailto": "me@example.org"},
        "ranking": {"source_priority": {"LOC": 7}},
        "output": {"format": "json"},
    }


class TestConfigParsing(unittest.TestCase):
    def test_parses_all_domains(self) -> None:
        config = parse_config_dict(_base_raw_config())

        self.assertEqual(config.runtime.level, "INFO")
        self.assertFalse(config.runtime.http_debug)
        self.assertEqual(config.search.sources, ("openalex", "crossref"))
        self.assertEqual(config.search.source_timeout, 8.0)
        self.assertIsNone(config.search.max_workers)
        self.assertEqual(config.providers.mailto, "me@example.org")
        self.assertEqual(config.providers.google_books_api_key_env, "GOOGLE_BOOKS_API_KEY")
        self.assertEqual(config.ranking.source_priority["loc"], 7)
        self.assertEqual(config.ranking.source_priority["openalex"], SOURCE_PRIORITY["openalex"])
        self.assertEqual(config.output.format, "json")

    def test_sources_are_normalized_and_deduplicated(self) -> None:
        raw = _base_raw_config()
        raw["search"]["sources"] = [" OpenAlex", "openalex", "", "loc"]

        self.assertEqual(parse_config_dict(raw).search.sources, ("openalex", "loc"))

    def test_unknown_source_is_rejected(self) -> None:
        raw = _base_raw_config()
        raw["search"]["sources"] = ["arxiv"]

        with self.assertRaisesRegex(ValueError, "search.sources has unknown source: arxiv"):
            parse_config_dict(raw)

    def test_invalid_values_name_the_config_key(self) -> None:
        cases = [
            (("search", "request_timeout"), "soon", TypeError, "search.request_timeout"),
            (("search", "request_timeout"), 0, ValueError, "search.request_timeout"),
            (("search", "overfetch_factor"), 0.5, ValueError, "search.overfetch_factor"),
            (("search", "max_workers"), 0, ValueError, "search.max_workers"),
            (("search", "max_results"), True, TypeError, "search.max_results"),
            (("log", "level"), "LOUD", ValueError, "log.level"),
            (("output", "format"), "html", ValueError, "output.format"),
            (("providers", "mailto"), "nobody", ValueError, "providers.mailto"),
        ]
        for (section, key), value, error, message in cases:
            with self.subTest(key=f"{section}.{key}"):
                raw = deepcopy(_base_raw_config())
                raw[section][key] = value
                with self.assertRaisesRegex(error, message):
                    parse_config_dict(raw)

    def test_missing_search_section(self) -> None:
        raw = _base_raw_config()
        del raw["search"]

        with self.assertRaisesRegex(ValueError, "Missing required config: search"):
            parse_config_dict(raw)

    def test_negative_priority_is_rejected(self) -> None:
        raw = _base_raw_config()
        raw["ranking"]["source_priority"] = {"crossref": -1}

        with self.assertRaisesRegex(ValueError, "ranking.source_priority.crossref"):
            parse_config_dict(raw)


class TestConfigLayering(unittest.TestCase):
    def test_bundled_defaults_are_valid(self) -> None:
        config = load_config_with_defaults()

        self.assertEqual(len(config.search.sources), 7)
        self.assertEqual(config.search.overfetch_factor, 1.5)
        self.assertEqual(config.output.format, "console")

    def test_override_file_is_deep_merged(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            override = Path(tmp) / "override.yml"
            override.write_text("search:\n  sources: [crossref]\n  max_results: 5\noutput:\n  format: json\n", encoding="utf-8")

            config = load_config_with_defaults(override, default_path=DEFAULT_CONFIG_PATH)

        self.assertEqual(config.search.sources, ("crossref",))
        self.assertEqual(config.search.max_results, 5)
        self.assertEqual(config.search.request_timeout, 20.0)
        self.assertEqual(config.output.format, "json")

    def test_merge_replaces_lists_and_merges_mappings(self) -> None:
        merged = merge_config_dicts(
            {"a": {"x": 1, "y": [1, 2]}, "b": 1},
            {"a": {"y": [3]}, "c": 2},
        )

        self.assertEqual(merged, {"a": {"x": 1, "y": [3]}, "b": 1, "c": 2})


class TestCreateSearchService(unittest.TestCase):
    def test_router_is_built_from_config(self) -> None:
        raw = _base_raw_config()
        raw["search"]["sources"] = ["loc", "google_books", "openalex"]
        raw["search"]["max_workers"] = 2
        config = parse_config_dict(raw)

        with patch.dict("os.environ", {"GOOGLE_BOOKS_API_KEY": "secret"}):
            router = create_search_service(config)
        try:
            self.assertEqual([source.name for source in router.sources], ["loc", "google_books", "openalex"])
            self.assertEqual(router.sources[1].api_key, "secret")
            self.assertEqual(router.sources[2].mailto, "me@example.org")
            self.assertEqual(router.sources[0].client.timeout, 8.0)
            self.assertEqual(router.max_workers, 2)
            self.assertEqual(router.ranker.source_priority["loc"], 7)
        finally:
            router.close()


if __name__ == "__main__":
    unittest.main()
