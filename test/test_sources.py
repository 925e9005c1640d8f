"""Tests for provider adapters: query translation, payload parsing and failure isolation."""

from __future__ import annotations

import sys
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

import requests

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from SourceFinder.core.models import BOOK, JOURNAL_ARTICLE, MAGAZINE_ARTICLE, NEWSPAPER_ARTICLE, VIDEO
from SourceFinder.core.query import ANY, AUTHOR, JOURNAL, PUBLISHER, SUBJECT, TITLE, YEAR, SearchRequest
from SourceFinder.sources.crossref.client import CrossrefApiClient
from SourceFinder.sources.crossref.query import compile_crossref_params
from SourceFinder.sources.crossref.source import CrossrefSource
from SourceFinder.sources.google_books.source import GoogleBooksSource, compile_google_books_params
from SourceFinder.sources.http import JsonApiClient
from SourceFinder.sources.loc.parser import map_loc_format, parse_contributors
from SourceFinder.sources.loc.source import LocSource, compile_loc_params
from SourceFinder.sources.openalex.source import OpenAlexSource, compile_openalex_params
from SourceFinder.sources.openlibrary.source import OpenLibrarySource, compile_openlibrary_params
from SourceFinder.sources.pubmed.source import PubmedSource, build_pubmed_term
from SourceFinder.sources.semantic_scholar.source import SemanticScholarSource, compile_s2_params

CROSSREF_ITEM = {
    "DOI": "10.1000/pb",
    "URL": "https://doi.org/10.1000/pb",
    "title": ["The Power Broker"],
    "author": [{"given": "Robert A.", "family": "Caro"}, {"name": "Editorial Board"}],
    "issued": {"date-parts": [[1974, 9, 16]]},
    "type": "book",
    "publisher": "Knopf",
    "is-referenced-by-count": 1200,
    "abstract": "<jats:p>Robert Moses and the fall of New York.</jats:p>",
}

OPENALEX_WORK = {
    "id": "https://openalex.org/W2919115771",
    "title": "Deep learning",
    "doi": "https://doi.org/10.1038/nature14539",
    "publication_year": 2015,
    "cited_by_count": 50000,
    "type": "article",
    "authorships": [{"author": {"display_name": "Yann LeCun"}}, {"author": {"display_name": "Geoffrey Hinton"}}],
    "primary_location": {
        "landing_page_url": "https://www.nature.com/articles/nature14539",
        "source": {"display_name": "Nature", "host_organization_name": "Springer Nature"},
    },
    "biblio": {"volume": "521", "issue": "7553"},
}


def _client(payload: dict | None = None, *, spec: type = JsonApiClient) -> MagicMock:
    client = MagicMock(spec=spec)
    client.get_json.return_value = payload or {}
    return client


class TestCrossrefSource(unittest.TestCase):
    def test_field_parameters(self) -> None:
        self.assertEqual(
            compile_crossref_params(SearchRequest(query=" Caro ", field=AUTHOR, max_results=15, offset=5)),
            {"rows": "15", "offset": "5", "query.author": "Caro"},
        )
        self.assertIn("query.container-title", compile_crossref_params(SearchRequest(query="Nature", field=JOURNAL)))
        self.assertIn("query.publisher-name", compile_crossref_params(SearchRequest(query="Knopf", field=PUBLISHER)))
        self.assertIn("query", compile_crossref_params(SearchRequest(query="power", field=ANY)))

    def test_year_becomes_publication_date_filter(self) -> None:
        params = compile_crossref_params(SearchRequest(query="published in 1974", field=YEAR))

        self.assertEqual(params["filter"], "from-pub-date:1974,until-pub-date:1974")
        self.assertNotIn("query", params)

    def test_search_parses_items_and_skips_untitled(self) -> None:
        client = MagicMock(spec=CrossrefApiClient)
        client.fetch_works.return_value = [CROSSREF_ITEM, {"DOI": "10.1/untitled", "title": []}, "junk"]
        source = CrossrefSource(client=client)

        results = source.search(SearchRequest(query="power broker", field=TITLE))

        self.assertEqual(len(results), 1)
        record = results[0]
        self.assertEqual(record.source, "crossref")
        self.assertEqual(record.id, "10.1000/pb")
        self.assertEqual(record.year, 1974)
        self.assertEqual(record.entry_type, BOOK)
        self.assertEqual([author.last_name for author in record.authors], ["Caro", "Editorial Board"])
        self.assertEqual(record.metadata.citation_count, 1200)
        self.assertEqual(record.metadata.abstract, "Robert Moses and the fall of New York.")

    def test_year_falls_back_to_date_time(self) -> None:
        client = MagicMock(spec=CrossrefApiClient)
        client.fetch_works.return_value = [{"title": ["X"], "created": {"date-time": "2019-05-01T10:00:00Z"}}]

        results = CrossrefSource(client=client).search(SearchRequest(query="x"))

        self.assertEqual(results[0].year, 2019)
        self.assertEqual(results[0].entry_type, JOURNAL_ARTICLE)

    def test_provider_failure_yields_empty_list(self) -> None:
        client = MagicMock(spec=CrossrefApiClient)
        client.fetch_works.side_effect = requests.ConnectionError("boom")

        self.assertEqual(CrossrefSource(client=client).search(SearchRequest(query="x")), [])

    def test_lookup_doi_strips_resolver_prefix(self) -> None:
        client = MagicMock(spec=CrossrefApiClient)
        client.fetch_work.return_value = CROSSREF_ITEM

        record = CrossrefSource(client=client).lookup_doi("https://doi.org/10.1000/pb")

        client.fetch_work.assert_called_once_with("10.1000/pb")
        self.assertEqual(record.title, "The Power Broker")

    def test_lookup_failure_returns_none(self) -> None:
        client = MagicMock(spec=CrossrefApiClient)
        client.fetch_work.side_effect = requests.Timeout("slow")

        self.assertIsNone(CrossrefSource(client=client).lookup_doi("10.1/x"))


class TestOpenAlexSource(unittest.TestCase):
    def test_field_filters_and_paging(self) -> None:
        params = compile_openalex_params(
            SearchRequest(query="Nature", field=JOURNAL, max_results=10, offset=20),
            mailto="me@example.org",
        )

        self.assertEqual(params["filter"], "primary_location.source.display_name.search:Nature")
        self.assertEqual(params["page"], "3")
        self.assertEqual(params["per_page"], "10")
        self.assertEqual(params["mailto"], "me@example.org")
        self.assertNotIn("search", params)

    def test_year_filter(self) -> None:
        params = compile_openalex_params(SearchRequest(query="2015", field=YEAR))

        self.assertEqual(params["filter"], "publication_year:2015")

    def test_search_parses_works(self) -> None:
        client = _client({"results": [OPENALEX_WORK, {"title": ""}]})

        results = OpenAlexSource(client=client).search(SearchRequest(query="deep learning"))

        self.assertEqual(len(results), 1)
        record = results[0]
        self.assertEqual(record.metadata.doi, "10.1038/nature14539")
        self.assertEqual(record.metadata.journal, "Nature")
        self.assertEqual(record.metadata.publisher, "Springer Nature")
        self.assertEqual(record.metadata.volume, "521")
        self.assertEqual(record.authors[0].first_name, "Yann")
        self.assertEqual(record.authors[0].last_name, "LeCun")
        self.assertEqual(record.entry_type, JOURNAL_ARTICLE)

    def test_supports_every_field(self) -> None:
        for field in (ANY, TITLE, AUTHOR, PUBLISHER, JOURNAL, SUBJECT, YEAR):
            self.assertIn(field, OpenAlexSource.supported_fields)


class TestPubmedSource(unittest.TestCase):
    def test_term_uses_field_tags(self) -> None:
        self.assertEqual(build_pubmed_term("Caro R", AUTHOR), "Caro R[AU]")
        self.assertEqual(build_pubmed_term("Lancet", JOURNAL), "Lancet[TA]")
        self.assertEqual(build_pubmed_term("malaria", ANY), "malaria")

    def test_search_runs_esearch_then_esummary(self) -> None:
        client = MagicMock(spec=JsonApiClient)
        client.get_json.side_effect = [
            {"esearchresult": {"idlist": ["31452104", "999"]}},
            {
                "result": {
                    "uids": ["31452104", "999"],
                    "31452104": {
                        "title": "Malaria vaccines since 2000.",
                        "authors": [{"name": "Doe JA", "authtype": "Author"}, {"name": "Consortium", "authtype": "CollectiveName"}],
                        "pubdate": "2019 Oct",
                        "fulljournalname": "The Lancet",
                        "articleids": [{"idtype": "doi", "value": "10.1016/xyz"}],
                    },
                    "999": {"error": "cannot get document summary"},
                }
            },
        ]
        source = PubmedSource(client=client, email="me@example.org")

        results = source.search(SearchRequest(query="malaria", max_results=15))

        self.assertEqual(len(results), 1)
        record = results[0]
        self.assertEqual(record.id, "pmid-31452104")
        self.assertEqual(record.title, "Malaria vaccines since 2000")
        self.assertEqual(record.year, 2019)
        self.assertEqual(record.authors[0].last_name, "Doe")
        self.assertEqual(record.authors[0].first_name, "JA")
        self.assertEqual(len(record.authors), 1)
        self.assertEqual(record.metadata.doi, "10.1016/xyz")
        self.assertEqual(record.metadata.extra["pmid"], "31452104")

        esearch_params = client.get_json.call_args_list[0].kwargs["params"]
        self.assertEqual(esearch_params["retmax"], "15")
        self.assertEqual(esearch_params["email"], "me@example.org")

    def test_empty_idlist_skips_esummary(self) -> None:
        client = _client({"esearchresult": {"idlist": []}})

        self.assertEqual(PubmedSource(client=client).search(SearchRequest(query="nothing")), [])
        self.assertEqual(client.get_json.call_count, 1)


class TestSemanticScholarSource(unittest.TestCase):
    def test_year_query_uses_wildcard(self) -> None:
        params = compile_s2_params(SearchRequest(query="1999", field=YEAR))

        self.assertEqual(params["year"], "1999")
        self.assertEqual(params["query"], "*")

    def test_search_parses_papers(self) -> None:
        client = _client(
            {
                "data": [
                    {
                        "paperId": "abc123",
                        "title": "Attention Is All You Need",
                        "authors": [{"name": "Ashish Vaswani"}],
                        "year": 2017,
                        "citationCount": 90000,
                        "externalIds": {"DOI": "10.48550/arXiv.1706.03762"},
                        "publicationTypes": ["Conference"],
                        "venue": "NeurIPS",
                    }
                ]
            }
        )

        results = SemanticScholarSource(client=client).search(SearchRequest(query="attention"))

        self.assertEqual(results[0].entry_type, "conference_paper")
        self.assertEqual(results[0].metadata.journal, "NeurIPS")
        self.assertEqual(results[0].metadata.citation_count, 90000)

    def test_author_field_is_not_supported(self) -> None:
        self.assertNotIn(AUTHOR, SemanticScholarSource.supported_fields)


class TestGoogleBooksSource(unittest.TestCase):
    def test_field_prefix_and_page_cap(self) -> None:
        params = compile_google_books_params(
            SearchRequest(query="Knopf", field=PUBLISHER, max_results=60, offset=3),
            api_key="secret",
        )

        self.assertEqual(params["q"], "inpublisher:Knopf")
        self.assertEqual(params["maxResults"], "40")
        self.assertEqual(params["startIndex"], "3")
        self.assertEqual(params["key"], "secret")

    def test_search_parses_volumes(self) -> None:
        client = _client(
            {
                "items": [
                    {
                        "id": "vol1",
                        "volumeInfo": {
                            "title": "The Power Broker",
                            "subtitle": "Robert Moses and the Fall of New York",
                            "authors": ["Robert A. Caro"],
                            "publishedDate": "1975-08-12",
                            "industryIdentifiers": [
                                {"type": "ISBN_10", "identifier": "0394720245"},
                                {"type": "ISBN_13", "identifier": "9780394720241"},
                            ],
                            "printType": "BOOK",
                            "pageCount": 1296,
                        },
                    },
                    {"id": "mag", "volumeInfo": {"title": "LIFE", "printType": "MAGAZINE"}},
                    {"id": "none", "volumeInfo": {}},
                ]
            }
        )
        source = GoogleBooksSource(client=client)

        results = source.search(SearchRequest(query="power broker", field=TITLE))

        self.assertEqual(len(results), 2)
        book, magazine = results
        self.assertEqual(book.id, "gbooks-vol1")
        self.assertEqual(book.title, "The Power Broker: Robert Moses and the Fall of New York")
        self.assertEqual(book.year, 1975)
        self.assertEqual(book.metadata.isbn, "9780394720241")
        self.assertEqual(book.metadata.pages, "1296")
        self.assertEqual(book.authors[0].last_name, "Caro")
        self.assertEqual(magazine.entry_type, MAGAZINE_ARTICLE)
        self.assertNotIn("key", client.get_json.call_args.kwargs["params"])


class TestOpenLibrarySource(unittest.TestCase):
    def test_field_parameters(self) -> None:
        params = compile_openlibrary_params(SearchRequest(query="Caro", field=AUTHOR, max_results=15))

        self.assertEqual(params["author"], "Caro")
        self.assertEqual(params["limit"], "15")
        self.assertNotIn("q", params)

    def test_search_parses_docs(self) -> None:
        client = _client(
            {
                "docs": [
                    {
                        "key": "/works/OL1168083W",
                        "title": "The Power Broker",
                        "author_name": ["Robert A. Caro"],
                        "first_publish_year": 1974,
                        "isbn": ["9780394480763"],
                        "publisher": ["Knopf"],
                        "subject": ["New York (N.Y.)", "Politics", ""],
                    }
                ]
            }
        )

        results = OpenLibrarySource(client=client).search(SearchRequest(query="power broker"))

        record = results[0]
        self.assertEqual(record.id, "ol-/works/OL1168083W")
        self.assertEqual(record.entry_type, BOOK)
        self.assertEqual(record.metadata.url, "https://openlibrary.org/works/OL1168083W")
        self.assertEqual(record.metadata.extra["subjects"], ("New York (N.Y.)", "Politics"))

    def test_lookup_isbn_normalizes_and_parses_edition(self) -> None:
        client = _client({"title": "The Power Broker", "publishers": ["Knopf"], "publish_date": "1974", "number_of_pages": 1246})

        record = OpenLibrarySource(client=client).lookup_isbn("978-0-394-48076-3")

        self.assertEqual(client.get_json.call_args.args[0], "https://openlibrary.org/isbn/9780394480763.json")
        self.assertEqual(record.id, "9780394480763")
        self.assertEqual(record.year, 1974)
        self.assertEqual(record.metadata.publisher, "Knopf")

    def test_lookup_unknown_isbn_returns_none(self) -> None:
        client = MagicMock(spec=JsonApiClient)
        response = MagicMock(status_code=404)
        client.get_json.side_effect = requests.HTTPError("not found", response=response)

        self.assertIsNone(OpenLibrarySource(client=client).lookup_isbn("0000000000"))


class TestLocSource(unittest.TestCase):
    def test_parameters(self) -> None:
        params = compile_loc_params(SearchRequest(query="1974", field=YEAR, max_results=50, offset=100))

        self.assertEqual(params["c"], "25")
        self.assertEqual(params["sp"], "3")
        self.assertEqual(params["dates"], "1974/1974")
        self.assertEqual(compile_loc_params(SearchRequest(query="Caro", field=AUTHOR))["q"], "contributor:Caro")

    def test_contributor_names(self) -> None:
        authors = parse_contributors(["Caro, Robert A., 1935-2020.", "Moses Robert", "Anonymous"])

        self.assertEqual((authors[0].first_name, authors[0].last_name), ("Robert A.", "Caro"))
        self.assertEqual((authors[1].first_name, authors[1].last_name), ("Moses", "Robert"))
        self.assertEqual((authors[2].first_name, authors[2].last_name), ("", "Anonymous"))

    def test_format_mapping(self) -> None:
        self.assertEqual(map_loc_format(["Film, Video"]), VIDEO)
        self.assertEqual(map_loc_format(["newspaper"]), NEWSPAPER_ARTICLE)
        self.assertEqual(map_loc_format([]), BOOK)

    def test_search_parses_results(self) -> None:
        client = _client(
            {
                "results": [
                    {
                        "id": "http://www.loc.gov/item/74003456/",
                        "title": "The power broker",
                        "contributor": ["caro, robert a"],
                        "date": "1974",
                        "original_format": ["book"],
                        "language": ["english"],
                    },
                    {"id": "x"},
                ]
            }
        )

        results = LocSource(client=client).search(SearchRequest(query="power broker"))

        self.assertEqual(len(results), 1)
        self.assertEqual(results[0].id, "loc-http://www.loc.gov/item/74003456/")
        self.assertEqual(results[0].metadata.language, "english")
        self.assertEqual(results[0].year, 1974)


class TestJsonApiClient(unittest.TestCase):
    def test_get_json_drops_none_params_and_sends_user_agent(self) -> None:
        response = MagicMock()
        response.json.return_value = {"ok": True}
        with patch.object(requests.Session, "get", return_value=response) as mock_get:
            client = JsonApiClient(timeout=3.0, user_agent="test-agent")
            payload = client.get_json("https://example.org/api", params={"a": "1", "b": None})

        self.assertEqual(payload, {"ok": True})
        kwargs = mock_get.call_args.kwargs
        self.assertEqual(kwargs["params"], {"a": "1"})
        self.assertEqual(kwargs["timeout"], 3.0)
        self.assertEqual(kwargs["headers"]["User-Agent"], "test-agent")

    def test_non_object_payload_is_rejected(self) -> None:
        response = MagicMock()
        response.json.return_value = ["not", "an", "object"]
        with patch.object(requests.Session, "get", return_value=response):
            with self.assertRaises(ValueError):
                JsonApiClient().get_json("https://example.org/api")

    def test_http_error_is_isolated_by_adapter(self) -> None:
        response = MagicMock()
        response.raise_for_status.side_effect = requests.HTTPError("503")
        with patch.object(requests.Session, "get", return_value=response):
            source = LocSource(client=JsonApiClient())
            self.assertEqual(source.search(SearchRequest(query="x")), [])


if __name__ == "__main__":
    unittest.main()
