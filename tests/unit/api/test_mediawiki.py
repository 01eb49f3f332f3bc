"""Unit tests for the MediaWiki api.php wrapper."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import httpx
import pytest

from easy_imslp.api.errors import NetworkError, NotFoundError
from easy_imslp.api.http import HttpClient
from easy_imslp.api.mediawiki import NS_CATEGORY, NS_FILE, CategoryMember, MediaWikiApi

MakeClient = Callable[..., HttpClient]


def json_handler(
    respond: Callable[[dict[str, str]], Any], seen: list[dict[str, str]] | None = None
) -> Callable[[httpx.Request], httpx.Response]:
    """Build a MockTransport handler answering with ``respond(query_params)``."""

    def handler(request: httpx.Request) -> httpx.Response:
        params = dict(request.url.params)
        if request.method == "POST":
            params.update(httpx.QueryParams(request.content.decode()))
        if seen is not None:
            seen.append(params)
        return httpx.Response(200, json=respond(params))

    return handler


@pytest.fixture
def make_api(make_http_client: MakeClient) -> Callable[..., MediaWikiApi]:
    def _make(
        respond: Callable[[dict[str, str]], Any], seen: list[dict[str, str]] | None = None
    ) -> MediaWikiApi:
        return MediaWikiApi(make_http_client(json_handler(respond, seen)))

    return _make


class TestQueryErrors:
    """Tests for API-level error payloads."""

    @pytest.mark.unit
    def test_missing_title(self, make_api: Callable[..., MediaWikiApi]) -> None:
        """Should raise NotFoundError for missingtitle."""
        api = make_api(
            lambda p: {"error": {"code": "missingtitle", "info": "The page doesn't exist."}}
        )
        with pytest.raises(NotFoundError) as exc_info:
            api.get_page_wikitext("Nope")
        assert "doesn't exist" in exc_info.value.message

    @pytest.mark.unit
    def test_other_api_error(self, make_api: Callable[..., MediaWikiApi]) -> None:
        """Should raise NetworkError for other API error codes."""
        api = make_api(lambda p: {"error": {"code": "badvalue", "info": "Bad value"}})
        with pytest.raises(NetworkError) as exc_info:
            api.search("x")
        assert exc_info.value.message == "MediaWiki API error (badvalue): Bad value"


class TestSearch:
    """Tests for OpenSearch and full-text search."""

    @pytest.mark.unit
    def test_open_search(self, make_api: Callable[..., MediaWikiApi]) -> None:
        """Should return the title list from an OpenSearch answer."""
        seen: list[dict[str, str]] = []
        api = make_api(
            lambda p: ["bach", ["Category:Bach, Johann Sebastian", "Bach Suite"], [], []], seen
        )
        titles = api.open_search("bach", limit=5, namespace=NS_CATEGORY)
        assert titles == ["Category:Bach, Johann Sebastian", "Bach Suite"]
        assert seen[0]["action"] == "opensearch"
        assert seen[0]["limit"] == "5"
        assert seen[0]["namespace"] == "14"

    @pytest.mark.unit
    def test_open_search_unexpected_shape(self, make_api: Callable[..., MediaWikiApi]) -> None:
        """Should return an empty list for malformed answers."""
        assert make_api(lambda p: {"weird": True}).open_search("x") == []

    @pytest.mark.unit
    def test_search(self, make_api: Callable[..., MediaWikiApi]) -> None:
        """Should map hits, total and continuation."""
        seen: list[dict[str, str]] = []
        api = make_api(
            lambda p: {
                "continue": {"sroffset": 2},
                "query": {
                    "searchinfo": {"totalhits": 40},
                    "search": [
                        {"ns": 0, "title": "Cello Suite No.1", "pageid": 11, "snippet": "s"},
                        {"ns": 0, "title": "Cello Suite No.2", "pageid": 12, "wordcount": 9},
                    ],
                },
            },
            seen,
        )
        result = api.search("cello suite", limit=2)

        assert [hit.title for hit in result.items] == ["Cello Suite No.1", "Cello Suite No.2"]
        assert result.items[0].pageid == 11
        assert result.items[1].wordcount == 9
        assert result.total == 40
        assert result.has_more is True
        assert seen[0]["list"] == "search"
        assert seen[0]["srsearch"] == "cello suite"
        assert seen[0]["format"] == "json"

    @pytest.mark.unit
    def test_search_last_page(self, make_api: Callable[..., MediaWikiApi]) -> None:
        """Should default the total to the hit count and report no more results."""
        api = make_api(lambda p: {"query": {"search": [{"title": "A"}]}})
        result = api.search_categories("a")
        assert result.total == 1
        assert result.has_more is False
        assert result.items[0].ns == NS_CATEGORY


class TestPages:
    """Tests for page parsing and existence checks."""

    @pytest.mark.unit
    def test_get_page_wikitext(self, make_api: Callable[..., MediaWikiApi]) -> None:
        """Should request prop=wikitext and return the text."""
        seen: list[dict[str, str]] = []
        api = make_api(
            lambda p: {"parse": {"title": "X", "wikitext": {"*": "{{Work|a=1}}"}}}, seen
        )
        assert api.get_page_wikitext("X") == "{{Work|a=1}}"
        assert seen[0]["action"] == "parse"
        assert seen[0]["page"] == "X"
        assert seen[0]["prop"] == "wikitext"
        assert "section" not in seen[0]

    @pytest.mark.unit
    def test_get_page_wikitext_empty(self, make_api: Callable[..., MediaWikiApi]) -> None:
        """Should return an empty string when there is no wikitext."""
        assert make_api(lambda p: {"parse": {}}).get_page_wikitext("X") == ""

    @pytest.mark.unit
    def test_parse_page_props(self, make_api: Callable[..., MediaWikiApi]) -> None:
        """Should join props and pass the section."""
        seen: list[dict[str, str]] = []
        api = make_api(lambda p: {"parse": {"text": {"*": "<p>x</p>"}}}, seen)
        parsed = api.parse_page("X", section=2)
        assert parsed == {"text": {"*": "<p>x</p>"}}
        assert seen[0]["prop"] == "text|categories|templates"
        assert seen[0]["section"] == "2"

    @pytest.mark.unit
    def test_parse_wikitext_posts(self, make_api: Callable[..., MediaWikiApi]) -> None:
        """Should POST arbitrary wikitext for rendering."""
        seen: list[dict[str, str]] = []
        api = make_api(lambda p: {"parse": {"text": {"*": "<b>x</b>"}}}, seen)
        assert api.parse_wikitext("'''x'''", title="Sandbox") == {"text": {"*": "<b>x</b>"}}
        assert seen[0]["text"] == "'''x'''"
        assert seen[0]["title"] == "Sandbox"

    @pytest.mark.unit
    def test_get_page_info(self, make_api: Callable[..., MediaWikiApi]) -> None:
        """Should report existence per title."""
        api = make_api(
            lambda p: {
                "query": {
                    "pages": {
                        "5": {"pageid": 5, "title": "A"},
                        "-1": {"title": "B", "missing": ""},
                    }
                }
            }
        )
        info = api.get_page_info(["A", "B"])
        assert info["A"].exists is True
        assert info["A"].pageid == 5
        assert info["B"].exists is False
        assert info["B"].pageid == -1


class TestCategories:
    """Tests for category membership."""

    @pytest.mark.unit
    def test_get_category_members(self, make_api: Callable[..., MediaWikiApi]) -> None:
        """Should prefix the category and return the continuation token."""
        seen: list[dict[str, str]] = []
        api = make_api(
            lambda p: {
                "continue": {"cmcontinue": "page|B"},
                "query": {"categorymembers": [{"pageid": 1, "ns": 0, "title": "A"}]},
            },
            seen,
        )
        members, token = api.get_category_members("Bach, Johann Sebastian", limit=1)
        assert members == [CategoryMember(pageid=1, title="A", ns=0)]
        assert token == "page|B"
        assert seen[0]["cmtitle"] == "Category:Bach, Johann Sebastian"
        assert "cmcontinue" not in seen[0]
        assert "cmnamespace" not in seen[0]

    @pytest.mark.unit
    def test_browse_follows_continuation(self, make_api: Callable[..., MediaWikiApi]) -> None:
        """Should yield members from every page."""
        pages = {
            None: {
                "continue": {"cmcontinue": "next"},
                "query": {"categorymembers": [{"pageid": 1, "title": "A"}]},
            },
            "next": {"query": {"categorymembers": [{"pageid": 2, "title": "B"}]}},
        }
        api = make_api(lambda p: pages[p.get("cmcontinue")])
        titles = [m.title for m in api.browse_category_members("Category:X", namespace=0)]
        assert titles == ["A", "B"]


class TestImageInfo:
    """Tests for file metadata."""

    @pytest.mark.unit
    def test_image_info(self, make_api: Callable[..., MediaWikiApi]) -> None:
        """Should map the first imageinfo entry."""
        seen: list[dict[str, str]] = []
        api = make_api(
            lambda p: {
                "query": {
                    "pages": {
                        "7": {
                            "ns": NS_FILE,
                            "title": "File:A.pdf",
                            "imageinfo": [
                                {
                                    "url": "https://imslp.org/images/a/ab/A.pdf",
                                    "descriptionurl": "https://imslp.org/wiki/File:A.pdf",
                                    "size": 1024,
                                    "mime": "application/pdf",
                                }
                            ],
                        }
                    }
                }
            },
            seen,
        )
        info = api.get_image_info("A.pdf")
        assert info is not None
        assert info.title == "File:A.pdf"
        assert info.size == 1024
        assert info.mime == "application/pdf"
        assert seen[0]["titles"] == "File:A.pdf"

    @pytest.mark.unit
    def test_image_info_missing(self, make_api: Callable[..., MediaWikiApi]) -> None:
        """Should return None for a missing file page."""
        api = make_api(lambda p: {"query": {"pages": {"-1": {"title": "File:B.pdf", "missing": ""}}}})
        assert api.get_image_info("File:B.pdf") is None
