"""Unit tests for the search service."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from easy_imslp.api.errors import NetworkError
from easy_imslp.api.mediawiki import MediaWikiApi, SearchHit
from easy_imslp.parsers.response import parse_work_wikitext
from easy_imslp.parsers.types import SearchResult
from easy_imslp.services.search import SearchService, matches_filters

PAGES = {
    "Cello Suite No.1 (Bach, Johann Sebastian)": (
        "{{Work|work_title=Cello Suite No.1|instrumentation=Cello}}"
    ),
    "Violin Partita No.2 (Bach, Johann Sebastian)": (
        "{{Work|work_title=Violin Partita No.2|instrumentation=Violin}}"
    ),
    "Cello Sonata No.3 (Beethoven, Ludwig van)": (
        "{{Work|work_title=Cello Sonata No.3|instrumentation=Cello, Piano}}"
    ),
}


def hits(*titles: str, total: int | None = None, has_more: bool = False) -> SearchResult[SearchHit]:
    return SearchResult(
        items=[SearchHit(title=title) for title in titles],
        total=len(titles) if total is None else total,
        has_more=has_more,
    )


@pytest.fixture
def mediawiki() -> MagicMock:
    api = MagicMock(spec=MediaWikiApi)
    api.get_page_wikitext.side_effect = lambda title: PAGES.get(title, "")
    return api


@pytest.fixture
def service(mediawiki: MagicMock) -> SearchService:
    return SearchService(mediawiki)


class TestMatchesFilters:
    """Tests for post-fetch filtering."""

    @pytest.mark.unit
    def test_instrument_any_of(self) -> None:
        """Should match when the work has any requested instrument."""
        title = "Cello Sonata No.3 (Beethoven, Ludwig van)"
        work = parse_work_wikitext(PAGES[title], title).data
        assert matches_filters(work, ["piano"])
        assert matches_filters(work, ["violin", "cello"])
        assert not matches_filters(work, ["violin"])

    @pytest.mark.unit
    def test_composer_substring(self) -> None:
        """Should match the composer slug or name case-insensitively."""
        title = "Cello Suite No.1 (Bach, Johann Sebastian)"
        work = parse_work_wikitext(PAGES[title], title).data
        assert matches_filters(work, composer="bach")
        assert matches_filters(work, composer="johann sebastian bach")
        assert not matches_filters(work, composer="Beethoven")

    @pytest.mark.unit
    def test_no_filters(self) -> None:
        """Should match everything without filters."""
        work = parse_work_wikitext("", "X").data
        assert matches_filters(work)


class TestSearchWorks:
    """Tests for work search."""

    @pytest.mark.unit
    def test_unfiltered_overfetch(self, service: SearchService, mediawiki: MagicMock) -> None:
        """Should fetch twice the limit and stop at the limit."""
        mediawiki.search_works.return_value = hits(*PAGES, has_more=True)

        result = service.search("bach", limit=2)

        mediawiki.search_works.assert_called_once_with("bach", limit=4)
        assert [w.title for w in result.data.items] == ["Cello Suite No.1", "Violin Partita No.2"]
        assert result.data.total == 2
        assert result.data.has_more is True
        assert mediawiki.get_page_wikitext.call_count == 2

    @pytest.mark.unit
    def test_instrument_filter(self, service: SearchService, mediawiki: MagicMock) -> None:
        """Should fetch five times the limit and keep matching works only."""
        mediawiki.search_works.return_value = hits(*PAGES)

        result = service.search("sonata", limit=5, instrument="cello")

        mediawiki.search_works.assert_called_once_with("sonata", limit=25)
        assert [w.title for w in result.data.items] == ["Cello Suite No.1", "Cello Sonata No.3"]
        assert result.data.total == 2

    @pytest.mark.unit
    def test_composer_filter_extends_query(
        self, service: SearchService, mediawiki: MagicMock
    ) -> None:
        """Should append the composer to the query and filter on it."""
        mediawiki.search_works.return_value = hits(*PAGES)

        result = service.search("cello", composer="Beethoven", instrument=["cello"])

        mediawiki.search_works.assert_called_once_with("cello Beethoven", limit=50)
        assert [w.title for w in result.data.items] == ["Cello Sonata No.3"]

    @pytest.mark.unit
    def test_fetch_failure_warns(self, service: SearchService, mediawiki: MagicMock) -> None:
        """Should skip hits whose page cannot be fetched."""
        mediawiki.search_works.return_value = hits("Broken", "Cello Suite No.1 (Bach, Johann Sebastian)")
        mediawiki.get_page_wikitext.side_effect = [
            NetworkError("down"),
            PAGES["Cello Suite No.1 (Bach, Johann Sebastian)"],
        ]

        result = service.search("suite")

        assert [w.title for w in result.data.items] == ["Cello Suite No.1"]
        assert result.warnings == ["Failed to parse work: Broken"]


class TestSearchComposers:
    """Tests for composer search and suggestions."""

    @pytest.mark.unit
    def test_search_composers(
        self, service: SearchService, mediawiki: MagicMock, composer_page: str
    ) -> None:
        """Should parse category hits and report the server total."""
        mediawiki.search_categories.return_value = hits(
            "Category:Beethoven, Ludwig van", "Beethoven Festival", total=12, has_more=True
        )
        mediawiki.get_page_wikitext.side_effect = None
        mediawiki.get_page_wikitext.return_value = composer_page

        result = service.search_composers("beethoven", limit=3)

        mediawiki.search_categories.assert_called_once_with("beethoven", limit=6)
        assert [c.name for c in result.data.items] == ["Ludwig van Beethoven"]
        assert result.data.total == 12
        assert result.data.has_more is True

    @pytest.mark.unit
    def test_autocomplete(self, service: SearchService, mediawiki: MagicMock) -> None:
        """Should pass through OpenSearch titles."""
        mediawiki.open_search.return_value = ["Bach", "Bartók"]
        assert service.autocomplete("ba", limit=2) == ["Bach", "Bartók"]
        mediawiki.open_search.assert_called_once_with("ba", 2)

    @pytest.mark.unit
    def test_search_all(self, service: SearchService, mediawiki: MagicMock) -> None:
        """Should combine work and composer results."""
        mediawiki.search_works.return_value = hits("Cello Suite No.1 (Bach, Johann Sebastian)")
        mediawiki.search_categories.return_value = hits("Category:Nobody")

        result = service.search_all("bach")

        assert [w.title for w in result.data.works] == ["Cello Suite No.1"]
        assert [c.slug for c in result.data.composers] == ["Nobody"]
        assert result.warnings == ["Could not extract composer name from template, using slug"]
