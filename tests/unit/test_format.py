"""Unit tests for display formatting and grouping helpers."""

import pytest

from easy_imslp.parsers.response import parse_work_wikitext
from easy_imslp.parsers.types import InstrumentInfo, Work
from easy_imslp.utils.format import (
    format_composer_name,
    format_instrumentation,
    format_lifespan,
    format_work_title,
    format_year_range,
    group_by_composer,
    group_by_genre,
    group_by_instrument,
    slugify,
    truncate,
    unslugify,
)


def work(wikitext: str, slug: str) -> Work:
    return parse_work_wikitext(wikitext, slug).data


class TestNames:
    """Tests for composer names and work titles."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("style", "expected"),
        [
            ("full", "Johann Sebastian Bach"),
            ("short", "Bach"),
            ("sort", "Bach, Johann Sebastian"),
        ],
    )
    def test_composer_name_styles(self, style: str, expected: str) -> None:
        """Should format full, short and sort names."""
        assert format_composer_name("Bach,_Johann_Sebastian", style) == expected  # type: ignore[arg-type]

    @pytest.mark.unit
    def test_composer_name_without_comma(self) -> None:
        """Should return single-part slugs with spaces."""
        assert format_composer_name("Anonymous_Composer") == "Anonymous Composer"
        assert format_composer_name("") == ""

    @pytest.mark.unit
    def test_work_title(self) -> None:
        """Should append the opus when present."""
        assert format_work_title("Sonata", "Op.2") == "Sonata, Op.2"
        assert format_work_title("Sonata") == "Sonata"
        assert format_work_title("") == ""


class TestYears:
    """Tests for year range and lifespan formatting."""

    @pytest.mark.unit
    def test_year_range(self) -> None:
        """Should use an en dash and handle open ends."""
        assert format_year_range(1804, 1806) == "1804–1806"
        assert format_year_range(1804) == "1804–"
        assert format_year_range(end=1806) == "–1806"
        assert format_year_range(1804, 1804) == "1804"
        assert format_year_range() == ""

    @pytest.mark.unit
    def test_lifespan(self) -> None:
        """Should mark birth-only and death-only lifespans."""
        assert format_lifespan(1770, 1827) == "1770–1827"
        assert format_lifespan(1946) == "b. 1946"
        assert format_lifespan(death_year=1750) == "d. 1750"
        assert format_lifespan() == ""


class TestInstrumentation:
    """Tests for instrument lists."""

    @pytest.mark.unit
    def test_format_instrumentation(self) -> None:
        """Should join normalized or raw names."""
        instruments = [
            InstrumentInfo(raw="Vln.", normalized="violin"),
            InstrumentInfo(raw="Pf", normalized="piano"),
        ]
        assert format_instrumentation(instruments) == "violin, piano"
        assert format_instrumentation(instruments, use_raw=True) == "Vln., Pf"


class TestGrouping:
    """Tests for grouping works."""

    @pytest.fixture
    def works(self) -> list[Work]:
        return [
            work("{{Work|work_title=A|instrumentation=Cello|genre=Suites}}", "A_(Bach,_J.S.)"),
            work("{{Work|work_title=B|instrumentation=Piano, Cello}}", "B_(Bach,_J.S.)"),
            work("{{Work|work_title=C|genre=Suites}}", "C"),
        ]

    @pytest.mark.unit
    def test_by_instrument(self, works: list[Work]) -> None:
        """Should group by first instrument with an unknown bucket."""
        groups = group_by_instrument(works)
        assert {key: [w.title for w in value] for key, value in groups.items()} == {
            "cello": ["A"],
            "piano": ["B"],
            "unknown": ["C"],
        }

    @pytest.mark.unit
    def test_by_genre(self, works: list[Work]) -> None:
        """Should group by genre with an unknown bucket."""
        groups = group_by_genre(works)
        assert [w.title for w in groups["Suites"]] == ["A", "C"]
        assert [w.title for w in groups["unknown"]] == ["B"]

    @pytest.mark.unit
    def test_by_composer(self, works: list[Work]) -> None:
        """Should group by composer slug with an unknown bucket."""
        groups = group_by_composer(works)
        assert [w.title for w in groups["Bach, J.S."]] == ["A", "B"]
        assert [w.title for w in groups["unknown"]] == ["C"]


class TestSlugs:
    """Tests for slug conversion and truncation."""

    @pytest.mark.unit
    def test_slugify(self) -> None:
        """Should underscore whitespace and drop unsafe characters."""
        assert (
            slugify("Cello Suite No.1, BWV 1007 (Bach, Johann Sebastian)")
            == "Cello_Suite_No.1,_BWV_1007_(Bach,_Johann_Sebastian)"
        )
        assert slugify("  What?  Now! ") == "What_Now"

    @pytest.mark.unit
    def test_unslugify(self) -> None:
        """Should turn underscores back into spaces."""
        assert unslugify("Bach,_Johann_Sebastian") == "Bach, Johann Sebastian"

    @pytest.mark.unit
    def test_truncate(self) -> None:
        """Should shorten long text with an ellipsis."""
        assert truncate("Goldberg Variations", 10) == "Goldber..."
        assert truncate("Short", 10) == "Short"
        assert truncate("", 3) == ""
