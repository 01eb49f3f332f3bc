"""Unit tests for work and score validation."""

import pytest

from easy_imslp.parsers.types import (
    ComposerReference,
    DifficultyRating,
    InstrumentInfo,
    Score,
    Work,
)
from easy_imslp.services.validation import validate_score, validate_work


def make_work(**overrides: object) -> Work:
    fields: dict[str, object] = {
        "slug": "Suite_(Bach,_Johann_Sebastian)",
        "title": "Suite",
        "full_title": "Suite",
        "url": "https://imslp.org/wiki/Suite_(Bach%2C_Johann_Sebastian)",
        "composer": ComposerReference(slug="Bach, Johann Sebastian", name="Johann Sebastian Bach"),
        "key": "D minor",
        "year": 1720,
        "instrumentation": [InstrumentInfo(raw="Cello", normalized="cello")],
    }
    fields.update(overrides)
    return Work(**fields)  # type: ignore[arg-type]


def make_score(**overrides: object) -> Score:
    fields: dict[str, object] = {
        "id": "A.pdf",
        "filename": "A.pdf",
        "url": "https://imslp.org/wiki/File:A.pdf",
        "download_url": "https://imslp.org/wiki/Special:ImagefromIndex/A.pdf",
        "editor": "Someone",
        "page_count": 10,
        "publication_year": 1900,
    }
    fields.update(overrides)
    return Score(**fields)  # type: ignore[arg-type]


class TestValidateWork:
    """Tests for work validation."""

    @pytest.mark.unit
    def test_complete_work(self) -> None:
        """Should accept a complete work without issues."""
        result = validate_work(make_work(), current_year=2026)
        assert result.valid is True
        assert result.issues == []

    @pytest.mark.unit
    def test_missing_title_and_composer(self) -> None:
        """Should report errors and mark the work invalid."""
        result = validate_work(
            make_work(title="", composer=ComposerReference(slug="", name="")), current_year=2026
        )
        assert result.valid is False
        errors = [(i.field, i.severity) for i in result.issues if i.severity == "error"]
        assert errors == [("title", "error"), ("composer", "error")]

    @pytest.mark.unit
    def test_missing_recommended_fields(self) -> None:
        """Should warn about instrumentation, year and key but stay valid."""
        result = validate_work(make_work(instrumentation=[], year=None, key=None), current_year=2026)
        assert result.valid is True
        assert [i.field for i in result.issues] == ["instrumentation", "year", "key"]
        assert all(i.severity == "warning" for i in result.issues)

    @pytest.mark.unit
    @pytest.mark.parametrize("year", [500, 2030])
    def test_implausible_year(self, year: int) -> None:
        """Should warn about years outside 800..current year."""
        result = validate_work(make_work(year=year), current_year=2026)
        assert result.valid is True
        assert [i.message for i in result.issues] == [f"Composition year {year} seems invalid"]

    @pytest.mark.unit
    def test_difficulty_out_of_range(self) -> None:
        """Should warn about difficulty levels outside 1-9."""
        result = validate_work(make_work(difficulty=DifficultyRating(12, "?")), current_year=2026)
        assert [i.field for i in result.issues] == ["difficulty"]


class TestValidateScore:
    """Tests for score validation."""

    @pytest.mark.unit
    def test_complete_score(self) -> None:
        """Should accept a complete score without issues."""
        result = validate_score(make_score(), current_year=2026)
        assert result.valid is True
        assert result.issues == []

    @pytest.mark.unit
    def test_missing_filename_and_url(self) -> None:
        """Should report errors for missing filename and URL."""
        result = validate_score(make_score(filename="", url=""), current_year=2026)
        assert result.valid is False
        assert [i.field for i in result.issues] == ["filename", "url"]

    @pytest.mark.unit
    def test_publisher_is_enough(self) -> None:
        """Should accept a publisher in place of an editor."""
        result = validate_score(make_score(editor=None, publisher="Peters"), current_year=2026)
        assert result.issues == []

    @pytest.mark.unit
    def test_page_count(self) -> None:
        """Should warn about missing and non-positive page counts."""
        missing = validate_score(make_score(page_count=None), current_year=2026)
        assert [i.message for i in missing.issues] == ["Page count is missing"]
        zero = validate_score(make_score(page_count=0), current_year=2026)
        assert [i.message for i in zero.issues] == ["Page count 0 is invalid"]

    @pytest.mark.unit
    def test_publication_year(self) -> None:
        """Should warn about publication years outside 1400..current year."""
        result = validate_score(make_score(publication_year=1200), current_year=2026)
        assert [i.field for i in result.issues] == ["publication_year"]
