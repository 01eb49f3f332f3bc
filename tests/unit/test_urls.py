"""Unit tests for IMSLP URL construction."""

import hashlib

import pytest

from easy_imslp.urls import (
    build_composer_url,
    build_direct_download_url,
    build_download_url,
    build_file_url,
    build_page_url,
    encode_uri_component,
    extract_slug_from_url,
)


class TestBuildUrls:
    """Tests for page, category and file URLs."""

    @pytest.mark.unit
    def test_encode_uri_component(self) -> None:
        """Should escape commas, spaces and colons but keep parentheses."""
        assert encode_uri_component("Sonata (Bach, J.S.)") == "Sonata%20(Bach%2C%20J.S.)"
        assert encode_uri_component("a:b/c") == "a%3Ab%2Fc"
        assert encode_uri_component("Dvořák") == "Dvo%C5%99%C3%A1k"

    @pytest.mark.unit
    def test_page_url_underscores_spaces(self) -> None:
        """Should turn spaces into underscores before encoding."""
        assert (
            build_page_url("Piano Sonata No.14 (Beethoven, Ludwig van)")
            == "https://imslp.org/wiki/Piano_Sonata_No.14_(Beethoven%2C_Ludwig_van)"
        )

    @pytest.mark.unit
    def test_composer_url(self) -> None:
        """Should point at the composer's category page."""
        assert (
            build_composer_url("Bach, Johann Sebastian")
            == "https://imslp.org/wiki/Category:Bach%2C_Johann_Sebastian"
        )

    @pytest.mark.unit
    def test_file_urls(self) -> None:
        """Should build File: and ImagefromIndex URLs."""
        assert build_file_url("PMLP01-A.pdf") == "https://imslp.org/wiki/File:PMLP01-A.pdf"
        assert (
            build_download_url("PMLP01-A.pdf")
            == "https://imslp.org/wiki/Special:ImagefromIndex/PMLP01-A.pdf"
        )

    @pytest.mark.unit
    def test_direct_download_url(self) -> None:
        """Should use MediaWiki's md5 hashed upload path."""
        digest = hashlib.md5(b"PMLP01_A.pdf").hexdigest()
        expected = f"https://imslp.org/images/{digest[0]}/{digest[:2]}/PMLP01_A.pdf"
        assert build_direct_download_url("File:PMLP01 A.pdf") == expected
        assert build_direct_download_url("PMLP01_A.pdf") == expected


class TestExtractSlug:
    """Tests for reading slugs back out of URLs."""

    @pytest.mark.unit
    def test_category_url(self) -> None:
        """Should strip the Category: prefix and decode."""
        url = "https://imslp.org/wiki/Category:Bach%2C_Johann_Sebastian"
        assert extract_slug_from_url(url) == "Bach, Johann Sebastian"

    @pytest.mark.unit
    def test_page_url_with_query(self) -> None:
        """Should ignore query strings and fragments."""
        url = "https://imslp.org/wiki/Cello_Suite_No.1?action=history#top"
        assert extract_slug_from_url(url) == "Cello Suite No.1"

    @pytest.mark.unit
    def test_round_trip(self) -> None:
        """Should recover the slug from a built page URL."""
        slug = "Piano Sonata No.14 (Beethoven, Ludwig van)"
        assert extract_slug_from_url(build_page_url(slug)) == slug

    @pytest.mark.unit
    def test_foreign_url(self) -> None:
        """Should return None for non-IMSLP URLs."""
        assert extract_slug_from_url("https://example.com/wiki/X") is None
