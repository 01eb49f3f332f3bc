"""IMSLP URL construction.

Page, category and file URLs are derived mechanically from slugs and
filenames, so these helpers have no network dependency and are shared by
the parsers and the API layer.
"""

from __future__ import annotations

import hashlib
import re
from urllib.parse import quote, unquote

WIKI_URL = "https://imslp.org/wiki/"
IMAGES_URL = "https://imslp.org/images/"

# Characters left unescaped by JavaScript's encodeURIComponent besides [A-Za-z0-9_.-]
_URI_COMPONENT_SAFE = "!*'()~"

SLUG_FROM_URL_PATTERN: re.Pattern[str] = re.compile(r"imslp\.org/wiki/(?:Category:)?([^?#]+)")


def encode_uri_component(value: str) -> str:
    """Percent-encode a path component the way IMSLP links are written.

    Examples:
        >>> encode_uri_component("Beethoven,_Ludwig_van")
        'Beethoven%2C_Ludwig_van'
    """
    return quote(value, safe=_URI_COMPONENT_SAFE)


def _underscored(slug: str) -> str:
    return slug.replace(" ", "_")


def build_page_url(slug: str) -> str:
    """URL of a work (or any main-namespace) page."""
    return f"{WIKI_URL}{encode_uri_component(_underscored(slug))}"


def build_composer_url(slug: str) -> str:
    """URL of a composer's ``Category:`` page."""
    return f"{WIKI_URL}Category:{encode_uri_component(_underscored(slug))}"


def build_file_url(filename: str) -> str:
    """URL of a score's ``File:`` description page."""
    return f"{WIKI_URL}File:{encode_uri_component(filename)}"


def build_download_url(filename: str) -> str:
    """URL of the download page for a score file (goes through the disclaimer)."""
    return f"{WIKI_URL}Special:ImagefromIndex/{encode_uri_component(filename)}"


def build_direct_download_url(filename: str) -> str:
    """URL of the raw file in MediaWiki's hashed upload directory.

    MediaWiki stores uploads under ``images/<h>/<hh>/<name>`` where ``hh`` is
    the first two hex digits of the MD5 of the underscored file name.
    """
    name = _underscored(filename.removeprefix("File:"))
    digest = hashlib.md5(name.encode("utf-8")).hexdigest()
    return f"{IMAGES_URL}{digest[0]}/{digest[:2]}/{encode_uri_component(name)}"


def extract_slug_from_url(url: str) -> str | None:
    """Extract the page slug (with spaces) from an IMSLP wiki URL.

    Examples:
        >>> extract_slug_from_url("https://imslp.org/wiki/Category:Bach,_Johann_Sebastian")
        'Bach, Johann Sebastian'
        >>> extract_slug_from_url("https://example.com/") is None
        True
    """
    match = SLUG_FROM_URL_PATTERN.search(url)
    if not match:
        return None
    return unquote(match.group(1)).replace("_", " ")
