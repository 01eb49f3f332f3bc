"""Display helpers for composers, works and instrumentation."""

from __future__ import annotations

import re
from collections import defaultdict
from collections.abc import Callable, Iterable
from typing import Literal

from easy_imslp.parsers.types import InstrumentInfo, Work

NameStyle = Literal["full", "short", "sort"]

WHITESPACE_PATTERN: re.Pattern[str] = re.compile(r"\s+")
SLUG_UNSAFE_PATTERN: re.Pattern[str] = re.compile(r"[^\w\-.(),]")

UNKNOWN_GROUP = "unknown"


def format_composer_name(slug: str, style: NameStyle = "full") -> str:
    """Format a ``Last, First`` slug.

    Examples:
        >>> format_composer_name("Bach,_Johann_Sebastian")
        'Johann Sebastian Bach'
        >>> format_composer_name("Bach,_Johann_Sebastian", "short")
        'Bach'
        >>> format_composer_name("Bach,_Johann_Sebastian", "sort")
        'Bach, Johann Sebastian'
    """
    if not slug:
        return ""

    normalized = slug.replace("_", " ").strip()
    parts = [part.strip() for part in normalized.split(",")]
    if len(parts) < 2:
        return normalized

    last_name = parts[0]
    first_name = " ".join(parts[1:])

    if style == "short":
        return last_name
    if style == "sort":
        return f"{last_name}, {first_name}".strip()
    return f"{first_name} {last_name}".strip()


def format_work_title(title: str, opus: str | None = None) -> str:
    if not title:
        return ""
    return f"{title}, {opus}" if opus else title


def format_year_range(start: int | None = None, end: int | None = None) -> str:
    """``1804–1806``, open ended ``1804–`` / ``–1806``, or a single year."""
    if not start and not end:
        return ""
    if start and not end:
        return f"{start}–"
    if end and not start:
        return f"–{end}"
    if start == end:
        return str(start)
    return f"{start}–{end}"


def format_lifespan(birth_year: int | None = None, death_year: int | None = None) -> str:
    """``1770–1827``, ``b. 1946`` or ``d. 1750``."""
    if not birth_year and not death_year:
        return ""
    if birth_year and not death_year:
        return f"b. {birth_year}"
    if death_year and not birth_year:
        return f"d. {death_year}"
    return f"{birth_year}–{death_year}"


def format_instrumentation(instruments: Iterable[InstrumentInfo], use_raw: bool = False) -> str:
    return ", ".join(info.raw if use_raw else info.normalized for info in instruments)


def _group_by(works: Iterable[Work], key: Callable[[Work], str]) -> dict[str, list[Work]]:
    groups: dict[str, list[Work]] = defaultdict(list)
    for work in works:
        groups[key(work)].append(work)
    return dict(groups)


def group_by_instrument(works: Iterable[Work]) -> dict[str, list[Work]]:
    """Group works by their first (primary) instrument."""
    return _group_by(
        works,
        lambda work: work.instrumentation[0].normalized if work.instrumentation else UNKNOWN_GROUP,
    )


def group_by_genre(works: Iterable[Work]) -> dict[str, list[Work]]:
    return _group_by(works, lambda work: work.genre or UNKNOWN_GROUP)


def group_by_composer(works: Iterable[Work]) -> dict[str, list[Work]]:
    return _group_by(works, lambda work: work.composer.slug or UNKNOWN_GROUP)


def slugify(text: str) -> str:
    """Turn a title into a page slug.

    Examples:
        >>> slugify("Cello Suite No.1, BWV 1007 (Bach, Johann Sebastian)")
        'Cello_Suite_No.1,_BWV_1007_(Bach,_Johann_Sebastian)'
    """
    return SLUG_UNSAFE_PATTERN.sub("", WHITESPACE_PATTERN.sub("_", text.strip()))


def unslugify(slug: str) -> str:
    return slug.replace("_", " ").strip()


def truncate(text: str, max_length: int) -> str:
    """Shorten ``text`` to ``max_length`` characters, ending in ``...``."""
    if not text or len(text) <= max_length:
        return text
    return text[: max(max_length - 3, 0)] + "..."
