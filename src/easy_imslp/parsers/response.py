"""Assemble composer, work and score records from page wikitext.

Each builder locates the relevant template, reads its parameters under the
spellings IMSLP editors actually use, and falls back to values derived from
the page slug when a field is missing. Builders never raise: anything
missing is left unset, and informative gaps are reported as warnings on the
returned :class:`ParseResult`.

Example::

    result = parse_composer_wikitext(wikitext, "Beethoven,_Ludwig_van")
    composer = result.data
    for warning in result.warnings:
        logger.warning(warning)
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Final

from easy_imslp.parsers.catalogue import parse_catalogue
from easy_imslp.parsers.instrument import parse_instruments
from easy_imslp.parsers.types import (
    Composer,
    ComposerReference,
    DifficultyRating,
    Movement,
    ParseResult,
    ScanQuality,
    Score,
    TimePeriod,
    Work,
)
from easy_imslp.parsers.wikitext import (
    extract_templates,
    find_template,
    parse_year,
    strip_wiki_markup,
)
from easy_imslp.urls import (
    build_composer_url,
    build_download_url,
    build_file_url,
    build_page_url,
)

WORK_TEMPLATE_NAMES: Final[tuple[str, ...]] = ("Work", "Composition", "Imslpwork")
SCORE_TEMPLATE_MARKERS: Final[tuple[str, ...]] = ("file", "score", "pdf")

# First match wins; order matters ("20th century" before "contemporary")
TIME_PERIOD_PATTERNS: Final[tuple[tuple[TimePeriod, re.Pattern[str]], ...]] = (
    ("medieval", re.compile(r"medieval|middle ages", re.IGNORECASE)),
    ("renaissance", re.compile(r"renaissance", re.IGNORECASE)),
    ("baroque", re.compile(r"baroque", re.IGNORECASE)),
    ("classical", re.compile(r"classical", re.IGNORECASE)),
    ("romantic", re.compile(r"romantic", re.IGNORECASE)),
    ("modern", re.compile(r"modern|20th century", re.IGNORECASE)),
    ("contemporary", re.compile(r"contemporary|21st century", re.IGNORECASE)),
)

# Henle difficulty scale
DIFFICULTY_DESCRIPTIONS: Final[dict[int, str]] = {
    1: "Very Easy",
    2: "Easy",
    3: "Moderately Easy",
    4: "Moderate",
    5: "Moderately Difficult",
    6: "Difficult",
    7: "Very Difficult",
    8: "Advanced",
    9: "Virtuoso",
}
DIFFICULTY_LEVEL_PATTERN: re.Pattern[str] = re.compile(
    r"^\s*(?:(?:henle|level|grade)\s*:?\s*)?([1-9])(?!\d)",
    re.IGNORECASE,
)
DIFFICULTY_KEYWORDS: Final[tuple[tuple[re.Pattern[str], DifficultyRating], ...]] = (
    (re.compile(r"beginner|easy|elementary", re.IGNORECASE), DifficultyRating(2, "Elementary")),
    (re.compile(r"intermediate", re.IGNORECASE), DifficultyRating(5, "Intermediate")),
    (re.compile(r"advanced", re.IGNORECASE), DifficultyRating(7, "Advanced")),
    (re.compile(r"virtuoso|professional", re.IGNORECASE), DifficultyRating(9, "Virtuoso")),
)

# Movement list formats: "# I. Allegro", "1. Allegro con brio", "Movement 1: Allegro"
MOVEMENT_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
    re.compile(r"^#[ \t]*([IVXL]+)\.[ \t]*(.+)$", re.IGNORECASE | re.MULTILINE),
    re.compile(r"^(\d{1,9})\.[ \t]*(.+)$", re.MULTILINE),
    re.compile(r"Movement[ \t]+(\d{1,9})[: \t]+(.+)$", re.IGNORECASE | re.MULTILINE),
)
TEMPO_MARKINGS: Final[tuple[str, ...]] = (
    "largo",
    "larghetto",
    "lento",
    "adagio",
    "andante",
    "andantino",
    "moderato",
    "allegretto",
    "allegro",
    "vivace",
    "presto",
    "prestissimo",
    "grave",
    "maestoso",
    "scherzo",
    "menuet",
    "minuet",
    "rondo",
    "finale",
)
MOVEMENT_KEY_PATTERN: re.Pattern[str] = re.compile(
    r"\bin\s+([A-G][#b♯♭]?(?:\s*(?:major|minor|dur|moll))?)(?![A-Za-z])", re.IGNORECASE
)
ROMAN_VALUES: Final[dict[str, int]] = {
    "I": 1,
    "V": 5,
    "X": 10,
    "L": 50,
    "C": 100,
    "D": 500,
    "M": 1000,
}

SCAN_QUALITY_PATTERNS: Final[tuple[tuple[ScanQuality, re.Pattern[str]], ...]] = (
    ("high", re.compile(r"high|excellent|good", re.IGNORECASE)),
    ("medium", re.compile(r"medium|fair|average", re.IGNORECASE)),
    ("low", re.compile(r"low|poor|bad", re.IGNORECASE)),
)

COMPOSER_SUFFIX_PATTERN: re.Pattern[str] = re.compile(r"\s*\([^)]+\)\s*$")
COMPOSER_IN_SLUG_PATTERN: re.Pattern[str] = re.compile(r"\(([^)]+)\)$")
LEADING_INT_PATTERN: re.Pattern[str] = re.compile(r"\s*(\d{1,9})(?!\d)")
URTEXT_PATTERN: re.Pattern[str] = re.compile(r"urtext", re.IGNORECASE)


def _first_param(params: Mapping[str, str], *keys: str) -> str | None:
    """Return the first non-empty value among ``keys``."""
    for key in keys:
        value = params.get(key)
        if value:
            return value
    return None


# =============================================================================
# SLUG HELPERS
# =============================================================================


def format_slug_as_name(slug: str) -> str:
    """Turn a ``Last, First`` slug into a display name.

    Examples:
        >>> format_slug_as_name("Beethoven,_Ludwig_van")
        'Ludwig van Beethoven'
        >>> format_slug_as_name("Anonymous")
        'Anonymous'
    """
    if not slug:
        return ""
    parts = [part.strip() for part in slug.replace("_", " ").split(",")]
    if len(parts) == 2:
        return f"{parts[1]} {parts[0]}"
    return ", ".join(parts)


def format_slug_as_title(slug: str) -> str:
    """Turn a work slug into a title by dropping the ``(Composer)`` suffix.

    Examples:
        >>> format_slug_as_title("Piano_Sonata_No.14_(Beethoven,_Ludwig_van)")
        'Piano Sonata No.14'
    """
    if not slug:
        return ""
    return COMPOSER_SUFFIX_PATTERN.sub("", slug.replace("_", " ")).strip()


def extract_composer_from_slug(work_slug: str) -> str | None:
    """Return the composer slug in a work slug's trailing parentheses."""
    match = COMPOSER_IN_SLUG_PATTERN.search(work_slug)
    if not match:
        return None
    return match.group(1).replace("_", " ")


def create_composer_reference(slug: str, name: str | None = None) -> ComposerReference:
    """Build a ComposerReference, deriving the name from the slug if not given."""
    return ComposerReference(slug=slug, name=name if name is not None else format_slug_as_name(slug))


# =============================================================================
# COMPOSER
# =============================================================================


def _parse_time_period(text: str) -> TimePeriod | None:
    for period, pattern in TIME_PERIOD_PATTERNS:
        if pattern.search(text):
            return period
    return None


def parse_composer_wikitext(wikitext: str, slug: str) -> ParseResult[Composer]:
    """Build a Composer from a composer category page.

    Args:
        wikitext: Page markup containing a ``{{Composer|...}}`` template.
        slug: Page slug, used as the name fallback and for the URL.

    Returns:
        ParseResult with the Composer and any warnings.
    """
    warnings: list[str] = []
    template = find_template(wikitext, "Composer")
    params = template.params if template else {}

    first_name = _first_param(params, "first_name", "firstname") or ""
    last_name = _first_param(params, "last_name", "lastname") or ""
    full_name = _first_param(params, "full_name", "fullname") or ""

    name = full_name
    if not name and first_name and last_name:
        name = f"{first_name} {last_name}"
    if not name:
        name = format_slug_as_name(slug)
        warnings.append("Could not extract composer name from template, using slug")

    sort_name = f"{last_name}, {first_name}" if last_name and first_name else name

    birth_raw = _first_param(params, "birth_date", "born")
    death_raw = _first_param(params, "death_date", "died")
    birth_year = parse_year(birth_raw) if birth_raw else None
    death_year = parse_year(death_raw) if death_raw else None
    if birth_raw and birth_year is None:
        warnings.append(f"Could not parse birth date: {birth_raw}")
    if death_raw and death_year is None:
        warnings.append(f"Could not parse death date: {death_raw}")

    period_raw = _first_param(params, "time_period", "period")

    composer = Composer(
        slug=slug,
        name=name,
        full_name=full_name or name,
        sort_name=sort_name,
        url=build_composer_url(slug),
        nationality=_first_param(params, "nationality", "country"),
        birth_year=birth_year,
        death_year=death_year,
        time_period=_parse_time_period(period_raw) if period_raw else None,
    )
    return ParseResult(data=composer, warnings=warnings)


# =============================================================================
# WORK
# =============================================================================


def _parse_difficulty(text: str) -> DifficultyRating | None:
    """Parse a Henle level (1-9) or a difficulty keyword."""
    match = DIFFICULTY_LEVEL_PATTERN.match(text)
    if match:
        level = int(match.group(1))
        return DifficultyRating(level=level, description=DIFFICULTY_DESCRIPTIONS[level])

    for pattern, rating in DIFFICULTY_KEYWORDS:
        if pattern.search(text):
            return rating
    return None


def parse_roman_numeral(roman: str) -> int:
    """Convert a Roman numeral with the subtractive rule; unknown letters count 0.

    Examples:
        >>> parse_roman_numeral("XIV")
        14
        >>> parse_roman_numeral("iv")
        4
    """
    values = [ROMAN_VALUES.get(char, 0) for char in roman.upper()]
    total = 0
    for index, current in enumerate(values):
        following = values[index + 1] if index + 1 < len(values) else 0
        if current < following:
            total -= current
        else:
            total += current
    return total


def _parse_movement_content(number: int, content: str) -> Movement:
    cleaned = strip_wiki_markup(content)
    lowered = cleaned.lower()

    if lowered.startswith(TEMPO_MARKINGS):
        return Movement(number=number, tempo=cleaned)

    key_match = MOVEMENT_KEY_PATTERN.search(cleaned)
    return Movement(
        number=number,
        title=cleaned,
        key=key_match.group(1).strip() if key_match else None,
    )


def _parse_movements(wikitext: str) -> list[Movement]:
    """Collect movements from list items and prose, sorted by number."""
    found: dict[int, Movement] = {}

    for pattern in MOVEMENT_PATTERNS:
        for match in pattern.finditer(wikitext):
            number_text = match.group(1)
            content = match.group(2).strip()
            number = int(number_text) if number_text.isdigit() else parse_roman_numeral(number_text)
            if number > 0 and content and number not in found:
                found[number] = _parse_movement_content(number, content)

    return [found[number] for number in sorted(found)]


def parse_work_wikitext(
    wikitext: str,
    slug: str,
    composer_slug: str | None = None,
) -> ParseResult[Work]:
    """Build a Work from a work page.

    Args:
        wikitext: Page markup containing a ``{{Work|...}}`` template (or one
            of its synonyms ``Composition`` / ``Imslpwork``).
        slug: Work page slug, e.g. ``Cello_Suite_No.1,_BWV_1007_(Bach,_Johann_Sebastian)``.
        composer_slug: Composer slug if already known; otherwise taken from
            the slug's trailing parentheses.

    Returns:
        ParseResult with the Work and any warnings.
    """
    warnings: list[str] = []

    template = None
    for template_name in WORK_TEMPLATE_NAMES:
        template = find_template(wikitext, template_name)
        if template is not None:
            break
    params = template.params if template else {}

    title = _first_param(params, "work_title", "worktitle", "title")
    if not title:
        title = format_slug_as_title(slug)
        warnings.append("Could not extract work title from template, using slug")

    opus = _first_param(params, "opus", "opus_catalogue")
    catalogue = parse_catalogue(opus) if opus else None

    year_raw = _first_param(params, "year", "year_of_composition", "composition_year")
    year = parse_year(year_raw) if year_raw else None
    if year_raw and year is None:
        warnings.append(f"Could not parse composition year: {year_raw}")

    instrumentation = parse_instruments(
        _first_param(params, "instrumentation", "instruments", "scoring") or ""
    )
    if not instrumentation:
        warnings.append("No instrumentation data found")

    difficulty_raw = _first_param(params, "difficulty", "henle")

    resolved_composer_slug = composer_slug or extract_composer_from_slug(slug) or ""
    composer_param = _first_param(params, "composer")
    composer = create_composer_reference(
        resolved_composer_slug,
        strip_wiki_markup(composer_param) if composer_param else None,
    )

    work = Work(
        slug=slug,
        title=title,
        full_title=f"{title}, {opus}" if opus else title,
        url=build_page_url(slug),
        composer=composer,
        opus=opus,
        catalogue=catalogue,
        key=_first_param(params, "key", "tonality"),
        year=year,
        movements=_parse_movements(wikitext),
        instrumentation=instrumentation,
        genre=_first_param(params, "genre", "form"),
        difficulty=_parse_difficulty(difficulty_raw) if difficulty_raw else None,
    )
    return ParseResult(data=work, warnings=warnings)


# =============================================================================
# SCORE
# =============================================================================


def _parse_scan_quality(text: str) -> ScanQuality | None:
    for quality, pattern in SCAN_QUALITY_PATTERNS:
        if pattern.search(text):
            return quality
    return None


def parse_score_wikitext(wikitext: str, filename: str) -> ParseResult[Score]:
    """Build a Score from the file section of a page.

    The first template whose name contains ``file``, ``score`` or ``pdf``
    supplies the metadata; URLs are derived from ``filename``.
    """
    warnings: list[str] = []

    params: Mapping[str, str] = {}
    for template in extract_templates(wikitext):
        lowered = template.name.lower()
        if any(marker in lowered for marker in SCORE_TEMPLATE_MARKERS):
            params = template.params
            break

    editor = _first_param(params, "editor", "arranger")

    year_raw = _first_param(params, "year", "pub_year")
    publication_year = parse_year(year_raw) if year_raw else None
    if year_raw and publication_year is None:
        warnings.append(f"Could not parse publication year: {year_raw}")

    pages_match = LEADING_INT_PATTERN.match(_first_param(params, "pages", "page_count") or "")
    page_count = int(pages_match.group(1)) if pages_match else None

    quality_raw = _first_param(params, "scan_quality", "quality")
    is_urtext = any(
        URTEXT_PATTERN.search(value)
        for value in (params.get("edition") or "", editor or "")
    )

    score = Score(
        id=filename,
        filename=filename,
        url=build_file_url(filename),
        download_url=build_download_url(filename),
        editor=editor,
        publisher=_first_param(params, "publisher"),
        publication_year=publication_year,
        page_count=page_count or None,
        scan_quality=_parse_scan_quality(quality_raw) if quality_raw else None,
        is_urtext=is_urtext,
    )
    return ParseResult(data=score, warnings=warnings)
