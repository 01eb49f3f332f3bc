"""Shared type definitions for the IMSLP parsers.

This module contains the dataclasses and type aliases produced by the
wikitext, catalogue, instrument and response parsers, and consumed by the
services and the client facade.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, Literal, TypeVar

T = TypeVar("T")

# Type aliases for literal string types
CatalogueSystem = Literal[
    "op", "bwv", "k", "d", "hob", "hwv", "rv", "woo", "s", "wwv", "tw", "l"
]
"""Known catalogue numbering systems (Opus, Bach, Köchel, Deutsch, ...)."""

KnownInstrument = Literal[
    "piano",
    "violin",
    "viola",
    "cello",
    "double-bass",
    "flute",
    "oboe",
    "clarinet",
    "bassoon",
    "horn",
    "trumpet",
    "trombone",
    "tuba",
    "voice",
    "organ",
    "guitar",
    "harp",
    "orchestra",
    "chamber-ensemble",
    "choir",
]
"""Canonical instrument names produced by the instrument normalizer."""

InstrumentFamily = Literal[
    "strings", "woodwinds", "brass", "keyboard", "vocal", "ensemble", "other"
]

TimePeriod = Literal[
    "medieval", "renaissance", "baroque", "classical", "romantic", "modern", "contemporary"
]
"""Musical era assigned to a composer."""

ScanQuality = Literal["high", "medium", "low"]

Severity = Literal["warning", "error"]


@dataclass(frozen=True)
class TemplateInvocation:
    """A single top-level ``{{Name|...}}`` template found in wikitext.

    Attributes:
        name: Trimmed template name. Never empty.
        params: Named parameters (``key=value``), values cleaned of HTML.
        positional: Unnamed parameters in source order, cleaned.
        raw: Exact source slice including the braces.
    """

    name: str
    params: dict[str, str]
    positional: list[str]
    raw: str


@dataclass(frozen=True)
class WikiLink:
    """Represents an internal ``[[target|display]]`` link."""

    target: str
    display: str


@dataclass(frozen=True)
class YearRange:
    """Start/end years parsed from a span such as ``1804-1806``."""

    start: int | None = None
    end: int | None = None


@dataclass(frozen=True)
class CatalogueInfo:
    """A parsed catalogue designation (``Op. 27 No. 2``, ``BWV 1007``, ...).

    When ``system`` is None the text was catalogue-like but unrecognized, and
    ``number``/``suffix`` are None as well.
    """

    raw: str
    system: CatalogueSystem | None = None
    number: int | None = None
    suffix: str | None = None


@dataclass(frozen=True)
class InstrumentInfo:
    """Instrument text paired with its canonical name (or the trimmed text)."""

    raw: str
    normalized: str


@dataclass(frozen=True)
class ComposerReference:
    """Lightweight pointer from a work back to its composer."""

    slug: str
    name: str


@dataclass(frozen=True)
class Composer:
    """Composer record assembled from a ``Category:`` page.

    Attributes:
        slug: Page slug, usually ``Last, First``.
        name: Display name (``First Last``).
        full_name: Full name as given on the page, else ``name``.
        sort_name: ``Last, First`` when both parts are known, else ``name``.
        url: Category page URL.
        nationality: Free-text nationality.
        birth_year: Parsed birth year.
        death_year: Parsed death year.
        time_period: Musical era.
        works_count: Number of works listed, when known.
    """

    slug: str
    name: str
    full_name: str
    sort_name: str
    url: str
    nationality: str | None = None
    birth_year: int | None = None
    death_year: int | None = None
    time_period: TimePeriod | None = None
    works_count: int | None = None


@dataclass(frozen=True)
class Movement:
    """One movement of a work, numbered from 1."""

    number: int
    title: str | None = None
    tempo: str | None = None
    key: str | None = None


@dataclass(frozen=True)
class DifficultyRating:
    """Henle-style difficulty level (1-9) with its description."""

    level: int
    description: str


@dataclass(frozen=True)
class Work:
    """Work record assembled from a work page.

    Attributes:
        slug: Page slug, e.g. ``Piano Sonata No.14, Op.27 No.2 (Beethoven, Ludwig van)``.
        title: Work title.
        full_title: ``title, opus`` when an opus is present, else ``title``.
        url: Wiki page URL.
        composer: Reference to the composer.
        opus: Raw opus/catalogue text.
        catalogue: Parsed catalogue designation.
        key: Tonality text.
        year: Year of composition.
        movements: Movements sorted by number.
        instrumentation: Parsed instruments in source order.
        genre: Genre or form.
        difficulty: Difficulty rating.
    """

    slug: str
    title: str
    full_title: str
    url: str
    composer: ComposerReference
    opus: str | None = None
    catalogue: CatalogueInfo | None = None
    key: str | None = None
    year: int | None = None
    movements: list[Movement] = field(default_factory=list)
    instrumentation: list[InstrumentInfo] = field(default_factory=list)
    genre: str | None = None
    difficulty: DifficultyRating | None = None


@dataclass(frozen=True)
class Score:
    """A score file (PDF) attached to a work."""

    id: str
    filename: str
    url: str
    download_url: str
    editor: str | None = None
    publisher: str | None = None
    publication_year: int | None = None
    page_count: int | None = None
    file_size: int | None = None
    scan_quality: ScanQuality | None = None
    is_urtext: bool = False


@dataclass
class ParseResult(Generic[T]):
    """Parsed record plus non-fatal warnings collected while building it."""

    data: T
    warnings: list[str] = field(default_factory=list)


@dataclass
class SearchResult(Generic[T]):
    """A page of search results."""

    items: list[T]
    total: int
    has_more: bool


@dataclass(frozen=True)
class ValidationIssue:
    """A single problem found when validating a record."""

    field: str
    message: str
    severity: Severity


@dataclass
class ValidationResult:
    """Outcome of validating a record; ``valid`` is False if any error exists."""

    valid: bool
    issues: list[ValidationIssue] = field(default_factory=list)
