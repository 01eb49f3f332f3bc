"""Catalogue number parser.

Works on IMSLP are identified by catalogue designations in many systems:
opus numbers (``Op. 27 No. 2``), Bach (``BWV 1007``), Köchel (``K. 331``),
Deutsch (``D. 960``), Hoboken (``Hob. XVI:52``) and others. This module
recognizes a fixed set of systems and keeps anything else numeric as a
raw-only record.

The pattern table is ordered: the generic opus grammar comes last so that it
cannot shadow the more specific systems.
"""

from __future__ import annotations

import re
from functools import cmp_to_key
from typing import Final

from easy_imslp.parsers.types import CatalogueInfo, CatalogueSystem

# Ordered (system, patterns) table; first match wins
CATALOGUE_PATTERNS: Final[tuple[tuple[CatalogueSystem, tuple[re.Pattern[str], ...]], ...]] = (
    ("bwv", (re.compile(r"\bBWV\s*\.?\s*(\d+)([a-z])?(?:\s*/\s*(\d+))?", re.IGNORECASE),)),
    (
        "k",
        (
            re.compile(r"\bK(?:V|\.)\s*(\d+)([a-z])?", re.IGNORECASE),
            re.compile(r"\bKöchel\s*(\d+)([a-z])?", re.IGNORECASE),
        ),
    ),
    (
        "d",
        (
            re.compile(r"\bD\.?\s*(\d+)([a-z])?", re.IGNORECASE),
            re.compile(r"\bDeutsch\s*(\d+)", re.IGNORECASE),
        ),
    ),
    (
        "hob",
        (
            re.compile(r"\bHob\.?\s*([IVX]+)[:/]?\s*(\d+)", re.IGNORECASE),
            re.compile(r"\bHoboken\s*([IVX]+)[:/]?\s*(\d+)", re.IGNORECASE),
        ),
    ),
    ("hwv", (re.compile(r"\bHWV\s*\.?\s*(\d+)([a-z])?", re.IGNORECASE),)),
    (
        "rv",
        (
            re.compile(r"\bRV\s*\.?\s*(\d+)([a-z])?", re.IGNORECASE),
            re.compile(r"\bRyom\s*(\d+)", re.IGNORECASE),
        ),
    ),
    ("woo", (re.compile(r"\bWoO\s*\.?\s*(\d+)", re.IGNORECASE),)),
    ("s", (re.compile(r"\bS\.?\s*(\d+)([a-z])?", re.IGNORECASE),)),  # Searle (Liszt)
    ("wwv", (re.compile(r"\bWWV\s*\.?\s*(\d+)", re.IGNORECASE),)),
    ("tw", (re.compile(r"\bTWV\s*\.?\s*(\d+)[:/](\d+)", re.IGNORECASE),)),
    ("l", (re.compile(r"\bL\.?\s*(\d+)", re.IGNORECASE),)),  # Longo (Scarlatti)
    (
        "op",
        (
            re.compile(r"\bOp(?:us)?\.?\s*(\d+)(?:\s*(?:No\.?|Nr\.?|,)\s*(\d+))?", re.IGNORECASE),
            re.compile(r"\bOp(?:us)?\.?\s*posth(?:umous)?\.?", re.IGNORECASE),
        ),
    ),
)

POSTHUMOUS_PATTERN: re.Pattern[str] = re.compile(r"posth", re.IGNORECASE)
DIGIT_PATTERN: re.Pattern[str] = re.compile(r"\d")
BATCH_SEPARATOR_PATTERN: re.Pattern[str] = re.compile(r"[;,]\s*")
OPUS_PATTERN: re.Pattern[str] = re.compile(
    r"\bOp(?:us)?\.?\s*(\d+)(?:\s*(?:No\.?|Nr\.?|,)\s*(\d+))?", re.IGNORECASE
)
MAX_NUMBER_DIGITS = 9

SYSTEM_PREFIXES: Final[dict[str, str]] = {
    "op": "Op.",
    "bwv": "BWV",
    "k": "K.",
    "d": "D.",
    "hob": "Hob.",
    "hwv": "HWV",
    "rv": "RV",
    "woo": "WoO",
    "s": "S.",
    "wwv": "WWV",
    "tw": "TWV",
    "l": "L.",
}

SYSTEM_NAMES: Final[dict[str, str]] = {
    "op": "Opus",
    "bwv": "Bach-Werke-Verzeichnis",
    "k": "Köchel (Mozart)",
    "d": "Deutsch (Schubert)",
    "hob": "Hoboken (Haydn)",
    "hwv": "Händel-Werke-Verzeichnis",
    "rv": "Ryom-Verzeichnis (Vivaldi)",
    "woo": "Werke ohne Opuszahl",
    "s": "Searle (Liszt)",
    "wwv": "Wagner-Werk-Verzeichnis",
    "tw": "Telemann-Werke-Verzeichnis",
    "l": "Longo (Scarlatti)",
}


def _group(match: re.Match[str], index: int) -> str | None:
    """Return a capture group, or None when the pattern has fewer groups."""
    if index > (match.re.groups or 0):
        return None
    return match.group(index)


def _to_number(digits: str | None) -> int | None:
    """Convert a digit run, or None when it is absent or too long to be a number."""
    if not digits or len(digits) > MAX_NUMBER_DIGITS:
        return None
    return int(digits)


def parse_catalogue(text: str) -> CatalogueInfo | None:
    """Parse a catalogue designation.

    Args:
        text: Free text such as ``"Op. 27 No. 2"`` or ``"BWV 1001a"``.

    Returns:
        CatalogueInfo for a known system; a raw-only CatalogueInfo when the
        text is unrecognized but contains a digit; None otherwise.

    Examples:
        >>> parse_catalogue("Op. 27 No. 2")
        CatalogueInfo(raw='Op. 27 No. 2', system='op', number=27, suffix='No.2')
        >>> parse_catalogue("Hob. XVI:52")
        CatalogueInfo(raw='Hob. XVI:52', system='hob', number=52, suffix='XVI')
        >>> parse_catalogue("Custom 123")
        CatalogueInfo(raw='Custom 123', system=None, number=None, suffix=None)
        >>> parse_catalogue("Just text") is None
        True
    """
    if not text:
        return None

    trimmed = text.strip()
    if not trimmed:
        return None

    for system, patterns in CATALOGUE_PATTERNS:
        for pattern in patterns:
            match = pattern.search(trimmed)
            if match:
                return _build_catalogue(trimmed, system, match)

    if DIGIT_PATTERN.search(trimmed):
        return CatalogueInfo(raw=trimmed)

    return None


def _build_catalogue(raw: str, system: CatalogueSystem, match: re.Match[str]) -> CatalogueInfo:
    """Turn a pattern match into a CatalogueInfo using the per-system rules."""
    first = _group(match, 1)
    second = _group(match, 2)

    if system == "hob" and first and second:
        # Roman numeral category is secondary; the number after the colon is primary
        return CatalogueInfo(raw=raw, system=system, number=_to_number(second), suffix=first)

    if system == "tw" and first and second:
        return CatalogueInfo(raw=raw, system=system, number=_to_number(first), suffix=second)

    if system == "op":
        if POSTHUMOUS_PATTERN.search(raw):
            return CatalogueInfo(raw=raw, system=system, suffix="posth.")
        return CatalogueInfo(
            raw=raw,
            system=system,
            number=_to_number(first),
            suffix=f"No.{second}" if second else None,
        )

    return CatalogueInfo(
        raw=raw,
        system=system,
        number=_to_number(first),
        suffix=second.lower() if second else None,
    )


def parse_all_catalogues(text: str) -> list[CatalogueInfo]:
    """Parse every ``;``/``,`` separated designation, dropping unparseable segments.

    Examples:
        >>> [c.system for c in parse_all_catalogues("BWV 1001; K. 331, notes")]
        ['bwv', 'k']
    """
    if not text:
        return []

    results: list[CatalogueInfo] = []
    for part in BATCH_SEPARATOR_PATTERN.split(text):
        parsed = parse_catalogue(part.strip())
        if parsed is not None:
            results.append(parsed)
    return results


def format_catalogue(info: CatalogueInfo) -> str:
    """Format a CatalogueInfo back to display text.

    Returns ``info.raw`` unchanged when the system or number is missing.

    Examples:
        >>> format_catalogue(CatalogueInfo(raw="", system="hob", number=52, suffix="XVI"))
        'Hob. XVI:52'
        >>> format_catalogue(CatalogueInfo(raw="", system="op", number=27, suffix="No.2"))
        'Op. 27 No.2'
    """
    if not info.system or not info.number:
        return info.raw

    prefix = SYSTEM_PREFIXES.get(info.system, info.system.upper())
    result = f"{prefix} {info.number}"

    if info.suffix:
        if info.system == "op" and info.suffix.startswith("No"):
            result += f" {info.suffix}"
        elif info.system == "hob":
            result = f"{prefix} {info.suffix}:{info.number}"
        else:
            result += info.suffix

    return result


def get_catalogue_system_name(system: str) -> str:
    """Return the full name of a catalogue system, e.g. ``'Bach-Werke-Verzeichnis'``."""
    return SYSTEM_NAMES.get(system, system)


def compare_catalogues(a: CatalogueInfo, b: CatalogueInfo) -> int:
    """Compare two designations: system, then number, then suffix.

    Absent systems and suffixes compare as ``""`` and absent numbers as 0,
    which makes this a total order.

    Returns:
        Negative if ``a`` sorts first, positive if ``b`` does, 0 if equal.
    """
    a_key = (a.system or "", a.number or 0, a.suffix or "")
    b_key = (b.system or "", b.number or 0, b.suffix or "")
    if a_key < b_key:
        return -1
    if a_key > b_key:
        return 1
    return 0


def sort_catalogues(catalogues: list[CatalogueInfo]) -> list[CatalogueInfo]:
    """Return a new list sorted with :func:`compare_catalogues`."""
    return sorted(catalogues, key=cmp_to_key(compare_catalogues))


def parse_opus(text: str) -> tuple[int, int | None] | None:
    """Extract ``(opus, number)`` from text such as ``"Op. 10 No. 3"`` or ``"Op. 10, 3"``.

    Examples:
        >>> parse_opus("Etude Op.10 No.3")
        (10, 3)
        >>> parse_opus("BWV 1007") is None
        True
    """
    match = OPUS_PATTERN.search(text or "")
    if not match:
        return None
    opus = _to_number(match.group(1))
    if opus is None:
        return None
    return opus, _to_number(match.group(2))
