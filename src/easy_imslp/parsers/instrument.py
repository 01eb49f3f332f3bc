"""Instrument name normalization.

Instrumentation fields on IMSLP are free text in several languages with
plenty of abbreviations (``vln.``, ``Pf``, ``Violoncello``, ``Kontrabass``).
This module maps them to a small set of canonical names, classifies them
into families and sorts them in approximate orchestral score order.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Final

from easy_imslp.parsers.types import InstrumentFamily, InstrumentInfo, KnownInstrument

# Canonical name -> accepted aliases (lower-case)
_ALIASES_BY_INSTRUMENT: Final[dict[KnownInstrument, tuple[str, ...]]] = {
    "piano": (
        "piano", "pianoforte", "pf", "pf.", "pno", "pno.", "klavier", "keyboard", "kbd",
        "fortepiano", "fp",
    ),
    "violin": (
        "violin", "violins", "vln", "vln.", "vn", "vn.", "v.", "violino", "violine", "fiddle",
    ),
    "viola": ("viola", "violas", "vla", "vla.", "va", "va.", "alto (instrument)", "bratsche"),
    "cello": ("cello", "cellos", "violoncello", "vc", "vc.", "vlc", "vlc."),
    "double-bass": (
        "double bass", "double-bass", "doublebass", "contrabass", "bass", "cb", "cb.", "db",
        "db.", "kontrabass",
    ),
    "flute": ("flute", "flutes", "fl", "fl.", "flauto", "flauti", "flöte", "piccolo"),
    "oboe": ("oboe", "oboes", "ob", "ob.", "oboi", "hautbois", "english horn", "cor anglais"),
    "clarinet": (
        "clarinet", "clarinets", "cl", "cl.", "clar", "clar.", "clarinetto", "klarinette",
        "bass clarinet",
    ),
    "bassoon": (
        "bassoon", "bassoons", "bsn", "bsn.", "bn", "bn.", "fagott", "fagotto",
        "contrabassoon", "contrafagotto",
    ),
    "horn": (
        "horn", "horns", "hn", "hn.", "hr", "hr.", "cor", "corno", "corni", "french horn",
        "waldhorn",
    ),
    "trumpet": (
        "trumpet", "trumpets", "tpt", "tpt.", "tr", "tr.", "trp", "tromba", "trombe",
        "trompete", "cornet",
    ),
    "trombone": (
        "trombone", "trombones", "trb", "trb.", "tbn", "tbn.", "posaune", "bass trombone",
    ),
    "tuba": ("tuba", "tubas", "tb", "tb.", "euphonium", "baritone horn", "sousaphone"),
    "voice": (
        "voice", "voices", "vocal", "vocals", "v", "soprano", "mezzo", "mezzo-soprano", "alto",
        "contralto", "tenor", "baritone", "bass voice", "singer", "voce", "voci",
    ),
    "organ": ("organ", "organs", "org", "org.", "orgel", "organo", "pipe organ", "harmonium"),
    "guitar": (
        "guitar", "guitars", "gtr", "gtr.", "git", "git.", "gitarre", "chitarra", "lute",
        "classical guitar",
    ),
    "harp": ("harp", "harps", "hp", "hp.", "arpa", "harfe"),
    "orchestra": (
        "orchestra", "orch", "orch.", "orchestral", "symphonic", "symphony orchestra",
        "full orchestra", "orchester",
    ),
    "chamber-ensemble": (
        "chamber ensemble", "chamber-ensemble", "ensemble", "chamber", "string quartet",
        "piano trio", "wind quintet", "brass quintet", "quartet", "quintet", "trio", "duet",
        "duo",
    ),
    "choir": (
        "choir", "choirs", "chorus", "choral", "chor", "coro", "satb", "mixed choir",
        "men's choir", "women's choir", "children's choir",
    ),
}

# Flattened alias -> canonical lookup
INSTRUMENT_ALIASES: Final[dict[str, KnownInstrument]] = {
    alias: canonical
    for canonical, aliases in _ALIASES_BY_INSTRUMENT.items()
    for alias in aliases
}

KNOWN_INSTRUMENTS: Final[frozenset[str]] = frozenset(_ALIASES_BY_INSTRUMENT)

INSTRUMENT_FAMILIES: Final[dict[str, InstrumentFamily]] = {
    "violin": "strings",
    "viola": "strings",
    "cello": "strings",
    "double-bass": "strings",
    "guitar": "strings",
    "harp": "strings",
    "flute": "woodwinds",
    "oboe": "woodwinds",
    "clarinet": "woodwinds",
    "bassoon": "woodwinds",
    "horn": "brass",
    "trumpet": "brass",
    "trombone": "brass",
    "tuba": "brass",
    "piano": "keyboard",
    "organ": "keyboard",
    "voice": "vocal",
    "choir": "vocal",
    "orchestra": "ensemble",
    "chamber-ensemble": "ensemble",
}

# Approximate orchestral score order
INSTRUMENT_ORDER: Final[dict[str, int]] = {
    "flute": 1,
    "oboe": 2,
    "clarinet": 3,
    "bassoon": 4,
    "horn": 5,
    "trumpet": 6,
    "trombone": 7,
    "tuba": 8,
    "piano": 10,
    "organ": 11,
    "violin": 20,
    "viola": 21,
    "cello": 22,
    "double-bass": 23,
    "guitar": 24,
    "harp": 25,
    "voice": 30,
    "choir": 31,
    "orchestra": 40,
    "chamber-ensemble": 41,
}
UNKNOWN_INSTRUMENT_RANK = 100

INSTRUMENT_SEPARATOR_PATTERN: re.Pattern[str] = re.compile(r"[,;]|\band\b|&", re.IGNORECASE)


def normalize_instrument(raw: str) -> str:
    """Map free-text instrument to its canonical name.

    Lookup order: the case-folded text, then without a trailing period, then
    without a plural ``s`` (input longer than 2 characters), then without a
    plural ``es`` (input longer than 3). Unknown instruments come back
    trimmed with their original case.

    Examples:
        >>> normalize_instrument("vln.")
        'violin'
        >>> normalize_instrument("Violoncellos")
        'cello'
        >>> normalize_instrument(" Theremin ")
        'Theremin'
    """
    trimmed = raw.strip()
    key = trimmed.casefold()

    if key in INSTRUMENT_ALIASES:
        return INSTRUMENT_ALIASES[key]

    if key.endswith(".") and key[:-1] in INSTRUMENT_ALIASES:
        return INSTRUMENT_ALIASES[key[:-1]]

    if key.endswith("s") and len(key) > 2 and key[:-1] in INSTRUMENT_ALIASES:
        return INSTRUMENT_ALIASES[key[:-1]]

    if key.endswith("es") and len(key) > 3 and key[:-2] in INSTRUMENT_ALIASES:
        return INSTRUMENT_ALIASES[key[:-2]]

    return trimmed


def parse_instrument(raw: str) -> InstrumentInfo:
    """Pair trimmed instrument text with its normalized name."""
    return InstrumentInfo(raw=raw.strip(), normalized=normalize_instrument(raw))


def parse_instruments(text: str) -> list[InstrumentInfo]:
    """Split an instrumentation list and normalize each entry.

    Separators are commas, semicolons, ampersands and the word ``and``.

    Examples:
        >>> [i.normalized for i in parse_instruments("Violin, Viola and Cello")]
        ['violin', 'viola', 'cello']
    """
    if not text:
        return []

    return [
        parse_instrument(part)
        for part in INSTRUMENT_SEPARATOR_PATTERN.split(text)
        if part.strip()
    ]


def is_known_instrument(name: str) -> bool:
    """Return True when ``name`` normalizes to a canonical instrument."""
    return normalize_instrument(name) in KNOWN_INSTRUMENTS


def get_instrument_family(name: str) -> InstrumentFamily:
    """Classify a canonical instrument name; unknown names are ``'other'``."""
    return INSTRUMENT_FAMILIES.get(name, "other")


def sort_instruments(instruments: Iterable[InstrumentInfo]) -> list[InstrumentInfo]:
    """Return a new list in score order; unknown instruments go last, stable."""
    return sorted(
        instruments,
        key=lambda info: INSTRUMENT_ORDER.get(info.normalized, UNKNOWN_INSTRUMENT_RANK),
    )
