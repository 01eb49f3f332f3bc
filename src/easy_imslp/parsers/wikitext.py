"""Wikitext template extraction and markup utilities.

IMSLP stores composer, work and score metadata in MediaWiki templates such
as ``{{Composer|first_name=...}}`` and ``{{Work|work_title=...}}``. This
module finds those templates, splits them into named and positional
parameters, and provides small helpers for links, markup stripping and
year parsing.

Template boundaries come from a single brace-depth pass over the page, so
extraction stays linear in the page size and unbalanced braces are left
as plain text. Each balanced ``{{...}}`` run is tokenized with
mwparserfromhell; runs the tokenizer does not accept as one template are
split on ``|`` and ``=`` outside nested ``{{...}}`` and ``[[...]]``.

Nothing in this module raises for string input.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

import mwparserfromhell
from mwparserfromhell.nodes import Template

from easy_imslp.parsers.types import TemplateInvocation, WikiLink, YearRange

if TYPE_CHECKING:
    from mwparserfromhell.wikicode import Wikicode

# Template boundaries
BRACE_PAIR_PATTERN: re.Pattern[str] = re.compile(r"\{\{|\}\}")
NESTING_TOKEN_PATTERN: re.Pattern[str] = re.compile(r"\{\{|\}\}|\[\[|\]\]|[|=]")

# Value cleaning
HTML_COMMENT_PATTERN: re.Pattern[str] = re.compile(r"<!--.*?-->", re.DOTALL)
BR_TAG_PATTERN: re.Pattern[str] = re.compile(r"<br\s*/?>", re.IGNORECASE)
HTML_TAG_PATTERN: re.Pattern[str] = re.compile(r"<[^>]+>")

# [[Target]] or [[Target|Display]]
WIKI_LINK_PATTERN: re.Pattern[str] = re.compile(r"\[\[([^\]|]+)(?:\|([^\]]+))?\]\]")

# Markup stripping, applied in declaration order
STRIP_LINK_PATTERN: re.Pattern[str] = re.compile(r"\[\[(?:[^\]|]+\|)?([^\]]+)\]\]")
BOLD_PATTERN: re.Pattern[str] = re.compile(r"'''([^']+)'''")
ITALIC_PATTERN: re.Pattern[str] = re.compile(r"''([^']+)''")
FLAT_TEMPLATE_PATTERN: re.Pattern[str] = re.compile(r"\{\{[^}]+\}\}")
REF_BLOCK_PATTERN: re.Pattern[str] = re.compile(
    r"<ref(?:\s[^>]*)?(?<!/)>.*?</ref>",
    re.IGNORECASE | re.DOTALL,
)
REF_SELF_CLOSING_PATTERN: re.Pattern[str] = re.compile(r"<ref[^>]*/>", re.IGNORECASE)

# Years
# Digit runs are bounded so int() never sees an oversized string
CENTURY_PATTERN: re.Pattern[str] = re.compile(
    r"\b(\d{1,2})(?:st|nd|rd|th)\s*century", re.IGNORECASE
)
NUMERIC_PATTERN: re.Pattern[str] = re.compile(r"\d{1,4}")
FOUR_DIGIT_YEAR_PATTERN: re.Pattern[str] = re.compile(r"\b(\d{4})\b")
YEAR_RANGE_PATTERN: re.Pattern[str] = re.compile(r"(\d{4})\s*[-–]\s*(\d{4})")

MAX_YEAR = 3000


# =============================================================================
# TEMPLATE EXTRACTION
# =============================================================================


def _template_spans(wikitext: str) -> list[tuple[int, int]]:
    """Offsets of balanced top-level ``{{...}}`` runs, in one left-to-right pass.

    A stray ``}}`` at depth zero is ignored; an opening that never closes
    yields nothing.
    """
    spans: list[tuple[int, int]] = []
    depth = 0
    start = 0
    for match in BRACE_PAIR_PATTERN.finditer(wikitext):
        if match.group() == "{{":
            if depth == 0:
                start = match.start()
            depth += 1
        elif depth > 0:
            depth -= 1
            if depth == 0:
                spans.append((start, match.end()))
    return spans


def _unnested_positions(content: str, separator: str) -> list[int]:
    """Positions of ``separator`` outside nested ``{{...}}`` and ``[[...]]``."""
    template_depth = 0
    link_depth = 0
    positions: list[int] = []
    for match in NESTING_TOKEN_PATTERN.finditer(content):
        token = match.group()
        if token == "{{":
            template_depth += 1
        elif token == "}}":
            template_depth = max(template_depth - 1, 0)
        elif token == "[[":
            link_depth += 1
        elif token == "]]":
            link_depth = max(link_depth - 1, 0)
        elif token == separator and template_depth == 0 and link_depth == 0:
            positions.append(match.start())
    return positions


def _split_invocation(template_str: str) -> TemplateInvocation | None:
    """Split balanced ``{{name|...}}`` text that mwparserfromhell kept as plain text.

    The tokenizer rejects names holding ``[``, ``<`` or a newline, and reads
    ``{{{{...}}}}`` as argument syntax.
    """
    inner = template_str[2:-2].strip()
    if not inner:
        return None

    cuts = _unnested_positions(inner, "|")
    parts = [inner[a + 1 : b] for a, b in zip([-1, *cuts], [*cuts, len(inner)])]
    name = parts[0].strip()
    if not name:
        return None

    params: dict[str, str] = {}
    positional: list[str] = []
    last_index = len(parts) - 1

    for index, part in enumerate(parts[1:], start=1):
        if index == last_index and not part:
            continue
        equals = _unnested_positions(part, "=")
        if equals:
            key = part[: equals[0]].strip()
            if key:
                params[key] = _clean_value(part[equals[0] + 1 :])
        else:
            positional.append(_clean_value(part))

    return TemplateInvocation(name=name, params=params, positional=positional, raw=template_str)


def _parse_wikicode(wikitext: str) -> Wikicode | None:
    try:
        return mwparserfromhell.parse(wikitext)
    except Exception:
        # Tokenizer failures fall through to the plain split
        return None


def _parse_span(template_str: str) -> TemplateInvocation | None:
    """Parse one balanced ``{{...}}`` run."""
    wikicode = _parse_wikicode(template_str)
    if wikicode is not None:
        nodes = wikicode.nodes
        if len(nodes) == 1 and isinstance(nodes[0], Template):
            return _to_invocation(nodes[0])
    return _split_invocation(template_str)


def _to_invocation(template: Template) -> TemplateInvocation | None:
    """Convert an mwparserfromhell Template, or None when its name is empty."""
    name = str(template.name).strip()
    if not name:
        return None

    params: dict[str, str] = {}
    positional: list[str] = []
    last_index = len(template.params) - 1

    for index, param in enumerate(template.params):
        value = str(param.value)
        if param.showkey:
            key = str(param.name).strip()
            if key:
                params[key] = _clean_value(value)
        elif index == last_index and not value.strip():
            # {{Name|a|}}: a trailing pipe is not an empty positional
            continue
        else:
            positional.append(_clean_value(value))

    return TemplateInvocation(name=name, params=params, positional=positional, raw=str(template))


def extract_templates(wikitext: str) -> list[TemplateInvocation]:
    """Extract all top-level templates from wikitext, in document order.

    Templates nested inside another template's parameters are kept verbatim
    in that parameter's value and are not returned separately. Unclosed
    openings are ignored, as are stray ``}}`` outside any template.

    Args:
        wikitext: Raw page markup.

    Returns:
        Parsed template invocations. Empty templates (``{{}}``) and
        templates with an empty name are skipped.

    Examples:
        >>> [t.name for t in extract_templates("{{A|x={{B}}}} text {{C}}")]
        ['A', 'C']
    """
    if not wikitext:
        return []

    templates: list[TemplateInvocation] = []
    for start, end in _template_spans(wikitext):
        invocation = _parse_span(wikitext[start:end])
        if invocation is not None:
            templates.append(invocation)
    return templates


def parse_template(template_str: str) -> TemplateInvocation | None:
    """Parse a single ``{{Name|key=value|positional}}`` string.

    Args:
        template_str: Template text including the outer braces.

    Returns:
        TemplateInvocation, or None when the input is not exactly one
        balanced template, the body is empty, or the name is empty.

    Examples:
        >>> t = parse_template("{{Test|key1=value1|key2=value2}}")
        >>> t.name, t.params
        ('Test', {'key1': 'value1', 'key2': 'value2'})
        >>> parse_template("{{}}") is None
        True
    """
    if _template_spans(template_str) != [(0, len(template_str))]:
        return None
    return _parse_span(template_str)


def _clean_value(value: str) -> str:
    """Remove comments and tags from a parameter value; ``<br>`` becomes a newline."""
    value = HTML_COMMENT_PATTERN.sub("", value)
    value = BR_TAG_PATTERN.sub("\n", value)
    value = HTML_TAG_PATTERN.sub("", value)
    return value.strip()


# =============================================================================
# TEMPLATE LOOKUP
# =============================================================================


def find_template(wikitext: str, template_name: str) -> TemplateInvocation | None:
    """Find the first template matching ``template_name``.

    An exact case-insensitive match wins over a prefix match, so
    ``find_template(text, "Work")`` prefers ``{{Work}}`` to ``{{Workinfo}}``
    wherever they appear.
    """
    templates = extract_templates(wikitext)
    wanted = template_name.lower()

    for template in templates:
        if template.name.lower() == wanted:
            return template
    for template in templates:
        if template.name.lower().startswith(wanted):
            return template
    return None


def find_all_templates(wikitext: str, template_name: str) -> list[TemplateInvocation]:
    """Find all templates named ``template_name`` or ``template_name/<subpage>``."""
    wanted = template_name.lower()
    return [
        t
        for t in extract_templates(wikitext)
        if t.name.lower() == wanted or t.name.lower().startswith(wanted + "/")
    ]


# =============================================================================
# LINKS AND MARKUP
# =============================================================================


def extract_wiki_links(text: str) -> list[WikiLink]:
    """Extract ``[[target]]`` and ``[[target|display]]`` links.

    Examples:
        >>> extract_wiki_links("[[Oslo]] and [[Karl Marx|Marx]]")
        [WikiLink(target='Oslo', display='Oslo'), WikiLink(target='Karl Marx', display='Marx')]
    """
    links: list[WikiLink] = []
    for match in WIKI_LINK_PATTERN.finditer(text):
        target = match.group(1).strip()
        display = match.group(2).strip() if match.group(2) is not None else target
        links.append(WikiLink(target=target, display=display))
    return links


def strip_wiki_markup(text: str) -> str:
    """Reduce wikitext to plain text.

    Links become their display text, bold/italic quotes are dropped,
    templates, references and comments are removed. Template removal is a
    single non-recursive pass: ``{{A|{{B}}}}`` leaves a stray ``}}``.

    Examples:
        >>> strip_wiki_markup("'''Allegro''' in [[C major|C]]{{fn}}")
        'Allegro in C'
    """
    text = STRIP_LINK_PATTERN.sub(r"\1", text)
    text = BOLD_PATTERN.sub(r"\1", text)
    text = ITALIC_PATTERN.sub(r"\1", text)
    text = FLAT_TEMPLATE_PATTERN.sub("", text)
    text = REF_BLOCK_PATTERN.sub("", text)
    text = REF_SELF_CLOSING_PATTERN.sub("", text)
    text = HTML_COMMENT_PATTERN.sub("", text)
    return text.strip()


# =============================================================================
# YEARS
# =============================================================================


def parse_year(text: str) -> int | None:
    """Parse a year from free text.

    Tries, in order: an ordinal century (mid-century approximation), a
    purely numeric string, then the first standalone four-digit number.
    Years must fall in (0, 3000).

    Examples:
        >>> parse_year("18th century")
        1750
        >>> parse_year("Born in 1770")
        1770
        >>> parse_year("unknown") is None
        True
    """
    if not text:
        return None

    trimmed = text.strip()

    century_match = CENTURY_PATTERN.search(trimmed)
    if century_match:
        century = int(century_match.group(1))
        return (century - 1) * 100 + 50

    if NUMERIC_PATTERN.fullmatch(trimmed):
        direct = int(trimmed)
        if 0 < direct < MAX_YEAR:
            return direct

    year_match = FOUR_DIGIT_YEAR_PATTERN.search(trimmed)
    if year_match:
        year = int(year_match.group(1))
        if 0 < year < MAX_YEAR:
            return year

    return None


def parse_year_range(text: str) -> YearRange:
    """Parse ``1770-1827`` (hyphen or en dash) or a single year.

    Examples:
        >>> parse_year_range("1770–1827")
        YearRange(start=1770, end=1827)
        >>> parse_year_range("c. 1770")
        YearRange(start=1770, end=None)
    """
    if not text:
        return YearRange()

    range_match = YEAR_RANGE_PATTERN.search(text)
    if range_match:
        return YearRange(start=int(range_match.group(1)), end=int(range_match.group(2)))

    year = parse_year(text)
    if year is not None:
        return YearRange(start=year)

    return YearRange()
