"""Parser modules for IMSLP wikitext.

This package turns raw MediaWiki markup from IMSLP pages into typed records:

- **Templates**: ``{{Composer|...}}``, ``{{Work|...}}`` and file templates,
  split into named and positional parameters
- **Catalogues**: ``Op. 27 No. 2``, ``BWV 1007``, ``Hob. XVI:52``, ...
- **Instruments**: ``vln.``, ``Violoncello``, ``Kontrabass`` -> canonical names
- **Records**: Composer, Work and Score built with warnings instead of errors

All functions are pure and never raise for string input.

Example usage::

    from easy_imslp.parsers import parse_work_wikitext

    result = parse_work_wikitext(wikitext, "Cello_Suite_No.1,_BWV_1007_(Bach,_Johann_Sebastian)")
    print(result.data.catalogue, result.warnings)
"""

from easy_imslp.parsers.catalogue import (
    compare_catalogues,
    format_catalogue,
    get_catalogue_system_name,
    parse_all_catalogues,
    parse_catalogue,
    parse_opus,
    sort_catalogues,
)
from easy_imslp.parsers.instrument import (
    get_instrument_family,
    is_known_instrument,
    normalize_instrument,
    parse_instrument,
    parse_instruments,
    sort_instruments,
)
from easy_imslp.parsers.response import (
    create_composer_reference,
    parse_composer_wikitext,
    parse_score_wikitext,
    parse_work_wikitext,
)
from easy_imslp.parsers.types import (
    CatalogueInfo,
    Composer,
    ComposerReference,
    DifficultyRating,
    InstrumentInfo,
    Movement,
    ParseResult,
    Score,
    SearchResult,
    TemplateInvocation,
    ValidationIssue,
    ValidationResult,
    WikiLink,
    Work,
    YearRange,
)
from easy_imslp.parsers.wikitext import (
    extract_templates,
    extract_wiki_links,
    find_all_templates,
    find_template,
    parse_template,
    parse_year,
    parse_year_range,
    strip_wiki_markup,
)

__all__ = [
    "CatalogueInfo",
    "Composer",
    "ComposerReference",
    "DifficultyRating",
    "InstrumentInfo",
    "Movement",
    "ParseResult",
    "Score",
    "SearchResult",
    "TemplateInvocation",
    "ValidationIssue",
    "ValidationResult",
    "WikiLink",
    "Work",
    "YearRange",
    "compare_catalogues",
    "create_composer_reference",
    "extract_templates",
    "extract_wiki_links",
    "find_all_templates",
    "find_template",
    "format_catalogue",
    "get_catalogue_system_name",
    "get_instrument_family",
    "is_known_instrument",
    "normalize_instrument",
    "parse_all_catalogues",
    "parse_catalogue",
    "parse_composer_wikitext",
    "parse_instrument",
    "parse_instruments",
    "parse_opus",
    "parse_score_wikitext",
    "parse_template",
    "parse_work_wikitext",
    "parse_year",
    "parse_year_range",
    "sort_catalogues",
    "sort_instruments",
    "strip_wiki_markup",
]
