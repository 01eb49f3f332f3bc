"""Formatting and grouping helpers."""

from easy_imslp.utils.format import (
    format_composer_name,
    format_instrumentation,
    format_lifespan,
    format_work_title,
    format_year_range,
    group_by_composer,
    group_by_genre,
    group_by_instrument,
    slugify,
    truncate,
    unslugify,
)

__all__ = [
    "format_composer_name",
    "format_instrumentation",
    "format_lifespan",
    "format_work_title",
    "format_year_range",
    "group_by_composer",
    "group_by_genre",
    "group_by_instrument",
    "slugify",
    "truncate",
    "unslugify",
]
