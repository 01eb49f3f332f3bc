"""Data-quality checks for parsed works and scores."""

from __future__ import annotations

from datetime import date

from easy_imslp.parsers.types import Score, ValidationIssue, ValidationResult, Work

EARLIEST_COMPOSITION_YEAR = 800
EARLIEST_PUBLICATION_YEAR = 1400


def _result(issues: list[ValidationIssue]) -> ValidationResult:
    return ValidationResult(
        valid=not any(issue.severity == "error" for issue in issues),
        issues=issues,
    )


def validate_work(work: Work, current_year: int | None = None) -> ValidationResult:
    """Check required and recommended Work fields.

    Missing title or composer are errors; everything else is a warning.
    """
    current_year = current_year or date.today().year
    issues: list[ValidationIssue] = []

    if not work.title:
        issues.append(ValidationIssue("title", "Work title is missing", "error"))
    if not work.composer.slug and not work.composer.name:
        issues.append(ValidationIssue("composer", "Composer information is missing", "error"))

    if not work.instrumentation:
        issues.append(
            ValidationIssue("instrumentation", "No instrumentation data available", "warning")
        )
    if not work.year:
        issues.append(ValidationIssue("year", "Composition year is missing", "warning"))
    if not work.key:
        issues.append(ValidationIssue("key", "Musical key is missing", "warning"))

    if work.year and not EARLIEST_COMPOSITION_YEAR <= work.year <= current_year:
        issues.append(
            ValidationIssue("year", f"Composition year {work.year} seems invalid", "warning")
        )
    if work.difficulty and not 1 <= work.difficulty.level <= 9:
        issues.append(
            ValidationIssue(
                "difficulty",
                f"Difficulty level {work.difficulty.level} is out of range (1-9)",
                "warning",
            )
        )

    return _result(issues)


def validate_score(score: Score, current_year: int | None = None) -> ValidationResult:
    """Check required and recommended Score fields."""
    current_year = current_year or date.today().year
    issues: list[ValidationIssue] = []

    if not score.filename:
        issues.append(ValidationIssue("filename", "Score filename is missing", "error"))
    if not score.url:
        issues.append(ValidationIssue("url", "Score URL is missing", "error"))

    if not score.editor and not score.publisher:
        issues.append(
            ValidationIssue("editor", "No editor or publisher information available", "warning")
        )
    if score.page_count is None:
        issues.append(ValidationIssue("page_count", "Page count is missing", "warning"))
    elif score.page_count <= 0:
        issues.append(
            ValidationIssue("page_count", f"Page count {score.page_count} is invalid", "warning")
        )

    if score.publication_year and not (
        EARLIEST_PUBLICATION_YEAR <= score.publication_year <= current_year
    ):
        issues.append(
            ValidationIssue(
                "publication_year",
                f"Publication year {score.publication_year} seems invalid",
                "warning",
            )
        )

    return _result(issues)
