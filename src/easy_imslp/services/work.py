"""Work lookups: work pages parsed into Work records."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from easy_imslp.api.errors import ErrorDetails, ImslpError, NotFoundError
from easy_imslp.api.mediawiki import CategoryMember, MediaWikiApi
from easy_imslp.parsers.response import (
    create_composer_reference,
    extract_composer_from_slug,
    format_slug_as_title,
    parse_work_wikitext,
)
from easy_imslp.parsers.types import ParseResult, ValidationResult, Work
from easy_imslp.services.composer import CATEGORY_PREFIX, normalize_slug
from easy_imslp.services.validation import validate_work
from easy_imslp.urls import build_page_url

logger = logging.getLogger(__name__)

FIND_SUGGESTION_LIMIT = 5


def minimal_work(slug: str, composer_slug: str | None = None) -> Work:
    """Work built from the slug alone, for pages that could not be fetched."""
    title = format_slug_as_title(slug)
    if composer_slug:
        composer = create_composer_reference(composer_slug)
    else:
        composer = create_composer_reference(extract_composer_from_slug(slug) or "", "")
    return Work(
        slug=slug,
        title=title,
        full_title=title,
        url=build_page_url(slug),
        composer=composer,
    )


class WorkService:
    """Fetch and parse work pages."""

    def __init__(self, mediawiki: MediaWikiApi) -> None:
        self.mediawiki = mediawiki

    def get_work(self, slug: str) -> ParseResult[Work]:
        """Fetch a work page by slug and parse it.

        Raises:
            NotFoundError: The page is empty or could not be fetched.
        """
        normalized = normalize_slug(slug)
        details = ErrorDetails(
            url=build_page_url(normalized),
            suggestion="Check the slug format. Use find_work() for fuzzy matching.",
        )

        try:
            wikitext = self.mediawiki.get_page_wikitext(normalized)
        except ImslpError as e:
            raise NotFoundError(f"Work not found: {slug}", details) from e

        if not wikitext:
            raise NotFoundError(f"Work not found: {slug}", details)

        return parse_work_wikitext(wikitext, normalized)

    def find_work(self, query: str) -> ParseResult[Work | None]:
        """Best-effort lookup of a work by partial title."""
        suggestions = self.mediawiki.open_search(query, FIND_SUGGESTION_LIMIT)
        titles = [title for title in suggestions if not title.startswith(CATEGORY_PREFIX)]
        if not titles:
            logger.info(f"No work found for query: {query}")
            return ParseResult(data=None, warnings=[f"No work found for query: {query}"])

        title = titles[0]
        try:
            wikitext = self.mediawiki.get_page_wikitext(title)
        except ImslpError as e:
            logger.warning(f"Failed to fetch work {title}: {e}")
            return ParseResult(data=None, warnings=[f"Failed to parse work: {title}"])

        parsed = parse_work_wikitext(wikitext, title)
        return ParseResult(data=parsed.data, warnings=parsed.warnings)

    def _parse_member(self, member: CategoryMember, composer_slug: str) -> ParseResult[Work]:
        try:
            wikitext = self.mediawiki.get_page_wikitext(member.title)
        except ImslpError as e:
            logger.warning(f"Failed to fetch work {member.title}: {e}")
            return ParseResult(
                data=minimal_work(member.title, composer_slug),
                warnings=[f"Failed to fully parse work: {member.title}"],
            )
        return parse_work_wikitext(wikitext, member.title, composer_slug)

    def browse_composer_works(self, composer_slug: str) -> Iterator[ParseResult[Work]]:
        """Yield every work in the composer's category, skipping subcategories."""
        category_title = f"{CATEGORY_PREFIX}{normalize_slug(composer_slug)}"
        for member in self.mediawiki.browse_category_members(category_title):
            if member.title.startswith(CATEGORY_PREFIX):
                continue
            yield self._parse_member(member, composer_slug)

    def get_composer_works(self, composer_slug: str, limit: int = 50) -> ParseResult[list[Work]]:
        """First page (up to ``limit``) of the composer's works."""
        category_title = f"{CATEGORY_PREFIX}{normalize_slug(composer_slug)}"
        members, _ = self.mediawiki.get_category_members(category_title, limit=limit)

        works: list[Work] = []
        warnings: list[str] = []
        for member in members:
            if member.title.startswith(CATEGORY_PREFIX):
                continue
            parsed = self._parse_member(member, composer_slug)
            works.append(parsed.data)
            warnings.extend(parsed.warnings)

        return ParseResult(data=works, warnings=warnings)

    def validate_work(self, work: Work) -> ValidationResult:
        return validate_work(work)
