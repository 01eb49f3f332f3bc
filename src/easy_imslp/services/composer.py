"""Composer lookups: category pages parsed into Composer records."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from easy_imslp.api.custom import CustomApi
from easy_imslp.api.errors import ErrorDetails, ImslpError, NotFoundError
from easy_imslp.api.mediawiki import NS_MAIN, MediaWikiApi
from easy_imslp.parsers.response import format_slug_as_name, parse_composer_wikitext
from easy_imslp.parsers.types import Composer, ParseResult
from easy_imslp.urls import build_composer_url

logger = logging.getLogger(__name__)

CATEGORY_PREFIX = "Category:"
COMPOSER_SLUG_HINT = 'Check the slug format. Composer slugs use "LastName, FirstName" format.'
FIND_SUGGESTION_LIMIT = 5
WORKS_COUNT_PAGE_SIZE = 500


def normalize_slug(slug: str) -> str:
    """Page titles use underscores for spaces."""
    return slug.strip().replace(" ", "_")


def minimal_composer(slug: str) -> Composer:
    """Composer built from the slug alone, for pages that could not be fetched."""
    name = format_slug_as_name(slug)
    return Composer(
        slug=slug,
        name=name,
        full_name=name,
        sort_name=slug.replace("_", " "),
        url=build_composer_url(slug),
    )


class ComposerService:
    """Fetch and parse composer category pages."""

    def __init__(self, mediawiki: MediaWikiApi, custom_api: CustomApi) -> None:
        self.mediawiki = mediawiki
        self.custom_api = custom_api

    def get_composer(self, slug: str) -> ParseResult[Composer]:
        """Fetch ``Category:<slug>`` and parse it.

        Raises:
            NotFoundError: The page is empty or could not be fetched.
        """
        normalized = normalize_slug(slug)
        category_title = f"{CATEGORY_PREFIX}{normalized}"
        details = ErrorDetails(url=build_composer_url(normalized), suggestion=COMPOSER_SLUG_HINT)

        try:
            wikitext = self.mediawiki.get_page_wikitext(category_title)
        except ImslpError as e:
            raise NotFoundError(f"Composer not found: {slug}", details) from e

        if not wikitext:
            raise NotFoundError(f"Composer not found: {slug}", details)

        return parse_composer_wikitext(wikitext, normalized)

    def find_composer(self, query: str) -> ParseResult[Composer | None]:
        """Best-effort lookup of a composer by partial name."""
        suggestions = self.mediawiki.open_search(f"{CATEGORY_PREFIX}{query}", FIND_SUGGESTION_LIMIT)
        categories = [title for title in suggestions if title.startswith(CATEGORY_PREFIX)]
        if not categories:
            logger.info(f"No composer found for query: {query}")
            return ParseResult(data=None, warnings=[f"No composer found for query: {query}"])

        category_title = categories[0]
        slug = category_title.removeprefix(CATEGORY_PREFIX)
        try:
            wikitext = self.mediawiki.get_page_wikitext(category_title)
        except ImslpError as e:
            logger.warning(f"Failed to fetch composer {slug}: {e}")
            return ParseResult(data=None, warnings=[f"Failed to parse composer: {slug}"])

        parsed = parse_composer_wikitext(wikitext, slug)
        return ParseResult(data=parsed.data, warnings=parsed.warnings)

    def browse_all_composers(self) -> Iterator[ParseResult[Composer]]:
        """Yield every composer known to the listing API.

        Composers whose page cannot be fetched are yielded as minimal
        records with a warning instead of stopping the iteration.
        """
        for person in self.custom_api.browse_all_composers():
            slug = person.slug.removeprefix(CATEGORY_PREFIX)
            try:
                wikitext = self.mediawiki.get_page_wikitext(
                    f"{CATEGORY_PREFIX}{normalize_slug(slug)}"
                )
            except ImslpError as e:
                logger.warning(f"Failed to fetch composer {slug}: {e}")
                yield ParseResult(
                    data=minimal_composer(slug),
                    warnings=[f"Failed to fully parse composer: {slug}"],
                )
                continue
            yield parse_composer_wikitext(wikitext, slug)

    def get_composers_by_letter(self, letter: str, limit: int = 50) -> ParseResult[list[Composer]]:
        """Composers whose slug starts with ``letter``."""
        warnings: list[str] = []
        composers: list[Composer] = []
        wanted = letter.lower()

        hits = self.mediawiki.search_categories(letter, limit=limit)
        for hit in hits.items:
            if not hit.title.startswith(CATEGORY_PREFIX):
                continue
            slug = hit.title.removeprefix(CATEGORY_PREFIX)
            if not slug.lower().startswith(wanted):
                continue
            try:
                wikitext = self.mediawiki.get_page_wikitext(hit.title)
            except ImslpError as e:
                logger.warning(f"Failed to fetch composer {slug}: {e}")
                warnings.append(f"Failed to parse composer: {slug}")
                continue
            parsed = parse_composer_wikitext(wikitext, slug)
            composers.append(parsed.data)
            warnings.extend(parsed.warnings)

        return ParseResult(data=composers, warnings=warnings)

    def get_works_count(self, composer_slug: str) -> int:
        """Number of work pages in the composer's category (0 if it cannot be read)."""
        category_title = f"{CATEGORY_PREFIX}{normalize_slug(composer_slug)}"
        try:
            return sum(
                1
                for _ in self.mediawiki.browse_category_members(
                    category_title, limit=WORKS_COUNT_PAGE_SIZE, namespace=NS_MAIN
                )
            )
        except ImslpError as e:
            logger.warning(f"Could not count works for {composer_slug}: {e}")
            return 0
