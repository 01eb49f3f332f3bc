"""Search over works and composers.

Full-text hits are fetched from the MediaWiki search API and each hit page
is parsed, so filters (instrument, composer) are applied to parsed records.
Because filtering happens after fetching, the service over-fetches: twice
the requested limit without filters, five times with filters.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from easy_imslp.api.errors import ImslpError
from easy_imslp.api.mediawiki import MediaWikiApi
from easy_imslp.parsers.response import parse_composer_wikitext, parse_work_wikitext
from easy_imslp.parsers.types import Composer, ParseResult, SearchResult, Work
from easy_imslp.services.composer import CATEGORY_PREFIX

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10
FETCH_MULTIPLIER = 2
FILTERED_FETCH_MULTIPLIER = 5


@dataclass
class CombinedResults:
    works: list[Work] = field(default_factory=list)
    composers: list[Composer] = field(default_factory=list)


def matches_filters(
    work: Work,
    instruments: Sequence[str] = (),
    composer: str | None = None,
) -> bool:
    """True when ``work`` has one of ``instruments`` and matches ``composer``.

    The composer filter is a case-insensitive substring match against the
    composer reference's slug or name.
    """
    if instruments:
        work_instruments = {info.normalized for info in work.instrumentation}
        if not any(instrument in work_instruments for instrument in instruments):
            return False

    if composer:
        wanted = composer.lower()
        if wanted not in work.composer.slug.lower() and wanted not in work.composer.name.lower():
            return False

    return True


class SearchService:
    """Search works and composers, returning parsed records."""

    def __init__(self, mediawiki: MediaWikiApi) -> None:
        self.mediawiki = mediawiki

    def search(
        self,
        query: str,
        limit: int = DEFAULT_LIMIT,
        instrument: str | Sequence[str] | None = None,
        composer: str | None = None,
    ) -> ParseResult[SearchResult[Work]]:
        """Search works, optionally filtered by instrument and composer.

        Args:
            query: Free-text query.
            limit: Maximum number of works returned.
            instrument: Canonical instrument name(s); a work matches if it
                has any of them.
            composer: Substring of the composer slug or name. Also appended
                to the search query.
        """
        instruments = [instrument] if isinstance(instrument, str) else list(instrument or [])
        search_query = f"{query} {composer}" if composer else query
        multiplier = FILTERED_FETCH_MULTIPLIER if instruments or composer else FETCH_MULTIPLIER

        hits = self.mediawiki.search_works(search_query, limit=limit * multiplier)

        works: list[Work] = []
        warnings: list[str] = []
        for hit in hits.items:
            if len(works) >= limit:
                break
            try:
                wikitext = self.mediawiki.get_page_wikitext(hit.title)
            except ImslpError as e:
                logger.warning(f"Failed to fetch search hit {hit.title}: {e}")
                warnings.append(f"Failed to parse work: {hit.title}")
                continue

            parsed = parse_work_wikitext(wikitext, hit.title)
            if matches_filters(parsed.data, instruments, composer):
                works.append(parsed.data)
                warnings.extend(parsed.warnings)

        items = works[:limit]
        return ParseResult(
            data=SearchResult(items=items, total=len(items), has_more=hits.has_more),
            warnings=warnings,
        )

    def search_composers(
        self, query: str, limit: int = DEFAULT_LIMIT
    ) -> ParseResult[SearchResult[Composer]]:
        """Search composer categories."""
        hits = self.mediawiki.search_categories(query, limit=limit * FETCH_MULTIPLIER)

        composers: list[Composer] = []
        warnings: list[str] = []
        for hit in hits.items:
            if len(composers) >= limit:
                break
            if not hit.title.startswith(CATEGORY_PREFIX):
                continue
            slug = hit.title.removeprefix(CATEGORY_PREFIX)
            try:
                wikitext = self.mediawiki.get_page_wikitext(hit.title)
            except ImslpError as e:
                logger.warning(f"Failed to fetch composer {slug}: {e}")
                warnings.append(f"Failed to parse composer: {slug}")
                continue
            parsed = parse_composer_wikitext(wikitext, slug)
            composers.append(parsed.data)
            warnings.extend(parsed.warnings)

        return ParseResult(
            data=SearchResult(items=composers[:limit], total=hits.total, has_more=hits.has_more),
            warnings=warnings,
        )

    def autocomplete(self, query: str, limit: int = DEFAULT_LIMIT) -> list[str]:
        """Page title suggestions for ``query``."""
        return self.mediawiki.open_search(query, limit)

    def search_all(self, query: str, limit: int = DEFAULT_LIMIT) -> ParseResult[CombinedResults]:
        """Works and composers matching ``query``."""
        works = self.search(query, limit=limit)
        composers = self.search_composers(query, limit=limit)
        return ParseResult(
            data=CombinedResults(works=works.data.items, composers=composers.data.items),
            warnings=[*works.warnings, *composers.warnings],
        )
