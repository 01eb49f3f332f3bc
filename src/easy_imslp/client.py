"""High-level IMSLP client.

Wires one HttpClient (shared cache, rate limit and request queue) into the
API wrappers and services, and exposes the common operations.

Usage:
    from easy_imslp import create_client

    with create_client(rate_limit_delay=0.5) as imslp:
        composer = imslp.get_composer("Beethoven, Ludwig van").data
        for result in imslp.browse_composer_works(composer.slug):
            print(result.data.full_title)
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Any

import httpx

from easy_imslp.api.custom import CustomApi
from easy_imslp.api.files import FileApi
from easy_imslp.api.http import HttpClient
from easy_imslp.api.mediawiki import MediaWikiApi
from easy_imslp.config import ClientConfig, load_config
from easy_imslp.parsers.types import Composer, ParseResult, Score, SearchResult, Work
from easy_imslp.services.composer import ComposerService
from easy_imslp.services.score import ScoreService
from easy_imslp.services.search import SearchService
from easy_imslp.services.work import WorkService


class ImslpClient:
    """Facade over the composer, work, score and search services."""

    def __init__(
        self,
        config: ClientConfig | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.config = config or load_config()
        self.http = HttpClient(self.config, transport=transport)
        self.mediawiki = MediaWikiApi(self.http)
        self.custom_api = CustomApi(self.http)
        self.files = FileApi(self.http)

        self.composers = ComposerService(self.mediawiki, self.custom_api)
        self.works = WorkService(self.mediawiki)
        self.scores = ScoreService(self.mediawiki)
        self.searcher = SearchService(self.mediawiki)

    # Search

    def search(
        self,
        query: str,
        limit: int = 10,
        instrument: str | Sequence[str] | None = None,
        composer: str | None = None,
    ) -> ParseResult[SearchResult[Work]]:
        return self.searcher.search(query, limit=limit, instrument=instrument, composer=composer)

    def search_composers(self, query: str, limit: int = 10) -> ParseResult[SearchResult[Composer]]:
        return self.searcher.search_composers(query, limit=limit)

    def autocomplete(self, query: str, limit: int = 10) -> list[str]:
        return self.searcher.autocomplete(query, limit=limit)

    # Composers

    def get_composer(self, slug: str) -> ParseResult[Composer]:
        return self.composers.get_composer(slug)

    def find_composer(self, query: str) -> ParseResult[Composer | None]:
        return self.composers.find_composer(query)

    def browse_all_composers(self) -> Iterator[ParseResult[Composer]]:
        return self.composers.browse_all_composers()

    # Works

    def get_work(self, slug: str) -> ParseResult[Work]:
        return self.works.get_work(slug)

    def find_work(self, query: str) -> ParseResult[Work | None]:
        return self.works.find_work(query)

    def browse_composer_works(self, composer_slug: str) -> Iterator[ParseResult[Work]]:
        return self.works.browse_composer_works(composer_slug)

    # Scores

    def get_work_scores(self, work_slug: str) -> ParseResult[list[Score]]:
        return self.scores.get_work_scores(work_slug)

    def get_score(self, filename: str) -> ParseResult[Score]:
        return self.scores.get_score(filename)

    def get_score_download_url(self, filename: str) -> str:
        return self.scores.get_score_download_url(filename)

    # Lifecycle

    def clear_cache(self) -> None:
        self.http.clear_cache()

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> ImslpClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def create_client(config: ClientConfig | None = None, **overrides: Any) -> ImslpClient:
    """Build a client from ``config`` (default: pyproject settings) plus field overrides.

    Examples:
        >>> client = create_client(cache=False, timeout=30)
    """
    base = config or load_config()
    if overrides:
        base = ClientConfig(**{**base.model_dump(), **overrides})
    return ImslpClient(base)


_default_client: ImslpClient | None = None


def get_default_client() -> ImslpClient:
    """Process-wide client created on first use."""
    global _default_client
    if _default_client is None:
        _default_client = ImslpClient()
    return _default_client
