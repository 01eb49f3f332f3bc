"""Wrapper around the standard MediaWiki ``api.php`` endpoint of IMSLP.

Covers the handful of actions the services need: OpenSearch title
suggestions, full-text search, page parsing (for raw wikitext), category
membership and file information.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Final, Literal

from easy_imslp.api.errors import ErrorDetails, NetworkError, NotFoundError
from easy_imslp.api.http import HttpClient, ParamValue
from easy_imslp.parsers.types import SearchResult

logger = logging.getLogger(__name__)

NS_MAIN: Final = 0
NS_FILE: Final = 6
NS_TEMPLATE: Final = 10
NS_CATEGORY: Final = 14

SEARCH_PROPS = "size|wordcount|timestamp|snippet"
IMAGE_INFO_PROPS = "timestamp|user|size|url|mime|mediatype"
MISSING_PAGE_CODES: Final[frozenset[str]] = frozenset({"missingtitle", "invalidtitle", "nosuchpageid"})

SearchWhat = Literal["title", "text", "nearmatch"]


@dataclass(frozen=True)
class SearchHit:
    """One full-text search hit."""

    title: str
    pageid: int | None = None
    ns: int = NS_MAIN
    snippet: str = ""
    size: int | None = None
    wordcount: int | None = None
    timestamp: str | None = None


@dataclass(frozen=True)
class CategoryMember:
    pageid: int
    title: str
    ns: int | None = None


@dataclass(frozen=True)
class ImageInfo:
    """File metadata from ``prop=imageinfo``."""

    title: str
    url: str | None = None
    description_url: str | None = None
    size: int | None = None
    mime: str | None = None
    timestamp: str | None = None
    user: str | None = None


@dataclass(frozen=True)
class PageInfo:
    pageid: int
    exists: bool


class MediaWikiApi:
    """Typed access to ``api.php`` through a shared HttpClient."""

    def __init__(self, http: HttpClient, api_url: str | None = None) -> None:
        self.http = http
        self.api_url = api_url or http.config.api_url

    def _query(self, params: dict[str, ParamValue]) -> dict[str, Any]:
        """GET ``api.php`` with ``format=json`` and surface API-level errors."""
        response = self.http.get(self.api_url, params={**params, "format": "json"})
        data = response.data if isinstance(response.data, dict) else {}
        error = data.get("error")
        if error:
            code = error.get("code", "")
            info = error.get("info", code)
            details = ErrorDetails(url=self.api_url, response_body=str(error))
            if code in MISSING_PAGE_CODES:
                raise NotFoundError(f"Page not found: {info}", details)
            raise NetworkError(f"MediaWiki API error ({code}): {info}", details)
        return data

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    def open_search(self, query: str, limit: int = 10, namespace: int = NS_MAIN) -> list[str]:
        """Return page titles suggested for ``query``.

        OpenSearch answers ``[query, [titles], [descriptions], [urls]]``.
        """
        response = self.http.get(
            self.api_url,
            params={
                "action": "opensearch",
                "search": query,
                "limit": limit,
                "namespace": namespace,
                "format": "json",
            },
        )
        data = response.data
        if isinstance(data, list) and len(data) > 1 and isinstance(data[1], list):
            return [str(title) for title in data[1]]
        return []

    def search(
        self,
        query: str,
        limit: int = 10,
        offset: int = 0,
        namespace: int = NS_MAIN,
        what: SearchWhat = "text",
    ) -> SearchResult[SearchHit]:
        """Full-text search (``list=search``)."""
        data = self._query(
            {
                "action": "query",
                "list": "search",
                "srsearch": query,
                "srlimit": limit,
                "sroffset": offset,
                "srnamespace": namespace,
                "srwhat": what,
                "srprop": SEARCH_PROPS,
            }
        )
        query_data = data.get("query", {})
        hits = [
            SearchHit(
                title=item["title"],
                pageid=item.get("pageid"),
                ns=item.get("ns", namespace),
                snippet=item.get("snippet", ""),
                size=item.get("size"),
                wordcount=item.get("wordcount"),
                timestamp=item.get("timestamp"),
            )
            for item in query_data.get("search", [])
        ]
        total = query_data.get("searchinfo", {}).get("totalhits", len(hits))
        has_more = "continue" in data or "query-continue" in data
        return SearchResult(items=hits, total=total, has_more=has_more)

    def search_works(self, query: str, **kwargs: Any) -> SearchResult[SearchHit]:
        return self.search(query, namespace=NS_MAIN, **kwargs)

    def search_categories(self, query: str, **kwargs: Any) -> SearchResult[SearchHit]:
        return self.search(query, namespace=NS_CATEGORY, **kwargs)

    # -------------------------------------------------------------------------
    # Pages
    # -------------------------------------------------------------------------

    def parse_page(
        self,
        title: str,
        wikitext: bool = False,
        section: int | None = None,
        props: tuple[str, ...] = ("text", "categories", "templates"),
    ) -> dict[str, Any]:
        """Run ``action=parse`` on an existing page and return the ``parse`` object."""
        prop_list = list(props)
        if wikitext:
            prop_list = ["wikitext", *(p for p in props if p not in ("text", "wikitext"))]
        data = self._query(
            {
                "action": "parse",
                "page": title,
                "prop": "|".join(prop_list),
                "section": section,
                "disablelimitreport": True,
                "disableeditsection": True,
            }
        )
        return data.get("parse", {})

    def parse_wikitext(self, wikitext: str, title: str | None = None) -> dict[str, Any]:
        """Render arbitrary wikitext (POSTed as a form)."""
        form = {"action": "parse", "text": wikitext, "contentmodel": "wikitext", "format": "json"}
        if title:
            form["title"] = title
        response = self.http.post(self.api_url, data=form)
        data = response.data if isinstance(response.data, dict) else {}
        return data.get("parse", {})

    def get_page_wikitext(self, title: str) -> str:
        """Return the raw wikitext of ``title``, or ``""`` when there is none."""
        parsed = self.parse_page(title, wikitext=True, props=("wikitext",))
        wikitext = parsed.get("wikitext", {})
        if isinstance(wikitext, dict):
            return wikitext.get("*", "")
        return str(wikitext or "")

    def get_page_info(self, titles: list[str]) -> dict[str, PageInfo]:
        """Existence and page id for each of ``titles``."""
        data = self._query({"action": "query", "titles": "|".join(titles)})
        return {
            page["title"]: PageInfo(pageid=page.get("pageid", -1), exists="missing" not in page)
            for page in data.get("query", {}).get("pages", {}).values()
        }

    # -------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------

    def get_category_members(
        self,
        category: str,
        limit: int = 50,
        continue_token: str | None = None,
        namespace: int | None = None,
        sort: Literal["sortkey", "timestamp"] = "sortkey",
    ) -> tuple[list[CategoryMember], str | None]:
        """One page of category members plus the token for the next page."""
        title = category if category.startswith("Category:") else f"Category:{category}"
        data = self._query(
            {
                "action": "query",
                "list": "categorymembers",
                "cmtitle": title,
                "cmlimit": limit,
                "cmsort": sort,
                "cmprop": "ids|title",
                "cmcontinue": continue_token,
                "cmnamespace": namespace,
            }
        )
        members = [
            CategoryMember(pageid=item["pageid"], title=item["title"], ns=item.get("ns"))
            for item in data.get("query", {}).get("categorymembers", [])
        ]
        return members, data.get("continue", {}).get("cmcontinue")

    def browse_category_members(
        self,
        category: str,
        limit: int = 50,
        namespace: int | None = None,
    ) -> Iterator[CategoryMember]:
        """Yield every member of ``category``, following continuation tokens."""
        continue_token: str | None = None
        while True:
            members, continue_token = self.get_category_members(
                category, limit=limit, continue_token=continue_token, namespace=namespace
            )
            yield from members
            if not continue_token:
                break

    # -------------------------------------------------------------------------
    # Files
    # -------------------------------------------------------------------------

    def get_image_info(self, filename: str) -> ImageInfo | None:
        """File URL, size and MIME type, or None if the file page is missing."""
        title = filename if filename.startswith("File:") else f"File:{filename}"
        data = self._query(
            {
                "action": "query",
                "titles": title,
                "prop": "imageinfo",
                "iiprop": IMAGE_INFO_PROPS,
            }
        )
        pages = data.get("query", {}).get("pages", {})
        if not pages:
            return None
        page = next(iter(pages.values()))
        if "missing" in page:
            logger.debug(f"File page missing: {title}")
            return None

        info = (page.get("imageinfo") or [{}])[0]
        return ImageInfo(
            title=page.get("title", title),
            url=info.get("url"),
            description_url=info.get("descriptionurl"),
            size=info.get("size"),
            mime=info.get("mime"),
            timestamp=info.get("timestamp"),
            user=info.get("user"),
        )
