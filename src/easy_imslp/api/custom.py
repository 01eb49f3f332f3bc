"""Client for the IMSLP custom listing API (``imslpscripts/API.ISCR.php``).

This endpoint pages through people (composers, performers, ...) and works by
numeric offset. Requests are addressed through an ``account`` path string
such as ``worklist/disclaimer=accepted/sort=id/type=1/start=0/limit=20``.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, Final
from urllib.parse import unquote

from easy_imslp.api.http import HttpClient

PERSON_COMPOSER: Final = "1"
PERSON_PERFORMER: Final = "2"
PERSON_EDITOR: Final = "3"
PERSON_LIBRETTIST: Final = "4"

DEFAULT_PAGE_SIZE = 20
BROWSE_PAGE_SIZE = 50


@dataclass(frozen=True)
class ListedPerson:
    id: str
    slug: str
    type: str
    intvals: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ListedWork:
    id: str
    slug: str
    composer_slug: str | None = None
    title: str | None = None
    catalogue_number: str | None = None
    page_id: str | None = None
    permlink: str | None = None
    parent_id: str | None = None
    intvals: dict[str, Any] = field(default_factory=dict)


@dataclass
class ListPage:
    """One page of a listing with the server-reported total."""

    items: list[Any]
    total: int
    has_more: bool


@dataclass(frozen=True)
class ApiMetadata:
    timestamp: str | None
    version: str | None
    rate_limit: str | None
    total_composers: int
    total_works: int


def _decode_slug(key: str) -> str:
    return unquote(key.replace("_", " "))


def _optional_str(value: Any) -> str | None:
    return str(value) if value else None


class CustomApi:
    """Paged listings of IMSLP people and works."""

    def __init__(self, http: HttpClient, api_url: str | None = None) -> None:
        self.http = http
        self.api_url = api_url or http.config.custom_api_url

    def _fetch(self, account: str, listing: str) -> dict[str, Any]:
        response = self.http.get(
            self.api_url,
            params={"account": account, "type": listing, "retformat": "json"},
        )
        return response.data if isinstance(response.data, dict) else {}

    # -------------------------------------------------------------------------
    # People
    # -------------------------------------------------------------------------

    def list_people(
        self,
        person_type: str = PERSON_COMPOSER,
        start: int = 0,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> ListPage:
        """One page of people of ``person_type``."""
        account = f"worklist/disclaimer=accepted/sort=id/type={person_type}/start={start}/limit={limit}"
        data = self._fetch(account, "people")

        total = int((data.get("metadata") or {}).get("totalpeople") or 0)
        people = [
            ListedPerson(
                id=str(entry.get("id", "")),
                slug=_decode_slug(key),
                type=str(entry.get("type", person_type)),
                intvals=entry.get("intvals") or {},
            )
            for key, entry in (data.get("people") or {}).items()
        ]
        return ListPage(items=people, total=total, has_more=start + len(people) < total)

    def list_composers(self, start: int = 0, limit: int = DEFAULT_PAGE_SIZE) -> ListPage:
        return self.list_people(PERSON_COMPOSER, start=start, limit=limit)

    def list_performers(self, start: int = 0, limit: int = DEFAULT_PAGE_SIZE) -> ListPage:
        return self.list_people(PERSON_PERFORMER, start=start, limit=limit)

    def browse_all_people(
        self, person_type: str = PERSON_COMPOSER, limit: int = BROWSE_PAGE_SIZE
    ) -> Iterator[ListedPerson]:
        """Yield every person of ``person_type``, page by page."""
        start = 0
        while True:
            page = self.list_people(person_type, start=start, limit=limit)
            yield from page.items
            if not page.has_more or not page.items:
                break
            start += len(page.items)

    def browse_all_composers(self, limit: int = BROWSE_PAGE_SIZE) -> Iterator[ListedPerson]:
        return self.browse_all_people(PERSON_COMPOSER, limit=limit)

    # -------------------------------------------------------------------------
    # Works
    # -------------------------------------------------------------------------

    def list_works(
        self,
        start: int = 0,
        limit: int = DEFAULT_PAGE_SIZE,
        composer_id: str | None = None,
    ) -> ListPage:
        """One page of works, optionally restricted to one composer."""
        account = f"worklist/disclaimer=accepted/sort=id/start={start}/limit={limit}"
        if composer_id:
            account += f"/composer={composer_id}"
        data = self._fetch(account, "works")

        total = int((data.get("metadata") or {}).get("totalworks") or 0)
        works = []
        for key, entry in (data.get("works") or {}).items():
            intvals = entry.get("intvals") or {}
            works.append(
                ListedWork(
                    id=str(entry.get("id", "")),
                    slug=_decode_slug(key),
                    composer_slug=_optional_str(intvals.get("composer")),
                    title=_optional_str(intvals.get("worktitle")),
                    catalogue_number=_optional_str(intvals.get("icatno")),
                    page_id=_optional_str(intvals.get("pageid")),
                    permlink=entry.get("permlink"),
                    parent_id=entry.get("parent"),
                    intvals=intvals,
                )
            )
        return ListPage(items=works, total=total, has_more=start + len(works) < total)

    def browse_all_works(
        self, limit: int = BROWSE_PAGE_SIZE, composer_id: str | None = None
    ) -> Iterator[ListedWork]:
        start = 0
        while True:
            page = self.list_works(start=start, limit=limit, composer_id=composer_id)
            yield from page.items
            if not page.has_more or not page.items:
                break
            start += len(page.items)

    def get_metadata(self) -> ApiMetadata:
        """Server metadata from a minimal one-item listing."""
        data = self._fetch(
            f"worklist/disclaimer=accepted/sort=id/type={PERSON_COMPOSER}/start=0/limit=1",
            "people",
        )
        metadata = data.get("metadata") or {}
        return ApiMetadata(
            timestamp=metadata.get("timestamp"),
            version=metadata.get("apiversion"),
            rate_limit=metadata.get("apirate"),
            total_composers=int(metadata.get("totalpeople") or 0),
            total_works=int(metadata.get("totalworks") or 0),
        )
