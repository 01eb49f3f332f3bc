"""Score file metadata lookups and the static genre index.

File information is fetched from ``api.php`` (``prop=imageinfo``), batching
up to 50 titles per request. Lookups here are best-effort: a failed batch is
logged and skipped so that one bad request does not lose the others.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Final

from easy_imslp.api.errors import ImslpError
from easy_imslp.api.http import HttpClient
from easy_imslp.urls import build_download_url

logger = logging.getLogger(__name__)

MAX_TITLES_PER_REQUEST = 50
FILE_INFO_PROPS = "timestamp|size|url|mime"


@dataclass(frozen=True)
class FileInfo:
    filename: str
    download_url: str
    url: str | None = None
    size: int | None = None
    mime_type: str | None = None
    timestamp: str | None = None


@dataclass(frozen=True)
class GenreTag:
    id: str
    name: str


GENRE_TAGS: Final[tuple[GenreTag, ...]] = (
    GenreTag("symphonies", "Symphonies"),
    GenreTag("concertos", "Concertos"),
    GenreTag("sonatas", "Sonatas"),
    GenreTag("chamber_music", "Chamber Music"),
    GenreTag("piano_music", "Piano Music"),
    GenreTag("songs", "Songs"),
    GenreTag("operas", "Operas"),
    GenreTag("choral_music", "Choral Music"),
    GenreTag("orchestral_music", "Orchestral Music"),
    GenreTag("string_quartets", "String Quartets"),
    GenreTag("preludes", "Preludes"),
    GenreTag("fugues", "Fugues"),
    GenreTag("etudes", "Etudes"),
    GenreTag("variations", "Variations"),
    GenreTag("masses", "Masses"),
    GenreTag("requiems", "Requiems"),
    GenreTag("nocturnes", "Nocturnes"),
    GenreTag("waltzes", "Waltzes"),
    GenreTag("mazurkas", "Mazurkas"),
    GenreTag("polonaises", "Polonaises"),
)


def _file_info_from_page(page: dict[str, Any]) -> FileInfo | None:
    if "missing" in page or not page.get("imageinfo"):
        return None
    filename = page.get("title", "").removeprefix("File:")
    info = page["imageinfo"][0]
    return FileInfo(
        filename=filename,
        download_url=build_download_url(filename),
        url=info.get("url"),
        size=info.get("size"),
        mime_type=info.get("mime"),
        timestamp=info.get("timestamp"),
    )


class FileApi:
    """Look up size, MIME type and URLs for score files."""

    def __init__(self, http: HttpClient, api_url: str | None = None) -> None:
        self.http = http
        self.api_url = api_url or http.config.api_url

    def _query_files(self, filenames: list[str]) -> list[dict[str, Any]]:
        response = self.http.get(
            self.api_url,
            params={
                "action": "query",
                "titles": "|".join(f"File:{name}" for name in filenames),
                "prop": "imageinfo",
                "iiprop": FILE_INFO_PROPS,
                "format": "json",
            },
        )
        data = response.data if isinstance(response.data, dict) else {}
        return list(data.get("query", {}).get("pages", {}).values())

    def get_file_info(self, filename: str) -> FileInfo | None:
        """Metadata for one file, or None when missing or the lookup fails."""
        try:
            pages = self._query_files([filename])
        except ImslpError as e:
            logger.warning(f"File info lookup failed for {filename}: {e}")
            return None

        for page in pages:
            info = _file_info_from_page(page)
            if info is not None:
                return info
        return None

    def get_multiple_file_info(self, filenames: list[str]) -> dict[str, FileInfo]:
        """Metadata for many files keyed by filename; failed batches are skipped."""
        result: dict[str, FileInfo] = {}
        for offset in range(0, len(filenames), MAX_TITLES_PER_REQUEST):
            batch = filenames[offset : offset + MAX_TITLES_PER_REQUEST]
            try:
                pages = self._query_files(batch)
            except ImslpError as e:
                logger.warning(f"File info batch {offset // MAX_TITLES_PER_REQUEST + 1} failed: {e}")
                continue
            for page in pages:
                info = _file_info_from_page(page)
                if info is not None:
                    result[info.filename] = info
        return result

    @staticmethod
    def get_genre_tags() -> list[GenreTag]:
        """Main IMSLP genre categories."""
        return list(GENRE_TAGS)
