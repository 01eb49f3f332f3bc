"""Network layer: HTTP transport, caching and IMSLP endpoint wrappers."""

from easy_imslp.api.cache import TTLCache, create_cache_key, hash_string
from easy_imslp.api.custom import (
    PERSON_COMPOSER,
    PERSON_EDITOR,
    PERSON_LIBRETTIST,
    PERSON_PERFORMER,
    CustomApi,
    ListedPerson,
    ListedWork,
)
from easy_imslp.api.errors import (
    ErrorDetails,
    ImslpError,
    NetworkError,
    NotFoundError,
    ParseError,
    RateLimitError,
    RequestTimeoutError,
)
from easy_imslp.api.files import FileApi, FileInfo, GenreTag
from easy_imslp.api.http import HttpClient, HttpResponse
from easy_imslp.api.mediawiki import (
    NS_CATEGORY,
    NS_FILE,
    NS_MAIN,
    NS_TEMPLATE,
    CategoryMember,
    ImageInfo,
    MediaWikiApi,
    SearchHit,
)

__all__ = [
    "NS_CATEGORY",
    "NS_FILE",
    "NS_MAIN",
    "NS_TEMPLATE",
    "PERSON_COMPOSER",
    "PERSON_EDITOR",
    "PERSON_LIBRETTIST",
    "PERSON_PERFORMER",
    "CategoryMember",
    "CustomApi",
    "ErrorDetails",
    "FileApi",
    "FileInfo",
    "GenreTag",
    "HttpClient",
    "HttpResponse",
    "ImageInfo",
    "ImslpError",
    "ListedPerson",
    "ListedWork",
    "MediaWikiApi",
    "NetworkError",
    "NotFoundError",
    "ParseError",
    "RateLimitError",
    "RequestTimeoutError",
    "SearchHit",
    "TTLCache",
    "create_cache_key",
    "hash_string",
]
