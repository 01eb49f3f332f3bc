"""easy-imslp: typed access to IMSLP composer, work and score metadata.

The package is split in three layers:

- ``easy_imslp.parsers``: pure wikitext parsing (templates, catalogue
  numbers, instruments, years) and record assembly.
- ``easy_imslp.api``: HTTP transport, caching, rate limiting and thin
  wrappers over the MediaWiki and IMSLP endpoints.
- ``easy_imslp.services`` and ``easy_imslp.client``: domain operations that
  fetch pages and run them through the parsers.
"""

from easy_imslp.api.errors import (
    ImslpError,
    NetworkError,
    NotFoundError,
    ParseError,
    RateLimitError,
    RequestTimeoutError,
)
from easy_imslp.client import ImslpClient, create_client, get_default_client
from easy_imslp.config import ClientConfig, load_config

__version__ = "0.1.0"

__all__ = [
    "ClientConfig",
    "ImslpClient",
    "ImslpError",
    "NetworkError",
    "NotFoundError",
    "ParseError",
    "RateLimitError",
    "RequestTimeoutError",
    "create_client",
    "get_default_client",
    "load_config",
]
