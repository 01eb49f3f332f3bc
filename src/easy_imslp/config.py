"""Client configuration loaded from pyproject.toml."""

from __future__ import annotations

import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

DEFAULT_USER_AGENT = "easy-imslp/0.1.0"


class ClientConfig(BaseModel):
    """Configuration for the IMSLP client."""

    # Response caching (GET only)
    cache: bool = True
    cache_ttl: float = Field(default=300.0, ge=0)  # seconds

    # Transport
    timeout: float = Field(default=10.0, gt=0)  # seconds, per request
    user_agent: str = DEFAULT_USER_AGENT
    rate_limit_delay: float = Field(default=0.1, ge=0)  # seconds between requests

    # Endpoints
    api_url: str = "https://imslp.org/api.php"
    custom_api_url: str = "https://imslp.org/imslpscripts/API.ISCR.php"
    wiki_url: str = "https://imslp.org/wiki/"


@lru_cache(maxsize=1)
def load_config() -> ClientConfig:
    """Load configuration from pyproject.toml.

    Returns:
        ClientConfig with settings from the [tool.easy-imslp] section,
        falling back to defaults if not found.
    """
    pyproject_path = _find_pyproject()
    if pyproject_path is None:
        return ClientConfig()

    with pyproject_path.open("rb") as f:
        data = tomllib.load(f)

    tool_config: dict[str, Any] = data.get("tool", {}).get("easy-imslp", {})
    return ClientConfig(**tool_config)


def _find_pyproject(start: Path | None = None) -> Path | None:
    """Find pyproject.toml by walking up from ``start`` (default: this file's directory)."""
    current = (start or Path(__file__).parent).resolve()
    for _ in range(10):  # Max 10 levels up
        candidate = current / "pyproject.toml"
        if candidate.exists():
            return candidate
        if current.parent == current:
            break
        current = current.parent
    return None
