"""Shared pytest fixtures for easy-imslp tests."""

from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import httpx
import pytest

from easy_imslp.api.http import HttpClient
from easy_imslp.config import ClientConfig

FIXTURES_DIR = Path(__file__).parent / "fixtures"
WIKITEXT_DIR = FIXTURES_DIR / "wikitext"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def load_fixture() -> Callable[[str], str]:
    """Factory fixture to load wikitext fixture files.

    Usage:
        def test_something(load_fixture):
            content = load_fixture("work_cello_suite.txt")
    """

    def _load(name: str) -> str:
        return (WIKITEXT_DIR / name).read_text(encoding="utf-8")

    return _load


@pytest.fixture
def composer_page(load_fixture: Callable[[str], str]) -> str:
    """Composer category page (Beethoven)."""
    return load_fixture("composer_beethoven.txt")


@pytest.fixture
def cello_suite_page(load_fixture: Callable[[str], str]) -> str:
    """Work page with Roman-numeral movements and file templates (Bach BWV 1007)."""
    return load_fixture("work_cello_suite.txt")


@pytest.fixture
def moonlight_page(load_fixture: Callable[[str], str]) -> str:
    """Work page using the Imslpwork template and prose movements (Op.27 No.2)."""
    return load_fixture("work_moonlight.txt")


@pytest.fixture
def score_page(load_fixture: Callable[[str], str]) -> str:
    """Score file template with editor/publisher metadata."""
    return load_fixture("score_file.txt")


@pytest.fixture
def test_config() -> ClientConfig:
    """Client config with no inter-request delay."""
    return ClientConfig(rate_limit_delay=0.0)


@pytest.fixture
def make_http_client(test_config: ClientConfig) -> Iterator[Callable[..., HttpClient]]:
    """Factory for HttpClient instances backed by an httpx.MockTransport.

    Usage:
        def test_something(make_http_client):
            http = make_http_client(lambda request: httpx.Response(200, json={}))
    """
    clients: list[HttpClient] = []

    def _make(
        handler: Callable[[httpx.Request], httpx.Response],
        config: ClientConfig | None = None,
        **kwargs: Any,
    ) -> HttpClient:
        client = HttpClient(
            config or test_config, transport=httpx.MockTransport(handler), **kwargs
        )
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.close()
