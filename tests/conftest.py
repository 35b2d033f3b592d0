"""Shared pytest fixtures for the SPN2 client tests.

Fixture summary
---------------
load_fixture  Load a recorded SPN2 JSON response by name.
api_client    APIClient with test credentials, closed after the test.
clean_env     Removes SPN2_* variables and clears the settings cache.

HTTP traffic is mocked with respx. The one exception is a slow-body timeout
test, which runs its own server on the loopback interface.
"""

from __future__ import annotations

import json
import os
from collections.abc import AsyncGenerator, Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio

from spn2.client import APIClient
from spn2.config import get_settings

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "api_responses" / "spn2"

TEST_ACCESS_KEY = "test-access-key"
TEST_SECRET = "test-secret-value"


def read_fixture(name: str) -> dict[str, Any]:
    """Return the parsed JSON fixture ``<name>.json``."""
    return json.loads((FIXTURES_DIR / f"{name}.json").read_text(encoding="utf-8"))


@pytest.fixture
def load_fixture() -> Callable[[str], dict[str, Any]]:
    return read_fixture


@pytest_asyncio.fixture
async def api_client() -> AsyncGenerator[APIClient, None]:
    client = APIClient(TEST_ACCESS_KEY, TEST_SECRET, timeout=5.0)
    try:
        yield client
    finally:
        await client.aclose()


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Isolate settings from the developer's environment and any ``.env`` file."""
    for key in list(os.environ):
        if key.startswith("SPN2_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
