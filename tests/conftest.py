from __future__ import annotations

from typing import Callable

import httpx
import pytest

from cse_fakes import FakeCse
from docsearch.config import Settings
from docsearch.cse_client import GoogleSearchClient


@pytest.fixture
def cse_settings() -> Settings:
    return Settings(cse_api_key="test-key", cse_id="test-cx", default_locale="en")


@pytest.fixture
def fake_cse() -> FakeCse:
    return FakeCse()


@pytest.fixture
def make_client(fake_cse: FakeCse) -> Callable[[Settings], GoogleSearchClient]:
    def _make(cfg: Settings) -> GoogleSearchClient:
        transport = httpx.MockTransport(fake_cse)
        return GoogleSearchClient(cfg, http_client=httpx.Client(transport=transport))

    return _make


@pytest.fixture
def search_client(make_client, cse_settings) -> GoogleSearchClient:
    return make_client(cse_settings)
