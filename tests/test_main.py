"""HTTP-level tests for the FastAPI app."""

import dataclasses

import pytest
from fastapi.testclient import TestClient

from cse_fakes import cse_item, cse_payload
from docsearch.cse_client import get_client
from docsearch.main import app


@pytest.fixture
def client(search_client):
    app.dependency_overrides[get_client] = lambda: search_client
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    """Health reports a configured search client."""

    r = client.get("/health")

    assert r.status_code == 200
    assert r.json() == {"status": "ok", "searchConfigured": True}


def test_health_reports_missing_key(make_client, cse_settings):
    """Health flags a client without an api key."""

    unconfigured = make_client(dataclasses.replace(cse_settings, cse_api_key=None))
    app.dependency_overrides[get_client] = lambda: unconfigured
    try:
        r = TestClient(app).get("/health")
    finally:
        app.dependency_overrides.clear()

    assert r.json()["searchConfigured"] is False


def test_search_do_returns_envelope(client, fake_cse):
    """The route returns the JSON envelope with cache and CORS headers."""

    fake_cse.payload = cse_payload(
        [cse_item("https://amp.dev/documentation/components/amp-list/", title="Documentation: amp-list")],
        total_results=25,
    )

    r = client.get("/search/do", params={"q": "amp-list", "locale": "en", "page": "1"}, headers={"Origin": "https://amp.dev"})

    assert r.status_code == 200
    assert r.headers["content-type"].startswith("application/json")
    assert r.headers["cache-control"] == "max-age=3600, immutable"
    assert r.headers["access-control-allow-origin"] == "https://amp.dev"
    data = r.json()
    assert data["result"]["components"][0]["title"] == "amp-list"
    assert data["result"]["pageCount"] == 3
    assert data["nextUrl"] == "/search/do?q=amp-list&locale=en&page=2"


def test_search_do_invalid_params_are_not_errors(client, fake_cse):
    """Invalid params answer 200 with an error body and no upstream call."""

    r = client.get("/search/do", params={"q": "amp", "page": "zero"})

    assert r.status_code == 200
    assert r.headers["cache-control"] == "no-cache"
    assert r.headers["access-control-allow-origin"] == "*"
    assert r.json() == {"error": "Invalid search params (q=amp, page=zero)"}
    assert fake_cse.requests == []


def test_search_do_without_query(client):
    """A bare request gets the error body instead of a 422."""

    r = client.get("/search/do")

    assert r.status_code == 200
    assert "error" in r.json()


def test_search_do_upstream_failure(client, fake_cse):
    """Upstream failures become a plain-text 500."""

    fake_cse.status_code = 403

    r = client.get("/search/do", params={"q": "amp"})

    assert r.status_code == 500
    assert r.headers["content-type"].startswith("text/plain")
    assert r.text == "Invalid response for search query"


def test_search_do_forwards_locale(client, fake_cse):
    """Non-default locales reach the upstream as an OR'ed hidden query."""

    client.get("/search/do", params={"q": "amp", "locale": "de"})

    params = fake_cse.last_params
    assert params["hq"] == "more:pagemap:metatags-page-locale:en OR more:pagemap:metatags-page-locale:de"
    assert "lr" not in params


def test_shutdown_closes_shared_client():
    """App shutdown closes and forgets the process-wide search client."""

    with TestClient(app):
        shared = get_client()
        assert get_client.cache_info().currsize == 1

    assert shared._http.is_closed
    assert get_client.cache_info().currsize == 0
