"""Tests for the terminal client."""

import pytest

import cli_search
from cse_fakes import cse_item, cse_payload


@pytest.fixture(autouse=True)
def fake_client(monkeypatch, search_client):
    monkeypatch.setattr(cli_search, "get_client", lambda: search_client)


def test_single_query_prints_components_and_pages(fake_cse, capsys):
    """Single-query mode lists components, pages and the next page link."""

    fake_cse.payload = cse_payload(
        [
            cse_item("https://amp.dev/documentation/components/amp-list/", title="Documentation: amp-list"),
            cse_item("https://amp.dev/documentation/guides-and-tutorials/start/", title="Getting started"),
        ],
        total_results=15,
    )

    assert cli_search.main(["amp-list"]) == 0

    out = capsys.readouterr().out
    assert "amp-list | https://amp.dev/documentation/components/amp-list/" in out
    assert "01. Getting started" in out
    assert "nextUrl: /search/do?q=amp-list&locale=en&page=2" in out


def test_single_query_failure_exit_code(fake_cse, capsys):
    """An upstream failure is printed and yields exit code 1."""

    fake_cse.status_code = 500

    assert cli_search.main(["amp"]) == 1
    assert "Invalid response for search query" in capsys.readouterr().out


def test_invalid_page_prints_error(capsys):
    """Invalid params print the handler's error message."""

    assert cli_search.main(["amp", "--page", "0"]) == 0
    assert "Invalid search params (q=amp, page=0)" in capsys.readouterr().out


def test_batch_mode_skips_blank_lines(tmp_path, fake_cse):
    """Batch files run one search per non-empty line in the given locale."""

    batch = tmp_path / "queries.txt"
    batch.write_text("amp-img\n\namp-video\n", encoding="utf-8")

    assert cli_search.main(["--batch", str(batch), "--locale", "de"]) == 0

    assert [r.url.params["q"] for r in fake_cse.requests] == ["amp-img", "amp-video"]
    assert all(r.url.params["hl"] == "de" for r in fake_cse.requests)
