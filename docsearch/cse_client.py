"""Google Custom Search JSON API client.

The client is synchronous; the FastAPI layer moves calls onto a worker thread
via ``asyncio.to_thread``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Optional

import httpx

from .config import API_KEY_ENV_VARS, Settings, settings

logger = logging.getLogger(__name__)

# google custom search does not support a page size > 10
PAGE_SIZE = 10

# the json api does not serve more than 100 results
MAX_PAGE = 10


class SearchError(Exception):
    """Base class for failures while talking to the search backend."""


class SearchConfigurationError(SearchError):
    pass


class UpstreamSearchError(SearchError):
    pass


@dataclass
class SearchOptions:
    hidden_query: Optional[str] = None
    no_language_filter: bool = False


def language_for(locale: str) -> str:
    return locale[:2]


def start_index(page: int) -> int:
    return (page - 1) * PAGE_SIZE + 1


def build_search_params(
    cfg: Settings, query: str, locale: str, page: int, options: SearchOptions | None = None
) -> Dict[str, Any]:
    options = options or SearchOptions()
    language = language_for(locale)
    params: Dict[str, Any] = {
        "cx": cfg.cse_id,
        "key": cfg.cse_api_key,
        "hl": language,
        "q": query,
        "start": start_index(page),
    }
    if not options.no_language_filter:
        params["lr"] = f"lang_{language}"
    if options.hidden_query:
        params["hq"] = options.hidden_query
    return params


def _redacted(url: httpx.URL) -> str:
    if "key" not in url.params:
        return str(url)
    return str(url.copy_set_param("key", "***"))


class GoogleSearchClient:
    def __init__(self, cfg: Settings, http_client: httpx.Client | None = None) -> None:
        self.settings = cfg
        self._http = http_client or httpx.Client(timeout=cfg.cse_timeout_seconds)

    @property
    def configured(self) -> bool:
        return bool(self.settings.cse_api_key)

    def search(
        self, query: str, locale: str, page: int, options: SearchOptions | None = None
    ) -> Dict[str, Any]:
        """Fetch one page of raw CSE results for ``query`` in ``locale``."""
        if not self.configured:
            raise SearchConfigurationError(
                "Custom search api key not initialized! "
                "Set GOOGLE_CUSTOM_SEARCH_API_KEY in environment."
            )

        try:
            params = build_search_params(self.settings, query, locale, page, options)
            logger.debug("Searching: %s (locale: %s, page: %s)", query, locale, page)
            response = self._http.get(self.settings.cse_base_url, params=params)

            if not response.is_success:
                logger.error(
                    "CSE Error %s for url %s: %s",
                    response.status_code,
                    _redacted(response.request.url),
                    response.text,
                )
                raise UpstreamSearchError("Invalid response for search query")

            result = response.json()
            if not isinstance(result, dict):
                raise ValueError(f"expected a JSON object, got {type(result).__name__}")
        except SearchError:
            raise
        except httpx.HTTPError as exc:
            logger.error("CSE request failed for query %r: %s", query, exc)
            raise UpstreamSearchError("Invalid response for search query") from exc
        except Exception as exc:
            logger.exception("CSE search failed for query %r", query)
            raise UpstreamSearchError("Invalid response for search query") from exc

        logger.debug(
            "Search returned %s results",
            (result.get("searchInformation") or {}).get("totalResults", 0),
        )
        return result

    def close(self) -> None:
        self._http.close()


@lru_cache(maxsize=1)
def get_client() -> GoogleSearchClient:
    if settings.cse_api_key:
        logger.info("Google Custom Search API key loaded")
    else:
        logger.warning(
            "Missing Google Custom Search API key, site search will not be available! Set one of %s.",
            ", ".join(API_KEY_ENV_VARS),
        )
    return GoogleSearchClient(settings)
