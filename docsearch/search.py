"""Search request handling: validation, locale scoping and result shaping."""
from __future__ import annotations

import logging
import math
from time import perf_counter
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .cse_client import (
    MAX_PAGE,
    PAGE_SIZE,
    GoogleSearchClient,
    SearchError,
    SearchOptions,
    get_client,
)
from .models import HandlerResponse, Page, ResultEnvelope, SearchErrorBody, SearchResult
from .utils import (
    cleanup_text,
    component_name,
    encode_uri_component,
    get_meta_tag_value,
    is_component_url,
    parse_int,
    strip_title_prefix,
)

logger = logging.getLogger(__name__)

DESCRIPTION_META_TAG = "twitter:description"
LAST_PAGE = MAX_PAGE
MAX_HIGHLIGHT_COMPONENTS = 3
MAX_HIGHLIGHT_COMPONENT_INDEX = 7
LOCALE_META_TAG_QUERY = "more:pagemap:metatags-page-locale:{}"
PLAYGROUND_URL = "https://playground.amp.dev/#url={}"
EXAMPLES_URL = "/{locale}/documentation/examples/?q={component}"
SEARCH_PATH = "/search/do"


def _header(headers: Optional[Mapping[str, str]], name: str) -> Optional[str]:
    for key, value in (headers or {}).items():
        if key.lower() == name:
            return value
    return None


def _response_headers(
    request_headers: Optional[Mapping[str, str]], content_type: str, cache_control: str
) -> Dict[str, str]:
    return {
        "Access-Control-Allow-Origin": _header(request_headers, "origin") or "*",
        "Content-Type": content_type,
        "Cache-Control": cache_control,
    }


def build_search_options(locale: str, default_locale: str) -> SearchOptions:
    """Restrict results to the request locale, falling back to the default one."""
    options = SearchOptions(hidden_query=LOCALE_META_TAG_QUERY.format(locale))
    if locale != default_locale:
        # the index only holds translated pages, so default locale pages must match too
        options.hidden_query = (
            f"{LOCALE_META_TAG_QUERY.format(default_locale)} OR {options.hidden_query}"
        )
        options.no_language_filter = True
    return options


def create_page(item: Dict[str, Any]) -> Page:
    return Page(
        title=item.get("title") or "",
        description=item.get("snippet") or "",
        url=item.get("link") or "",
    )


def add_example_and_playground_link(page: Page, locale: str) -> None:
    name = component_name(page.url)
    if name:
        page.exampleUrl = EXAMPLES_URL.format(locale=locale, component=name)
        page.playgroundUrl = PLAYGROUND_URL.format(encode_uri_component(page.url))


def enrich_component_page(item: Dict[str, Any], page: Page, locale: str) -> None:
    description = get_meta_tag_value(item, DESCRIPTION_META_TAG)
    if description:
        page.description = description
    if page.title:
        page.title = strip_title_prefix(page.title)
    add_example_and_playground_link(page, locale)


def cleanup_texts(page: Page) -> None:
    page.title = cleanup_text(page.title)
    page.description = cleanup_text(page.description)


def classify_items(
    items: List[Dict[str, Any]], page: int, locale: str
) -> Tuple[List[Page], List[Page]]:
    """Split raw items into highlighted component pages and regular pages."""
    highlight_components = page == 1
    components: List[Page] = []
    pages: List[Page] = []
    for index, item in enumerate(items):
        result_page = create_page(item)
        if (
            highlight_components
            and index <= MAX_HIGHLIGHT_COMPONENT_INDEX
            and is_component_url(result_page.url)
        ):
            enrich_component_page(item, result_page, locale)
            components.append(result_page)
            if len(components) >= MAX_HIGHLIGHT_COMPONENTS:
                highlight_components = False
        else:
            pages.append(result_page)
        cleanup_texts(result_page)
    return components, pages


def page_count(total_results: int) -> int:
    return math.ceil(total_results / PAGE_SIZE)


def create_result(
    total_results: int,
    page: int,
    last_page: int,
    components: List[Page],
    pages: List[Page],
    query: str,
    locale: str,
) -> ResultEnvelope:
    envelope = ResultEnvelope(
        result=SearchResult(
            totalResults=total_results,
            currentPage=page,
            pageCount=last_page,
            components=components,
            pages=pages,
        ),
    )
    if page == LAST_PAGE and last_page > LAST_PAGE:
        envelope.result.isTruncated = True

    base_url = (
        f"{SEARCH_PATH}?q={encode_uri_component(query)}"
        f"&locale={encode_uri_component(locale)}&page="
    )
    if page < last_page and page < LAST_PAGE:
        envelope.nextUrl = f"{base_url}{page + 1}"
    if page > 1:
        envelope.prevUrl = f"{base_url}{page - 1}"
    return envelope


def _total_results(cse_result: Dict[str, Any]) -> int:
    raw_total = (cse_result.get("searchInformation") or {}).get("totalResults") or 0
    return parse_int(str(raw_total)) or 0


def handle_search(
    params: Optional[Mapping[str, Optional[str]]],
    headers: Optional[Mapping[str, str]] = None,
    client: GoogleSearchClient | None = None,
) -> HandlerResponse:
    """Run one search request end to end and build the HTTP response."""
    params = params or {}
    client = client or get_client()
    default_locale = client.settings.default_locale

    raw_query = params.get("q")
    raw_page = params.get("page")
    locale = params.get("locale") or default_locale
    page = parse_int(raw_page) if raw_page else 1
    query = raw_query.strip() if raw_query else ""

    if page is None or page < 1 or not query:
        error = f"Invalid search params (q={raw_query}, page={raw_page})"
        logger.error(error)
        # an empty query is normal for the search template, keep client consoles quiet
        return HandlerResponse(
            statusCode=200,
            headers=_response_headers(headers, "application/json", "no-cache"),
            body=SearchErrorBody(error=error).model_dump_json(),
        )

    options = build_search_options(locale, default_locale)

    t0 = perf_counter()
    try:
        cse_result = client.search(query, locale, page, options)
    except SearchError as exc:
        # details were logged by the client
        logger.error("Search error: %s", exc)
        return HandlerResponse(
            statusCode=500,
            headers=_response_headers(headers, "text/plain", "no-cache"),
            body=str(exc),
        )
    t1 = perf_counter()

    total_results = _total_results(cse_result)
    last_page = page_count(total_results)
    components: List[Page] = []
    pages: List[Page] = []
    if total_results > 0:
        components, pages = classify_items(cse_result.get("items") or [], page, locale)

    envelope = create_result(total_results, page, last_page, components, pages, query, locale)
    t2 = perf_counter()
    logger.info(
        "timing: total=%.2fms cse=%.2fms post=%.2fms q=%r locale=%s page=%s total_results=%s components=%s",
        (t2 - t0) * 1000,
        (t1 - t0) * 1000,
        (t2 - t1) * 1000,
        query,
        locale,
        page,
        total_results,
        len(components),
    )

    max_age = client.settings.search_max_age_seconds
    return HandlerResponse(
        statusCode=200,
        headers=_response_headers(headers, "application/json", f"max-age={max_age}, immutable"),
        body=envelope.to_json(),
    )


def handler(event: Mapping[str, Any], context: Any = None) -> Dict[str, Any]:
    """Serverless entrypoint taking an API-gateway style event."""
    response = handle_search(
        event.get("queryStringParameters"),
        event.get("headers"),
    )
    return response.model_dump()
