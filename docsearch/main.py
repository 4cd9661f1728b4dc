"""FastAPI application wiring the search proxy."""
from __future__ import annotations

import asyncio
import logging
from typing import Optional

from fastapi import Depends, FastAPI, Query, Request, Response

from .config import settings
from .cse_client import GoogleSearchClient, get_client
from .search import handle_search

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_LEVEL = logging.getLevelName(settings.log_level.upper())

# Force a predictable logging setup even when run under uvicorn. ``force=True``
# replaces uvicorn's default handlers.
logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT, force=True)
for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
    logging.getLogger(name).setLevel(LOG_LEVEL)
# httpx logs full request urls, which carry the api key
logging.getLogger("httpx").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)
logger.info("Logging configured at %s", settings.log_level.upper())

app = FastAPI(title="Documentation Search Proxy")


@app.on_event("startup")
async def startup_event() -> None:
    # builds the shared client and warns when no api key is configured
    get_client()


@app.on_event("shutdown")
async def shutdown_event() -> None:
    if get_client.cache_info().currsize:
        get_client().close()
        get_client.cache_clear()


@app.get("/health")
async def health(client: GoogleSearchClient = Depends(get_client)) -> dict:
    return {"status": "ok", "searchConfigured": client.configured}


@app.get("/search/do")
async def search_do(
    request: Request,
    q: Optional[str] = Query(None, description="Search query"),
    locale: Optional[str] = Query(None, description="Locale of the pages to search"),
    page: Optional[str] = Query(None, description="1-based result page"),
    client: GoogleSearchClient = Depends(get_client),
) -> Response:
    params = {"q": q, "locale": locale, "page": page}
    result = await asyncio.to_thread(handle_search, params, dict(request.headers), client)
    return Response(
        content=result.body,
        status_code=result.statusCode,
        headers={k: v for k, v in result.headers.items() if k != "Content-Type"},
        media_type=result.headers.get("Content-Type"),
    )
