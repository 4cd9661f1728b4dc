"""Pydantic models for request/response payloads."""
from __future__ import annotations

from typing import Dict

from pydantic import BaseModel, Field


class Page(BaseModel):
    title: str = ""
    description: str = ""
    url: str = ""
    exampleUrl: str | None = None
    playgroundUrl: str | None = None


class SearchResult(BaseModel):
    totalResults: int
    currentPage: int
    pageCount: int
    components: list[Page] = Field(default_factory=list)
    pages: list[Page] = Field(default_factory=list)
    isTruncated: bool | None = None


class ResultEnvelope(BaseModel):
    result: SearchResult
    initial: bool = False
    nextUrl: str | None = None
    prevUrl: str | None = None

    def to_json(self) -> str:
        return self.model_dump_json(exclude_none=True)


class SearchErrorBody(BaseModel):
    error: str


class HandlerResponse(BaseModel):
    statusCode: int
    headers: Dict[str, str]
    body: str
