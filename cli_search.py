"""Terminal client that reuses the in-process search handler."""
from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Iterable

from docsearch.config import settings
from docsearch.cse_client import get_client
from docsearch.models import HandlerResponse
from docsearch.search import handle_search

GREEN = "\033[92m"
RED = "\033[91m"
RESET = "\033[0m"


def perform_query(query: str, locale: str, page: int) -> HandlerResponse:
    params = {"q": query, "locale": locale, "page": str(page)}
    return handle_search(params, client=get_client())


def interactive_shell(locale: str) -> None:
    print("Interactive documentation search. Type 'exit' to quit.")
    while True:
        try:
            query = input("> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            return
        if not query:
            continue
        if query.lower() in {"exit", "quit"}:
            return
        pretty_print_response(query, perform_query(query, locale, 1))


def pretty_print_response(query: str, response: HandlerResponse) -> None:
    if response.statusCode != 200:
        print(f"{RED}Query: {query} | failed ({response.statusCode}): {response.body}{RESET}")
        return
    payload = json.loads(response.body)
    if "error" in payload:
        print(f"{RED}{payload['error']}{RESET}")
        return

    result = payload["result"]
    print(
        f"Query: {query} | results: {GREEN}{result['totalResults']}{RESET} | "
        f"page {result['currentPage']}/{result['pageCount']}"
        + (" (truncated)" if result.get("isTruncated") else "")
    )
    for item in result["components"]:
        print(f"  * {item['title']} | {item['url']}")
        print(f"      example: {item.get('exampleUrl', '-')} | playground: {item.get('playgroundUrl', '-')}")
    for idx, item in enumerate(result["pages"], start=1):
        print(f"  {idx:02d}. {item['title']} | {item['url']}")
    for label in ("prevUrl", "nextUrl"):
        if label in payload:
            print(f"  {label}: {payload[label]}")


def batch_mode(file_path: Path, locale: str) -> None:
    with file_path.open("r", encoding="utf-8") as fh:
        for line in fh:
            query = line.strip()
            if not query:
                continue
            pretty_print_response(query, perform_query(query, locale, 1))


def main(argv: Iterable[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="CLI client for the documentation search proxy")
    parser.add_argument("query", nargs="?", help="Query string. If omitted, starts REPL mode.")
    parser.add_argument("--locale", default=settings.default_locale, help="Locale to search in")
    parser.add_argument("--page", type=int, default=1, help="Result page to fetch")
    parser.add_argument("--batch", type=Path, help="File with queries to execute line by line")
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.batch:
        batch_mode(args.batch, args.locale)
        return 0
    if args.query:
        response = perform_query(args.query, args.locale, args.page)
        pretty_print_response(args.query, response)
        return 0 if response.statusCode == 200 else 1
    interactive_shell(args.locale)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
