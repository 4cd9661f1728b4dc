"""Text and URL helpers for turning raw CSE items into display records.

The component pattern is matched exactly as the documentation site lays out
its reference pages: an optional scheme+host, an optional single path segment
(usually the locale) and then ``/documentation/components/amp-<name>``.
"""
from __future__ import annotations

import re
from typing import Any, Dict, Optional
from urllib.parse import quote

COMPONENT_REFERENCE_DOC_PATTERN = re.compile(
    r"^(?:https?://[^/]+)?(?:/[^/]+)?/documentation/components/(amp-[^/]+)"
)

# Markdown links, optionally holding {{g.doc}} template calls or cut off at the end.
MARKDOWN_LINK_PATTERN = re.compile(r"\[([^\]]+)\]\([^)]*?(?:\{\{[^}]+\}[^)]*)?(?:\)|$)")

_JS_URI_COMPONENT_SAFE = "!'()*-._~"


def encode_uri_component(value: str) -> str:
    """Percent-encode like JavaScript's ``encodeURIComponent``."""
    return quote(value, safe=_JS_URI_COMPONENT_SAFE)


def component_name(url: str) -> Optional[str]:
    match = COMPONENT_REFERENCE_DOC_PATTERN.match(url)
    if match and match.group(1):
        return match.group(1)
    return None


def is_component_url(url: str) -> bool:
    return COMPONENT_REFERENCE_DOC_PATTERN.match(url) is not None


def cleanup_text(text: str) -> str:
    """Remove/rewrite characters that cause problems when displaying."""
    # ` renders badly in the search template (`i shows up as Ã¬)
    text = text.replace("`", "'")
    while True:
        cleaned = MARKDOWN_LINK_PATTERN.sub(r"\1", text)
        if cleaned == text:
            return cleaned
        text = cleaned


def strip_title_prefix(title: str) -> str:
    """Cut off a ``Documentation: `` style prefix."""
    prefix_index = title.rfind(":")
    if prefix_index > 0 and prefix_index + 1 < len(title):
        return title[prefix_index + 1 :].strip()
    return title


def get_meta_tag_value(item: Dict[str, Any], meta_tag: str) -> Optional[str]:
    # pagemap values are always lists, the metatags dict is the first element
    metatags = (item.get("pagemap") or {}).get("metatags") or []
    if metatags and metatags[0].get(meta_tag):
        return metatags[0][meta_tag]
    return None


# JavaScript parseInt without a radix: optional sign, then hex after 0x/0X, else decimal
_LEADING_INT_PATTERN = re.compile(r"\s*([+-]?)(?:0[xX]([0-9a-fA-F]*)|([0-9]+))")


def parse_int(value: str) -> Optional[int]:
    """Parse a leading integer like JavaScript's ``parseInt`` ("2abc" -> 2, "0x10" -> 16)."""
    match = _LEADING_INT_PATTERN.match(value)
    if not match:
        return None
    sign, hex_digits, digits = match.groups()
    if hex_digits == "":
        return None
    number = int(hex_digits, 16) if hex_digits is not None else int(digits)
    return -number if sign == "-" else number
