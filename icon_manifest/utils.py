"""Utility helpers for string normalization and path handling."""

from __future__ import annotations

import re
import unicodedata
from urllib.parse import quote

SLUG_PATTERN = re.compile(r"[^a-z0-9]+")
HYPHEN_RUN_PATTERN = re.compile(r"-{2,}")

# Characters encodeURIComponent leaves untouched beyond quote()'s defaults.
_URI_COMPONENT_SAFE = "!~*'()"


def slugify(value: str) -> str:
    """Lowercase, strip diacritics and join alphanumeric runs with hyphens."""
    normalized = unicodedata.normalize("NFD", value.lower())
    normalized = "".join(ch for ch in normalized if not unicodedata.combining(ch))
    return SLUG_PATTERN.sub("-", normalized).strip("-")


def collapse_hyphens(value: str) -> str:
    return HYPHEN_RUN_PATTERN.sub("-", value)


def encode_uri_component(value: str) -> str:
    """Percent-encode a single URL path segment."""
    return quote(value, safe=_URI_COMPONENT_SAFE)
