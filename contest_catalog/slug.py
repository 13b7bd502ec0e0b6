"""URL slugs for catalog records."""

from __future__ import annotations

import re
from typing import Any, Mapping

NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def normalize_slug(value: str) -> str:
    """Lowercase, collapse non-alphanumeric runs to "-", trim hyphens.

    Example:
        >>> normalize_slug("  Round 1! ")
        'round-1'
    """
    return NON_ALNUM_RE.sub("-", (value or "").lower()).strip("-")


def _field(entry: Any, name: str) -> str:
    if isinstance(entry, Mapping):
        value = entry.get(name)
    else:
        value = getattr(entry, name, None)
    return "" if value is None else str(value)


def hashcode_slug(entry: Any) -> str:
    """Slug for a record, mapping or any object with year/round/id.

    Example:
        >>> hashcode_slug({"year": "2023", "round": "Round 1!"})
        '2023-round-1'
    """
    parts = [normalize_slug(_field(entry, name)) for name in ("year", "round")]
    slug = "-".join(part for part in parts if part)
    if slug:
        return slug
    return normalize_slug(_field(entry, "id").replace("/", "-"))
