"""Compose, persist and query the consolidated icon manifest."""

from __future__ import annotations

import datetime as dt
import json
import logging
import os
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .models import CatalogRecord, Manifest

logger = logging.getLogger("icon_manifest")


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision."""
    return (
        dt.datetime.now(dt.timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def compose_manifest(records: Sequence[CatalogRecord], generated_at: Optional[str] = None) -> Manifest:
    return Manifest(generated_at=generated_at or utc_timestamp(), icons=list(records))


def render_manifest(manifest: Manifest) -> str:
    return json.dumps(manifest.to_dict(), indent=2, ensure_ascii=False) + "\n"


def write_manifest(manifest: Manifest, output_path: Path) -> Path:
    """Atomically replace ``output_path`` with the rendered manifest.

    Readers see either the previous file or the complete new one.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = render_manifest(manifest)

    tmp = output_path.with_name(f".{output_path.name}.tmp.{uuid.uuid4().hex}")
    try:
        with tmp.open("w", encoding="utf-8") as handle:
            handle.write(payload)
            handle.flush()
            os.fsync(handle.fileno())
        tmp.replace(output_path)
    except Exception:
        tmp.unlink(missing_ok=True)
        raise
    logger.info(
        "Generated manifest with %d icons at %s", manifest.count, output_path
    )
    return output_path


def load_manifest(path: Path) -> Dict[str, Any]:
    return json.loads(Path(path).read_text(encoding="utf-8"))


def _is_any(value: Optional[str]) -> bool:
    return not value or value == "all"


def filter_icons(
    icons: Sequence[Dict[str, Any]],
    query: Optional[str] = None,
    category: Optional[str] = None,
    style: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """Filter manifest records by category slug, style and free text.

    The query matches case-insensitively against the name, any tag and the
    raw category label.
    """
    needle = (query or "").strip().lower()
    matches: List[Dict[str, Any]] = []
    for icon in icons:
        if limit is not None and len(matches) >= limit:
            break
        if not _is_any(category) and icon.get("categorySlug") != category:
            continue
        if not _is_any(style) and icon.get("style") != style:
            continue
        if needle and not (
            needle in str(icon.get("name", "")).lower()
            or any(needle in str(tag).lower() for tag in icon.get("tags", []))
            or needle in str(icon.get("category", "")).lower()
        ):
            continue
        matches.append(icon)
    return matches


def summarize_categories(icons: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Return ``{slug, label, count}`` per category slug, sorted by label."""
    summary: Dict[str, Dict[str, Any]] = {}
    for icon in icons:
        slug = icon["categorySlug"]
        entry = summary.setdefault(slug, {"slug": slug, "label": icon["category"], "count": 0})
        entry["count"] += 1
    return sorted(summary.values(), key=lambda item: item["label"].lower())
