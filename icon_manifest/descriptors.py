"""Loading of per-category ``metadata.json`` descriptor files."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Optional

from .models import CategoryDescriptor

logger = logging.getLogger("icon_manifest")


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value:
        return value
    return None


def _tags(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item if isinstance(item, str) else str(item) for item in value if item is not None]


def load_descriptor(path: Path) -> Optional[CategoryDescriptor]:
    """Read a category descriptor, returning ``None`` when it is unusable.

    A missing, unreadable or malformed file is an expected outcome and is
    never raised to the caller.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("No descriptor at %s", path)
        return None
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Could not read descriptor %s: %s", path, exc)
        return None

    try:
        data = json.loads(raw)
    except ValueError as exc:
        logger.warning("Ignoring malformed descriptor %s: %s", path, exc)
        return None

    if not isinstance(data, dict):
        logger.warning("Ignoring descriptor %s: expected a JSON object", path)
        return None

    return CategoryDescriptor(
        name=_text(data.get("name")),
        description=_text(data.get("description")),
        keyword=_text(data.get("keyword")),
        tags=_tags(data.get("metaphor")),
    )
