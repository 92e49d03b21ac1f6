"""Shared fixtures for building small icon asset trees."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

import pytest

SVG_BODY = '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 20 20"></svg>\n'


def make_category(
    root: Path,
    name: str,
    files: Iterable[str] = (),
    descriptor: Optional[Dict[str, Any]] = None,
    raw_descriptor: Optional[str] = None,
    image_dir: str = "SVG",
) -> Path:
    category_dir = root / name
    svg_dir = category_dir / image_dir
    svg_dir.mkdir(parents=True, exist_ok=True)
    for filename in files:
        (svg_dir / filename).write_text(SVG_BODY, encoding="utf-8")
    if descriptor is not None:
        (category_dir / "metadata.json").write_text(json.dumps(descriptor), encoding="utf-8")
    elif raw_descriptor is not None:
        (category_dir / "metadata.json").write_text(raw_descriptor, encoding="utf-8")
    return category_dir


@pytest.fixture
def asset_root(tmp_path: Path) -> Path:
    root = tmp_path / "assets"
    root.mkdir()
    return root
