"""Extract size and style facets from asset filenames."""

from __future__ import annotations

import re

from .config import DEFAULT_IMAGE_SUFFIX
from .models import AssetFileFacets

ICON_STYLES = ("regular", "filled", "light", "bold", "outline")

SIZE_PATTERN = re.compile(r"_([0-9]+)_")
STYLE_PATTERN = re.compile(r"_(" + "|".join(ICON_STYLES) + r")\Z", re.IGNORECASE)


def has_image_suffix(filename: str, suffix: str = DEFAULT_IMAGE_SUFFIX) -> bool:
    return filename[-len(suffix):].lower() == suffix.lower()


def strip_image_suffix(filename: str, suffix: str = DEFAULT_IMAGE_SUFFIX) -> str:
    if has_image_suffix(filename, suffix):
        return filename[: len(filename) - len(suffix)]
    return filename


def parse_file_details(filename: str, suffix: str = DEFAULT_IMAGE_SUFFIX) -> AssetFileFacets:
    """Parse ``icon_name_24_regular.svg`` style names.

    The size is the first underscore-delimited number inside the stem and the
    style an underscore-delimited suffix from :data:`ICON_STYLES`. Facets are
    annotations only; ``base_name`` keeps the whole stem.
    """
    stem = strip_image_suffix(filename, suffix)

    size = None
    size_match = SIZE_PATTERN.search(stem)
    if size_match:
        size = int(size_match.group(1)) or None

    style = None
    style_match = STYLE_PATTERN.search(stem)
    if style_match:
        style = style_match.group(1).lower()

    return AssetFileFacets(base_name=stem, size=size, style=style)
