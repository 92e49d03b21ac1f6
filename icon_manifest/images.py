"""Image file discovery and content-type detection for uploads."""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from typing import Iterator, Optional

from filetype import guess

from .config import DEFAULT_IMAGE_SUFFIX
from .filenames import has_image_suffix

logger = logging.getLogger("icon_manifest")

DEFAULT_CONTENT_TYPE = "application/octet-stream"

# Text-based formats carry no magic number for filetype to sniff.
EXTENSION_CONTENT_TYPES = {
    ".svg": "image/svg+xml",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
}


def detect_image_mime(data: bytes) -> Optional[str]:
    """Detect an image MIME type from the file signature."""
    kind = guess(data)
    if kind and kind.mime.startswith("image/"):
        return kind.mime
    return None


def detect_content_type(data: bytes, filename: str) -> str:
    detected = detect_image_mime(data)
    if detected:
        return detected
    return EXTENSION_CONTENT_TYPES.get(PurePosixPath(filename).suffix.lower(), DEFAULT_CONTENT_TYPE)


def iter_image_files(
    root: Path,
    suffix: str = DEFAULT_IMAGE_SUFFIX,
    base: PurePosixPath = PurePosixPath(),
) -> Iterator[str]:
    """Yield POSIX paths, relative to ``root``, of every matching file.

    Traversal is depth-first with entries in name order. Failing to list
    ``root`` itself raises; unreadable subdirectories are logged and skipped.
    """
    for entry in sorted(root.iterdir(), key=lambda item: item.name):
        relative = base / entry.name
        if entry.is_dir():
            try:
                nested = list(iter_image_files(entry, suffix, relative))
            except OSError as exc:
                logger.warning("Skipping unreadable directory %s: %s", entry, exc)
                continue
            yield from nested
        elif entry.is_file() and has_image_suffix(entry.name, suffix):
            yield str(relative)
