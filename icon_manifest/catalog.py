"""Walk the category tree and assemble catalog records."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Dict, List, Optional

from .config import CatalogConfig
from .descriptors import load_descriptor
from .filenames import has_image_suffix, parse_file_details
from .models import CatalogRecord, CategoryDescriptor
from .utils import collapse_hyphens, encode_uri_component, slugify

logger = logging.getLogger("icon_manifest")


class AssetRootError(RuntimeError):
    """Raised when the asset root cannot be enumerated."""


@dataclass
class CategorySource:
    """A category directory that holds an image subfolder."""

    name: str
    slug: str
    image_dir: Path
    descriptor: CategoryDescriptor


def list_directory(path: Path) -> List[Path]:
    return sorted(path.iterdir(), key=lambda entry: entry.name)


class CatalogBuilder:
    """Turns an asset root into an ordered list of :class:`CatalogRecord`."""

    def __init__(self, config: CatalogConfig) -> None:
        self.config = config

    def build(self) -> List[CatalogRecord]:
        """Walk every category and return records in enumeration order.

        Raises :class:`AssetRootError` when the root itself is unusable; any
        problem below the root only drops the affected category or file.
        """
        records: List[CatalogRecord] = []
        seen_ids: Dict[str, CatalogRecord] = {}
        for entry in self._list_root():
            try:
                category = self.prepare_category(entry)
            except OSError as exc:
                logger.warning("Skipping category %s: %s", entry.name, exc)
                continue
            if category is None:
                continue
            for record in self.build_category(category):
                record.id = self._claim_id(record, seen_ids)
                records.append(record)
        return records

    def _list_root(self) -> List[Path]:
        root = self.config.asset_root
        if not root.is_dir():
            raise AssetRootError(f"Assets directory not found at {root}")
        try:
            return list_directory(root)
        except OSError as exc:
            raise AssetRootError(f"Could not read assets directory at {root}: {exc}") from exc

    def prepare_category(self, entry: Path) -> Optional[CategorySource]:
        """Return the category for a root entry, or ``None`` to skip it."""
        if not entry.is_dir():
            return None
        image_dir = entry / self.config.image_dir_name
        if not image_dir.is_dir():
            logger.debug("Skipping %s: no %s folder", entry.name, self.config.image_dir_name)
            return None
        descriptor = load_descriptor(entry / self.config.descriptor_name)
        return CategorySource(
            name=entry.name,
            slug=slugify(entry.name),
            image_dir=image_dir,
            descriptor=descriptor or CategoryDescriptor(),
        )

    def build_category(self, category: CategorySource) -> List[CatalogRecord]:
        try:
            files = list_directory(category.image_dir)
        except OSError as exc:
            logger.warning("Skipping category %s: %s", category.name, exc)
            return []

        records: List[CatalogRecord] = []
        for path in files:
            if not has_image_suffix(path.name, self.config.image_suffix):
                continue
            records.append(self.build_record(category, path.name))
        logger.debug("Category %s contributed %d icon(s)", category.name, len(records))
        return records

    def build_record(self, category: CategorySource, filename: str) -> CatalogRecord:
        facets = parse_file_details(filename, self.config.image_suffix)
        descriptor = category.descriptor
        relative_path = PurePosixPath(
            self.config.assets_segment,
            category.name,
            self.config.image_dir_name,
            filename,
        )
        return CatalogRecord(
            id=collapse_hyphens(f"{category.slug}-{facets.base_name}"),
            category=category.name,
            category_slug=category.slug,
            name=descriptor.name or category.name,
            description=descriptor.description,
            keyword=descriptor.keyword,
            tags=list(descriptor.tags),
            size=facets.size,
            style=facets.style,
            file=filename,
            relative_path=str(relative_path),
            cdn_url=self.cdn_url(category.name, filename),
        )

    def cdn_url(self, category_name: str, filename: str) -> Optional[str]:
        base = self.config.cdn_base_url
        if not base:
            return None
        return "/".join(
            [
                base,
                encode_uri_component(category_name),
                self.config.image_dir_name,
                encode_uri_component(filename),
            ]
        )

    def _claim_id(self, record: CatalogRecord, seen_ids: Dict[str, CatalogRecord]) -> str:
        candidate = record.id
        if candidate in seen_ids:
            previous = seen_ids[candidate]
            suffix = 2
            while f"{record.id}-{suffix}" in seen_ids:
                suffix += 1
            candidate = f"{record.id}-{suffix}"
            logger.warning(
                "Duplicate icon id %s for %s (already used by %s); using %s",
                record.id,
                record.relative_path,
                previous.relative_path,
                candidate,
            )
        seen_ids[candidate] = record
        return candidate


def build_catalog(config: CatalogConfig) -> List[CatalogRecord]:
    return CatalogBuilder(config).build()
