"""Data models used throughout the manifest pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class CategoryDescriptor:
    """Human-authored metadata for one category directory."""

    name: Optional[str] = None
    description: Optional[str] = None
    keyword: Optional[str] = None
    tags: List[str] = field(default_factory=list)


@dataclass
class AssetFileFacets:
    """Facets embedded in an asset filename."""

    base_name: str
    size: Optional[int] = None
    style: Optional[str] = None


@dataclass
class CatalogRecord:
    """One discovered asset as it appears in the manifest."""

    id: str
    category: str
    category_slug: str
    name: str
    file: str
    relative_path: str
    cdn_url: Optional[str]
    tags: List[str] = field(default_factory=list)
    description: Optional[str] = None
    keyword: Optional[str] = None
    size: Optional[int] = None
    style: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Return the manifest representation; absent optionals are omitted."""
        data: Dict[str, Any] = {
            "id": self.id,
            "category": self.category,
            "categorySlug": self.category_slug,
            "name": self.name,
        }
        if self.description is not None:
            data["description"] = self.description
        if self.keyword is not None:
            data["keyword"] = self.keyword
        data["tags"] = list(self.tags)
        if self.size is not None:
            data["size"] = self.size
        if self.style is not None:
            data["style"] = self.style
        data["file"] = self.file
        data["relativePath"] = self.relative_path
        data["cdnUrl"] = self.cdn_url
        return data


@dataclass(frozen=True)
class Manifest:
    """Snapshot of the full catalog at generation time."""

    generated_at: str
    icons: List[CatalogRecord]

    @property
    def count(self) -> int:
        return len(self.icons)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generatedAt": self.generated_at,
            "count": self.count,
            "icons": [record.to_dict() for record in self.icons],
        }
