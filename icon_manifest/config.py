"""Configuration objects and constants for manifest generation and upload."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional

CDN_BASE_URL_ENV = "ICON_CDN_BASE_URL"
DEFAULT_IMAGE_DIR_NAME = "SVG"
DEFAULT_DESCRIPTOR_NAME = "metadata.json"
DEFAULT_IMAGE_SUFFIX = ".svg"
DEFAULT_ASSETS_SEGMENT = "assets"
DEFAULT_BATCH_SIZE = 20
DEFAULT_MAX_ATTEMPTS = 5

_REQUIRED_UPLOAD_VARS = (
    "R2_ACCOUNT_ID",
    "R2_ACCESS_KEY_ID",
    "R2_SECRET_ACCESS_KEY",
    "R2_BUCKET_NAME",
)


class ConfigError(ValueError):
    """Raised when required configuration is missing or invalid."""


def _strip_base_url(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    stripped = value.rstrip("/")
    return stripped or None


@dataclass
class CatalogConfig:
    """Settings that control how the asset tree is turned into a manifest."""

    asset_root: Path
    output_path: Path
    cdn_base_url: Optional[str] = None
    image_dir_name: str = DEFAULT_IMAGE_DIR_NAME
    descriptor_name: str = DEFAULT_DESCRIPTOR_NAME
    image_suffix: str = DEFAULT_IMAGE_SUFFIX
    assets_segment: str = DEFAULT_ASSETS_SEGMENT

    def __post_init__(self) -> None:
        self.asset_root = Path(self.asset_root)
        self.output_path = Path(self.output_path)
        self.cdn_base_url = _strip_base_url(self.cdn_base_url)

    @classmethod
    def from_env(
        cls,
        asset_root: Path,
        output_path: Path,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "CatalogConfig":
        env = os.environ if environ is None else environ
        return cls(
            asset_root=asset_root,
            output_path=output_path,
            cdn_base_url=env.get(CDN_BASE_URL_ENV),
        )


@dataclass
class UploadConfig:
    """Credentials and tuning for the object-storage uploader."""

    account_id: str
    access_key_id: str
    secret_access_key: str
    bucket_name: str
    prefix: Optional[str] = None
    batch_size: int = DEFAULT_BATCH_SIZE
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    backoff_base: float = 0.5
    backoff_max: float = 8.0

    def __post_init__(self) -> None:
        if self.prefix is not None:
            self.prefix = self.prefix.strip("/") or None
        if self.batch_size < 1:
            raise ConfigError(f"batch_size must be positive, got {self.batch_size}")
        if self.max_attempts < 1:
            raise ConfigError(f"max_attempts must be positive, got {self.max_attempts}")

    @property
    def endpoint_url(self) -> str:
        return f"https://{self.account_id}.r2.cloudflarestorage.com"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "UploadConfig":
        """Build the upload settings from ``R2_*`` variables.

        Every missing variable is reported in a single :class:`ConfigError`.
        """
        env = os.environ if environ is None else environ
        missing: List[str] = [name for name in _REQUIRED_UPLOAD_VARS if not env.get(name)]
        if missing:
            raise ConfigError(
                f"Missing required environment variables: {', '.join(missing)}"
            )
        return cls(
            account_id=env["R2_ACCOUNT_ID"],
            access_key_id=env["R2_ACCESS_KEY_ID"],
            secret_access_key=env["R2_SECRET_ACCESS_KEY"],
            bucket_name=env["R2_BUCKET_NAME"],
            prefix=env.get("R2_PREFIX"),
        )
