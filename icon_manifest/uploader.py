"""Batch upload of the asset tree to Cloudflare R2 (S3-compatible)."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Sequence

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .catalog import AssetRootError
from .config import DEFAULT_IMAGE_SUFFIX, UploadConfig
from .images import detect_content_type, iter_image_files

logger = logging.getLogger("icon_manifest")

RETRYABLE_ERRORS = (BotoCoreError, ClientError, OSError)


@dataclass
class UploadResult:
    """Outcome of uploading a single file."""

    relative_path: str
    key: str
    ok: bool
    attempts: int
    error: Optional[str] = None


@dataclass
class UploadSummary:
    """Aggregate counts for an upload run."""

    results: List[UploadResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> int:
        return sum(1 for result in self.results if result.ok)

    @property
    def failed(self) -> List[UploadResult]:
        return [result for result in self.results if not result.ok]


def build_object_key(prefix: Optional[str], relative_path: str) -> str:
    segments = [segment for segment in (prefix, relative_path) if segment]
    return "/".join(segment.replace("\\", "/") for segment in segments)


def create_r2_client(config: UploadConfig) -> Any:
    return boto3.client(
        "s3",
        region_name="auto",
        endpoint_url=config.endpoint_url,
        aws_access_key_id=config.access_key_id,
        aws_secret_access_key=config.secret_access_key,
    )


class R2Uploader:
    """Uploads every image under ``asset_root`` in concurrent batches."""

    def __init__(
        self,
        config: UploadConfig,
        asset_root: Path,
        client: Any = None,
        image_suffix: str = DEFAULT_IMAGE_SUFFIX,
    ) -> None:
        self.config = config
        self.asset_root = Path(asset_root)
        self.image_suffix = image_suffix
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = create_r2_client(self.config)
        return self._client

    def collect_files(self) -> List[str]:
        if not self.asset_root.is_dir():
            raise AssetRootError(f"Assets directory not found at {self.asset_root}")
        try:
            return list(iter_image_files(self.asset_root, self.image_suffix))
        except OSError as exc:
            raise AssetRootError(
                f"Could not read assets directory at {self.asset_root}: {exc}"
            ) from exc

    def _retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self.config.max_attempts),
            wait=wait_exponential(
                multiplier=self.config.backoff_base, max=self.config.backoff_max
            ),
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

    def upload_file(self, relative_path: str) -> UploadResult:
        """Upload one file with retries; failures are returned, not raised."""
        key = build_object_key(self.config.prefix, relative_path)
        attempts = 0
        try:
            for attempt in self._retrying():
                with attempt:
                    attempts = attempt.retry_state.attempt_number
                    body = (self.asset_root / relative_path).read_bytes()
                    self.client.put_object(
                        Bucket=self.config.bucket_name,
                        Key=key,
                        Body=body,
                        ContentType=detect_content_type(body, relative_path),
                    )
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning(
                "Failed to upload %s after %d attempt(s): %s", relative_path, attempts, exc
            )
            return UploadResult(relative_path, key, ok=False, attempts=attempts, error=str(exc))
        logger.info("Uploaded %s -> %s", relative_path, key)
        return UploadResult(relative_path, key, ok=True, attempts=attempts)

    async def upload_batch(self, batch: Sequence[str]) -> List[UploadResult]:
        return list(
            await asyncio.gather(
                *(asyncio.to_thread(self.upload_file, path) for path in batch)
            )
        )

    async def upload_all(self) -> UploadSummary:
        files = self.collect_files()
        summary = UploadSummary()
        if not files:
            logger.warning("No %s files found to upload.", self.image_suffix)
            return summary

        # Worker threads share one client.
        if self._client is None:
            self._client = create_r2_client(self.config)
        batch_size = self.config.batch_size
        total_batches = (len(files) + batch_size - 1) // batch_size
        logger.info(
            'Uploading %d files to bucket "%s" in %d batch(es)...',
            len(files),
            self.config.bucket_name,
            total_batches,
        )
        for index in range(0, len(files), batch_size):
            batch = files[index : index + batch_size]
            logger.debug(
                "Processing batch %d of %d (size: %d)",
                index // batch_size + 1,
                total_batches,
                len(batch),
            )
            summary.results.extend(await self.upload_batch(batch))
        return summary
