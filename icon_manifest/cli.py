"""Command-line entry point for manifest generation and asset upload."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import time
from dataclasses import replace
from pathlib import Path
from typing import Iterable, Sequence

from .catalog import AssetRootError, CatalogBuilder
from .config import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_MAX_ATTEMPTS,
    CatalogConfig,
    ConfigError,
    UploadConfig,
)
from .manifest import compose_manifest, write_manifest
from .uploader import R2Uploader

logger = logging.getLogger("icon_manifest.cli")


def _ensure_command_prefix(argv: Sequence[str], commands: Iterable[str]) -> Sequence[str]:
    if argv and (argv[0] in commands or argv[0] in ("-h", "--help")):
        return argv
    return ("generate", *argv)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--assets",
        default="assets",
        type=Path,
        help="Asset root holding one directory per icon category",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )


def _add_generate_arguments(parser: argparse.ArgumentParser) -> None:
    _add_common_arguments(parser)
    parser.add_argument(
        "--output",
        default="assets_manifest.json",
        type=Path,
        help="Path of the manifest file to write",
    )
    parser.add_argument(
        "--cdn-base-url",
        default=None,
        help="Base URL for cdnUrl values (defaults to $ICON_CDN_BASE_URL)",
    )


def _add_upload_arguments(parser: argparse.ArgumentParser) -> None:
    _add_common_arguments(parser)
    parser.add_argument(
        "--batch-size",
        type=int,
        default=DEFAULT_BATCH_SIZE,
        help="Number of files uploaded concurrently per batch",
    )
    parser.add_argument(
        "--max-attempts",
        type=int,
        default=DEFAULT_MAX_ATTEMPTS,
        help="Attempts per file before it is reported as failed",
    )


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Build the icon manifest from an asset tree or upload the tree to R2.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate", help="Scan the asset tree and write the icon manifest"
    )
    _add_generate_arguments(generate_parser)

    upload_parser = subparsers.add_parser(
        "upload", help="Upload every icon in the asset tree to Cloudflare R2"
    )
    _add_upload_arguments(upload_parser)

    argv = list(sys.argv[1:] if argv is None else argv)
    argv = list(_ensure_command_prefix(argv, subparsers.choices.keys()))
    return parser.parse_args(argv)


def _run_generate(args: argparse.Namespace) -> int:
    config = CatalogConfig.from_env(
        asset_root=Path(args.assets).resolve(),
        output_path=Path(args.output).resolve(),
    )
    if args.cdn_base_url is not None:
        config = replace(config, cdn_base_url=args.cdn_base_url)
    if not config.cdn_base_url:
        logger.debug("No CDN base URL configured; cdnUrl will be null")

    start = time.perf_counter()
    try:
        records = CatalogBuilder(config).build()
    except AssetRootError as exc:
        logger.error("Failed to generate manifest: %s", exc)
        return 1
    write_manifest(compose_manifest(records), config.output_path)
    logger.debug("Manifest generation finished in %.2fs", time.perf_counter() - start)
    return 0


def _run_upload(args: argparse.Namespace) -> int:
    try:
        config = replace(
            UploadConfig.from_env(),
            batch_size=args.batch_size,
            max_attempts=args.max_attempts,
        )
    except ConfigError as exc:
        logger.error("Failed to upload assets: %s", exc)
        return 1

    uploader = R2Uploader(config, Path(args.assets).resolve())
    start = time.perf_counter()
    try:
        summary = asyncio.run(uploader.upload_all())
    except AssetRootError as exc:
        logger.error("Failed to upload assets: %s", exc)
        return 1
    total_elapsed = time.perf_counter() - start

    failures = summary.failed
    logger.info(
        "Uploaded %d/%d files in %.2fs (%d failed)",
        summary.succeeded,
        summary.total,
        total_elapsed,
        len(failures),
    )
    for result in failures:
        logger.error("Upload failed for %s: %s", result.relative_path, result.error)
    return 1 if failures else 0


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    _configure_logging(args.verbose)
    if args.command == "upload":
        return _run_upload(args)
    return _run_generate(args)


if __name__ == "__main__":
    sys.exit(main())
