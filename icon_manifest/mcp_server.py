"""MCP server exposing manifest generation and icon search tools."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List

from mcp.server.fastmcp import FastMCP

from .catalog import CatalogBuilder
from .config import CatalogConfig
from .manifest import (
    compose_manifest,
    filter_icons,
    load_manifest,
    summarize_categories,
    write_manifest,
)

logger = logging.getLogger("icon_manifest.mcp")
logger.setLevel(logging.ERROR)

mcp = FastMCP(name="icon-manifest")


@mcp.tool()
def generate_manifest(
    assets_dir: str,
    output_path: str,
) -> str:
    """Scan an icon asset tree and write its manifest."""

    config = CatalogConfig.from_env(
        asset_root=Path(assets_dir).expanduser(),
        output_path=Path(output_path).expanduser(),
    )
    manifest = compose_manifest(CatalogBuilder(config).build())
    written = write_manifest(manifest, config.output_path)
    return f"Generated manifest with {manifest.count} icons at {written}"


@mcp.tool()
def search_icons(
    manifest_path: str,
    query: str = "",
    category: str = "all",
    style: str = "all",
    limit: int = 50,
) -> List[Dict[str, Any]]:
    """Find icons in a manifest by text, category slug and style."""

    source = Path(manifest_path).expanduser()
    if not source.exists():
        raise FileNotFoundError(f"Manifest does not exist: {source}")
    icons = load_manifest(source).get("icons", [])
    return filter_icons(icons, query=query, category=category, style=style, limit=limit)


@mcp.tool()
def list_categories(manifest_path: str) -> List[Dict[str, Any]]:
    """List icon categories in a manifest with their icon counts."""

    source = Path(manifest_path).expanduser()
    if not source.exists():
        raise FileNotFoundError(f"Manifest does not exist: {source}")
    return summarize_categories(load_manifest(source).get("icons", []))


def main() -> None:
    """Entry point for running the MCP server."""
    logging.basicConfig(level=logging.ERROR)
    mcp.run()


if __name__ == "__main__":
    main()
