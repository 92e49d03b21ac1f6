import json
import os
import re
import stat

import pytest

from icon_manifest import manifest as manifest_module
from icon_manifest.catalog import build_catalog
from icon_manifest.config import CatalogConfig
from icon_manifest.manifest import (
    compose_manifest,
    filter_icons,
    load_manifest,
    summarize_categories,
    utc_timestamp,
    write_manifest,
)
from icon_manifest.models import CatalogRecord

from conftest import make_category


def _record(**overrides):
    values = dict(
        id="alert-alert_24_regular",
        category="Alert",
        category_slug="alert",
        name="Alert",
        file="alert_24_regular.svg",
        relative_path="assets/Alert/SVG/alert_24_regular.svg",
        cdn_url=None,
    )
    values.update(overrides)
    return CatalogRecord(**values)


def test_timestamp_format():
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z", utc_timestamp())


def test_record_omits_absent_optionals_but_keeps_null_cdn_url():
    data = _record().to_dict()
    assert list(data) == [
        "id",
        "category",
        "categorySlug",
        "name",
        "tags",
        "file",
        "relativePath",
        "cdnUrl",
    ]
    assert data["cdnUrl"] is None


def test_record_key_order_with_all_fields():
    data = _record(description="d", keyword="k", tags=["t"], size=24, style="regular").to_dict()
    assert list(data) == [
        "id",
        "category",
        "categorySlug",
        "name",
        "description",
        "keyword",
        "tags",
        "size",
        "style",
        "file",
        "relativePath",
        "cdnUrl",
    ]


def test_write_manifest_round_trips_count(tmp_path):
    output = tmp_path / "out" / "assets_manifest.json"
    manifest = compose_manifest([_record(), _record(id="alert-other", file="other.svg")])
    write_manifest(manifest, output)
    data = load_manifest(output)
    assert list(data) == ["generatedAt", "count", "icons"]
    assert data["count"] == len(data["icons"]) == 2
    assert output.read_text(encoding="utf-8").endswith("\n")


def test_write_manifest_preserves_unicode(tmp_path):
    output = tmp_path / "assets_manifest.json"
    write_manifest(compose_manifest([_record(name="Café")]), output)
    assert "Café" in output.read_text(encoding="utf-8")


def test_write_manifest_overwrites_previous(tmp_path):
    output = tmp_path / "assets_manifest.json"
    write_manifest(compose_manifest([_record(), _record(id="x")]), output)
    write_manifest(compose_manifest([]), output)
    data = load_manifest(output)
    assert data["count"] == 0
    assert data["icons"] == []


def test_failed_write_leaves_previous_manifest(tmp_path, monkeypatch):
    output = tmp_path / "assets_manifest.json"
    output.write_text('{"previous": true}', encoding="utf-8")

    def boom(self, target):
        raise OSError("disk full")

    monkeypatch.setattr(manifest_module.Path, "replace", boom)
    with pytest.raises(OSError):
        write_manifest(compose_manifest([_record()]), output)
    assert output.read_text(encoding="utf-8") == '{"previous": true}'
    assert list(tmp_path.iterdir()) == [output]


@pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
def test_written_manifest_honours_umask(tmp_path):
    output = tmp_path / "assets_manifest.json"
    previous = os.umask(0o022)
    try:
        write_manifest(compose_manifest([]), output)
    finally:
        os.umask(previous)
    assert stat.S_IMODE(output.stat().st_mode) == 0o644


def test_icons_identical_across_runs(asset_root, tmp_path):
    make_category(asset_root, "Alert", files=["alert_24_regular.svg", "alert_20_filled.svg"])
    make_category(asset_root, "Clock", files=["clock.svg"], descriptor={"metaphor": ["time"]})
    config = CatalogConfig(
        asset_root=asset_root,
        output_path=tmp_path / "assets_manifest.json",
        cdn_base_url="https://cdn.example.com",
    )
    first = tmp_path / "first.json"
    second = tmp_path / "second.json"
    write_manifest(compose_manifest(build_catalog(config), "2026-01-01T00:00:00.000Z"), first)
    write_manifest(compose_manifest(build_catalog(config), "2026-01-02T00:00:00.000Z"), second)
    assert json.dumps(load_manifest(first)["icons"]) == json.dumps(load_manifest(second)["icons"])


ICONS = [
    {"name": "Alert", "category": "Alert", "categorySlug": "alert", "tags": ["bell"], "style": "regular"},
    {"name": "Alert", "category": "Alert", "categorySlug": "alert", "tags": ["bell"], "style": "filled"},
    {"name": "Clock", "category": "Access Time", "categorySlug": "access-time", "tags": ["Time"]},
]


def test_filter_by_query_matches_name_tags_and_category():
    assert filter_icons(ICONS, query="  BELL ") == ICONS[:2]
    assert filter_icons(ICONS, query="time") == [ICONS[2]]
    assert filter_icons(ICONS, query="access") == [ICONS[2]]
    assert filter_icons(ICONS, query="") == ICONS


def test_filter_by_category_and_style():
    assert filter_icons(ICONS, category="access-time") == [ICONS[2]]
    assert filter_icons(ICONS, style="filled") == [ICONS[1]]
    assert filter_icons(ICONS, category="all", style="all") == ICONS
    assert filter_icons(ICONS, category="access-time", style="regular") == []


def test_filter_limit():
    assert filter_icons(ICONS, limit=1) == [ICONS[0]]
    assert filter_icons(ICONS, limit=0) == []


def test_summarize_categories():
    assert summarize_categories(ICONS) == [
        {"slug": "access-time", "label": "Access Time", "count": 1},
        {"slug": "alert", "label": "Alert", "count": 2},
    ]
