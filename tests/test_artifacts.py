"""Tests for generated manifest, robots and sitemap artifacts."""

from __future__ import annotations

import json
import re

from docsite.artifacts import (
    compute_manifest,
    compute_robots_txt,
    compute_sitemap_xml,
)
from docsite.config import check_site_config


def _config(**metadata: object):
    site_metadata = {"title": "Widget Docs", "description": "All about widgets"}
    site_metadata.update(metadata)
    return check_site_config({"product": "Widget", "themeColor": "#112233", "siteMetadata": site_metadata})


def test_manifest_members_and_content_addressed_path() -> None:
    path, text = compute_manifest(_config(faviconSvg="/favicon.svg"))
    members = json.loads(text)

    assert re.fullmatch(r"/app\.[0-9a-f]{32}\.webmanifest", path)
    assert members["short_name"] == "Widget"
    assert members["name"] == "Widget Docs"
    assert members["description"] == "All about widgets"
    assert members["theme_color"] == "#112233"
    assert members["display"] == "standalone"
    assert members["icons"] == [{"src": "/favicon.svg", "type": "image/svg+xml", "sizes": "any"}]


def test_manifest_path_is_stable_and_tracks_content() -> None:
    first, _ = compute_manifest(_config())
    second, _ = compute_manifest(_config())
    changed, text = compute_manifest(_config(manifest={"display": "browser", "lang": "de"}))

    assert first == second
    assert changed != first
    assert json.loads(text)["display"] == "browser"
    assert json.loads(text)["lang"] == "de"


def test_robots_points_at_sitemap() -> None:
    assert "Sitemap: https://example.com/sitemap.xml" in compute_robots_txt(_config(origin="https://example.com"))
    assert "Sitemap: http://localhost:8099/sitemap.xml" in compute_robots_txt(
        _config(origin="https://example.com"), "http://localhost:8099"
    )
    robots = compute_robots_txt(_config())
    assert robots.startswith("User-agent: *\nDisallow:\n")
    assert "Sitemap: /sitemap.xml" in robots


def test_sitemap_is_sorted_and_skips_not_found_page() -> None:
    xml = compute_sitemap_xml(["/b", "/", "/404", "/a&b"], _config(origin="https://example.com"))

    locs = [line for line in xml.splitlines() if line.startswith("<loc>")]
    assert locs == [
        "<loc>https://example.com/</loc>",
        "<loc>https://example.com/a&amp;b</loc>",
        "<loc>https://example.com/b</loc>",
    ]
    assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>')
