from __future__ import annotations

import json
from typing import Iterable, Optional
from xml.sax.saxutils import escape

from .cache import hash_text
from .config import SiteConfig

MANIFEST_PATH_PREFIX = "/app."
MANIFEST_PATH_SUFFIX = ".webmanifest"
ROBOTS_PATH = "/robots.txt"
SITEMAP_PATH = "/sitemap.xml"
NOT_FOUND_CANONICAL_PATH = "/404"
DEFAULT_THEME_COLOR = "#ffffff"


def resolve_origin(config: SiteConfig, local_origin: Optional[str]) -> str:
    return local_origin or config.site_metadata.origin or ""


def compute_manifest_members(config: SiteConfig) -> dict:
    metadata = config.site_metadata
    icons = []
    if metadata.favicon_svg:
        icons.append({"src": metadata.favicon_svg, "type": "image/svg+xml", "sizes": "any"})
    if metadata.favicon_ico:
        icons.append({"src": metadata.favicon_ico, "type": "image/x-icon", "sizes": "48x48"})
    theme_color = config.theme_color or DEFAULT_THEME_COLOR
    members = {
        "short_name": config.product,
        "name": metadata.title,
        "description": metadata.description,
        "icons": icons,
        "theme_color": theme_color,
        "background_color": config.theme_color_dark or theme_color,
        "display": "standalone",
        "start_url": "/",
        "lang": "en-US",
        "dir": "ltr",
    }
    if metadata.manifest:
        members.update(metadata.manifest)
    return members


def compute_manifest(config: SiteConfig) -> tuple[str, str]:
    """Return ``(resource_path, json_text)`` for the web app manifest.

    The path embeds a digest of the text, so it only changes when the
    manifest content does.
    """
    text = json.dumps(compute_manifest_members(config), indent=2, ensure_ascii=False)
    digest = hash_text(text, "md5")
    return f"{MANIFEST_PATH_PREFIX}{digest}{MANIFEST_PATH_SUFFIX}", text


def compute_robots_txt(config: SiteConfig, local_origin: Optional[str] = None) -> str:
    origin = resolve_origin(config, local_origin)
    return "\n".join(
        [
            "User-agent: *",
            "Disallow:",
            "",
            f"Sitemap: {origin}{SITEMAP_PATH}",
            "",
        ]
    )


def compute_sitemap_xml(
    canonical_paths: Iterable[str], config: SiteConfig, local_origin: Optional[str] = None
) -> str:
    origin = resolve_origin(config, local_origin)
    items = []
    for canonical_path in sorted(set(canonical_paths)):
        if canonical_path == NOT_FOUND_CANONICAL_PATH:
            continue
        items.append(
            "\n".join(
                [
                    "<url>",
                    f"<loc>{escape(origin + canonical_path)}</loc>",
                    "</url>",
                ]
            )
        )
    return "\n".join(
        [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
            *items,
            "</urlset>",
            "",
        ]
    )
