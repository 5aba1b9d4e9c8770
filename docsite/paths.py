from __future__ import annotations

from pathlib import Path

from .errors import PathOutsideRootError, UnknownContentTypeError

CONFIG_RESOURCE_PATHS = ("/config.yaml", "/config.json")
ALWAYS_INCLUDED_PATHS = {"/_redirects", "/_headers"}

CONTENT_TYPES = {
    ".html": "text/html; charset=utf-8",
    ".md": "text/html; charset=utf-8",
    ".ico": "image/x-icon",
    ".jpg": "image/jpeg",
    ".json": "application/json",
    ".png": "image/png",
    ".svg": "image/svg+xml",
    ".txt": "text/plain; charset=utf-8",
    ".webmanifest": "application/manifest+json",
    ".xml": "application/xml",
}


def replace_md_with_html(path: str) -> str:
    if path.endswith(".md"):
        return path[: -len(".md")] + ".html"
    return path


def relative_input_path(input_path: Path, root_dir: Path) -> str:
    try:
        rel = Path(input_path).relative_to(root_dir)
    except ValueError:
        raise PathOutsideRootError(str(input_path), str(root_dir)) from None
    if ".." in rel.parts:
        raise PathOutsideRootError(str(input_path), str(root_dir))
    return rel.as_posix()


def compute_resource_path(input_path: Path, root_dir: Path) -> str:
    return "/" + replace_md_with_html(relative_input_path(input_path, root_dir))


def compute_canonical_path(resource_path: str) -> str:
    if resource_path.endswith(".html"):
        resource_path = resource_path[: -len(".html")]
    if resource_path.endswith("/index"):
        # keep the slash: /docs/index -> /docs/
        resource_path = resource_path[: -len("index")]
    return resource_path


def compute_content_repo_path(input_path: Path, root_dir: Path) -> str:
    return "/" + relative_input_path(input_path, root_dir)


def compute_output_path(input_path: Path, root_dir: Path, output_dir: Path) -> Path:
    rel = relative_input_path(input_path, root_dir)
    return Path(output_dir) / replace_md_with_html(rel)


def should_include_in_output(resource_path: str, extension: str) -> bool:
    if resource_path in CONFIG_RESOURCE_PATHS:
        return False
    if resource_path.lower() == "/readme.html":
        return False
    if resource_path in ALWAYS_INCLUDED_PATHS:
        return True
    return extension in CONTENT_TYPES


def content_type_for(extension: str) -> str:
    content_type = CONTENT_TYPES.get(extension)
    if content_type is None:
        raise UnknownContentTypeError(extension)
    return content_type
