from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from .artifacts import NOT_FOUND_CANONICAL_PATH
from .paths import compute_canonical_path, content_type_for

if TYPE_CHECKING:
    from .model import Resource, SiteSnapshot

NOT_FOUND_BODY = b"not found"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"


@dataclass(frozen=True)
class SiteResponse:
    status: int
    body: bytes = b""
    headers: dict[str, str] = field(default_factory=dict)


def redirect(location: str) -> SiteResponse:
    return SiteResponse(status=308, headers={"location": location})


def read_resource_body(resource: Resource) -> bytes:
    if resource.output_text is not None:
        return resource.output_text.encode("utf-8")
    return Path(resource.input_path).read_bytes()


def serve_resource(resource: Resource, status: int = 200) -> SiteResponse:
    content_type = content_type_for(resource.extension)
    return SiteResponse(
        status=status,
        body=read_resource_body(resource),
        headers={"content-type": content_type},
    )


def route(snapshot: SiteSnapshot, path: str) -> SiteResponse:
    """Resolve one request path against a published snapshot.

    Raises :class:`UnknownContentTypeError` when the matched resource has no
    content type mapping; the HTTP layer turns that into a 500.
    """
    if not path.startswith("/"):
        path = "/" + path

    resource = snapshot.resources.get(path)
    if resource is not None:
        if path.endswith(".html"):
            return redirect(path[: -len(".html")])
        if path.endswith("/index"):
            return redirect(path[: -len("index")])
        return serve_resource(resource)

    canonical_path = compute_canonical_path(path)
    resource = snapshot.find_canonical(canonical_path) or snapshot.find_canonical(canonical_path + "/")
    if resource is not None:
        return serve_resource(resource)

    not_found = snapshot.find_canonical(NOT_FOUND_CANONICAL_PATH)
    if not_found is not None:
        return serve_resource(not_found, status=404)
    return SiteResponse(status=404, body=NOT_FOUND_BODY, headers={"content-type": TEXT_CONTENT_TYPE})
