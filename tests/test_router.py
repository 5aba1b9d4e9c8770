"""Tests for request routing against a published snapshot."""

from __future__ import annotations

import pytest

from docsite.errors import UnknownContentTypeError
from docsite.model import SiteModel

from conftest import SiteBuilder


def _renderer(page, **kwargs) -> str:
    return f"<p>{page.title_resolved}</p>"


@pytest.fixture
def model(site_builder: SiteBuilder) -> SiteModel:
    site_builder.write_config()
    site_builder.write(
        {
            "index.md": "# Home\n",
            "a/b.md": "# B\n",
            "docs/index.md": "# Docs\n",
            "_redirects": "/x /y\n",
        }
    )
    site_builder.write_bytes("logo.png", b"\x89PNG")
    return site_builder.build(renderer=_renderer)


def test_html_suffix_redirects_to_canonical(model: SiteModel) -> None:
    response = model.handle("/a/b.html")

    assert response.status == 308
    assert response.headers["location"] == "/a/b"
    assert response.body == b""


def test_canonical_path_serves_rendered_page(model: SiteModel) -> None:
    response = model.handle("/a/b")

    assert response.status == 200
    assert response.body == b"<p>B</p>"
    assert response.headers["content-type"] == "text/html; charset=utf-8"


def test_root_and_directory_paths(model: SiteModel) -> None:
    assert model.handle("/").body == b"<p>Home</p>"
    assert model.handle("/docs/").body == b"<p>Docs</p>"
    assert model.handle("/docs").body == b"<p>Docs</p>"


def test_index_html_redirect_chain_ends_at_page(model: SiteModel) -> None:
    first = model.handle("/docs/index.html")
    assert first.status == 308
    assert first.headers["location"] == "/docs/index"

    second = model.handle(first.headers["location"])
    assert second.status == 200
    assert second.body == b"<p>Docs</p>"


def test_static_file_is_served_verbatim(model: SiteModel) -> None:
    response = model.handle("/logo.png")

    assert response.status == 200
    assert response.body == b"\x89PNG"
    assert response.headers["content-type"] == "image/png"


def test_generated_artifacts_are_served(model: SiteModel) -> None:
    assert model.handle("/sitemap.xml").headers["content-type"] == "application/xml"
    manifest = model.handle(model.manifest_path)
    assert manifest.status == 200
    assert manifest.headers["content-type"] == "application/manifest+json"


def test_unknown_path_without_custom_page(model: SiteModel) -> None:
    response = model.handle("/nope")

    assert response.status == 404
    assert response.body == b"not found"


def test_unknown_path_uses_custom_not_found_page(site_builder: SiteBuilder) -> None:
    site_builder.write_config()
    site_builder.write({"index.md": "# Home\n", "404.md": "# Lost\n"})
    model = site_builder.build(renderer=_renderer)

    response = model.handle("/nope")

    assert response.status == 404
    assert response.body == b"<p>Lost</p>"
    assert response.headers["content-type"].startswith("text/html")


def test_extensionless_resource_has_no_content_type(model: SiteModel) -> None:
    with pytest.raises(UnknownContentTypeError):
        model.handle("/_redirects")


def test_requests_before_first_build_are_unavailable(site_builder: SiteBuilder) -> None:
    assert site_builder.model().handle("/").status == 503
