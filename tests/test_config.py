"""Tests for docsite.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from docsite.config import SiteConfig, check_site_config, load_config, load_config_text
from docsite.errors import ConfigError


def _raw(**overrides: object) -> dict:
    raw = {"product": "Widget", "siteMetadata": {"title": "T", "description": "D"}}
    raw.update(overrides)
    return raw


def test_minimal_config_is_accepted() -> None:
    config = check_site_config(_raw())

    assert isinstance(config, SiteConfig)
    assert config.product == "Widget"
    assert config.site_metadata.title == "T"
    assert config.site_metadata.origin is None
    assert config.search is None


def test_camel_case_fields_map_to_attributes() -> None:
    config = check_site_config(
        _raw(
            productRepo="acme/widget",
            contentRepo="acme/widget-docs",
            themeColor="#112233",
            themeColorDark="#000000",
            search={"indexName": "widget", "apiKey": "key", "appId": "APP"},
            siteMetadata={
                "title": "T",
                "description": "D",
                "origin": "https://docs.example.com",
                "twitterUsername": "@widget",
                "faviconMaskSvg": "/mask.svg",
                "faviconMaskColor": "#abcdef",
                "manifest": {"display": "browser"},
            },
        )
    )

    assert config.product_repo == "acme/widget"
    assert config.theme_color_dark == "#000000"
    assert config.search.index_name == "widget"
    assert config.site_metadata.twitter_username == "@widget"
    assert config.site_metadata.manifest == {"display": "browser"}


@pytest.mark.parametrize(
    "raw",
    [
        {"siteMetadata": {"title": "T", "description": "D"}},
        _raw(product=""),
        _raw(siteMetadata={"title": "", "description": "D"}),
        _raw(siteMetadata={"title": "T"}),
        _raw(themeColor="red"),
        _raw(themeColorDark="#000000"),
        _raw(productRepo="not-a-repo"),
        _raw(contentRepo="a/b/c"),
        _raw(siteMetadata={"title": "T", "description": "D", "origin": "https://x.com/docs"}),
        _raw(siteMetadata={"title": "T", "description": "D", "origin": "ftp://x.com"}),
        _raw(siteMetadata={"title": "T", "description": "D", "twitterUsername": "widget"}),
        _raw(siteMetadata={"title": "T", "description": "D", "faviconMaskSvg": "/mask.svg"}),
        _raw(search={"indexName": "widget"}),
    ],
)
def test_invalid_configs_are_rejected(raw: dict) -> None:
    with pytest.raises(ConfigError):
        check_site_config(raw)


def test_error_message_names_the_field() -> None:
    with pytest.raises(ConfigError) as excinfo:
        check_site_config(_raw(themeColor="blue"))

    assert "themeColor" in str(excinfo.value)


def test_non_mapping_is_rejected() -> None:
    with pytest.raises(ConfigError):
        check_site_config(["product"])


def test_load_yaml_config(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(
        'product: Widget\nthemeColor: "#123456"\nsiteMetadata:\n  title: T\n  description: D\n',
        encoding="utf-8",
    )

    config = load_config(path)

    assert config.theme_color == "#123456"


def test_unparsable_text_raises_config_error() -> None:
    with pytest.raises(ConfigError):
        load_config_text("{not json", ".json")
    with pytest.raises(ConfigError):
        load_config_text("product: [unclosed", ".yaml")
