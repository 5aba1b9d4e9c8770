from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Optional
from urllib.parse import urlsplit

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, ValidationInfo, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .errors import ConfigError

COLOR_RE = re.compile(r"^#[a-fA-F0-9]{6}$")
REPO_RE = re.compile(r"^[A-Za-z0-9_.-]+/[A-Za-z0-9_.-]+$")
TWITTER_RE = re.compile(r"^@\w+$")


def _check_not_blank(name: str, value: Optional[str]) -> Optional[str]:
    if value is not None and value == "":
        raise ValueError(f"Bad {name}: must not be blank")
    return value


def _check_pattern(name: str, pattern: re.Pattern, value: Optional[str]) -> Optional[str]:
    if value is not None and not pattern.match(value):
        raise ValueError(f"Bad {name}: {value}")
    return value


def check_origin(value: str) -> str:
    parts = urlsplit(value)
    if parts.scheme not in {"http", "https"} or not parts.netloc:
        raise ValueError(f"Bad origin: {value}")
    if parts.path or parts.query or parts.fragment:
        raise ValueError(f"Bad origin: {value}, must not include a path")
    return value


class _ConfigModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class SiteSearchConfig(_ConfigModel):
    index_name: str
    api_key: str
    app_id: str

    @field_validator("index_name", "api_key", "app_id")
    @classmethod
    def _not_blank(cls, value: str, info: ValidationInfo) -> str:
        return _check_not_blank(to_camel(info.field_name), value)


class SiteMetadata(_ConfigModel):
    title: str
    description: str
    twitter_username: Optional[str] = None
    image: Optional[str] = None
    image_alt: Optional[str] = None
    origin: Optional[str] = None
    favicon_ico: Optional[str] = None
    favicon_svg: Optional[str] = None
    favicon_mask_svg: Optional[str] = None
    favicon_mask_color: Optional[str] = None
    manifest: Optional[dict[str, Any]] = None

    @field_validator(
        "title", "description", "image", "image_alt", "favicon_ico", "favicon_svg", "favicon_mask_svg"
    )
    @classmethod
    def _not_blank(cls, value: Optional[str], info: ValidationInfo) -> Optional[str]:
        return _check_not_blank(to_camel(info.field_name), value)

    @field_validator("twitter_username")
    @classmethod
    def _twitter(cls, value: Optional[str]) -> Optional[str]:
        return _check_pattern("twitterUsername", TWITTER_RE, value)

    @field_validator("favicon_mask_color")
    @classmethod
    def _mask_color(cls, value: Optional[str]) -> Optional[str]:
        return _check_pattern("faviconMaskColor", COLOR_RE, value)

    @field_validator("origin")
    @classmethod
    def _origin(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else check_origin(value)

    @model_validator(mode="after")
    def _mask_pair(self) -> SiteMetadata:
        if self.favicon_mask_color and not self.favicon_mask_svg:
            raise ValueError("faviconMaskSvg required when faviconMaskColor defined")
        if self.favicon_mask_svg and not self.favicon_mask_color:
            raise ValueError("faviconMaskColor required when faviconMaskSvg defined")
        return self


class SiteConfig(_ConfigModel):
    product: str
    site_metadata: SiteMetadata
    organization: Optional[str] = None
    organization_suffix: Optional[str] = None
    organization_svg: Optional[str] = None
    organization_url: Optional[str] = None
    product_repo: Optional[str] = None
    product_svg: Optional[str] = None
    content_repo: Optional[str] = None
    theme_color: Optional[str] = None
    theme_color_dark: Optional[str] = None
    search: Optional[SiteSearchConfig] = None

    @field_validator(
        "product",
        "organization",
        "organization_suffix",
        "organization_svg",
        "organization_url",
        "product_svg",
    )
    @classmethod
    def _not_blank(cls, value: Optional[str], info: ValidationInfo) -> Optional[str]:
        return _check_not_blank(to_camel(info.field_name), value)

    @field_validator("product_repo", "content_repo")
    @classmethod
    def _repo(cls, value: Optional[str], info: ValidationInfo) -> Optional[str]:
        return _check_pattern(to_camel(info.field_name), REPO_RE, value)

    @field_validator("theme_color", "theme_color_dark")
    @classmethod
    def _color(cls, value: Optional[str], info: ValidationInfo) -> Optional[str]:
        return _check_pattern(to_camel(info.field_name), COLOR_RE, value)

    @model_validator(mode="after")
    def _dark_requires_light(self) -> SiteConfig:
        if self.theme_color_dark and not self.theme_color:
            raise ValueError("themeColor required when themeColorDark defined")
        return self


def _format_validation_error(exc: ValidationError) -> str:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "config"
        message = error["msg"].removeprefix("Value error, ")
        problems.append(f"{location}: {message}")
    return "Invalid site config: " + "; ".join(problems)


def check_site_config(raw: object) -> SiteConfig:
    if not isinstance(raw, dict):
        raise ConfigError("Site config must be a mapping")
    try:
        return SiteConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(_format_validation_error(exc)) from exc


def load_config_text(text: str, suffix: str, source: str = "config") -> object:
    suffix = suffix.lower()
    if suffix in {".yml", ".yaml"}:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in config file {source}: {exc}") from exc
        return {} if data is None else data
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in config file {source}: {exc}") from exc


def load_config(path: Path) -> SiteConfig:
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    return check_site_config(load_config_text(text, path.suffix, str(path)))
