from __future__ import annotations

import json
import textwrap
from pathlib import Path
from typing import Mapping, Optional

import pytest

from docsite.model import SiteModel
from docsite.repo import InputFileInfo, list_input_files

ORIGIN = "https://docs.example.com"


def default_config(**overrides: object) -> dict:
    config = {
        "product": "Widget",
        "siteMetadata": {"title": "T", "description": "D", "origin": ORIGIN},
    }
    config.update(overrides)
    return config


class SiteBuilder:
    """Write a throwaway content directory and build a model from it."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "content"
        self.root.mkdir()

    def write(self, files: Mapping[str, str]) -> None:
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")

    def write_bytes(self, relative: str, data: bytes) -> Path:
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return path

    def write_config(self, config: Optional[dict] = None, name: str = "config.json") -> None:
        (self.root / name).write_text(json.dumps(config or default_config()), encoding="utf-8")

    def files(self) -> list[InputFileInfo]:
        return list_input_files(self.root)

    def model(self, **kwargs: object) -> SiteModel:
        return SiteModel(self.root, **kwargs)

    def build(self, **kwargs: object) -> SiteModel:
        model = self.model(**kwargs)
        model.set_input_files(self.files())
        return model


@pytest.fixture
def site_builder(tmp_path: Path) -> SiteBuilder:
    return SiteBuilder(tmp_path)
