"""Tests for the content directory lister."""

from __future__ import annotations

from pathlib import Path

from docsite.repo import IgnoreRule, list_input_files, parse_ignore_rules

from conftest import SiteBuilder


def _relative(root: Path, files) -> list[str]:
    return sorted(file.path.relative_to(root).as_posix() for file in files)


def test_parse_ignore_rules() -> None:
    rules = parse_ignore_rules("# comment\n\n*.log\nbuild/\n/drafts\ndocs/tmp\n")

    assert rules == [
        IgnoreRule(pattern="*.log", any_level=True),
        IgnoreRule(pattern="build", any_level=True),
        IgnoreRule(pattern="drafts", any_level=False),
        IgnoreRule(pattern="docs/tmp", any_level=False),
    ]


def test_lister_honours_ignore_file(site_builder: SiteBuilder) -> None:
    site_builder.write(
        {
            ".gitignore": "*.log\nbuild/\n/drafts\n",
            ".git/HEAD": "ref: refs/heads/main\n",
            "index.md": "# Home\n",
            "debug.log": "x",
            "nested/trace.log": "x",
            "nested/build/out.html": "x",
            "drafts/wip.md": "x",
            "nested/drafts/kept.md": "x",
            "guide/setup.md": "x",
        }
    )

    files = list_input_files(site_builder.root)

    assert _relative(site_builder.root, files) == [
        "guide/setup.md",
        "index.md",
        "nested/drafts/kept.md",
    ]
    assert all(file.path.is_absolute() for file in files)


def test_version_changes_when_file_changes(site_builder: SiteBuilder) -> None:
    site_builder.write({"index.md": "# Home\n"})
    (before,) = list_input_files(site_builder.root)

    site_builder.write({"index.md": "# Home, now longer\n"})
    (after,) = list_input_files(site_builder.root)

    assert before.path == after.path
    assert before.version != after.version
