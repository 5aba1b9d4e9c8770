from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .errors import FrontMatterError

FRONT_MATTER_DELIMITER = "---"
FRONT_MATTER_LINE_RE = re.compile(r"^\s*(?P<name>[a-z]+[a-zA-Z]+)\s*:\s*(?P<value>.*?)\s*$")
H1_RE = re.compile(r"^#\s+(?P<title>.*?)\s*$")
TYPE_RE = re.compile(r"^[a-z]+$")
ORDER_RE = re.compile(r"^\d+$")
BOOL_RE = re.compile(r"^(true|false)$")

DEFAULT_PAGE_TYPE = "document"


@dataclass(frozen=True)
class FrontMatter:
    title: Optional[str] = None
    type: str = DEFAULT_PAGE_TYPE
    summary: str = ""
    order: Optional[int] = None
    hidden: Optional[bool] = None
    hide_children: Optional[bool] = None


@dataclass(frozen=True)
class Page:
    front_matter: FrontMatter
    title_resolved: str
    markdown: str
    title_from_first_h1: Optional[str] = None
    title_from_filename: Optional[str] = None


def _parse_bool_value(name: str, value: str, line: str) -> bool:
    norm_value = value.strip().lower()
    if not BOOL_RE.match(norm_value):
        raise FrontMatterError(f"Bad {name}: {value}", line=line, field=name, value=value)
    return norm_value == "true"


def parse_front_matter_line(line: str) -> tuple[str, str]:
    match = FRONT_MATTER_LINE_RE.match(line)
    if not match:
        raise FrontMatterError(f"Bad front matter line: {line}", line=line)
    return match.group("name"), match.group("value")


def split_front_matter(text: str) -> tuple[list[str], str]:
    clean_text = text.lstrip("\ufeff")
    lines = clean_text.splitlines(keepends=True)
    if not lines or lines[0].strip() != FRONT_MATTER_DELIMITER:
        return [], clean_text

    end = None
    for i in range(1, len(lines)):
        if lines[i].strip() == FRONT_MATTER_DELIMITER:
            end = i
            break
    if end is None:
        return [], clean_text

    block = [line.rstrip("\r\n") for line in lines[1:end]]
    body = "".join(lines[end + 1 :])
    return block, body


def parse_front_matter(text: str) -> tuple[FrontMatter, str]:
    """Split ``text`` into its front matter and markdown body.

    Every line inside the block must be ``key: value``, blank lines
    included; anything else raises :class:`FrontMatterError`. Unrecognized
    keys are accepted and ignored.
    """
    block, body = split_front_matter(text)
    values: dict = {}
    for line in block:
        name, value = parse_front_matter_line(line)
        if name == "title":
            if value == "":
                raise FrontMatterError(f"Bad title: {value}", line=line, field=name, value=value)
            values["title"] = value
        elif name == "type":
            if not TYPE_RE.match(value):
                raise FrontMatterError(f"Bad type: {value}", line=line, field=name, value=value)
            values["type"] = value
        elif name == "summary":
            if value == "":
                raise FrontMatterError(f"Bad summary: {value}", line=line, field=name, value=value)
            values["summary"] = value
        elif name == "order":
            if not ORDER_RE.match(value):
                raise FrontMatterError(f"Bad order: {value}", line=line, field=name, value=value)
            values["order"] = int(value)
        elif name == "hidden":
            values["hidden"] = _parse_bool_value(name, value, line)
        elif name == "hideChildren":
            values["hide_children"] = _parse_bool_value(name, value, line)
    return FrontMatter(**values), body


def find_first_h1(markdown_text: str) -> Optional[str]:
    for line in markdown_text.splitlines():
        match = H1_RE.match(line)
        if match and match.group("title"):
            return match.group("title")
    return None


def parse_page(text: str, filename: str) -> Page:
    front_matter, body = parse_front_matter(text)
    title_from_first_h1 = None
    title_from_filename = None
    if front_matter.title is None:
        title_from_first_h1 = find_first_h1(body)
        if title_from_first_h1 is None:
            title_from_filename = Path(filename).stem or None
    title_resolved = front_matter.title or title_from_first_h1 or title_from_filename or "untitled"
    return Page(
        front_matter=front_matter,
        title_resolved=title_resolved,
        markdown=body,
        title_from_first_h1=title_from_first_h1,
        title_from_filename=title_from_filename,
    )


def load_page(path: Path) -> Page:
    text = Path(path).read_text(encoding="utf-8")
    try:
        return parse_page(text, Path(path).name)
    except FrontMatterError as exc:
        raise FrontMatterError(
            str(exc), line=exc.line, field=exc.field, value=exc.value, source=str(path)
        ) from None
