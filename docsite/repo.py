from __future__ import annotations

import fnmatch
import logging
import os
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from .cache import file_version

logger = logging.getLogger(__name__)

IGNORE_FILE = ".gitignore"
ALWAYS_SKIPPED = (".git", IGNORE_FILE)


@dataclass(frozen=True)
class InputFileInfo:
    path: Path
    version: str


@dataclass(frozen=True)
class IgnoreRule:
    pattern: str
    any_level: bool

    def matches(self, rel_path: str) -> bool:
        parts = PurePosixPath(rel_path).parts
        if self.any_level:
            return any(fnmatch.fnmatchcase(part, self.pattern) for part in parts)
        # rooted pattern: test the path and each of its ancestors
        for i in range(len(parts), 0, -1):
            if fnmatch.fnmatchcase("/".join(parts[:i]), self.pattern):
                return True
        return False


def parse_ignore_rules(text: str) -> list[IgnoreRule]:
    rules = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        slash = line.find("/")
        any_level = slash < 0 or slash == len(line) - 1
        pattern = line.rstrip("/") if any_level else line.strip("/")
        if pattern:
            rules.append(IgnoreRule(pattern=pattern, any_level=any_level))
    return rules


def load_ignore_rules(root: Path) -> list[IgnoreRule]:
    ignore_file = Path(root) / IGNORE_FILE
    if not ignore_file.is_file():
        return []
    return parse_ignore_rules(ignore_file.read_text(encoding="utf-8"))


def should_skip(rel_path: str, rules: list[IgnoreRule]) -> bool:
    if rel_path in ALWAYS_SKIPPED or rel_path.startswith(".git/"):
        return True
    return any(rule.matches(rel_path) for rule in rules)


def list_input_files(root: Path) -> list[InputFileInfo]:
    """List every content file under ``root`` with its change token.

    Directories matched by an ignore rule are pruned without descending.
    """
    root = Path(root)
    rules = load_ignore_rules(root)
    files = []
    for dirpath, dirnames, filenames in os.walk(root):
        current = Path(dirpath)
        rel_dir = current.relative_to(root).as_posix()
        prefix = "" if rel_dir == "." else rel_dir + "/"
        dirnames[:] = sorted(d for d in dirnames if not should_skip(prefix + d, rules))
        for name in sorted(filenames):
            if should_skip(prefix + name, rules):
                continue
            path = current / name
            files.append(InputFileInfo(path=path, version=file_version(path)))
    logger.debug("Listed %d input files under %s", len(files), root)
    return files
