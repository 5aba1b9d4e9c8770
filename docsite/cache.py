from __future__ import annotations

import hashlib
import os
from pathlib import Path


def hash_bytes(data: bytes, algorithm: str = "sha256") -> str:
    return hashlib.new(algorithm, data).hexdigest()


def hash_text(text: str, algorithm: str = "sha256") -> str:
    return hash_bytes(text.encode("utf-8"), algorithm)


def compute_file_version(stat_result: os.stat_result) -> str:
    return f"{stat_result.st_size}|{stat_result.st_mtime_ns}"


def file_version(path: Path) -> str:
    return compute_file_version(Path(path).stat())
