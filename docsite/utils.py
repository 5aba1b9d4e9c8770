from __future__ import annotations

import shutil
from pathlib import Path

from .errors import OutputDirError


def empty_output_dir(output_dir: Path, input_dir: Path) -> None:
    """Create ``output_dir`` or remove everything inside it."""
    output_resolved = output_dir.resolve()
    input_resolved = input_dir.resolve()
    if output_resolved == input_resolved:
        raise OutputDirError(f"Refusing to clean the content directory: {output_dir}")
    if input_resolved.is_relative_to(output_resolved):
        raise OutputDirError(f"Refusing to clean a parent of the content directory: {output_dir}")
    if output_dir.exists() and not output_dir.is_dir():
        raise OutputDirError(f"Bad output dir, exists as file: {output_dir}")
    output_dir.mkdir(parents=True, exist_ok=True)
    for item in output_dir.iterdir():
        if item.is_dir() and not item.is_symlink():
            shutil.rmtree(item)
        else:
            item.unlink()


def copy_file(source: Path, dest: Path) -> None:
    dest.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(source, dest)
