from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import Callable, Optional

from .errors import SiteError
from .repo import InputFileInfo, list_input_files

logger = logging.getLogger(__name__)

RebuildCallback = Callable[[list[InputFileInfo]], object]


def snapshot_versions(files: list[InputFileInfo]) -> dict[Path, str]:
    return {file.path: file.version for file in files}


class SiteWatcher:
    """Poll a content directory and trigger rebuilds after changes settle.

    Polling and rebuilding share one thread, so changes seen while a rebuild
    runs are picked up by the next poll instead of starting a second rebuild.
    """

    def __init__(
        self,
        root: Path,
        on_change: RebuildCallback,
        *,
        interval: float = 0.5,
        debounce: float = 0.3,
        lister: Callable[[Path], list[InputFileInfo]] = list_input_files,
    ) -> None:
        self.root = Path(root)
        self.on_change = on_change
        self.interval = interval
        self.debounce = debounce
        self.lister = lister
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._versions: dict[Path, str] = {}

    def prime(self, files: list[InputFileInfo]) -> None:
        self._versions = snapshot_versions(files)

    def poll_once(self) -> bool:
        try:
            files = self._settled_files()
        except (SiteError, OSError, UnicodeDecodeError) as exc:
            logger.error("Listing %s failed: %s", self.root, exc)
            return False
        if files is None:
            return False
        logger.info("Change detected, rebuilding %d files", len(files))
        start = time.perf_counter()
        try:
            self.on_change(files)
        except (SiteError, OSError, UnicodeDecodeError) as exc:
            logger.error("Rebuild failed: %s", exc)
            return False
        except Exception:
            # keep watching; the next edit may fix the content
            logger.exception("Unexpected error while rebuilding")
            return False
        logger.info("Rebuilt site in %.2fs", time.perf_counter() - start)
        return True

    def _settled_files(self) -> Optional[list[InputFileInfo]]:
        """Return the file list once it stops changing, or None if nothing changed."""
        files = self.lister(self.root)
        versions = snapshot_versions(files)
        if versions == self._versions:
            return None
        # wait for the tree to stop changing before rebuilding
        while True:
            if self._stop.wait(self.debounce):
                return None
            settled = self.lister(self.root)
            settled_versions = snapshot_versions(settled)
            if settled_versions == versions:
                break
            files, versions = settled, settled_versions
        self._versions = versions
        return files

    def run(self) -> None:
        logger.info("Watching %s for changes", self.root)
        while not self._stop.wait(self.interval):
            self.poll_once()

    def start(self) -> None:
        if self._thread is not None:
            raise RuntimeError("Already watching")
        self._thread = threading.Thread(target=self.run, name="docsite-watcher", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None
