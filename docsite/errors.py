from __future__ import annotations

from typing import Optional


class SiteError(Exception):
    """Base class for all user-visible build and serve failures."""


class PathOutsideRootError(SiteError):
    def __init__(self, path: str, root: str) -> None:
        super().__init__(f"Bad input path: {path}, must reside under {root}")
        self.path = path
        self.root = root


class FrontMatterError(SiteError):
    def __init__(
        self,
        message: str,
        *,
        line: Optional[str] = None,
        field: Optional[str] = None,
        value: Optional[str] = None,
        source: Optional[str] = None,
    ) -> None:
        if source:
            message = f"{source}: {message}"
        super().__init__(message)
        self.line = line
        self.field = field
        self.value = value
        self.source = source


class ConfigError(SiteError):
    pass


class BuildError(SiteError):
    pass


class OutputDirError(SiteError):
    pass


class UnknownContentTypeError(SiteError):
    def __init__(self, extension: str) -> None:
        super().__init__(f"No content type for extension: {extension!r}")
        self.extension = extension
