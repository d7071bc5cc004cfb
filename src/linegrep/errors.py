"""
Error variants for path resolution, file access, and pattern compilation.

Each variant carries structured fields so callers can dispatch on the kind of
failure instead of parsing message text. `str(err)` gives the message shown to
the user.
"""

from __future__ import annotations

from pathlib import Path


def describe_cause(cause: BaseException) -> str:
    """Short human-readable text for an underlying exception."""
    if isinstance(cause, OSError) and cause.strerror:
        return cause.strerror
    return str(cause)


class LinegrepError(Exception):
    """Base class for all linegrep errors."""


class PatternError(LinegrepError):
    """The user-supplied pattern is not a valid regular expression."""

    def __init__(self, pattern: str, cause: BaseException) -> None:
        self.pattern: str = pattern
        self.cause: BaseException = cause
        super().__init__(pattern, cause)

    def __str__(self) -> str:
        return f'Invalid pattern "{self.pattern}": {self.cause}'


class PathResolutionError(LinegrepError):
    """A top-level path could not be turned into a search target."""

    def __init__(self, path: str | Path) -> None:
        self.path: str = str(path)
        super().__init__(self.path)


class DirectoryNotRecursive(PathResolutionError):
    def __str__(self) -> str:
        return f"{self.path} is a directory"


class NotFound(PathResolutionError):
    """Metadata for the path could not be read (missing, permission denied, etc.)."""

    def __init__(self, path: str | Path, cause: BaseException) -> None:
        super().__init__(path)
        self.cause: BaseException = cause

    def __str__(self) -> str:
        return f"{self.path}: {describe_cause(self.cause)}"


class OpenFailed(LinegrepError):
    """A resolved target could not be opened for reading."""

    def __init__(self, path: str | Path, cause: BaseException) -> None:
        self.path: str = str(path)
        self.cause: BaseException = cause
        super().__init__(self.path, cause)

    def __str__(self) -> str:
        return f"{self.path}: {describe_cause(self.cause)}"


class ReadFailed(LinegrepError):
    """
    Reading or decoding a stream failed partway through. The matcher raises
    this without a path; the caller attaches one with `for_path()`.
    """

    def __init__(self, cause: BaseException, path: str | None = None) -> None:
        self.cause: BaseException = cause
        self.path: str | None = path
        super().__init__(cause)

    def for_path(self, path: str) -> ReadFailed:
        return ReadFailed(self.cause, path)

    def __str__(self) -> str:
        if self.path is None:
            return describe_cause(self.cause)
        return f"{self.path}: {describe_cause(self.cause)}"


class ConfigError(LinegrepError):
    """A config file could not be parsed or holds a value of the wrong type."""

    def __init__(self, path: str | Path, message: str) -> None:
        self.path: str = str(path)
        self.message: str = message
        super().__init__(self.path, message)

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"
