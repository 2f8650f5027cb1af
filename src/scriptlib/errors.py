"""Exceptions raised while building archives and plugin descriptors."""

from __future__ import annotations

from pathlib import Path


class ScriptlibError(Exception):
    """Base class for every scriptlib failure."""


class InvalidArgument(ScriptlibError, ValueError):
    """A required field is missing or malformed."""


class MissingRequiredField(InvalidArgument):
    def __init__(self, field_name: str) -> None:
        super().__init__(f"{field_name} is required")
        self.field_name = field_name


class InvalidArchiveRoot(InvalidArgument):
    """The archive root is not absolute, does not exist or cannot be read."""

    def __init__(self, root: Path | str | None, reason: str) -> None:
        super().__init__(f"Invalid archive root {root}: {reason}")
        self.root = root
        self.reason = reason


class ArchiveIOError(ScriptlibError):
    """Directory traversal failed part way through."""

    def __init__(self, path: Path | str, reason: str) -> None:
        super().__init__(f"Failed to index {path}: {reason}")
        self.path = path
        self.reason = reason
