"""Utility helpers for working with archive directories."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterator, Tuple

from scriptlib.errors import ArchiveIOError, InvalidArchiveRoot

LOGGER = logging.getLogger(__name__)

ENTRY_SEPARATOR = "/"


def check_root(root: Path | str | None) -> Path:
    """Return ``root`` as a Path if it is an absolute, readable directory."""
    if root is None:
        raise InvalidArchiveRoot(root, "root path is required")
    path = Path(root)
    if not path.is_absolute():
        raise InvalidArchiveRoot(path, "root path must be absolute")
    if not path.exists():
        raise InvalidArchiveRoot(path, "root path does not exist")
    if not path.is_dir():
        raise InvalidArchiveRoot(path, "root path is not a directory")
    if not os.access(path, os.R_OK | os.X_OK):
        raise InvalidArchiveRoot(path, "root path is not readable")
    return path


def iter_relative_files(
    root: Path,
    *,
    follow_symlinks: bool = False,
    max_depth: int = 64,
) -> Iterator[str]:
    """Yield the path of every regular file under ``root``, relative to it.

    Names use ``/`` as separator regardless of platform. Directories are
    walked in sorted order so the output is stable. Any unreadable directory
    or file, a symlink cycle, or nesting deeper than ``max_depth`` raises
    :class:`ArchiveIOError`.
    """
    root_key = _identity(root, follow_symlinks=True)
    stack: list[tuple[Path, Tuple[str, ...], Tuple[tuple[int, int], ...]]] = [
        (root, (), (root_key,))
    ]

    while stack:
        directory, parts, ancestors = stack.pop()
        try:
            with os.scandir(directory) as it:
                children = sorted(it, key=lambda entry: entry.name)
        except OSError as exc:
            raise ArchiveIOError(directory, exc.strerror or str(exc)) from exc

        subdirs = []
        for child in children:
            child_parts = parts + (child.name,)
            try:
                is_dir = child.is_dir(follow_symlinks=follow_symlinks)
                is_file = not is_dir and child.is_file()
            except OSError as exc:
                raise ArchiveIOError(child.path, exc.strerror or str(exc)) from exc

            if is_dir:
                if len(child_parts) > max_depth:
                    raise ArchiveIOError(child.path, f"exceeds maximum depth of {max_depth}")
                key = _identity(Path(child.path), follow_symlinks=follow_symlinks)
                if key in ancestors:
                    raise ArchiveIOError(child.path, "directory cycle detected")
                subdirs.append((Path(child.path), child_parts, ancestors + (key,)))
            elif is_file:
                if not os.access(child.path, os.R_OK):
                    raise ArchiveIOError(child.path, "file is not readable")
                yield ENTRY_SEPARATOR.join(child_parts)
            elif child.is_symlink():
                LOGGER.debug("Skipping dangling or unsupported link %s", child.path)

        # reversed so the stack pops siblings in sorted order
        stack.extend(reversed(subdirs))


def entry_path(root: Path, entry_name: str) -> Path:
    """Join a ``/``-separated entry name onto ``root``."""
    return root.joinpath(*entry_name.split(ENTRY_SEPARATOR))


def to_uri(path: Path) -> str:
    """Convert an absolute path into a ``file://`` URI."""
    return path.as_uri()


def _identity(path: Path, *, follow_symlinks: bool) -> tuple[int, int]:
    try:
        stat = path.stat() if follow_symlinks else path.lstat()
    except OSError as exc:
        raise ArchiveIOError(path, exc.strerror or str(exc)) from exc
    return stat.st_dev, stat.st_ino
