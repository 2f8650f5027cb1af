"""Script archive backed by a directory on the local filesystem."""

from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Mapping, Optional

from scriptlib.archive.base import ScriptArchive
from scriptlib.config import IndexerConfig
from scriptlib.errors import InvalidArgument
from scriptlib.utils.files import check_root, entry_path, iter_relative_files, to_uri

LOGGER = logging.getLogger(__name__)


class PathScriptArchive(ScriptArchive):
    """Archive containing every file under ``root_path``.

    The entry index is a snapshot taken when the archive is built; files added
    to or removed from the directory afterwards are not reflected. Instances
    are created through :class:`PathScriptArchiveBuilder`.
    """

    __slots__ = (
        "_name",
        "_version",
        "_root_path",
        "_root_url",
        "_entry_names",
        "_metadata",
        "_dependencies",
    )

    def __init__(
        self,
        name: str,
        version: int,
        root_path: Path,
        entry_names: frozenset[str],
        metadata: Mapping[str, str],
        dependencies: tuple[str, ...],
    ) -> None:
        self._name = name
        self._version = version
        self._root_path = root_path
        self._root_url = to_uri(root_path)
        self._entry_names = entry_names
        self._metadata = MappingProxyType(dict(metadata))
        self._dependencies = dependencies

    @classmethod
    def builder(
        cls,
        name: str,
        version: int,
        root_path: Path | str,
        config: IndexerConfig | None = None,
    ) -> "PathScriptArchiveBuilder":
        return PathScriptArchiveBuilder(name, version, root_path, config=config)

    @property
    def name(self) -> str:
        return self._name

    @property
    def version(self) -> int:
        return self._version

    @property
    def root_path(self) -> Path:
        return self._root_path

    @property
    def root_url(self) -> str:
        return self._root_url

    @property
    def entry_names(self) -> frozenset[str]:
        return self._entry_names

    @property
    def metadata(self) -> Mapping[str, str]:
        return self._metadata

    @property
    def dependencies(self) -> tuple[str, ...]:
        return self._dependencies

    def get_entry(self, entry_name: str) -> Optional[str]:
        path = self.get_entry_path(entry_name)
        if path is None:
            return None
        return to_uri(path)

    def get_entry_path(self, entry_name: str) -> Optional[Path]:
        if entry_name not in self._entry_names:
            return None
        return entry_path(self._root_path, entry_name)

    def __contains__(self, entry_name: object) -> bool:
        return entry_name in self._entry_names

    def __len__(self) -> int:
        return len(self._entry_names)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._entry_names))

    def __repr__(self) -> str:
        return (
            f"PathScriptArchive(name={self._name!r}, version={self._version}, "
            f"root_path={str(self._root_path)!r}, entries={len(self._entry_names)})"
        )


class PathScriptArchiveBuilder:
    """Accumulates archive settings and indexes the directory on :meth:`build`."""

    def __init__(
        self,
        name: str,
        version: int,
        root_path: Path | str | None,
        *,
        config: IndexerConfig | None = None,
    ) -> None:
        self.name = name
        self.version = version
        self.root_path = root_path
        self.config = config or IndexerConfig()
        self._metadata: dict[str, str] = {}
        self._dependencies: list[str] = []

    def add_metadata(
        self, key: Mapping[str, str] | str | None, value: str | None = None
    ) -> "PathScriptArchiveBuilder":
        """Add one ``key``/``value`` pair, or every pair of a mapping.

        Later writes to the same key win. ``None`` arguments are ignored.
        """
        if isinstance(key, Mapping):
            self._metadata.update((k, v) for k, v in key.items() if k is not None and v is not None)
        elif key is not None and value is not None:
            self._metadata[key] = value
        return self

    def add_dependency(self, dependency_name: str | None) -> "PathScriptArchiveBuilder":
        if dependency_name:
            self._dependencies.append(dependency_name)
        return self

    def build(self) -> PathScriptArchive:
        """Validate the settings, walk the root directory and freeze the result.

        Raises InvalidArgument for a bad name or version, InvalidArchiveRoot
        for a root that is relative, missing or unreadable, and ArchiveIOError
        when the walk fails part way.
        """
        metadata = dict(self._metadata)
        dependencies = tuple(self._dependencies)

        if not isinstance(self.name, str) or not self.name:
            raise InvalidArgument("archive name must be a non-empty string")
        if not isinstance(self.version, int) or isinstance(self.version, bool):
            raise InvalidArgument(f"archive version must be an integer, got {self.version!r}")
        root = check_root(self.root_path)

        entry_names = frozenset(
            iter_relative_files(
                root,
                follow_symlinks=self.config.follow_symlinks,
                max_depth=self.config.max_depth,
            )
        )
        LOGGER.info(
            "Indexed archive %s (version %s): %d entries under %s",
            self.name,
            self.version,
            len(entry_names),
            root,
        )
        return PathScriptArchive(
            self.name,
            self.version,
            root,
            entry_names,
            metadata,
            dependencies,
        )
