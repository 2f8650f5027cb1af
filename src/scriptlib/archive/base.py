"""Read-only contract shared by every script archive format."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import AbstractSet, Mapping, Optional, Sequence


class ScriptArchive(ABC):
    """A named, versioned, immutable bundle of script resources.

    Archive registries and loaders only depend on this interface. Entries are
    addressed by their ``/``-separated path relative to the archive root.
    """

    __slots__ = ()

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @property
    @abstractmethod
    def version(self) -> int:
        """Opaque ordinal; not compared by this library."""

    @property
    @abstractmethod
    def root_url(self) -> str:
        """Resolvable reference to the archive root."""

    @property
    @abstractmethod
    def entry_names(self) -> AbstractSet[str]:
        ...

    @property
    @abstractmethod
    def metadata(self) -> Mapping[str, str]:
        ...

    @property
    @abstractmethod
    def dependencies(self) -> Sequence[str]:
        """Names of other archives this one depends on, unresolved."""

    @abstractmethod
    def get_entry(self, entry_name: str) -> Optional[str]:
        """Return a resolvable reference to ``entry_name``, or None if absent."""
