"""Archive indexing configuration defaults."""

from __future__ import annotations

from dataclasses import dataclass

from scriptlib.errors import InvalidArgument

DEFAULT_MAX_DEPTH = 64


@dataclass(slots=True)
class IndexerConfig:
    follow_symlinks: bool = False
    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        if not isinstance(self.max_depth, int) or isinstance(self.max_depth, bool):
            raise InvalidArgument(f"max_depth must be an integer, got {self.max_depth!r}")
        if self.max_depth < 1:
            raise InvalidArgument(f"max_depth must be at least 1, got {self.max_depth}")
