"""Descriptors for pluggable language compilers.

Each compiler plugin is loaded by an external loader into its own isolation
unit, keyed by ``plugin_name``, so that two plugins shipping different
versions of the same runtime cannot interfere. The descriptor only records
what to load: runtime resources in load order and the provider entry point to
instantiate inside the isolated unit. Whether those resources exist is the
loader's concern.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

from scriptlib.errors import MissingRequiredField

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PluginDescriptor:
    """Immutable metadata needed to locate and bootstrap a compiler plugin."""

    plugin_name: str
    provider_entry_point: str
    runtime_resources: tuple[Path, ...] = ()
    metadata: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}), hash=False)

    def __post_init__(self) -> None:
        if not self.plugin_name:
            raise MissingRequiredField("plugin_name")
        if not self.provider_entry_point:
            raise MissingRequiredField("provider_entry_point")
        # frozen: normalise through object.__setattr__
        object.__setattr__(self, "runtime_resources", _dedupe(self.runtime_resources))
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    @classmethod
    def builder(cls, plugin_name: str) -> "PluginDescriptorBuilder":
        return PluginDescriptorBuilder(plugin_name)


class PluginDescriptorBuilder:
    def __init__(self, plugin_name: str) -> None:
        self.plugin_name = plugin_name
        self.provider_entry_point: Optional[str] = None
        self._runtime_resources: dict[Path, None] = {}
        self._metadata: dict[str, str] = {}

    def with_provider_entry_point(self, entry_point: str) -> "PluginDescriptorBuilder":
        self.provider_entry_point = entry_point
        return self

    def add_runtime_resource(self, resource: Path | str | None) -> "PluginDescriptorBuilder":
        """Append a jar, file or directory needed by the language runtime.

        Includes the provider's own location. Repeated paths keep their first
        position. None and empty strings are ignored.
        """
        if resource is not None and resource != "":
            self._runtime_resources.setdefault(Path(resource), None)
        return self

    def add_metadata(
        self, key: Mapping[str, str] | str | None, value: str | None = None
    ) -> "PluginDescriptorBuilder":
        if isinstance(key, Mapping):
            self._metadata.update((k, v) for k, v in key.items() if k is not None and v is not None)
        elif key is not None and value is not None:
            self._metadata[key] = value
        return self

    def build(self) -> PluginDescriptor:
        descriptor = PluginDescriptor(
            plugin_name=self.plugin_name,
            provider_entry_point=self.provider_entry_point,
            runtime_resources=tuple(self._runtime_resources),
            metadata=dict(self._metadata),
        )
        LOGGER.debug(
            "Built plugin descriptor %s -> %s (%d runtime resources)",
            descriptor.plugin_name,
            descriptor.provider_entry_point,
            len(descriptor.runtime_resources),
        )
        return descriptor


def _dedupe(resources: tuple[Path, ...]) -> tuple[Path, ...]:
    return tuple(dict.fromkeys(Path(resource) for resource in resources))
