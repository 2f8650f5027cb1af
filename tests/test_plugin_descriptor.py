"""Tests for PluginDescriptor and its builder."""

from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest

from scriptlib.errors import InvalidArgument, MissingRequiredField
from scriptlib.plugin.descriptor import PluginDescriptor, PluginDescriptorBuilder


class TestPluginDescriptorBuilder:
    """Test descriptor accumulation and build."""

    def test_end_to_end_dedupes_resources(self) -> None:
        """Should collapse duplicate resources and keep first-occurrence order."""
        p1 = Path("/opt/groovy/groovy-all.jar")
        p2 = Path("/opt/plugins/groovy-provider")

        descriptor = (
            PluginDescriptor.builder("groovy")
            .with_provider_entry_point("org.example.GroovyProvider")
            .add_runtime_resource(p1)
            .add_runtime_resource(p1)
            .add_runtime_resource(p2)
            .build()
        )

        assert descriptor.plugin_name == "groovy"
        assert descriptor.provider_entry_point == "org.example.GroovyProvider"
        assert descriptor.runtime_resources == (p1, p2)

    def test_missing_provider_entry_point(self) -> None:
        """Should name provider_entry_point when it was never set."""
        with pytest.raises(MissingRequiredField) as excinfo:
            PluginDescriptorBuilder("x").build()

        assert excinfo.value.field_name == "provider_entry_point"
        assert "provider_entry_point" in str(excinfo.value)

    @pytest.mark.parametrize("name", [None, ""])
    def test_missing_plugin_name(self, name) -> None:
        """Should name plugin_name when it is empty or unset."""
        builder = PluginDescriptorBuilder(name).with_provider_entry_point("org.example.Provider")

        with pytest.raises(MissingRequiredField) as excinfo:
            builder.build()

        assert excinfo.value.field_name == "plugin_name"

    def test_empty_provider_entry_point(self) -> None:
        """Should reject an empty entry point like a missing one."""
        builder = PluginDescriptorBuilder("x").with_provider_entry_point("")

        with pytest.raises(InvalidArgument):
            builder.build()

    def test_provider_last_write_wins(self) -> None:
        """Should keep the last entry point set."""
        descriptor = (
            PluginDescriptorBuilder("js")
            .with_provider_entry_point("first.Provider")
            .with_provider_entry_point("second.Provider")
            .build()
        )

        assert descriptor.provider_entry_point == "second.Provider"

    def test_string_resources_and_none(self) -> None:
        """Should accept strings as paths and ignore None."""
        descriptor = (
            PluginDescriptorBuilder("js")
            .with_provider_entry_point("js.Provider")
            .add_runtime_resource("/opt/js/runtime.jar")
            .add_runtime_resource(None)
            .add_runtime_resource(Path("/opt/js/runtime.jar"))
            .build()
        )

        assert descriptor.runtime_resources == (Path("/opt/js/runtime.jar"),)

    def test_empty_string_resource_ignored(self) -> None:
        """Should not turn an empty argument into the current directory."""
        descriptor = (
            PluginDescriptorBuilder("js")
            .with_provider_entry_point("js.Provider")
            .add_runtime_resource("")
            .add_runtime_resource("/opt/js/runtime.jar")
            .build()
        )

        assert descriptor.runtime_resources == (Path("/opt/js/runtime.jar"),)
        assert Path(".") not in descriptor.runtime_resources

    def test_resources_not_checked_on_disk(self) -> None:
        """Should record paths as given without touching the filesystem."""
        missing = Path("/definitely/not/here.jar")
        relative = Path("lib/runtime")

        descriptor = (
            PluginDescriptorBuilder("js")
            .with_provider_entry_point("js.Provider")
            .add_runtime_resource(missing)
            .add_runtime_resource(relative)
            .build()
        )

        assert descriptor.runtime_resources == (missing, relative)

    def test_metadata_overloads(self) -> None:
        """Should accept single pairs and mappings, ignoring None."""
        descriptor = (
            PluginDescriptorBuilder("groovy")
            .with_provider_entry_point("org.example.GroovyProvider")
            .add_metadata("version", "2.1")
            .add_metadata({"vendor": "example", "version": "2.2"})
            .add_metadata(None)
            .add_metadata("ignored", None)
            .build()
        )

        assert dict(descriptor.metadata) == {"version": "2.2", "vendor": "example"}

    def test_builder_reusable_after_build(self) -> None:
        """Should not share collections with descriptors already built."""
        builder = PluginDescriptorBuilder("groovy").with_provider_entry_point("g.Provider")
        builder.add_runtime_resource("/a.jar")
        first = builder.build()
        builder.add_runtime_resource("/b.jar").add_metadata("k", "v")
        second = builder.build()

        assert first.runtime_resources == (Path("/a.jar"),)
        assert dict(first.metadata) == {}
        assert second.runtime_resources == (Path("/a.jar"), Path("/b.jar"))


class TestPluginDescriptor:
    """Test the frozen descriptor value."""

    @pytest.fixture
    def descriptor(self) -> PluginDescriptor:
        return (
            PluginDescriptorBuilder("groovy")
            .with_provider_entry_point("org.example.GroovyProvider")
            .add_runtime_resource("/opt/groovy.jar")
            .add_metadata("k", "v")
            .build()
        )

    def test_fields_frozen(self, descriptor: PluginDescriptor) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            descriptor.plugin_name = "other"

    def test_metadata_frozen(self, descriptor: PluginDescriptor) -> None:
        with pytest.raises(TypeError):
            descriptor.metadata["k"] = "changed"

    def test_resources_frozen(self, descriptor: PluginDescriptor) -> None:
        with pytest.raises(AttributeError):
            descriptor.runtime_resources.append(Path("/evil.jar"))

    def test_direct_construction_normalises(self) -> None:
        """Should dedupe resources and freeze metadata when built directly."""
        metadata = {"k": "v"}
        descriptor = PluginDescriptor(
            plugin_name="py",
            provider_entry_point="py.Provider",
            runtime_resources=(Path("/a"), Path("/a"), Path("/b")),
            metadata=metadata,
        )
        metadata["k"] = "changed"

        assert descriptor.runtime_resources == (Path("/a"), Path("/b"))
        assert descriptor.metadata["k"] == "v"

    def test_direct_construction_validates(self) -> None:
        with pytest.raises(MissingRequiredField):
            PluginDescriptor(plugin_name="py", provider_entry_point="")

    def test_equality_and_hash(self) -> None:
        """Should compare by value and be usable as a dict key."""
        first = PluginDescriptorBuilder("py").with_provider_entry_point("py.Provider").build()
        second = PluginDescriptorBuilder("py").with_provider_entry_point("py.Provider").build()

        assert first == second
        assert {first: "loaded"}[second] == "loaded"
