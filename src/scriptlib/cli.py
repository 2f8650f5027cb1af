"""Command line interface for inspecting script archives and compiler plugins."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from scriptlib.archive.path_archive import PathScriptArchiveBuilder
from scriptlib.config import IndexerConfig
from scriptlib.errors import ScriptlibError
from scriptlib.plugin.descriptor import PluginDescriptorBuilder


console = Console()
app = typer.Typer(help="scriptlib - index script archives and describe compiler plugins")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _parse_pairs(pairs: Optional[List[str]]) -> Dict[str, str]:
    parsed: Dict[str, str] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected key=value, got {pair!r}")
        parsed[key] = value
    return parsed


@app.command()
def archive(
    root: Path = typer.Argument(..., help="Archive root directory.", resolve_path=True),
    name: str = typer.Option(..., "--name", help="Archive name"),
    version: int = typer.Option(1, "--version", help="Archive version"),
    metadata: Optional[List[str]] = typer.Option(None, "--metadata", "-m", help="key=value tag"),
    dependency: Optional[List[str]] = typer.Option(None, "--dependency", "-d", help="Dependency name"),
    follow_symlinks: bool = typer.Option(
        IndexerConfig().follow_symlinks, "--follow-symlinks", help="Descend into symlinked directories"
    ),
    max_depth: int = typer.Option(IndexerConfig().max_depth, help="Maximum directory depth"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Index a directory as a script archive and list its entries."""
    _setup_logging(verbose)
    pairs = _parse_pairs(metadata)

    try:
        builder = PathScriptArchiveBuilder(
            name,
            version,
            root,
            config=IndexerConfig(follow_symlinks=follow_symlinks, max_depth=max_depth),
        ).add_metadata(pairs)
        for dep in dependency or []:
            builder.add_dependency(dep)
        built = builder.build()
    except ScriptlibError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]", soft_wrap=True)
        raise typer.Exit(code=1) from exc

    if as_json:
        typer.echo(
            json.dumps(
                {
                    "name": built.name,
                    "version": built.version,
                    "root_url": built.root_url,
                    "entries": sorted(built.entry_names),
                    "metadata": dict(built.metadata),
                    "dependencies": list(built.dependencies),
                },
                indent=2,
            )
        )
        return

    console.print(
        f"Archive [bold]{escape(built.name)}[/bold] v{built.version} at {escape(built.root_url)}: "
        f"{len(built)} {'entry' if len(built) == 1 else 'entries'}",
        soft_wrap=True,
    )
    if built.dependencies:
        console.print(f"Dependencies: {escape(', '.join(built.dependencies))}", soft_wrap=True)

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Entry", no_wrap=True)
    table.add_column("URL")
    for entry_name in built:
        table.add_row(escape(entry_name), escape(built.get_entry(entry_name)))
    console.print(table)


@app.command()
def plugin(
    name: str = typer.Argument(..., help="Plugin name"),
    provider: Optional[str] = typer.Option(None, "--provider", help="Provider entry point"),
    resource: Optional[List[Path]] = typer.Option(None, "--resource", "-r", help="Runtime resource"),
    metadata: Optional[List[str]] = typer.Option(None, "--metadata", "-m", help="key=value tag"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Build and print a compiler plugin descriptor."""
    _setup_logging(verbose)
    builder = PluginDescriptorBuilder(name).add_metadata(_parse_pairs(metadata))
    if provider is not None:
        builder.with_provider_entry_point(provider)
    for item in resource or []:
        builder.add_runtime_resource(item)

    try:
        descriptor = builder.build()
    except ScriptlibError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]", soft_wrap=True)
        raise typer.Exit(code=1) from exc

    if as_json:
        typer.echo(
            json.dumps(
                {
                    "plugin_name": descriptor.plugin_name,
                    "provider_entry_point": descriptor.provider_entry_point,
                    "runtime_resources": [str(p) for p in descriptor.runtime_resources],
                    "metadata": dict(descriptor.metadata),
                },
                indent=2,
            )
        )
        return

    table = Table(show_header=False)
    table.add_row("Plugin", escape(descriptor.plugin_name))
    table.add_row("Provider", escape(descriptor.provider_entry_point))
    for index, path in enumerate(descriptor.runtime_resources):
        table.add_row(f"Resource {index}", escape(str(path)))
    for key, value in descriptor.metadata.items():
        table.add_row(escape(key), escape(value))
    console.print(table)
