# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Command line interface for packing, expanding and resetting assets."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich import box
from rich.table import Table

from .config import AssetPackConfig, load_config
from .errors import AssetPackError, ConfigError
from .logging import configure_logging, detect_tty, fail, get_console, info, ok
from .service import AssetPackService
from .tools import ToolRegistry

app = typer.Typer(
    name="assetpack",
    help="Pack stylesheets and scripts with external processors.",
    no_args_is_help=True,
    add_completion=False,
)

ROOT_OPTION = Annotated[
    Path,
    typer.Option("--root", "-r", help="Project root holding pyproject.toml.", file_okay=False),
]
STATIC_OPTION = Annotated[
    list[Path] | None,
    typer.Option("--static", "-s", help="Static root directory (repeatable, first wins)."),
]
OUT_DIR_OPTION = Annotated[
    Path | None,
    typer.Option("--out-dir", "-o", help="Directory receiving packed artifacts."),
]
TOOL_OPTION = Annotated[
    list[str] | None,
    typer.Option("--tool", "-t", help="Processor override as KEY=PATH (less, sass, js)."),
]
TIMEOUT_OPTION = Annotated[
    float | None,
    typer.Option("--timeout", help="Seconds allowed per external processor call."),
]
EMOJI_OPTION = Annotated[bool, typer.Option("--emoji/--no-emoji", help="Toggle emoji in CLI output.")]
DEBUG_OPTION = Annotated[bool, typer.Option("--debug", help="Log every external command.")]
FILES_ARGUMENT = Annotated[list[str], typer.Argument(help="Source references, in concatenation order.")]


def _parse_tools(entries: list[str] | None) -> dict[str, str] | None:
    if not entries:
        return None
    tools: dict[str, str] = {}
    for entry in entries:
        key, sep, value = entry.partition("=")
        if not sep or not key or not value:
            raise ConfigError(f"Invalid --tool value '{entry}', expected KEY=PATH")
        tools[key.strip()] = value.strip()
    return tools


def _load(
    root: Path,
    *,
    static: list[Path] | None,
    out_dir: Path | None,
    tools: list[str] | None,
    timeout: float | None,
    debug: bool,
    enabled: bool | None = None,
    reset: bool | None = None,
) -> AssetPackConfig:
    overrides = {
        "static_paths": static or None,
        "out_dir": out_dir,
        "tools": _parse_tools(tools),
        "timeout": timeout,
        "debug": debug or None,
        "enabled": enabled,
        "reset": reset,
    }
    return load_config(root, overrides)


@app.command("pack")
def pack_command(
    files: FILES_ARGUMENT,
    root: ROOT_OPTION = Path("."),
    static: STATIC_OPTION = None,
    out_dir: OUT_DIR_OPTION = None,
    tool: TOOL_OPTION = None,
    timeout: TIMEOUT_OPTION = None,
    emoji: EMOJI_OPTION = True,
    debug: DEBUG_OPTION = False,
) -> None:
    """Pack FILES into one fingerprinted artifact and print its tag."""

    configure_logging(debug=debug, use_emoji=emoji)
    try:
        config = _load(root, static=static, out_dir=out_dir, tools=tool, timeout=timeout, debug=debug, enabled=True)
        service = AssetPackService(config)
        fragment = service.asset(*files)
    except AssetPackError as exc:
        fail(str(exc), use_emoji=emoji)
        raise typer.Exit(code=1) from exc
    typer.echo(str(fragment))


@app.command("expand")
def expand_command(
    files: FILES_ARGUMENT,
    root: ROOT_OPTION = Path("."),
    static: STATIC_OPTION = None,
    tool: TOOL_OPTION = None,
    timeout: TIMEOUT_OPTION = None,
    emoji: EMOJI_OPTION = True,
    debug: DEBUG_OPTION = False,
) -> None:
    """Print one tag per file, converting stylesheet dialects next to their sources."""

    configure_logging(debug=debug, use_emoji=emoji)
    try:
        config = _load(root, static=static, out_dir=None, tools=tool, timeout=timeout, debug=debug, enabled=False)
        fragment = AssetPackService(config).expand(files)
    except AssetPackError as exc:
        fail(str(exc), use_emoji=emoji)
        raise typer.Exit(code=1) from exc
    typer.echo(str(fragment))


@app.command("tools")
def tools_command(
    root: ROOT_OPTION = Path("."),
    tool: TOOL_OPTION = None,
    emoji: EMOJI_OPTION = True,
) -> None:
    """Show which external processor is bound to each source format."""

    configure_logging(debug=False, use_emoji=emoji)
    try:
        config = _load(root, static=None, out_dir=None, tools=tool, timeout=None, debug=False)
    except AssetPackError as exc:
        fail(str(exc), use_emoji=emoji)
        raise typer.Exit(code=1) from exc
    registry = ToolRegistry.discover(config.tool_overrides())
    table = Table(title="Processors", box=box.SIMPLE_HEAVY)
    table.add_column("Format", no_wrap=True)
    table.add_column("Executable", overflow="fold")
    table.add_column("Source", no_wrap=True)
    for binding in registry:
        executable = str(binding.executable) if binding.available else "unavailable"
        table.add_row(binding.format.value, executable, binding.source)
    tty = detect_tty()
    get_console(color=tty, emoji=emoji, tty=tty).print(table)


@app.command("reset")
def reset_command(
    root: ROOT_OPTION = Path("."),
    static: STATIC_OPTION = None,
    out_dir: OUT_DIR_OPTION = None,
    emoji: EMOJI_OPTION = True,
) -> None:
    """Remove every packed artifact so the next request rebuilds it."""

    configure_logging(debug=False, use_emoji=emoji)
    try:
        config = _load(root, static=static, out_dir=out_dir, tools=None, timeout=None, debug=False)
        service = AssetPackService(config, registry=ToolRegistry())
    except AssetPackError as exc:
        fail(str(exc), use_emoji=emoji)
        raise typer.Exit(code=1) from exc
    removed = service.reset()
    for path in removed:
        info(f"removed {path.name}", use_emoji=emoji)
    ok(f"{len(removed)} artifact(s) removed from {service.cache.directory}", use_emoji=emoji)


def main() -> None:
    """Console-script entry point."""

    app()


__all__ = ["app", "main"]
