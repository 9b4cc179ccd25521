# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import stat
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import pytest

from assetpack.config import AssetPackConfig
from assetpack.formats import SourceFormat
from assetpack.service import AssetPackService
from assetpack.tools import ToolRegistry

# Pack mode: ``-x IN`` (less), ``-t compressed IN`` (sass) and ``IN`` (js) print
# the input with spaces and newlines stripped. Expand mode: ``IN OUT`` copies.
FAKE_PROCESSOR = """#!/bin/sh
echo "$*" >> "{log}"
case "$1" in
  -x) tr -d ' \\n' < "$2" ;;
  -t) tr -d ' \\n' < "$3" ;;
  *) if [ $# -ge 2 ]; then cp "$1" "$2"; else tr -d ' \\n' < "$1"; fi ;;
esac
"""

BROKEN_PROCESSOR = """#!/bin/sh
echo "$*" >> "{log}"
echo "syntax error on line 1" >&2
exit 3
"""


@dataclass(slots=True)
class FakeTool:
    """Executable shell script standing in for an external processor."""

    path: Path
    log: Path

    @property
    def calls(self) -> list[str]:
        if not self.log.exists():
            return []
        return self.log.read_text(encoding="utf-8").splitlines()


def _write_tool(directory: Path, name: str, template: str) -> FakeTool:
    directory.mkdir(parents=True, exist_ok=True)
    log = directory / f"{name}.log"
    script = directory / name
    script.write_text(template.format(log=log), encoding="utf-8")
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return FakeTool(path=script, log=log)


@pytest.fixture
def fake_tool(tmp_path: Path) -> FakeTool:
    """Return a working fake processor."""

    return _write_tool(tmp_path / "bin", "processor", FAKE_PROCESSOR)


@pytest.fixture
def broken_tool(tmp_path: Path) -> FakeTool:
    """Return a fake processor that always exits with status 3."""

    return _write_tool(tmp_path / "bin", "broken", BROKEN_PROCESSOR)


@pytest.fixture
def static_root(tmp_path: Path) -> Path:
    """Create a static directory with scripts, stylesheets and dialect sources."""

    root = tmp_path / "public"
    files = {
        "js/app.js": "var a = 1;\nvar b = 2;",
        "js/util.js": "function f() { return 1; }\n",
        "js/jquery.min.js": "var  keep = 'as is';\n",
        "css/reset.css": "body { margin: 0; }\n",
        "css/app.css": "h1 { color: red; }\n",
        "sass/theme.scss": "$c: red;\na { color: $c; }\n",
        "less/layout.less": "@w: 10px;\n.box { width: @w; }\n",
    }
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def registry_for() -> Callable[..., ToolRegistry]:
    """Return a factory building registries that bind every format to one tool."""

    def build(tool: FakeTool | None, **overrides: FakeTool | None) -> ToolRegistry:
        executable = tool.path if tool is not None else None
        mapping: dict[SourceFormat, Path | None] = {
            SourceFormat.SCRIPT: executable,
            SourceFormat.SCSS: executable,
            SourceFormat.LESS: executable,
        }
        for name, override in overrides.items():
            mapping[SourceFormat(name)] = override.path if override is not None else None
        return ToolRegistry.from_mapping(mapping)

    return build


@pytest.fixture
def make_service(static_root: Path) -> Callable[..., AssetPackService]:
    """Return a factory building services rooted at ``static_root``."""

    def build(registry: ToolRegistry, **settings: object) -> AssetPackService:
        config = AssetPackConfig(static_paths=[static_root], **settings)
        return AssetPackService(config, registry=registry)

    return build
