# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests covering configuration loading and mode selection."""

from __future__ import annotations

from pathlib import Path

import pytest

from assetpack.config import AssetPackConfig, load_config
from assetpack.errors import ConfigError


def test_explicit_enabled_wins() -> None:
    assert AssetPackConfig(enabled=False, mode="production").is_enabled({"COMPRESS_ASSETS": "1"}) is False


@pytest.mark.parametrize(
    ("env", "mode", "expected"),
    [
        ({"COMPRESS_ASSETS": "1"}, "development", True),
        ({"COMPRESS_ASSETS": "0"}, "production", False),
        ({}, "production", True),
        ({}, "development", False),
        ({"COMPRESS_ASSETS": ""}, "production", True),
    ],
)
def test_enabled_defaults_from_environment_then_mode(env: dict[str, str], mode: str, expected: bool) -> None:
    assert AssetPackConfig(mode=mode).is_enabled(env) is expected


def test_out_dir_defaults_below_first_static_path() -> None:
    config = AssetPackConfig(static_paths=[Path("/srv/public"), Path("/srv/extra")])

    assert config.resolved_out_dir() == Path("/srv/public/packed")


def test_tool_aliases_and_unknown_keys() -> None:
    config = AssetPackConfig(tools={"yuicompressor": "/opt/yui", "sass": "/opt/sass"})

    assert config.tool_overrides() == {"js": "/opt/yui", "sass": "/opt/sass"}
    with pytest.raises(ValueError):
        AssetPackConfig(tools={"coffee": "/opt/coffee"})


def test_negative_timeout_rejected() -> None:
    with pytest.raises(ValueError):
        AssetPackConfig(timeout=-1)


def test_load_config_layers_pyproject_and_overrides(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        "[tool.assetpack]\n"
        'static_paths = ["web"]\n'
        "reset = true\n"
        'tools = { less = "/opt/lessc" }\n',
        encoding="utf-8",
    )

    config = load_config(tmp_path, {"tools": {"sass": "/opt/sass"}, "timeout": 30, "out_dir": None})

    assert config.static_paths == [tmp_path.resolve() / "web"]
    assert config.resolved_out_dir() == tmp_path.resolve() / "web" / "packed"
    assert config.reset is True
    assert config.timeout == 30
    assert config.tool_overrides() == {"less": "/opt/lessc", "sass": "/opt/sass"}


def test_override_beats_pyproject_alias(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        "[tool.assetpack.tools]\n" 'yuicompressor = "/from/pyproject"\n',
        encoding="utf-8",
    )

    config = load_config(tmp_path, {"tools": {"js": "/from/override"}})

    assert config.tool_overrides() == {"js": "/from/override"}


def test_canonical_key_beats_alias_in_one_table() -> None:
    config = AssetPackConfig(tools={"js": "/opt/js", "yuicompressor": "/opt/yui"})

    assert config.tool_overrides() == {"js": "/opt/js"}


def test_relative_tool_paths_are_anchored_at_root(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        "[tool.assetpack.tools]\n" 'less = "bin/lessc"\n' 'sass = "sass"\n',
        encoding="utf-8",
    )

    config = load_config(tmp_path)

    assert config.tool_overrides() == {"less": str(tmp_path.resolve() / "bin" / "lessc"), "sass": "sass"}


def test_unknown_override_key_is_a_config_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config(tmp_path, {"tools": {"coffee": "/opt/coffee"}})


def test_load_config_without_pyproject_uses_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert config.static_paths == [tmp_path.resolve() / "public"]


def test_load_config_reports_invalid_data(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text("[tool.assetpack]\nunknown = 1\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_reports_broken_toml(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text("[tool.assetpack\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Could not read"):
        load_config(tmp_path)
