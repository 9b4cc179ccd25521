# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration model and loader for the asset pipeline."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError

ENABLE_ENV: Final[str] = "COMPRESS_ASSETS"
MODE_ENV: Final[str] = "ASSETPACK_MODE"
DEBUG_ENV: Final[str] = "ASSETPACK_DEBUG"
PRODUCTION_MODE: Final[str] = "production"
DEFAULT_STATIC_DIR: Final[str] = "public"
DEFAULT_OUT_SUBDIR: Final[str] = "packed"
PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "assetpack"
TOOL_ALIASES: Final[dict[str, str]] = {"yuicompressor": "js"}
TOOL_KEYS: Final[frozenset[str]] = frozenset({"less", "sass", "js"})
_TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})


def env_flag(value: str | None) -> bool | None:
    """Return the boolean meaning of an environment value, ``None`` when unset."""

    if value is None or value.strip() == "":
        return None
    return value.strip().lower() in _TRUTHY


def normalise_tools(value: Mapping[str, Any]) -> dict[str, Any]:
    """Fold alias keys onto their canonical tool names.

    Within one mapping a canonical key wins over its alias.

    Raises:
        ValueError: If a key names no known processor.
    """

    normalised: dict[str, Any] = {}
    for key, entry in value.items():
        name = TOOL_ALIASES.get(str(key), str(key))
        if name not in TOOL_KEYS:
            raise ValueError(f"unknown tool override '{key}' (expected one of {sorted(TOOL_KEYS)})")
        if name == str(key) or name not in normalised:
            normalised[name] = entry
    return normalised


class AssetPackConfig(BaseModel):
    """Settings fixed for the lifetime of an :class:`~assetpack.service.AssetPackService`."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    enabled: bool | None = None
    mode: str = Field(default_factory=lambda: os.environ.get(MODE_ENV, "development"))
    reset: bool = False
    out_dir: Path | None = None
    static_paths: list[Path] = Field(default_factory=lambda: [Path(DEFAULT_STATIC_DIR)])
    tools: dict[str, Path] = Field(default_factory=dict)
    timeout: float | None = None
    debug: bool = Field(default_factory=lambda: bool(env_flag(os.environ.get(DEBUG_ENV))))

    @field_validator("tools", mode="before")
    @classmethod
    def _normalise_tools(cls, value: Any) -> Any:
        if not isinstance(value, Mapping):
            return value
        return normalise_tools(value)

    @field_validator("timeout")
    @classmethod
    def _check_timeout(cls, value: float | None) -> float | None:
        if value is not None and value < 0:
            raise ValueError("timeout must be non-negative")
        return value

    @field_validator("static_paths")
    @classmethod
    def _require_static_paths(cls, value: list[Path]) -> list[Path]:
        if not value:
            raise ValueError("at least one static path is required")
        return value

    def is_enabled(self, env: Mapping[str, str] | None = None) -> bool:
        """Return whether pack mode is active.

        An explicit ``enabled`` wins, then the ``COMPRESS_ASSETS`` environment
        toggle, then whether ``mode`` is ``production``.
        """

        if self.enabled is not None:
            return self.enabled
        from_env = env_flag((os.environ if env is None else env).get(ENABLE_ENV))
        if from_env is not None:
            return from_env
        return self.mode == PRODUCTION_MODE

    def resolved_out_dir(self) -> Path:
        """Return the output directory, defaulting to ``<first static path>/packed``."""

        if self.out_dir is not None:
            return self.out_dir
        return self.static_paths[0] / DEFAULT_OUT_SUBDIR

    def tool_overrides(self) -> dict[str, str]:
        return {key: str(path) for key, path in self.tools.items()}

    def rooted(self, root: Path) -> AssetPackConfig:
        """Return a copy with relative paths anchored at ``root``.

        Tool overrides given as a bare executable name stay as they are so the
        process lookup still searches ``PATH``.
        """

        def anchor(path: Path) -> Path:
            return path if path.is_absolute() else (root / path)

        return self.model_copy(
            update={
                "static_paths": [anchor(path) for path in self.static_paths],
                "out_dir": anchor(self.out_dir) if self.out_dir is not None else None,
                "tools": {
                    key: anchor(path) if len(path.parts) > 1 else path for key, path in self.tools.items()
                },
            },
        )


def _read_pyproject(path: Path) -> Mapping[str, Any]:
    if not path.is_file():
        return {}
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Could not read {path}: {exc}") from exc
    section = data.get(PYPROJECT_TOOL_KEY, {}).get(PYPROJECT_SECTION_KEY, {})
    if not isinstance(section, Mapping):
        raise ConfigError(f"[{PYPROJECT_TOOL_KEY}.{PYPROJECT_SECTION_KEY}] in {path} must be a table")
    return section


def load_config(root: Path, overrides: Mapping[str, Any] | None = None) -> AssetPackConfig:
    """Load configuration for the project at ``root``.

    Built-in defaults are overlaid with ``[tool.assetpack]`` from
    ``pyproject.toml`` and then with ``overrides`` (entries set to ``None`` are
    ignored). Relative paths are anchored at ``root``.

    Raises:
        ConfigError: If the pyproject file or the merged data is invalid.
    """

    merged: dict[str, Any] = dict(_read_pyproject(root / PYPROJECT_FILENAME))
    try:
        for key, value in (overrides or {}).items():
            if value is None:
                continue
            if key == "tools" and isinstance(value, Mapping):
                base = merged.get("tools", {})
                if isinstance(base, Mapping):
                    value = {**normalise_tools(base), **normalise_tools(value)}
            merged[key] = value
        config = AssetPackConfig.model_validate(merged)
    except (ValidationError, ValueError) as exc:
        raise ConfigError(str(exc)) from exc
    return config.rooted(root.resolve())


__all__ = [
    "DEBUG_ENV",
    "ENABLE_ENV",
    "MODE_ENV",
    "AssetPackConfig",
    "env_flag",
    "load_config",
    "normalise_tools",
]
