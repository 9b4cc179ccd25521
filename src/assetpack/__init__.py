# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Pack stylesheets and scripts into fingerprinted artifacts using external processors."""

from __future__ import annotations

from importlib import metadata

from .cache import ArtifactHandle, AssetCache, fingerprint
from .config import AssetPackConfig, load_config
from .errors import (
    AssetGroupError,
    AssetPackError,
    ConfigError,
    ConversionWarning,
    PathResolutionError,
    ProcessError,
    SourceReadError,
    ToolUnavailable,
)
from .formats import AssetGroup, AssetType, SourceFormat
from .pipeline import PipelineRunner
from .service import AssetPackService, AssetReference
from .static import DirectoryStaticResolver, StaticResolver
from .tools import ToolBinding, ToolRegistry

try:
    __version__ = metadata.version("assetpack")
except metadata.PackageNotFoundError:  # pragma: no cover - local development fallback
    __version__ = "0.0.0"

__all__ = [
    "ArtifactHandle",
    "AssetCache",
    "AssetGroup",
    "AssetGroupError",
    "AssetPackConfig",
    "AssetPackError",
    "AssetPackService",
    "AssetReference",
    "AssetType",
    "ConfigError",
    "ConversionWarning",
    "DirectoryStaticResolver",
    "PathResolutionError",
    "PipelineRunner",
    "ProcessError",
    "SourceReadError",
    "SourceFormat",
    "StaticResolver",
    "ToolBinding",
    "ToolRegistry",
    "ToolUnavailable",
    "__version__",
    "fingerprint",
    "load_config",
]
