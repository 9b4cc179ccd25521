# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Façade consumed by the template layer: pack or expand asset groups."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from markupsafe import Markup

from . import markup
from .cache import AssetCache, fingerprint
from .config import AssetPackConfig
from .errors import AssetGroupError
from .formats import AssetGroup, AssetType
from .pipeline import PipelineRunner
from .process import CommandOptions
from .static import DirectoryStaticResolver, StaticResolver, resolve_inputs, to_reference
from .tools import ToolRegistry

LOGGER = logging.getLogger(__name__)

AssetReference = str


class AssetPackService:
    """Resolve, fingerprint, build and reference asset groups.

    Construction performs the startup work: tools are discovered (unless a
    registry is injected), the output directory is created and, when both
    ``enabled`` and ``reset`` are set, swept of previous artifacts. The pack or
    expand mode is fixed from then on.
    """

    def __init__(
        self,
        config: AssetPackConfig,
        resolver: StaticResolver | None = None,
        *,
        registry: ToolRegistry | None = None,
    ) -> None:
        """Prepare the service.

        Args:
            config: Settings for this process.
            resolver: Static file resolver; defaults to the configured static paths.
            registry: Pre-built tool bindings; discovered from ``config.tools`` and ``PATH`` when omitted.
        """

        self.config = config
        self.resolver = resolver or DirectoryStaticResolver(config.static_paths)
        self.registry = registry if registry is not None else ToolRegistry.discover(config.tool_overrides())
        self.enabled = config.is_enabled()
        self.cache = AssetCache(config.resolved_out_dir())
        self.runner = PipelineRunner(
            self.registry,
            CommandOptions(timeout=config.timeout, debug=config.debug),
        )
        if self.enabled and config.reset:
            self.cache.reset()
        if not self.enabled:
            LOGGER.debug("assetpack will expand file list")

    def pack(self, group: AssetGroup) -> AssetReference:
        """Build (or reuse) the artifact for ``group`` and return its static reference.

        Args:
            group: Asset group to pack.

        Returns:
            AssetReference: ``/``-prefixed path relative to a static root.

        Raises:
            ProcessError: If a transform fails while building; nothing is published.
            PathResolutionError: If the output directory is outside every static root.
        """

        inputs = resolve_inputs(self.resolver, group.references)
        digest = fingerprint(str(path) for path in inputs)
        handle = self.cache.open_or_reuse(digest, group.asset_type.extension)
        if handle.is_builder:
            LOGGER.debug("building %s from %d file(s)", handle.path.name, len(inputs))
            with handle.writer() as sink:
                self.runner.run(group.asset_type, inputs, sink)
        return to_reference(handle.path, self.resolver.paths)

    def pack_scripts(self, references: Iterable[str]) -> Markup:
        """Return a ``<script>`` tag for the packed scripts in ``references``."""

        group = self._group(references, AssetType.SCRIPT)
        return markup.javascript(self.pack(group))

    def pack_stylesheets(self, references: Iterable[str]) -> Markup:
        """Return a stylesheet ``<link>`` tag for the packed ``references``."""

        group = self._group(references, AssetType.STYLESHEET)
        return markup.stylesheet(self.pack(group))

    def expand(self, references: Iterable[str]) -> Markup:
        """Return one tag per reference (development mode, nothing cached)."""

        group = AssetGroup.from_references(references)
        expanded = self.runner.expand(group, self.resolver)
        return markup.join(markup.tag_for(group.asset_type, ref) for ref in expanded)

    def asset(self, *references: str) -> Markup:
        """Template helper: pack in production mode, expand otherwise."""

        if not self.enabled:
            return self.expand(references)
        group = AssetGroup.from_references(references)
        return markup.tag_for(group.asset_type, self.pack(group))

    def reset(self) -> list[Path]:
        """Remove every cached artifact so the next requests rebuild them."""

        return self.cache.reset()

    @staticmethod
    def _group(references: Iterable[str], expected: AssetType) -> AssetGroup:
        group = AssetGroup.from_references(references)
        if group.asset_type is not expected:
            raise AssetGroupError(f"Expected {expected.value} sources, got {group.asset_type.value}")
        return group


__all__ = ["AssetPackService", "AssetReference"]
