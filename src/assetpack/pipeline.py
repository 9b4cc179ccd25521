# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Ordering of transform pipes for packed and expanded asset groups."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path, PurePosixPath
from typing import BinaryIO, Final

from .errors import ConversionWarning, ProcessError
from .formats import AssetGroup, AssetType, SourceFormat, detect_format, is_minified
from .pipes import ConvertStep, CopyPipe, TransformPipe, build_pack_pipes
from .process import CommandOptions
from .static import StaticResolver
from .tools import ToolRegistry

LOGGER = logging.getLogger(__name__)

SCRIPT_SEPARATOR: Final[bytes] = b"\n"


class PipelineRunner:
    """Stream every member of a group through its transform chain into one sink."""

    def __init__(self, registry: ToolRegistry, options: CommandOptions | None = None) -> None:
        """Build the dispatch table for ``registry``.

        Args:
            registry: Processor bindings shared by every pipe.
            options: Execution options (timeout, debug) for external processors.
        """

        self._registry = registry
        self._options = options or CommandOptions()
        self._pipes = build_pack_pipes(registry, self._options)
        self._copy = CopyPipe()

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    def pipe_for(self, path: Path) -> TransformPipe:
        """Return the pack-mode pipe for ``path``.

        Minified scripts and plain stylesheets are copied verbatim; scripts are
        minified and dialect files compiled with compressed output.
        """

        fmt = detect_format(path)
        if fmt is SourceFormat.SCRIPT and is_minified(path):
            return self._copy
        return self._pipes[fmt]

    def pack_scripts(self, inputs: Sequence[Path], sink: BinaryIO) -> None:
        """Append each script, followed by a newline, to ``sink`` in order."""

        for path in inputs:
            self.pipe_for(path).apply(path, sink)
            sink.write(SCRIPT_SEPARATOR)

    def pack_stylesheets(self, inputs: Sequence[Path], sink: BinaryIO) -> None:
        """Append each stylesheet (dialects compiled) to ``sink`` in order."""

        for path in inputs:
            self.pipe_for(path).apply(path, sink)

    def run(self, asset_type: AssetType, inputs: Sequence[Path], sink: BinaryIO) -> None:
        """Dispatch to the packing algorithm for ``asset_type``.

        Raises:
            ProcessError: If any member fails; the remaining members are skipped.
        """

        if asset_type is AssetType.SCRIPT:
            self.pack_scripts(inputs, sink)
        else:
            self.pack_stylesheets(inputs, sink)

    def expand(self, group: AssetGroup, resolver: StaticResolver) -> list[str]:
        """Return one reference per member for development mode.

        Scripts are returned untouched. Dialect stylesheets are converted to a
        sibling ``.css`` file on every call; when that fails the original
        reference is kept and a warning is logged.
        """

        if group.asset_type is AssetType.SCRIPT:
            return list(group.references)
        return [self.compile_css(reference, resolver) for reference in group.references]

    def compile_css(self, reference: str, resolver: StaticResolver) -> str:
        """Convert a dialect stylesheet for expand mode, falling back to ``reference``."""

        fmt = detect_format(reference)
        if not fmt.is_dialect:
            return reference
        step = ConvertStep(format=fmt, registry=self._registry, options=self._options)
        source = resolver.resolve(reference)
        try:
            if source is None:
                raise FileNotFoundError(f"{reference} is not found in static paths")
            step.apply(source)
        except (ProcessError, OSError) as exc:
            LOGGER.warning(
                "Could not convert %s: %s",
                reference,
                exc,
                extra={
                    "category": ConversionWarning.__name__,
                    "source": reference,
                    "tool": str(self._registry.resolve(fmt) or f"<{fmt.value} unavailable>"),
                    "error": str(exc),
                },
            )
            return reference
        return str(PurePosixPath(reference).with_suffix(".css"))


__all__ = ["SCRIPT_SEPARATOR", "PipelineRunner"]
