# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Discovery of the external processors used by the transform pipes."""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Final

from .errors import ToolUnavailable
from .formats import SourceFormat

LOGGER = logging.getLogger(__name__)

Which = Callable[[str], str | None]


@dataclass(frozen=True, slots=True)
class ToolSpec:
    """Describe how to locate the processor for a source format."""

    format: SourceFormat
    override_key: str
    candidates: tuple[str, ...]
    aliases: tuple[str, ...] = ()

    @property
    def config_keys(self) -> tuple[str, ...]:
        """Return the override keys accepted for this processor, preferred first."""

        return (self.override_key, *self.aliases)


TOOL_SPECS: Final[tuple[ToolSpec, ...]] = (
    ToolSpec(SourceFormat.LESS, "less", ("lessc", "less")),
    ToolSpec(SourceFormat.SCSS, "sass", ("sass",)),
    ToolSpec(SourceFormat.SCRIPT, "js", ("yui-compressor", "yuicompressor"), aliases=("yuicompressor",)),
)


@dataclass(frozen=True, slots=True)
class ToolBinding:
    """Resolved executable for a format, or ``None`` when unavailable."""

    format: SourceFormat
    executable: Path | None
    source: str = "unavailable"

    @property
    def available(self) -> bool:
        """Return ``True`` when an executable was bound."""

        return self.executable is not None


@dataclass(frozen=True, slots=True)
class ToolRegistry:
    """Read-only mapping from processing formats to their executables.

    Build it once with :meth:`discover` and share it between threads; nothing
    mutates the bindings after construction.
    """

    bindings: Mapping[SourceFormat, ToolBinding] = field(default_factory=dict)
    missing: tuple[ToolUnavailable, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "bindings", MappingProxyType(dict(self.bindings)))

    @classmethod
    def discover(
        cls,
        overrides: Mapping[str, str | Path | None] | None = None,
        *,
        which: Which = shutil.which,
        specs: tuple[ToolSpec, ...] = TOOL_SPECS,
    ) -> ToolRegistry:
        """Resolve every processor from ``overrides`` first, then from ``PATH``.

        Args:
            overrides: Explicit executables keyed by override key (``less``, ``sass``, ``js``).
            which: Lookup used for ``PATH`` discovery.
            specs: Processor descriptions to resolve.

        Returns:
            ToolRegistry: Registry holding one binding per spec.
        """

        provided = dict(overrides or {})
        bindings: dict[SourceFormat, ToolBinding] = {}
        missing: list[ToolUnavailable] = []
        for spec in specs:
            binding = _resolve_spec(spec, provided, which)
            bindings[spec.format] = binding
            if not binding.available:
                record = ToolUnavailable(format=spec.format.value, candidates=spec.candidates)
                LOGGER.warning(record.describe(), extra={"format": spec.format.value})
                missing.append(record)
        return cls(bindings=bindings, missing=tuple(missing))

    @classmethod
    def from_mapping(cls, executables: Mapping[SourceFormat, str | Path | None]) -> ToolRegistry:
        """Return a registry built from explicit bindings without any discovery."""

        bindings = {
            fmt: ToolBinding(fmt, Path(exe) if exe else None, "explicit" if exe else "unavailable")
            for fmt, exe in executables.items()
        }
        missing = tuple(
            ToolUnavailable(format=fmt.value, candidates=()) for fmt, binding in bindings.items() if not binding.available
        )
        return cls(bindings=bindings, missing=missing)

    def resolve(self, fmt: SourceFormat) -> Path | None:
        """Return the executable bound to ``fmt`` or ``None`` when unavailable."""

        binding = self.bindings.get(fmt)
        return binding.executable if binding is not None else None

    def __iter__(self) -> Iterator[ToolBinding]:
        return iter(self.bindings.values())


def _resolve_spec(spec: ToolSpec, overrides: Mapping[str, str | Path | None], which: Which) -> ToolBinding:
    """Return the binding for ``spec``; an override wins over ``PATH`` candidates."""

    for key in spec.config_keys:
        value = overrides.get(key)
        if value:
            return ToolBinding(spec.format, Path(value), f"config:{key}")
    for candidate in spec.candidates:
        found = which(candidate)
        if found:
            return ToolBinding(spec.format, Path(found), f"PATH:{candidate}")
    return ToolBinding(spec.format, None)


__all__ = ["TOOL_SPECS", "ToolBinding", "ToolRegistry", "ToolSpec", "Which"]
