# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared by the asset pipeline."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass


class AssetPackError(Exception):
    """Base class for every error raised by :mod:`assetpack`."""


class ConfigError(AssetPackError):
    """Raised when configuration input is invalid."""


class AssetGroupError(AssetPackError, ValueError):
    """Raised when an asset group is empty, mixed or has an unknown file type."""


class PathResolutionError(AssetPackError):
    """Raised when a packed artifact lies outside every configured static root."""

    def __init__(self, path: str, roots: Sequence[str]) -> None:
        """Initialise the error with the offending path and the searched roots.

        Args:
            path: Absolute artifact path that could not be relativised.
            roots: Static root directories that were consulted.
        """

        super().__init__(f"{path} is not found in static paths ({', '.join(roots) or '<none>'})")
        self.path = path
        self.roots = tuple(roots)


class SourceReadError(AssetPackError):
    """Raised when a source copied verbatim into an artifact cannot be read."""

    def __init__(self, path: str, error: OSError) -> None:
        super().__init__(f"Could not read {path}: {error.strerror or error}")
        self.path = path
        self.error = error


class ProcessError(AssetPackError):
    """Raised when an external processor is unavailable, cannot spawn or fails."""

    def __init__(
        self,
        executable: str,
        args: Sequence[str],
        *,
        returncode: int | None = None,
        stderr: str | None = None,
        spawn_error: BaseException | None = None,
    ) -> None:
        """Initialise the error with the command that failed.

        Args:
            executable: Executable path or, for unbound formats, a descriptive label.
            args: Arguments passed to the executable.
            returncode: Exit status reported by the process, when it ran.
            stderr: Captured standard error text.
            spawn_error: Exception raised while starting the process.
        """

        self.executable = executable
        self.arguments = tuple(args)
        self.returncode = returncode
        self.stderr = stderr
        self.spawn_error = spawn_error
        super().__init__(self._describe())

    @property
    def command(self) -> tuple[str, ...]:
        """Return the full command vector (executable followed by arguments)."""

        return (self.executable, *self.arguments)

    def _describe(self) -> str:
        rendered = " ".join(self.command)
        if self.spawn_error is not None:
            return f"{rendered}: {self.spawn_error}"
        detail = (self.stderr or "").strip() or "<none>"
        return f"{rendered}: exited with status {self.returncode}. stderr: {detail}"


class ConversionWarning(UserWarning):
    """Category attached to expand-mode conversion failures (logged, never raised)."""


@dataclass(frozen=True, slots=True)
class ToolUnavailable:
    """Record a processor that could not be located during discovery."""

    format: str
    candidates: tuple[str, ...]

    def describe(self) -> str:
        """Return the warning text emitted for the missing processor."""

        tried = ", ".join(self.candidates) or "<no candidates>"
        return f"Could not find application for {self.format} (tried: {tried})"


__all__ = [
    "AssetGroupError",
    "AssetPackError",
    "ConfigError",
    "ConversionWarning",
    "PathResolutionError",
    "ProcessError",
    "SourceReadError",
    "ToolUnavailable",
]
