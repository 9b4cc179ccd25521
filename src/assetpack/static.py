# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Static file lookup and artifact path relativisation."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path, PurePosixPath
from typing import Protocol, runtime_checkable

from .errors import PathResolutionError


@runtime_checkable
class StaticResolver(Protocol):
    """Resolve logical references to files below the static roots."""

    @property
    def paths(self) -> Sequence[Path]:
        """Return the configured static roots in lookup order."""
        ...

    def resolve(self, reference: str) -> Path | None:
        """Return the absolute path for ``reference`` or ``None`` when unknown."""
        ...


class DirectoryStaticResolver:
    """Look references up in an ordered list of directories."""

    def __init__(self, paths: Iterable[Path | str]) -> None:
        self._paths = tuple(Path(path).resolve() for path in paths)

    @property
    def paths(self) -> tuple[Path, ...]:
        return self._paths

    def resolve(self, reference: str) -> Path | None:
        relative = PurePosixPath(reference.lstrip("/"))
        if not relative.parts or ".." in relative.parts:
            return None
        for root in self._paths:
            candidate = root.joinpath(*relative.parts)
            if candidate.is_file():
                return candidate
        return None


def resolve_inputs(resolver: StaticResolver, references: Iterable[str]) -> list[Path]:
    """Resolve ``references`` to paths, keeping unresolvable ones as given.

    Unresolved references are passed through so generated or virtual assets
    addressed by a real path still work.
    """

    resolved: list[Path] = []
    for reference in references:
        found = resolver.resolve(reference)
        resolved.append(found if found is not None else Path(reference))
    return resolved


def to_reference(path: Path, roots: Sequence[Path]) -> str:
    """Return ``path`` as a ``/``-prefixed URL path relative to the first matching root.

    Raises:
        PathResolutionError: If ``path`` is not below any of ``roots``.
    """

    absolute = Path(path).resolve()
    for root in roots:
        try:
            relative = absolute.relative_to(Path(root).resolve())
        except ValueError:
            continue
        return "/" + relative.as_posix()
    raise PathResolutionError(str(absolute), [str(root) for root in roots])


__all__ = ["DirectoryStaticResolver", "StaticResolver", "resolve_inputs", "to_reference"]
