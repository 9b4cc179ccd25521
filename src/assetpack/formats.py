# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Source format detection and asset group modelling."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import StrEnum
from pathlib import PurePath
from typing import Final

from .errors import AssetGroupError


class AssetType(StrEnum):
    """Kind of output artifact produced for a group."""

    SCRIPT = "script"
    STYLESHEET = "stylesheet"

    @property
    def extension(self) -> str:
        """Return the artifact extension (without the dot) for this asset type."""

        return "js" if self is AssetType.SCRIPT else "css"


class SourceFormat(StrEnum):
    """Format tag derived from a source file extension."""

    SCRIPT = "script"
    STYLE = "style"
    SCSS = "scss"
    LESS = "less"

    @property
    def asset_type(self) -> AssetType:
        """Return the asset type a file of this format contributes to."""

        return AssetType.SCRIPT if self is SourceFormat.SCRIPT else AssetType.STYLESHEET

    @property
    def is_dialect(self) -> bool:
        """Return ``True`` when the format must be compiled to plain CSS."""

        return self in DIALECTS


EXTENSION_FORMATS: Final[dict[str, SourceFormat]] = {
    ".js": SourceFormat.SCRIPT,
    ".css": SourceFormat.STYLE,
    ".scss": SourceFormat.SCSS,
    ".less": SourceFormat.LESS,
}
DIALECTS: Final[frozenset[SourceFormat]] = frozenset({SourceFormat.SCSS, SourceFormat.LESS})
_MINIFIED_MARKER: Final[re.Pattern[str]] = re.compile(r"\bmin\b")


def detect_format(reference: str | PurePath) -> SourceFormat:
    """Return the :class:`SourceFormat` for ``reference`` based on its extension.

    Args:
        reference: Logical reference or filesystem path of a source file.

    Returns:
        SourceFormat: Format tag matching the file extension.

    Raises:
        AssetGroupError: If the extension is not one of the supported formats.
    """

    suffix = PurePath(str(reference)).suffix.lower()
    try:
        return EXTENSION_FORMATS[suffix]
    except KeyError:
        raise AssetGroupError(f"Unsupported asset type for {reference}") from None


def is_minified(reference: str | PurePath) -> bool:
    """Return ``True`` when the file name marks the source as already minified."""

    return bool(_MINIFIED_MARKER.search(PurePath(str(reference)).name))


@dataclass(frozen=True, slots=True)
class AssetGroup:
    """Ordered, type-homogeneous list of source references packed together."""

    references: tuple[str, ...]
    asset_type: AssetType

    @classmethod
    def from_references(cls, references: Iterable[str]) -> AssetGroup:
        """Build a group, deriving its asset type from the first reference.

        Args:
            references: Logical file references in declaration order.

        Returns:
            AssetGroup: Validated group.

        Raises:
            AssetGroupError: If the group is empty or mixes scripts and stylesheets.
        """

        refs = tuple(str(ref) for ref in references)
        if not refs:
            raise AssetGroupError("An asset group needs at least one file")
        asset_type = detect_format(refs[0]).asset_type
        for ref in refs[1:]:
            if detect_format(ref).asset_type is not asset_type:
                raise AssetGroupError(
                    f"Cannot combine {ref} with {asset_type.value} sources in one group",
                )
        return cls(references=refs, asset_type=asset_type)

    def __iter__(self) -> Iterator[str]:
        return iter(self.references)

    def __len__(self) -> int:
        return len(self.references)


__all__ = [
    "DIALECTS",
    "EXTENSION_FORMATS",
    "AssetGroup",
    "AssetType",
    "SourceFormat",
    "detect_format",
    "is_minified",
]
