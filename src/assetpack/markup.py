# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""HTML fragments embedding asset references in templates."""

from __future__ import annotations

from collections.abc import Iterable

from markupsafe import Markup

from .formats import AssetType


def javascript(reference: str) -> Markup:
    """Return a ``<script>`` tag loading ``reference``."""

    return Markup('<script src="{}"></script>').format(reference)


def stylesheet(reference: str) -> Markup:
    """Return a stylesheet ``<link>`` tag for ``reference``."""

    return Markup('<link rel="stylesheet" href="{}">').format(reference)


def tag_for(asset_type: AssetType, reference: str) -> Markup:
    """Return the tag matching ``asset_type`` for ``reference``."""

    return javascript(reference) if asset_type is AssetType.SCRIPT else stylesheet(reference)


def join(fragments: Iterable[Markup]) -> Markup:
    """Concatenate ``fragments`` into a single markup value."""

    return Markup("").join(fragments)


__all__ = ["javascript", "join", "stylesheet", "tag_for"]
