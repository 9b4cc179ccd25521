# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for source format detection and asset groups."""

from __future__ import annotations

import pytest

from assetpack.errors import AssetGroupError
from assetpack.formats import AssetGroup, AssetType, SourceFormat, detect_format, is_minified


@pytest.mark.parametrize(
    ("reference", "expected"),
    [
        ("/js/app.js", SourceFormat.SCRIPT),
        ("/css/app.css", SourceFormat.STYLE),
        ("/sass/theme.scss", SourceFormat.SCSS),
        ("/less/layout.LESS", SourceFormat.LESS),
    ],
)
def test_detect_format_by_extension(reference: str, expected: SourceFormat) -> None:
    assert detect_format(reference) is expected


def test_detect_format_rejects_unknown_extension() -> None:
    with pytest.raises(AssetGroupError, match="Unsupported asset type"):
        detect_format("/img/logo.png")


def test_dialects_are_stylesheets() -> None:
    assert SourceFormat.SCSS.is_dialect
    assert SourceFormat.LESS.asset_type is AssetType.STYLESHEET
    assert not SourceFormat.STYLE.is_dialect
    assert SourceFormat.SCRIPT.asset_type.extension == "js"


@pytest.mark.parametrize(
    ("name", "minified"),
    [
        ("jquery.min.js", True),
        ("/vendor/app-min.js", True),
        ("admin.js", False),
        ("minimal.js", False),
    ],
)
def test_is_minified_uses_whole_word_marker(name: str, minified: bool) -> None:
    assert is_minified(name) is minified


def test_group_preserves_declaration_order() -> None:
    group = AssetGroup.from_references(["/b.css", "/a.scss", "/c.less"])

    assert group.asset_type is AssetType.STYLESHEET
    assert list(group) == ["/b.css", "/a.scss", "/c.less"]
    assert len(group) == 3


def test_group_rejects_mixed_types() -> None:
    with pytest.raises(AssetGroupError, match="Cannot combine"):
        AssetGroup.from_references(["/js/app.js", "/css/app.css"])


def test_group_rejects_empty_input() -> None:
    with pytest.raises(ValueError):
        AssetGroup.from_references([])
