# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for static lookup, relativisation and markup."""

from __future__ import annotations

from pathlib import Path

import pytest

from assetpack import markup
from assetpack.errors import PathResolutionError
from assetpack.formats import AssetType
from assetpack.static import DirectoryStaticResolver, StaticResolver, resolve_inputs, to_reference


def test_resolver_searches_roots_in_order(tmp_path: Path) -> None:
    first, second = tmp_path / "one", tmp_path / "two"
    for root in (first, second):
        (root / "css").mkdir(parents=True)
        (root / "css" / "app.css").write_text(root.name, encoding="utf-8")
    (second / "css" / "extra.css").write_text("extra", encoding="utf-8")
    resolver = DirectoryStaticResolver([first, second])

    assert isinstance(resolver, StaticResolver)
    assert resolver.resolve("/css/app.css") == (first / "css" / "app.css").resolve()
    assert resolver.resolve("css/extra.css") == (second / "css" / "extra.css").resolve()
    assert resolver.resolve("/css/missing.css") is None
    assert resolver.resolve("/../one/css/app.css") is None


def test_resolve_inputs_keeps_unknown_references(static_root: Path) -> None:
    resolver = DirectoryStaticResolver([static_root])

    resolved = resolve_inputs(resolver, ["/css/app.css", "/virtual/generated.css"])

    assert resolved == [(static_root / "css" / "app.css").resolve(), Path("/virtual/generated.css")]


def test_to_reference_uses_first_matching_root(tmp_path: Path) -> None:
    artifact = tmp_path / "public" / "packed" / "abc.css"

    assert to_reference(artifact, [tmp_path / "assets", tmp_path / "public"]) == "/packed/abc.css"


def test_to_reference_outside_roots_fails(tmp_path: Path) -> None:
    with pytest.raises(PathResolutionError) as excinfo:
        to_reference(tmp_path / "cache" / "abc.css", [tmp_path / "public"])

    assert "is not found in static paths" in str(excinfo.value)
    assert excinfo.value.roots == (str(tmp_path / "public"),)


def test_markup_escapes_references() -> None:
    assert str(markup.javascript('/a".js')) == '<script src="/a&#34;.js"></script>'
    assert str(markup.tag_for(AssetType.STYLESHEET, "/a.css")) == '<link rel="stylesheet" href="/a.css">'
