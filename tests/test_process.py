# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the external processor wrapper."""

from __future__ import annotations

from pathlib import Path

import pytest

from assetpack.errors import ProcessError
from assetpack.process import TIMEOUT_RETURNCODE, CommandOptions, run_tool


def test_run_tool_captures_stdout_bytes(fake_tool, tmp_path: Path) -> None:
    source = tmp_path / "app.js"
    source.write_text("var a = 1;\n", encoding="utf-8")

    completed = run_tool([str(fake_tool.path), str(source)])

    assert completed.stdout == b"vara=1;"
    assert fake_tool.calls == [str(source)]


def test_run_tool_reports_exit_status_and_stderr(broken_tool, tmp_path: Path) -> None:
    with pytest.raises(ProcessError) as excinfo:
        run_tool([str(broken_tool.path), "-x", "in.less"])

    error = excinfo.value
    assert error.returncode == 3
    assert error.arguments == ("-x", "in.less")
    assert error.executable == str(broken_tool.path)
    assert "syntax error" in (error.stderr or "")
    assert "exited with status 3" in str(error)


def test_run_tool_reports_spawn_failure(tmp_path: Path) -> None:
    missing = tmp_path / "does-not-exist"

    with pytest.raises(ProcessError) as excinfo:
        run_tool([str(missing), "input.js"])

    assert isinstance(excinfo.value.spawn_error, FileNotFoundError)
    assert excinfo.value.returncode is None


def test_run_tool_times_out(tmp_path: Path) -> None:
    sleeper = tmp_path / "sleeper"
    sleeper.write_text("#!/bin/sh\nexec sleep 5\n", encoding="utf-8")
    sleeper.chmod(0o755)

    with pytest.raises(ProcessError) as excinfo:
        run_tool([str(sleeper)], options=CommandOptions(timeout=0.2))

    assert excinfo.value.returncode == TIMEOUT_RETURNCODE
    assert "timed out" in (excinfo.value.stderr or "")


def test_negative_timeout_is_rejected() -> None:
    with pytest.raises(ValueError):
        CommandOptions(timeout=-1)


def test_empty_command_is_rejected() -> None:
    with pytest.raises(ValueError):
        run_tool([])
