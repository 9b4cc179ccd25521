# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe wrappers around ``subprocess`` execution of external processors."""

from __future__ import annotations

import logging

# Bandit: subprocess usage is intentional; we provide a controlled wrapper around
# external tool execution, passing argument lists and disabling ``shell=True``.
import subprocess  # nosec B404
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from subprocess import CompletedProcess
from typing import Final

from .errors import ProcessError

LOGGER = logging.getLogger(__name__)

TIMEOUT_RETURNCODE: Final[int] = 124


@dataclass(frozen=True, slots=True)
class CommandOptions:
    """Immutable execution options applied to every external tool invocation."""

    cwd: Path | None = None
    env: Mapping[str, str] | None = None
    timeout: float | None = None
    debug: bool = False

    def __post_init__(self) -> None:
        if self.timeout is not None and self.timeout < 0:
            raise ValueError("timeout must be non-negative")


def _ensure_text(value: str | bytes | None) -> str | None:
    """Return ``value`` decoded to text when supplied as ``bytes``."""

    if value is None or isinstance(value, str):
        return value
    return value.decode(errors="replace")


def run_tool(args: Sequence[str], *, options: CommandOptions | None = None) -> CompletedProcess[bytes]:
    """Execute ``args`` and return the completed process with captured bytes.

    Args:
        args: Executable followed by its arguments.
        options: Execution options; defaults to no timeout and the inherited environment.

    Returns:
        CompletedProcess[bytes]: Completed process with ``stdout`` holding the produced bytes.

    Raises:
        ValueError: If ``args`` is empty.
        ProcessError: If the process cannot be spawned, times out or exits non-zero.
    """

    if not args:
        raise ValueError("subprocess command requires at least one argument")
    resolved = options or CommandOptions()
    executable, *rest = (str(arg) for arg in args)
    if resolved.debug:
        LOGGER.debug("system %s", " ".join([executable, *rest]))

    try:
        # Bandit: commands come from the tool registry; no shell expansion happens.
        completed: CompletedProcess[bytes] = subprocess.run(  # nosec B603
            [executable, *rest],
            cwd=str(resolved.cwd) if resolved.cwd is not None else None,
            env=dict(resolved.env) if resolved.env is not None else None,
            check=False,
            capture_output=True,
            timeout=resolved.timeout,
            stdin=subprocess.DEVNULL,
        )
    except subprocess.TimeoutExpired as exc:
        stderr = _ensure_text(exc.stderr)
        timeout_msg = f"Command timed out after {resolved.timeout:.1f}s"
        raise ProcessError(
            executable,
            rest,
            returncode=TIMEOUT_RETURNCODE,
            stderr=f"{stderr}\n{timeout_msg}" if stderr else timeout_msg,
        ) from exc
    except OSError as exc:
        raise ProcessError(executable, rest, spawn_error=exc) from exc

    if completed.returncode != 0:
        raise ProcessError(
            executable,
            rest,
            returncode=completed.returncode,
            stderr=_ensure_text(completed.stderr),
        )
    return completed


__all__ = ["TIMEOUT_RETURNCODE", "CommandOptions", "run_tool"]
