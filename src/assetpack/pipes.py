# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Transform stages that turn one source file into bytes of the target format."""

from __future__ import annotations

import shutil
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Final

from .errors import ProcessError, SourceReadError
from .formats import SourceFormat
from .process import CommandOptions, run_tool
from .tools import ToolRegistry

INPUT_PLACEHOLDER: Final[str] = "{input}"
OUTPUT_PLACEHOLDER: Final[str] = "{output}"


class TransformPipe(ABC):
    """Single transform stage appending its output to an append-only sink."""

    name: str

    @abstractmethod
    def apply(self, input_path: Path, sink: BinaryIO) -> None:
        """Append the transformed contents of ``input_path`` to ``sink``.

        Args:
            input_path: Source file to transform.
            sink: Binary stream receiving the produced bytes; never truncated or rewound.

        Raises:
            ProcessError: If the external processor is unavailable or fails.
            SourceReadError: If a verbatim source cannot be read.
        """


class CopyPipe(TransformPipe):
    """Copy the source bytes verbatim."""

    name = "copy"

    def apply(self, input_path: Path, sink: BinaryIO) -> None:
        try:
            handle = input_path.open("rb")
        except OSError as exc:
            raise SourceReadError(str(input_path), exc) from exc
        with handle:
            shutil.copyfileobj(handle, sink)


@dataclass(frozen=True, slots=True)
class ToolPipe(TransformPipe):
    """Run the processor bound to ``format`` and append its standard output.

    ``arguments`` is a template where ``{input}`` is replaced by the source path.
    """

    name: str
    format: SourceFormat
    arguments: tuple[str, ...]
    registry: ToolRegistry
    options: CommandOptions = CommandOptions()

    def command(self, input_path: Path) -> list[str]:
        """Return the full argument vector for ``input_path``.

        Raises:
            ProcessError: If no executable is bound to the pipe's format.
        """

        args = _render(self.arguments, input_path=input_path)
        executable = self.registry.resolve(self.format)
        if executable is None:
            raise ProcessError(
                f"<{self.format.value} unavailable>",
                args,
                spawn_error=FileNotFoundError(f"No application configured for {self.format.value}"),
            )
        return [str(executable), *args]

    def apply(self, input_path: Path, sink: BinaryIO) -> None:
        completed = run_tool(self.command(input_path), options=self.options)
        sink.write(completed.stdout)


@dataclass(frozen=True, slots=True)
class ConvertStep:
    """Compile a dialect file into a sibling plain stylesheet (expand mode)."""

    format: SourceFormat
    registry: ToolRegistry
    options: CommandOptions = CommandOptions()
    arguments: tuple[str, ...] = (INPUT_PLACEHOLDER, OUTPUT_PLACEHOLDER)

    @staticmethod
    def target_for(input_path: Path) -> Path:
        """Return the sibling ``.css`` path written for ``input_path``."""

        return input_path.with_suffix(".css")

    def apply(self, input_path: Path) -> Path:
        """Convert ``input_path`` and return the written sibling path.

        Raises:
            ProcessError: If the processor is unavailable or fails.
        """

        output_path = self.target_for(input_path)
        args = _render(self.arguments, input_path=input_path, output_path=output_path)
        executable = self.registry.resolve(self.format)
        if executable is None:
            raise ProcessError(
                f"<{self.format.value} unavailable>",
                args,
                spawn_error=FileNotFoundError(f"No application configured for {self.format.value}"),
            )
        run_tool([str(executable), *args], options=self.options)
        return output_path


def _render(template: tuple[str, ...], *, input_path: Path, output_path: Path | None = None) -> list[str]:
    rendered: list[str] = []
    for part in template:
        if part == INPUT_PLACEHOLDER:
            rendered.append(str(input_path))
        elif part == OUTPUT_PLACEHOLDER and output_path is not None:
            rendered.append(str(output_path))
        else:
            rendered.append(part)
    return rendered


PACK_ARGUMENTS: Final[Mapping[SourceFormat, tuple[str, tuple[str, ...]]]] = {
    SourceFormat.LESS: ("less-compress", ("-x", INPUT_PLACEHOLDER)),
    SourceFormat.SCSS: ("sass-compress", ("-t", "compressed", INPUT_PLACEHOLDER)),
    SourceFormat.SCRIPT: ("js-minify", (INPUT_PLACEHOLDER,)),
}


def build_pack_pipes(
    registry: ToolRegistry,
    options: CommandOptions | None = None,
) -> dict[SourceFormat, TransformPipe]:
    """Return the dispatch table used while packing.

    Plain stylesheets map to :class:`CopyPipe`; every other format maps to the
    :class:`ToolPipe` that invokes its bound processor.
    """

    resolved = options or CommandOptions()
    pipes: dict[SourceFormat, TransformPipe] = {SourceFormat.STYLE: CopyPipe()}
    for fmt, (name, arguments) in PACK_ARGUMENTS.items():
        pipes[fmt] = ToolPipe(name=name, format=fmt, arguments=arguments, registry=registry, options=resolved)
    return pipes


__all__ = [
    "PACK_ARGUMENTS",
    "ConvertStep",
    "CopyPipe",
    "ToolPipe",
    "TransformPipe",
    "build_pack_pipes",
]
