"""Theme painting through an external palette generator."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Protocol, Sequence

from chromash.backends.process import run_command
from chromash.core.color import ColorMode, SchemeVariant

CommandRunner = Callable[[str, Sequence[str]], str]


class PaintBackend(Protocol):
    """Generates and installs a system theme."""

    def paint_color(self, hex_color: str, mode: ColorMode, scheme: SchemeVariant) -> None:
        ...

    def paint_image(self, image_path: Path, mode: ColorMode, scheme: SchemeVariant) -> None:
        ...


class MatugenBackend:
    """Paints via ``matugen``; a non-zero exit raises ChromashError."""

    def __init__(self, command: str = "matugen", runner: CommandRunner = run_command) -> None:
        self._command = command
        self._run = runner

    def paint_color(self, hex_color: str, mode: ColorMode, scheme: SchemeVariant) -> None:
        self._run(self._command, [*self._style_args(mode, scheme), "color", "hex", f"#{hex_color}"])

    def paint_image(self, image_path: Path, mode: ColorMode, scheme: SchemeVariant) -> None:
        self._run(self._command, [*self._style_args(mode, scheme), "image", str(image_path)])

    @staticmethod
    def _style_args(mode: ColorMode, scheme: SchemeVariant) -> list[str]:
        return ["-m", mode.value, "-t", scheme.scheme_name]
