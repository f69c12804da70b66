"""Theme state models."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Union

from chromash.core.color import RGB, ColorMode, SchemeVariant
from chromash.themes.constants import (
    COLOR_TAG,
    MAX_PRESET_NAME_LEN,
    SOURCE_SEPARATOR,
    WALLPAPER_TAG,
)

__all__ = [
    "RGB",
    "ColorMode",
    "ColorSource",
    "CurrentTheme",
    "Preset",
    "SchemeVariant",
    "ThemeOptions",
    "ThemeSource",
    "ThemeValidationError",
    "WallpaperSource",
    "encode_source",
    "parse_source",
    "preset_name_problem",
    "sanitize_preset_name",
]


class ThemeValidationError(ValueError):
    """Raised when persisted theme data fails validation."""


@dataclass(frozen=True, slots=True)
class ColorSource:
    """Theme painted from a literal hex color (no leading '#')."""

    hex: str

    def encode(self) -> str:
        return f"{COLOR_TAG}{SOURCE_SEPARATOR}{self.hex}"


@dataclass(frozen=True, slots=True)
class WallpaperSource:
    """Theme painted from a wallpaper image."""

    path: Path

    def encode(self) -> str:
        return f"{WALLPAPER_TAG}{SOURCE_SEPARATOR}{self.path}"


ThemeSource = Union[ColorSource, WallpaperSource]


def parse_source(raw: str) -> ThemeSource:
    """Decode the persisted ``<tag>_<value>`` form of a ThemeSource.

    The tag is the text before the first separator, so the value may contain
    anything, including another tag word.
    """
    tag, sep, value = (raw or "").partition(SOURCE_SEPARATOR)
    if not sep or not value:
        raise ThemeValidationError(f"Malformed theme source: {raw!r}")
    if tag == COLOR_TAG:
        return ColorSource(value)
    if tag == WALLPAPER_TAG:
        return WallpaperSource(Path(value))
    raise ThemeValidationError(f"Unknown theme source tag {tag!r} in {raw!r}")


def encode_source(source: ThemeSource) -> str:
    return source.encode()


def sanitize_preset_name(name: str) -> str:
    """Filesystem-safe preset identity derived from a display name."""
    kept = "".join(ch for ch in name if ch.isalnum() or ch in "_- ")
    return kept.replace(" ", "_")


def preset_name_problem(name: str) -> str | None:
    """Why *name* cannot be stored as a preset, or None when it can."""
    if not name.strip():
        return "must not be blank"
    if len(name) > MAX_PRESET_NAME_LEN:
        return f"exceeds max length {MAX_PRESET_NAME_LEN}"
    if not sanitize_preset_name(name):
        return "has no usable characters"
    return None


@dataclass(frozen=True, slots=True)
class CurrentTheme:
    """The single most recently applied theme."""

    source: ThemeSource
    timestamp: int
    preset_name: str | None = None


@dataclass(frozen=True, slots=True)
class Preset:
    """A named, persisted theme source."""

    name: str
    created: int
    modified: int
    source: str | None = None
    wallpaper: str | None = None

    @property
    def identity(self) -> str:
        return sanitize_preset_name(self.name)

    @property
    def theme_source(self) -> ThemeSource | None:
        """Parsed source, or None when absent or unrecognised."""
        if not self.source:
            return None
        try:
            return parse_source(self.source)
        except ThemeValidationError:
            return None


@dataclass(frozen=True, slots=True)
class ThemeOptions:
    """Caller overrides for a single apply operation."""

    mode: ColorMode | None = None
    scheme: SchemeVariant | None = None
    save_preset: bool = False
    preset_name: str | None = None
