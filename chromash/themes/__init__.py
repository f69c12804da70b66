"""Theme state and preset exports."""

from chromash.themes.models import (
    ColorMode,
    ColorSource,
    CurrentTheme,
    Preset,
    SchemeVariant,
    ThemeOptions,
    ThemeSource,
    ThemeValidationError,
    WallpaperSource,
    parse_source,
    sanitize_preset_name,
)
from chromash.themes.registry import PresetRegistry
from chromash.themes.service import ThemeService

__all__ = [
    "ColorMode",
    "ColorSource",
    "CurrentTheme",
    "Preset",
    "PresetRegistry",
    "SchemeVariant",
    "ThemeOptions",
    "ThemeService",
    "ThemeSource",
    "ThemeValidationError",
    "WallpaperSource",
    "parse_source",
    "sanitize_preset_name",
]
