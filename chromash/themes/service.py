"""Theme apply and preset service."""

from __future__ import annotations

import logging
import re
import time
from pathlib import Path
from typing import TYPE_CHECKING, Callable

from chromash.core.derivation import derive_mode, derive_scheme
from chromash.core.extractor import ImageInput, extract_dominant_color
from chromash.errors import ChromashError, ErrorCode
from chromash.runtime_paths import is_image_file
from chromash.themes.loader import (
    as_decode_error,
    current_theme_to_dict,
    load_current_theme,
    write_json,
)
from chromash.themes.models import (
    RGB,
    ColorMode,
    ColorSource,
    CurrentTheme,
    Preset,
    SchemeVariant,
    ThemeOptions,
    ThemeSource,
    ThemeValidationError,
    WallpaperSource,
)
from chromash.themes.registry import PresetRegistry

if TYPE_CHECKING:
    from chromash.backends.paint import PaintBackend
    from chromash.backends.wallpaper import WallpaperBackend
    from chromash.config.settings import AppSettings

logger = logging.getLogger(__name__)

DEFAULT_COLOR_MODE = ColorMode.LIGHT
DEFAULT_COLOR_SCHEME = SchemeVariant.TONAL_SPOT

_HEX_RE = re.compile(r"^(?:[0-9a-f]{3}|[0-9a-f]{6})$")


def normalize_hex(color: str) -> str:
    """Lowercase 6-digit hex without '#'; 3-digit shorthand is expanded."""
    cleaned = (color or "").strip().lower().removeprefix("#")
    if not _HEX_RE.match(cleaned):
        raise ChromashError(
            ErrorCode.INVALID_COLOR,
            message=f"Invalid hex color: {color!r}",
        )
    if len(cleaned) == 3:
        cleaned = "".join(ch * 2 for ch in cleaned)
    return cleaned


class ThemeService:
    """Applies colors, wallpapers and presets, and records the current theme."""

    def __init__(
        self,
        settings: AppSettings,
        registry: PresetRegistry,
        paint: PaintBackend,
        wallpaper: WallpaperBackend,
        *,
        extractor: Callable[[ImageInput], RGB] = extract_dominant_color,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._settings = settings
        self._registry = registry
        self._paint = paint
        self._wallpaper = wallpaper
        self._extract = extractor
        self._clock = clock

    @property
    def registry(self) -> PresetRegistry:
        return self._registry

    # -- current theme --

    def current_theme(self) -> CurrentTheme | None:
        path = self._settings.current_theme_file
        if not path.exists():
            return None
        try:
            return load_current_theme(path)
        except ThemeValidationError as exc:
            raise as_decode_error(exc, path) from exc

    def _record(self, source: ThemeSource, preset_name: str | None) -> CurrentTheme:
        theme = CurrentTheme(source=source, timestamp=self._now(), preset_name=preset_name)
        write_json(self._settings.current_theme_file, current_theme_to_dict(theme))
        logger.info("current theme is now %s", source.encode())
        return theme

    def _record_with_preset(
        self,
        source: ThemeSource,
        options: ThemeOptions,
        wallpaper: Path | None = None,
    ) -> CurrentTheme:
        if options.save_preset and options.preset_name:
            self.save_preset(
                options.preset_name,
                source=source,
                wallpaper=str(wallpaper) if wallpaper is not None else None,
            )
            return self._record(source, options.preset_name)
        if options.save_preset:
            logger.info("preset save requested without a name; skipping preset")
        return self._record(source, None)

    # -- apply --

    def apply_color(self, color: str, options: ThemeOptions | None = None) -> CurrentTheme:
        options = options or ThemeOptions()
        hex_color = normalize_hex(color)
        self._check_preset_name(options)
        mode = options.mode or DEFAULT_COLOR_MODE
        scheme = options.scheme or DEFAULT_COLOR_SCHEME

        self._paint.paint_color(hex_color, mode, scheme)
        return self._record_with_preset(ColorSource(hex_color), options)

    def apply_wallpaper(
        self,
        path: str | Path | None = None,
        extract_colors: bool = True,
        options: ThemeOptions | None = None,
    ) -> CurrentTheme | None:
        """Set a wallpaper and, if *extract_colors*, theme from it.

        Without extraction the current theme record is left untouched and
        ``None`` is returned.
        """
        options = options or ThemeOptions()
        self._check_preset_name(options)
        wallpaper_path = self.select_wallpaper(path)
        self._wallpaper.set_wallpaper(wallpaper_path)
        if not extract_colors:
            return None

        mode, scheme = self._resolve_style(wallpaper_path, options)
        self._paint.paint_image(wallpaper_path, mode, scheme)
        return self._record_with_preset(
            WallpaperSource(wallpaper_path), options, wallpaper=wallpaper_path
        )

    def _check_preset_name(self, options: ThemeOptions) -> None:
        # Reject a bad preset name before anything external runs.
        if options.save_preset and options.preset_name:
            self._registry.preset_dir(options.preset_name)

    def _resolve_style(self, image: Path, options: ThemeOptions) -> tuple[ColorMode, SchemeVariant]:
        if options.mode is not None and options.scheme is not None:
            return options.mode, options.scheme
        r, g, b = self._extract(image)
        logger.info("dominant color of %s is #%02x%02x%02x", image.name, r, g, b)
        mode = options.mode if options.mode is not None else derive_mode(r, g, b)
        scheme = options.scheme if options.scheme is not None else derive_scheme(r, g, b)
        return mode, scheme

    def dominant_color(self, image: str | Path) -> RGB:
        """Extracted accent color of *image*; `~` expands against the configured home."""
        return self._extract(self._settings.expand_path(image))

    def select_wallpaper(self, path: str | Path | None = None) -> Path:
        """Explicit path if it is a file, else the first image in the search dirs."""
        if path:
            candidate = self._settings.expand_path(path)
            if candidate.is_file():
                return candidate
            logger.warning("wallpaper %s is not a file; searching wallpaper directories", candidate)

        for directory in self._settings.wallpaper_search_dirs:
            if not directory.is_dir():
                continue
            for entry in sorted(directory.iterdir()):
                if is_image_file(entry):
                    return entry
        raise ChromashError(ErrorCode.WALLPAPER_NOT_FOUND)

    # -- presets --

    def list_presets(self) -> list[Preset]:
        return self._registry.list_presets()

    def save_preset(
        self,
        name: str,
        source: ThemeSource | str | None = None,
        wallpaper: str | None = None,
    ) -> Preset:
        """Create or replace a preset.

        Both timestamps are reset on every save; an existing preset's
        creation time is not carried over.
        """
        now = self._now()
        encoded = source.encode() if isinstance(source, (ColorSource, WallpaperSource)) else source
        preset = Preset(name=name, created=now, modified=now, source=encoded, wallpaper=wallpaper)
        self._registry.save(preset)
        return preset

    def capture_preset(self, name: str) -> Preset:
        """Save the current theme under *name*."""
        current = self.current_theme()
        if current is None:
            return self.save_preset(name)
        wallpaper = None
        if isinstance(current.source, WallpaperSource):
            wallpaper = str(current.source.path)
        return self.save_preset(name, source=current.source, wallpaper=wallpaper)

    def apply_preset(self, name: str) -> CurrentTheme | None:
        preset = self._registry.get(name)

        match preset.theme_source:
            case ColorSource(hex=hex_color):
                return self.apply_color(hex_color, ThemeOptions())
            case WallpaperSource(path=source_path) if source_path.exists():
                return self.apply_wallpaper(source_path, True, ThemeOptions())

        if preset.wallpaper and Path(preset.wallpaper).exists():
            return self.apply_wallpaper(preset.wallpaper, True, ThemeOptions())

        raise ChromashError(
            ErrorCode.PRESET_NOT_FOUND,
            message=f"Unable to apply preset: {name}",
            details={"reason": "no usable color or existing wallpaper"},
        )

    def delete_preset(self, name: str) -> bool:
        return self._registry.delete(name)

    def _now(self) -> int:
        return int(self._clock())
