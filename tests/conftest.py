"""Shared fixtures: settings in a temp tree and recording backends."""

from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image

from chromash.config.settings import AppSettings
from chromash.themes.registry import PresetRegistry
from chromash.themes.service import ThemeService


class RecordingPaintBackend:
    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def paint_color(self, hex_color, mode, scheme) -> None:
        self.calls.append(("color", hex_color, mode, scheme))

    def paint_image(self, image_path, mode, scheme) -> None:
        self.calls.append(("image", Path(image_path), mode, scheme))


class RecordingWallpaperBackend:
    def __init__(self) -> None:
        self.calls: list[Path] = []

    def set_wallpaper(self, image_path) -> None:
        self.calls.append(Path(image_path))


class FakeClock:
    def __init__(self, start: int = 1_700_000_000) -> None:
        self.now = start

    def __call__(self) -> float:
        return float(self.now)


@pytest.fixture
def settings(tmp_path) -> AppSettings:
    home = tmp_path / "home"
    home.mkdir()
    result = AppSettings(environ={"HOME": str(home)})
    result.ensure_directories()
    return result


@pytest.fixture
def paint() -> RecordingPaintBackend:
    return RecordingPaintBackend()


@pytest.fixture
def wallpaper() -> RecordingWallpaperBackend:
    return RecordingWallpaperBackend()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def service(settings, paint, wallpaper, clock) -> ThemeService:
    return ThemeService(
        settings,
        PresetRegistry(settings.presets_dir),
        paint,
        wallpaper,
        clock=clock,
    )


def write_image(path: Path, color: tuple[int, int, int], size: tuple[int, int] = (32, 32)) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, color).save(path)
    return path


@pytest.fixture
def make_image():
    return write_image
