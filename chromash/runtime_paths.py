"""Default path helpers resolved from the process environment."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".bmp", ".webp"}


def _env(environ: Mapping[str, str] | None) -> Mapping[str, str]:
    return os.environ if environ is None else environ


def home_dir(environ: Mapping[str, str] | None = None) -> Path:
    """Return $HOME, falling back to the filesystem root like a bare session."""
    value = _env(environ).get("HOME", "").strip()
    return Path(value) if value else Path("/")


def config_dir(environ: Mapping[str, str] | None = None) -> Path:
    """Return the Chromash config directory."""
    env = _env(environ)
    override = env.get("CHROMASH_CONFIG_DIR", "").strip()
    if override:
        return expand_user(override, env)
    return home_dir(env) / ".config" / "chromash"


def wallpaper_dir(environ: Mapping[str, str] | None = None) -> Path:
    """Return the user's wallpaper directory."""
    env = _env(environ)
    pictures = env.get("XDG_PICTURES_DIR", "").strip()
    if pictures:
        return expand_user(pictures, env) / "Wallpapers"
    return home_dir(env) / "Pictures" / "Wallpapers"


def hyprpaper_dir(environ: Mapping[str, str] | None = None) -> Path:
    return home_dir(environ) / ".config" / "hypr" / "hyprpaper"


def hyprpaper_config(environ: Mapping[str, str] | None = None) -> Path:
    return home_dir(environ) / ".config" / "hypr" / "hyprpaper.conf"


def expand_user(path: str | Path, environ: Mapping[str, str] | None = None) -> Path:
    """Expand a leading `~` against $HOME from *environ*."""
    text = str(path)
    if text == "~":
        return home_dir(environ)
    if text.startswith("~/"):
        return home_dir(environ) / text[2:]
    return Path(text)


def is_image_file(path: Path) -> bool:
    """Return True for regular files with a known image extension."""
    return path.suffix.lower() in IMAGE_EXTENSIONS and path.is_file()
