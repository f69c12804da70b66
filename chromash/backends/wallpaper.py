"""Wallpaper display through hyprpaper."""

from __future__ import annotations

import logging
import shutil
import time
from pathlib import Path
from typing import Callable, Protocol, Sequence

from chromash.backends.process import run_command
from chromash.errors import ChromashError, ErrorCode, classify_exception
from chromash.runtime_paths import is_image_file

logger = logging.getLogger(__name__)

CommandRunner = Callable[[str, Sequence[str]], str]

MONITOR_MARKER = "Monitor"

_CONFIG_TEMPLATE = """\
# hyprpaper configuration - managed by chromash
preload = {path}
wallpaper = ,{path}

# If you have specific monitor configurations, add them below:
# wallpaper = HDMI-A-1,{path}
# wallpaper = eDP-1,{path}
"""


class WallpaperBackend(Protocol):
    """Displays an image as the desktop wallpaper."""

    def set_wallpaper(self, image_path: Path) -> None:
        ...


def parse_monitor_names(output: str) -> list[str]:
    """Monitor names from ``hyprctl monitors`` output."""
    names: list[str] = []
    for line in output.splitlines():
        if not line.startswith(MONITOR_MARKER):
            continue
        fields = line.split()
        if len(fields) > 1:
            names.append(fields[1])
    return names


def render_hyprpaper_config(wallpaper_path: Path) -> str:
    return _CONFIG_TEMPLATE.format(path=wallpaper_path)


class HyprpaperBackend:
    """Copies the image into the hyprpaper directory and loads it on every monitor.

    The daemon gives no acknowledgement after ``unload all``, so a fixed
    ``settle_delay`` separates it from ``preload``.
    """

    def __init__(
        self,
        wallpaper_dir: Path,
        config_path: Path,
        *,
        hyprctl: str = "hyprctl",
        settle_delay: float = 0.2,
        runner: CommandRunner = run_command,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._wallpaper_dir = wallpaper_dir
        self._config_path = config_path
        self._hyprctl = hyprctl
        self._settle_delay = settle_delay
        self._run = runner
        self._sleep = sleep

    def set_wallpaper(self, image_path: Path) -> None:
        dest_path = self.install(image_path)
        self.write_config(dest_path)
        self.load(dest_path)

    def install(self, image_path: Path) -> Path:
        """Copy *image_path* into the hyprpaper directory, dropping older copies."""
        if not image_path.name:
            raise ChromashError(ErrorCode.INVALID_FILE_NAME, path=image_path)
        dest_path = self._wallpaper_dir / image_path.name
        try:
            self._wallpaper_dir.mkdir(parents=True, exist_ok=True)
            self._remove_stale(keep=dest_path)
            if not _same_file(image_path, dest_path):
                shutil.copyfile(image_path, dest_path)
        except OSError as exc:
            raise classify_exception(exc, image_path) from exc
        return dest_path

    def write_config(self, wallpaper_path: Path) -> None:
        try:
            self._config_path.parent.mkdir(parents=True, exist_ok=True)
            self._config_path.write_text(render_hyprpaper_config(wallpaper_path), encoding="utf-8")
        except OSError as exc:
            raise classify_exception(exc, self._config_path) from exc

    def load(self, wallpaper_path: Path) -> None:
        """Run the unload / preload / per-monitor set handshake."""
        path_arg = str(wallpaper_path)
        try:
            self._run(self._hyprctl, ["hyprpaper", "unload", "all"])
        except ChromashError as exc:
            logger.warning("hyprpaper unload failed: %s", exc)
        if self._settle_delay > 0:
            self._sleep(self._settle_delay)

        self._run(self._hyprctl, ["hyprpaper", "preload", path_arg])

        monitors = parse_monitor_names(self._run(self._hyprctl, ["monitors"]))
        for monitor in monitors:
            try:
                self._run(self._hyprctl, ["hyprpaper", "wallpaper", f"{monitor},{path_arg}"])
            except ChromashError as exc:
                logger.warning("setting wallpaper on %s failed: %s", monitor, exc)

    def _remove_stale(self, keep: Path) -> None:
        for entry in self._wallpaper_dir.iterdir():
            if entry == keep or not is_image_file(entry):
                continue
            try:
                entry.unlink()
            except OSError as exc:
                logger.warning("could not remove old wallpaper %s: %s", entry, exc)


def _same_file(left: Path, right: Path) -> bool:
    try:
        return right.exists() and left.samefile(right)
    except OSError:
        return False
