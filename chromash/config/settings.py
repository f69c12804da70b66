"""Application settings backed by an optional settings.yaml."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from chromash import runtime_paths
from chromash.errors import ChromashError, ErrorCode
from chromash.themes.constants import CURRENT_THEME_FILENAME

SETTINGS_FILENAME = "settings.yaml"
DEFAULT_PAINT_COMMAND = "matugen"
DEFAULT_HYPRCTL_COMMAND = "hyprctl"
DEFAULT_SETTLE_DELAY = 0.2

_PATH_KEYS = ("wallpaper_dir", "hyprpaper_dir", "hyprpaper_config")
_ALLOWED_KEYS = set(_PATH_KEYS) | {"paint_command", "hyprctl_command", "settle_delay"}


class AppSettings:
    """Explicit filesystem layout and tool configuration.

    Every component receives an instance instead of reading the environment
    itself, so tests can point the whole tool at a temporary directory.
    """

    def __init__(
        self,
        config_dir: str | Path | None = None,
        *,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._environ: Mapping[str, str] = os.environ if environ is None else environ
        if config_dir is not None:
            self._config_dir = runtime_paths.expand_user(config_dir, self._environ)
        else:
            self._config_dir = runtime_paths.config_dir(self._environ)
        self._values: dict[str, Any] = self._load()

    # -- core layout --

    @property
    def config_dir(self) -> Path:
        return self._config_dir

    @property
    def settings_file(self) -> Path:
        return self._config_dir / SETTINGS_FILENAME

    @property
    def presets_dir(self) -> Path:
        return self._config_dir / "presets"

    @property
    def current_theme_file(self) -> Path:
        return self._config_dir / CURRENT_THEME_FILENAME

    @property
    def log_dir(self) -> Path:
        return self._config_dir / "logs"

    # -- wallpapers --

    @property
    def wallpaper_dir(self) -> Path:
        return self._path_value("wallpaper_dir", runtime_paths.wallpaper_dir(self._environ))

    @wallpaper_dir.setter
    def wallpaper_dir(self, value: str | Path) -> None:
        self._values["wallpaper_dir"] = str(value)

    @property
    def hyprpaper_dir(self) -> Path:
        return self._path_value("hyprpaper_dir", runtime_paths.hyprpaper_dir(self._environ))

    @hyprpaper_dir.setter
    def hyprpaper_dir(self, value: str | Path) -> None:
        self._values["hyprpaper_dir"] = str(value)

    @property
    def hyprpaper_config(self) -> Path:
        return self._path_value("hyprpaper_config", runtime_paths.hyprpaper_config(self._environ))

    @hyprpaper_config.setter
    def hyprpaper_config(self, value: str | Path) -> None:
        self._values["hyprpaper_config"] = str(value)

    @property
    def wallpaper_search_dirs(self) -> list[Path]:
        """Directories searched, in order, when no wallpaper path is given."""
        return [self.hyprpaper_dir, self.wallpaper_dir]

    # -- external tools --

    @property
    def paint_command(self) -> str:
        value = str(self._values.get("paint_command") or "").strip()
        return value or DEFAULT_PAINT_COMMAND

    @paint_command.setter
    def paint_command(self, value: str) -> None:
        self._values["paint_command"] = (value or "").strip() or DEFAULT_PAINT_COMMAND

    @property
    def hyprctl_command(self) -> str:
        value = str(self._values.get("hyprctl_command") or "").strip()
        return value or DEFAULT_HYPRCTL_COMMAND

    @hyprctl_command.setter
    def hyprctl_command(self, value: str) -> None:
        self._values["hyprctl_command"] = (value or "").strip() or DEFAULT_HYPRCTL_COMMAND

    @property
    def settle_delay(self) -> float:
        raw = self._values.get("settle_delay", DEFAULT_SETTLE_DELAY)
        try:
            value = float(raw)
        except (TypeError, ValueError):
            return DEFAULT_SETTLE_DELAY
        return max(0.0, value)

    @settle_delay.setter
    def settle_delay(self, value: float) -> None:
        self._values["settle_delay"] = max(0.0, float(value))

    # -- helpers --

    @property
    def home_dir(self) -> Path:
        return runtime_paths.home_dir(self._environ)

    def expand_path(self, value: str | Path) -> Path:
        return runtime_paths.expand_user(value, self._environ)

    def ensure_directories(self) -> None:
        """Create every directory the tool writes into."""
        for path in (self.config_dir, self.presets_dir, self.wallpaper_dir, self.hyprpaper_dir):
            path.mkdir(parents=True, exist_ok=True)

    def save(self) -> Path:
        """Write explicitly configured values back to settings.yaml."""
        self._config_dir.mkdir(parents=True, exist_ok=True)
        self.settings_file.write_text(
            yaml.safe_dump(dict(sorted(self._values.items())), default_flow_style=False),
            encoding="utf-8",
        )
        return self.settings_file

    def _path_value(self, key: str, default: Path) -> Path:
        raw = self._values.get(key)
        if isinstance(raw, str) and raw.strip():
            return self.expand_path(raw.strip())
        return default

    def _load(self) -> dict[str, Any]:
        path = self.settings_file
        if not path.exists():
            return {}
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as exc:
            raise ChromashError(
                ErrorCode.CONFIG_INVALID, path=path, details={"original": str(exc)}
            ) from exc
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ChromashError(
                ErrorCode.CONFIG_INVALID,
                message="settings.yaml must contain a mapping",
                path=path,
            )
        unknown = sorted(str(key) for key in data if key not in _ALLOWED_KEYS)
        if unknown:
            raise ChromashError(
                ErrorCode.CONFIG_INVALID,
                message=f"Unsupported settings keys: {', '.join(unknown)}",
                path=path,
            )
        return dict(data)
