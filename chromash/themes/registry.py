"""Preset discovery and persistence."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from chromash.errors import ChromashError, ErrorCode, classify_exception
from chromash.themes.constants import MAX_PRESET_DIR_CANDIDATES, PRESET_METADATA_FILENAME
from chromash.themes.loader import as_decode_error, load_preset, preset_to_dict, write_json
from chromash.themes.models import (
    Preset,
    ThemeValidationError,
    preset_name_problem,
    sanitize_preset_name,
)

logger = logging.getLogger(__name__)


class PresetRegistry:
    """Stores presets as ``<root>/<identity>/metadata.json``."""

    def __init__(self, root: Path) -> None:
        self._root = root
        self._load_errors: list[str] = []

    @property
    def root(self) -> Path:
        return self._root

    def load_errors(self) -> list[str]:
        """Problems found by the most recent listing."""
        return list(self._load_errors)

    def preset_dir(self, name: str) -> Path:
        problem = preset_name_problem(name)
        if problem:
            raise ChromashError(
                ErrorCode.INVALID_PRESET_NAME,
                message=f"Preset name {name!r} {problem}",
            )
        return self._root / sanitize_preset_name(name)

    def list_presets(self) -> list[Preset]:
        """Every readable preset, most recently modified first.

        Unreadable or corrupt entries are skipped and reported through
        :meth:`load_errors`.
        """
        self._load_errors = []
        presets: list[Preset] = []
        for preset_dir in self._candidate_dirs():
            metadata_file = preset_dir / PRESET_METADATA_FILENAME
            if not metadata_file.is_file():
                continue
            try:
                presets.append(load_preset(metadata_file))
            except ThemeValidationError as exc:
                self._load_errors.append(str(exc))
                logger.warning("skipping preset %s: %s", preset_dir.name, exc)
        presets.sort(key=lambda preset: preset.modified, reverse=True)
        return presets

    def find_dir(self, name: str) -> Path | None:
        """Locate a preset directory by identity, then by display name."""
        identity = sanitize_preset_name(name)
        if identity:
            direct = self._root / identity
            if direct.exists():
                return direct
        for preset_dir in self._candidate_dirs():
            metadata_file = preset_dir / PRESET_METADATA_FILENAME
            if not metadata_file.is_file():
                continue
            try:
                preset = load_preset(metadata_file)
            except ThemeValidationError:
                continue
            if preset.name == name:
                return preset_dir
        return None

    def get(self, name: str) -> Preset:
        """Load one preset; a corrupt file here is an error, not a skip."""
        preset_dir = self.find_dir(name)
        if preset_dir is None:
            raise ChromashError(
                ErrorCode.PRESET_NOT_FOUND,
                message=f"Preset not found: {name}",
            )
        metadata_file = preset_dir / PRESET_METADATA_FILENAME
        if not metadata_file.exists():
            raise ChromashError(
                ErrorCode.PRESET_NOT_FOUND,
                message=f"Preset metadata missing for: {name}",
                path=metadata_file,
            )
        try:
            return load_preset(metadata_file)
        except ThemeValidationError as exc:
            raise as_decode_error(exc, metadata_file) from exc

    def save(self, preset: Preset) -> Path:
        """Write *preset*, replacing whatever is stored under its identity."""
        metadata_file = self.preset_dir(preset.name) / PRESET_METADATA_FILENAME
        write_json(metadata_file, preset_to_dict(preset))
        logger.info("saved preset %r to %s", preset.name, metadata_file.parent)
        return metadata_file

    def delete(self, name: str) -> bool:
        preset_dir = self.find_dir(name)
        if preset_dir is None:
            return False
        try:
            shutil.rmtree(preset_dir)
        except OSError as exc:
            raise classify_exception(exc, preset_dir) from exc
        logger.info("deleted preset %r at %s", name, preset_dir)
        return True

    def _candidate_dirs(self) -> list[Path]:
        if not self._root.is_dir():
            return []
        try:
            all_dirs = sorted(path for path in self._root.iterdir() if path.is_dir())
        except OSError as exc:
            self._load_errors.append(f"Failed to list presets in {self._root}: {exc}")
            return []
        if len(all_dirs) > MAX_PRESET_DIR_CANDIDATES:
            self._load_errors.append(
                f"Preset directory limit exceeded in {self._root}; "
                f"only first {MAX_PRESET_DIR_CANDIDATES} folders were scanned."
            )
            all_dirs = all_dirs[:MAX_PRESET_DIR_CANDIDATES]
        return all_dirs
