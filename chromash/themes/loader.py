"""Parsing, validation and writing of persisted theme records."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

from chromash.errors import ChromashError, ErrorCode, classify_exception
from chromash.themes.constants import MAX_METADATA_BYTES, SCHEMA_VERSION
from chromash.themes.models import (
    CurrentTheme,
    Preset,
    ThemeValidationError,
    parse_source,
    preset_name_problem,
)


def load_preset(metadata_file: Path) -> Preset:
    """Load and validate a preset metadata.json file."""
    data = _load_json(metadata_file)
    _check_schema_version(data, metadata_file)
    name = data.get("name")
    if not isinstance(name, str):
        raise ThemeValidationError(f"{metadata_file}: field 'name' must be a string")
    problem = preset_name_problem(name)
    if problem:
        raise ThemeValidationError(f"{metadata_file}: field 'name' {problem}")
    return Preset(
        name=name,
        created=_required_int(data, "created", metadata_file),
        modified=_required_int(data, "modified", metadata_file),
        source=_optional_str(data, "source", metadata_file),
        wallpaper=_optional_str(data, "wallpaper", metadata_file),
    )


def preset_to_dict(preset: Preset) -> dict[str, Any]:
    return {
        "schema_version": SCHEMA_VERSION,
        "name": preset.name,
        "created": preset.created,
        "modified": preset.modified,
        "source": preset.source,
        "wallpaper": preset.wallpaper,
    }


def load_current_theme(path: Path) -> CurrentTheme:
    """Load and validate current_theme.json."""
    data = _load_json(path)
    _check_schema_version(data, path)
    raw_source = data.get("source")
    if not isinstance(raw_source, str):
        raise ThemeValidationError(f"{path}: field 'source' must be a string")
    return CurrentTheme(
        source=parse_source(raw_source),
        timestamp=_required_int(data, "timestamp", path),
        preset_name=_optional_str(data, "preset_name", path),
    )


def current_theme_to_dict(theme: CurrentTheme) -> dict[str, Any]:
    return {
        "schema_version": SCHEMA_VERSION,
        "source": theme.source.encode(),
        "timestamp": theme.timestamp,
        "preset_name": theme.preset_name,
    }


def write_json(path: Path, data: Mapping[str, Any]) -> None:
    """Overwrite *path* with pretty-printed JSON in a single write."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        raise classify_exception(exc, path) from exc


def as_decode_error(exc: ThemeValidationError, path: Path) -> ChromashError:
    return ChromashError(
        ErrorCode.METADATA_CORRUPT,
        message=f"Invalid theme data: {exc}",
        path=path,
    )


def _load_json(path: Path) -> Mapping[str, Any]:
    content = _read_text_limited(path)
    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ThemeValidationError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ThemeValidationError(f"Expected JSON object in {path}")
    return data


def _check_schema_version(data: Mapping[str, Any], path: Path) -> int:
    # Files written before versioning carry no field at all.
    version = data.get("schema_version", 0)
    if not isinstance(version, int) or isinstance(version, bool) or version < 0:
        raise ThemeValidationError(f"{path}: schema_version must be a non-negative integer")
    if version > SCHEMA_VERSION:
        raise ThemeValidationError(
            f"{path}: unsupported schema_version {version}; expected <= {SCHEMA_VERSION}"
        )
    return version


def _required_int(data: Mapping[str, Any], key: str, path: Path) -> int:
    value = data.get(key)
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise ThemeValidationError(f"{path}: field {key!r} must be a non-negative integer")
    return value


def _optional_str(data: Mapping[str, Any], key: str, path: Path) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ThemeValidationError(f"{path}: field {key!r} must be a string or null")
    return value


def _read_text_limited(path: Path) -> str:
    try:
        size = path.stat().st_size
    except OSError as exc:
        raise ThemeValidationError(f"Unable to stat {path}: {exc}") from exc
    if size > MAX_METADATA_BYTES:
        raise ThemeValidationError(f"{path}: file exceeds max size ({MAX_METADATA_BYTES} bytes)")
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ThemeValidationError(f"Unable to read {path}: {exc}") from exc
