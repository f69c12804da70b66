"""Theme state constants."""

from __future__ import annotations

SCHEMA_VERSION = 1

CURRENT_THEME_FILENAME = "current_theme.json"
PRESET_METADATA_FILENAME = "metadata.json"

COLOR_TAG = "color"
WALLPAPER_TAG = "wallpaper"
SOURCE_SEPARATOR = "_"

MAX_METADATA_BYTES = 64 * 1024
MAX_PRESET_DIR_CANDIDATES = 1024

MAX_PRESET_NAME_LEN = 120
