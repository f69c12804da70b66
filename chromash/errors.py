"""Error codes and error handling utilities for Chromash."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import Any


class ErrorCategory(Enum):
    """Coarse error families surfaced to the top-level caller."""

    IO = "io"
    DECODE = "decode"
    PROCESS = "process"
    NOT_FOUND = "not_found"
    GENERAL = "general"


class ErrorCode(Enum):
    """Standardized error codes for Chromash operations."""

    # File system errors
    FILE_ACCESS_DENIED = auto()
    IO_FAILED = auto()

    # Decode / serialization errors
    IMAGE_DECODE_FAILED = auto()
    METADATA_CORRUPT = auto()

    # External process errors
    PROCESS_FAILED = auto()

    # Lookup errors
    FILE_NOT_FOUND = auto()
    WALLPAPER_NOT_FOUND = auto()
    PRESET_NOT_FOUND = auto()
    COMMAND_NOT_FOUND = auto()

    # Invariant violations
    INVALID_COLOR = auto()
    INVALID_PRESET_NAME = auto()
    INVALID_FILE_NAME = auto()
    CONFIG_INVALID = auto()
    OPERATION_FAILED = auto()

    @property
    def category(self) -> ErrorCategory:
        return _CATEGORIES[self]


_CATEGORIES: dict[ErrorCode, ErrorCategory] = {
    ErrorCode.FILE_ACCESS_DENIED: ErrorCategory.IO,
    ErrorCode.IO_FAILED: ErrorCategory.IO,
    ErrorCode.IMAGE_DECODE_FAILED: ErrorCategory.DECODE,
    ErrorCode.METADATA_CORRUPT: ErrorCategory.DECODE,
    ErrorCode.PROCESS_FAILED: ErrorCategory.PROCESS,
    ErrorCode.FILE_NOT_FOUND: ErrorCategory.NOT_FOUND,
    ErrorCode.WALLPAPER_NOT_FOUND: ErrorCategory.NOT_FOUND,
    ErrorCode.PRESET_NOT_FOUND: ErrorCategory.NOT_FOUND,
    ErrorCode.COMMAND_NOT_FOUND: ErrorCategory.NOT_FOUND,
    ErrorCode.INVALID_COLOR: ErrorCategory.GENERAL,
    ErrorCode.INVALID_PRESET_NAME: ErrorCategory.GENERAL,
    ErrorCode.INVALID_FILE_NAME: ErrorCategory.GENERAL,
    ErrorCode.CONFIG_INVALID: ErrorCategory.GENERAL,
    ErrorCode.OPERATION_FAILED: ErrorCategory.GENERAL,
}


ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.FILE_ACCESS_DENIED: "Access denied. Check file and directory permissions.",
    ErrorCode.IO_FAILED: "A filesystem operation failed.",
    ErrorCode.IMAGE_DECODE_FAILED: "The image could not be decoded.",
    ErrorCode.METADATA_CORRUPT: "Stored theme data is corrupt or incomplete.",
    ErrorCode.PROCESS_FAILED: "An external command failed.",
    ErrorCode.FILE_NOT_FOUND: "The file was not found. It may have been moved or deleted.",
    ErrorCode.WALLPAPER_NOT_FOUND: "No wallpaper found.",
    ErrorCode.PRESET_NOT_FOUND: "Preset not found.",
    ErrorCode.COMMAND_NOT_FOUND: "A required external command is not installed.",
    ErrorCode.INVALID_COLOR: "Invalid hex color.",
    ErrorCode.INVALID_PRESET_NAME: "Invalid preset name.",
    ErrorCode.INVALID_FILE_NAME: "Invalid file name.",
    ErrorCode.CONFIG_INVALID: "Configuration is invalid.",
    ErrorCode.OPERATION_FAILED: "Operation failed. See details for more information.",
}

SUGGESTIONS: dict[ErrorCode, str] = {
    ErrorCode.FILE_ACCESS_DENIED: "Check that the config directory is writable.",
    ErrorCode.METADATA_CORRUPT: "Delete the damaged preset and save it again.",
    ErrorCode.WALLPAPER_NOT_FOUND: "Pass a wallpaper path or put images in your wallpaper directory.",
    ErrorCode.PRESET_NOT_FOUND: "Run `chromash presets` to see saved presets.",
    ErrorCode.COMMAND_NOT_FOUND: "Install matugen and hyprpaper, or set the command in settings.yaml.",
    ErrorCode.INVALID_COLOR: "Use 3 or 6 hex digits, e.g. ff8800 or #f80.",
    ErrorCode.INVALID_PRESET_NAME: "Use letters, digits, spaces, '-' or '_'.",
    ErrorCode.CONFIG_INVALID: "Fix or remove settings.yaml in the config directory.",
}


@dataclass
class ChromashError(Exception):
    """Base exception for Chromash with error code and context."""

    code: ErrorCode
    message: str = ""
    path: Path | None = None
    details: dict[str, Any] = field(default_factory=dict)
    suggestion: str = ""

    def __post_init__(self) -> None:
        if not self.message:
            self.message = ERROR_MESSAGES.get(self.code, "An unexpected error occurred.")
        if not self.suggestion:
            self.suggestion = SUGGESTIONS.get(self.code, "")

    @property
    def category(self) -> ErrorCategory:
        return self.code.category

    def __str__(self) -> str:
        parts = [self.message]
        if self.path:
            parts.append(f"\nFile: {self.path}")
        if self.details:
            details_str = " | ".join(f"{k}={v}" for k, v in self.details.items())
            parts.append(f"\nDetails: {details_str}")
        return "".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "code": self.code.name,
            "category": self.category.value,
            "message": self.message,
            "path": str(self.path) if self.path else None,
            "details": self.details,
            "suggestion": self.suggestion,
        }


def classify_exception(exc: Exception, path: Path | None = None) -> ChromashError:
    """Classify a generic exception into a ChromashError with appropriate code."""
    if isinstance(exc, ChromashError):
        return exc
    exc_str = str(exc)

    if isinstance(exc, FileNotFoundError):
        return ChromashError(ErrorCode.FILE_NOT_FOUND, path=path, details={"original": exc_str})
    if isinstance(exc, PermissionError):
        return ChromashError(ErrorCode.FILE_ACCESS_DENIED, path=path, details={"original": exc_str})
    if isinstance(exc, (json.JSONDecodeError, UnicodeDecodeError)):
        return ChromashError(ErrorCode.METADATA_CORRUPT, path=path, details={"original": exc_str})
    if isinstance(exc, OSError):
        return ChromashError(
            ErrorCode.IO_FAILED,
            message=f"IO error: {exc_str}",
            path=path,
            details={"original": exc_str},
        )

    return ChromashError(
        ErrorCode.OPERATION_FAILED,
        message=f"{type(exc).__name__}: {exc}",
        path=path,
        details={"original": exc_str},
    )


def format_error_for_user(error: ChromashError | Exception) -> str:
    """Format an error for display on the terminal."""
    if isinstance(error, ChromashError):
        parts = [error.message]
        if error.path:
            parts.append(f" ({error.path})")
        stderr = error.details.get("stderr")
        if stderr:
            parts.append(f"\n{str(stderr).rstrip()}")
        if error.suggestion and error.suggestion != error.message:
            parts.append(f"\nHint: {error.suggestion}")
        return "".join(parts)

    return format_error_for_user(classify_exception(error))
