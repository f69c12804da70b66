"""CLI bootstrap."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
import sys
from typing import Sequence

from chromash.backends.paint import MatugenBackend
from chromash.backends.wallpaper import HyprpaperBackend
from chromash.cli import build_parser, dispatch
from chromash.config.settings import AppSettings
from chromash.errors import ChromashError, format_error_for_user
from chromash.themes.registry import PresetRegistry
from chromash.themes.service import ThemeService


def _configure_logger(settings: AppSettings, *, verbose: bool = False) -> logging.Logger:
    logger = logging.getLogger("chromash")
    if any(isinstance(handler, RotatingFileHandler) for handler in logger.handlers):
        return logger

    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    log_dir = settings.log_dir
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_dir / "chromash.log",
        maxBytes=512_000,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    logger.addHandler(handler)
    if verbose:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        logger.addHandler(console)
    logger.propagate = False
    return logger


def build_service(settings: AppSettings) -> ThemeService:
    """Wire the production backends around *settings*."""
    paint = MatugenBackend(settings.paint_command)
    wallpaper = HyprpaperBackend(
        settings.hyprpaper_dir,
        settings.hyprpaper_config,
        hyprctl=settings.hyprctl_command,
        settle_delay=settings.settle_delay,
    )
    return ThemeService(settings, PresetRegistry(settings.presets_dir), paint, wallpaper)


def run_app(argv: Sequence[str] | None = None) -> int:
    """Parse *argv*, run the command and return the exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command in (None, "help"):
        parser.print_help()
        return 0

    logger = logging.getLogger("chromash")
    try:
        settings = AppSettings(args.config_dir)
        settings.ensure_directories()
        logger = _configure_logger(settings, verbose=args.verbose)
        logger.info("command=%s config_dir=%s", args.command, settings.config_dir)
        return dispatch(args, build_service(settings), sys.stdout)
    except ChromashError as exc:
        logger.error("%s failed: %s", args.command, exc.to_dict())
        print(f"Error: {format_error_for_user(exc)}", file=sys.stderr)
        return 1
    except OSError as exc:
        logger.error("%s failed: %s", args.command, exc)
        print(f"Error: {format_error_for_user(exc)}", file=sys.stderr)
        return 1
