"""Command-line parsing and command handlers."""

from __future__ import annotations

import argparse
from datetime import datetime
from typing import TextIO

from chromash import __version__
from chromash.core.color import ColorMode, SchemeVariant, to_hex
from chromash.core.derivation import derive_mode, derive_scheme
from chromash.themes.models import ThemeOptions
from chromash.themes.service import ThemeService

SCHEME_CHOICES = ", ".join(variant.value for variant in SchemeVariant)

_EPILOG = f"""\
commands:
  color <hex> [--mode light|dark] [--scheme type] [--save-preset name]
  wallpaper [path] [options]     set wallpaper and extract colors
  wallpaper-only <path>          set wallpaper only
  extract <image>                print the dominant color of an image
  presets                        list presets
  preset apply|save|delete <name>
  theme                          show current theme
  help                           show this help

scheme types:
  {SCHEME_CHOICES}
"""


def _mode_arg(value: str) -> ColorMode:
    mode = ColorMode.parse(value)
    if mode is None:
        raise argparse.ArgumentTypeError(f"invalid mode {value!r} (expected light or dark)")
    return mode


def _scheme_arg(value: str) -> SchemeVariant:
    scheme = SchemeVariant.parse(value)
    if scheme is None:
        raise argparse.ArgumentTypeError(f"invalid scheme {value!r} (expected one of: {SCHEME_CHOICES})")
    return scheme


def _add_theme_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-m", "--mode", type=_mode_arg, help="light or dark")
    parser.add_argument("-s", "--scheme", type=_scheme_arg, help="scheme variant")
    parser.add_argument(
        "--save-preset",
        nargs="?",
        const="",
        default=None,
        metavar="NAME",
        help="also save the result as a preset",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chromash",
        description="Chromash - Dynamic Theme Manager",
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config-dir", help="override the config directory")
    parser.add_argument("-v", "--verbose", action="store_true", help="log debug output to stderr")
    sub = parser.add_subparsers(dest="command")

    color = sub.add_parser("color", help="apply a theme from a hex color")
    color.add_argument("hex")
    _add_theme_options(color)

    wallpaper = sub.add_parser("wallpaper", help="set wallpaper and extract colors")
    wallpaper.add_argument("path", nargs="?")
    _add_theme_options(wallpaper)

    wallpaper_only = sub.add_parser("wallpaper-only", help="set wallpaper only")
    wallpaper_only.add_argument("path")

    extract = sub.add_parser("extract", help="print the dominant color of an image")
    extract.add_argument("image")

    sub.add_parser("presets", help="list presets")

    preset = sub.add_parser("preset", help="apply, save or delete a preset")
    preset.add_argument("action", choices=("apply", "save", "delete"))
    preset.add_argument("name")

    sub.add_parser("theme", help="show current theme")
    sub.add_parser("help", help="show help")
    return parser


def options_from_args(args: argparse.Namespace) -> ThemeOptions:
    save_preset = args.save_preset is not None
    return ThemeOptions(
        mode=args.mode,
        scheme=args.scheme,
        save_preset=save_preset,
        preset_name=args.save_preset or None,
    )


def format_timestamp(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp).strftime("%Y-%m-%d %H:%M:%S")


def dispatch(args: argparse.Namespace, service: ThemeService, out: TextIO) -> int:
    """Run one parsed command against *service*."""
    command = args.command

    if command == "color":
        theme = service.apply_color(args.hex, options_from_args(args))
        print(f"Applied color theme: {theme.source.hex}", file=out)
    elif command == "wallpaper":
        service.apply_wallpaper(args.path, True, options_from_args(args))
        print("Applied wallpaper and extracted colors", file=out)
    elif command == "wallpaper-only":
        service.apply_wallpaper(args.path, False, ThemeOptions())
        print(f"Set wallpaper: {args.path}", file=out)
    elif command == "extract":
        color = service.dominant_color(args.image)
        print(
            f"#{to_hex(color)} mode={derive_mode(*color)} scheme={derive_scheme(*color)}",
            file=out,
        )
    elif command == "presets":
        presets = service.list_presets()
        if not presets:
            print("No saved presets found", file=out)
        for preset in presets:
            print(f"{preset.name} ({format_timestamp(preset.modified)})", file=out)
    elif command == "preset":
        return _dispatch_preset(args.action, args.name, service, out)
    elif command == "theme":
        current = service.current_theme()
        if current is None:
            print("No theme info", file=out)
        else:
            print(f"Source: {current.source.encode()}", file=out)
            print(f"Time: {format_timestamp(current.timestamp)}", file=out)
            if current.preset_name:
                print(f"Preset: {current.preset_name}", file=out)
    else:
        raise ValueError(f"Unknown command: {command}")
    return 0


def _dispatch_preset(action: str, name: str, service: ThemeService, out: TextIO) -> int:
    if action == "apply":
        service.apply_preset(name)
        print(f"Applied preset: {name}", file=out)
    elif action == "save":
        service.capture_preset(name)
        print(f"Saved preset: {name}", file=out)
    elif service.delete_preset(name):
        print(f"Deleted preset: {name}", file=out)
    else:
        print(f"Preset not found: {name}", file=out)
    return 0
