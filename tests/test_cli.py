"""Tests for argument parsing, command dispatch and the app entry point."""

from __future__ import annotations

import io
import logging
import logging.handlers
from datetime import datetime

import pytest

from chromash.app import build_service, run_app
from chromash.backends.paint import MatugenBackend
from chromash.backends.wallpaper import HyprpaperBackend
from chromash.cli import build_parser, dispatch, format_timestamp, options_from_args
from chromash.config.settings import AppSettings
from chromash.themes.models import ColorMode, SchemeVariant


@pytest.fixture(autouse=True)
def _reset_chromash_logger():
    yield
    logger = logging.getLogger("chromash")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True


@pytest.fixture
def home(tmp_path, monkeypatch):
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    monkeypatch.setenv("HOME", str(home_dir))
    monkeypatch.delenv("CHROMASH_CONFIG_DIR", raising=False)
    monkeypatch.delenv("XDG_PICTURES_DIR", raising=False)
    return home_dir


def _run(service, *argv: str) -> str:
    out = io.StringIO()
    args = build_parser().parse_args(list(argv))
    assert dispatch(args, service, out) == 0
    return out.getvalue()


class TestParser:
    def test_theme_options(self):
        args = build_parser().parse_args(
            ["color", "ff00ff", "-m", "Dark", "-s", "fruit_salad", "--save-preset", "Night"]
        )
        options = options_from_args(args)
        assert args.hex == "ff00ff"
        assert options.mode is ColorMode.DARK
        assert options.scheme is SchemeVariant.FRUIT_SALAD
        assert options.save_preset is True
        assert options.preset_name == "Night"

    def test_save_preset_flag_without_name(self):
        args = build_parser().parse_args(["wallpaper", "--save-preset"])
        options = options_from_args(args)
        assert args.path is None
        assert options.save_preset is True
        assert options.preset_name is None

    def test_no_theme_options(self):
        options = options_from_args(build_parser().parse_args(["color", "abc"]))
        assert options.mode is None
        assert options.scheme is None
        assert options.save_preset is False

    def test_scheme_accepts_prefixed_name(self):
        args = build_parser().parse_args(["color", "abc", "--scheme", "scheme-tonal-spot"])
        assert args.scheme is SchemeVariant.TONAL_SPOT

    @pytest.mark.parametrize(
        "argv",
        [
            ["color", "abc", "--mode", "dim"],
            ["color", "abc", "--scheme", "vibrant"],
            ["preset", "rename", "x"],
            ["wallpaper-only"],
        ],
    )
    def test_invalid_arguments_exit(self, argv, capsys):
        with pytest.raises(SystemExit) as excinfo:
            build_parser().parse_args(argv)
        assert excinfo.value.code == 2


class TestDispatch:
    def test_color(self, service, paint):
        assert _run(service, "color", "#FF00FF") == "Applied color theme: ff00ff\n"
        assert paint.calls == [("color", "ff00ff", ColorMode.LIGHT, SchemeVariant.TONAL_SPOT)]

    def test_wallpaper(self, service, wallpaper, tmp_path, make_image):
        image = make_image(tmp_path / "wine.png", (200, 40, 90))
        assert _run(service, "wallpaper", str(image)) == "Applied wallpaper and extracted colors\n"
        assert wallpaper.calls == [image]

    def test_wallpaper_only(self, service, paint, tmp_path, make_image):
        image = make_image(tmp_path / "wine.png", (200, 40, 90))
        assert _run(service, "wallpaper-only", str(image)) == f"Set wallpaper: {image}\n"
        assert paint.calls == []
        assert service.current_theme() is None

    def test_extract(self, service, tmp_path, make_image):
        image = make_image(tmp_path / "wine.png", (200, 40, 90))
        assert _run(service, "extract", str(image)) == "#c02050 mode=dark scheme=expressive\n"

    def test_extract_expands_home(self, service, settings, make_image):
        make_image(settings.home_dir / "walls" / "wine.png", (200, 40, 90))
        assert _run(service, "extract", "~/walls/wine.png") == "#c02050 mode=dark scheme=expressive\n"

    def test_presets_empty(self, service):
        assert _run(service, "presets") == "No saved presets found\n"

    def test_presets_listing(self, service, clock):
        service.save_preset("Older", source="color_111111")
        clock.now += 30
        service.save_preset("Newer", source="color_222222")

        output = _run(service, "presets")

        assert output.splitlines() == [
            f"Newer ({format_timestamp(clock.now)})",
            f"Older ({format_timestamp(clock.now - 30)})",
        ]

    def test_preset_save_apply_delete(self, service, paint):
        _run(service, "color", "123456")
        assert _run(service, "preset", "save", "Deep Blue") == "Saved preset: Deep Blue\n"
        assert _run(service, "preset", "apply", "Deep Blue") == "Applied preset: Deep Blue\n"
        assert paint.calls[-1] == ("color", "123456", ColorMode.LIGHT, SchemeVariant.TONAL_SPOT)
        assert _run(service, "preset", "delete", "Deep Blue") == "Deleted preset: Deep Blue\n"
        assert _run(service, "preset", "delete", "Deep Blue") == "Preset not found: Deep Blue\n"

    def test_theme(self, service, clock):
        assert _run(service, "theme") == "No theme info\n"
        _run(service, "color", "abcdef", "--save-preset", "Sky")
        assert _run(service, "theme").splitlines() == [
            "Source: color_abcdef",
            f"Time: {format_timestamp(clock.now)}",
            "Preset: Sky",
        ]


def test_format_timestamp():
    expected = datetime.fromtimestamp(1_700_000_000).strftime("%Y-%m-%d %H:%M:%S")
    assert format_timestamp(1_700_000_000) == expected


class TestRunApp:
    def test_help(self, home, capsys):
        assert run_app(["help"]) == 0
        assert "Dynamic Theme Manager" in capsys.readouterr().out

    def test_no_command_prints_help(self, home, capsys):
        assert run_app([]) == 0
        assert "usage: chromash" in capsys.readouterr().out

    def test_theme_with_config_dir(self, home, tmp_path, capsys):
        config_dir = tmp_path / "cfg"
        assert run_app(["--config-dir", str(config_dir), "theme"]) == 0
        assert capsys.readouterr().out == "No theme info\n"
        assert (config_dir / "presets").is_dir()
        assert (config_dir / "logs" / "chromash.log").exists()

    def test_config_dir_from_environment(self, home, tmp_path, monkeypatch, capsys):
        config_dir = tmp_path / "env-cfg"
        monkeypatch.setenv("CHROMASH_CONFIG_DIR", str(config_dir))
        assert run_app(["presets"]) == 0
        assert capsys.readouterr().out == "No saved presets found\n"
        assert (config_dir / "presets").is_dir()

    def test_default_layout_under_home(self, home, capsys):
        assert run_app(["presets"]) == 0
        assert (home / ".config" / "chromash" / "presets").is_dir()
        assert (home / "Pictures" / "Wallpapers").is_dir()
        assert (home / ".config" / "hypr" / "hyprpaper").is_dir()

    def test_errors_exit_non_zero(self, home, tmp_path, capsys):
        assert run_app(["--config-dir", str(tmp_path / "cfg"), "preset", "apply", "ghost"]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err.startswith("Error: Preset not found: ghost")
        assert "Hint:" in captured.err

    def test_invalid_color_exit_non_zero(self, home, tmp_path, capsys):
        assert run_app(["--config-dir", str(tmp_path / "cfg"), "color", "zzz"]) == 1
        assert "Invalid hex color" in capsys.readouterr().err

    def test_missing_wallpaper_exit_non_zero(self, home, tmp_path, capsys):
        assert run_app(["--config-dir", str(tmp_path / "cfg"), "wallpaper"]) == 1
        assert "No wallpaper found" in capsys.readouterr().err

    def test_errors_are_logged(self, home, tmp_path, capsys):
        config_dir = tmp_path / "cfg"
        run_app(["--config-dir", str(config_dir), "preset", "apply", "ghost"])
        for handler in logging.getLogger("chromash").handlers:
            handler.flush()
        log_text = (config_dir / "logs" / "chromash.log").read_text(encoding="utf-8")
        assert "PRESET_NOT_FOUND" in log_text

    def test_file_log_installed_alongside_other_handlers(self, home, tmp_path, capsys):
        config_dir = tmp_path / "cfg"
        logger = logging.getLogger("chromash")
        logger.addHandler(logging.NullHandler())

        assert run_app(["--config-dir", str(config_dir), "theme"]) == 0

        assert (config_dir / "logs" / "chromash.log").exists()
        assert any(isinstance(h, logging.handlers.RotatingFileHandler) for h in logger.handlers)

    def test_save_preset_name_checked_before_painting(self, home, tmp_path, capsys):
        config_dir = tmp_path / "cfg"
        argv = ["--config-dir", str(config_dir), "color", "ff0000", "--save-preset", "!!!"]
        assert run_app(argv) == 1
        assert "has no usable characters" in capsys.readouterr().err
        assert not (config_dir / "current_theme.json").exists()

    def test_invalid_settings_file(self, home, tmp_path, capsys):
        config_dir = tmp_path / "cfg"
        config_dir.mkdir()
        (config_dir / "settings.yaml").write_text("colour: red\n", encoding="utf-8")
        assert run_app(["--config-dir", str(config_dir), "theme"]) == 1
        assert "Unsupported settings keys: colour" in capsys.readouterr().err


def test_build_service_wires_configured_commands(tmp_path):
    settings = AppSettings(tmp_path / "cfg", environ={"HOME": str(tmp_path)})
    settings.paint_command = "/opt/matugen"
    settings.hyprctl_command = "/opt/hyprctl"

    service = build_service(settings)

    assert service.registry.root == settings.presets_dir
    assert isinstance(service._paint, MatugenBackend)
    assert service._paint._command == "/opt/matugen"
    assert isinstance(service._wallpaper, HyprpaperBackend)
    assert service._wallpaper._hyprctl == "/opt/hyprctl"
