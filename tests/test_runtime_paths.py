from __future__ import annotations

from pathlib import Path

from chromash import runtime_paths


def test_home_falls_back_to_root_when_unset() -> None:
    assert runtime_paths.home_dir({}) == Path("/")
    assert runtime_paths.home_dir({"HOME": "  "}) == Path("/")


def test_default_layout_derives_from_home(tmp_path: Path) -> None:
    env = {"HOME": str(tmp_path)}
    assert runtime_paths.config_dir(env) == tmp_path / ".config" / "chromash"
    assert runtime_paths.wallpaper_dir(env) == tmp_path / "Pictures" / "Wallpapers"
    assert runtime_paths.hyprpaper_dir(env) == tmp_path / ".config" / "hypr" / "hyprpaper"
    assert runtime_paths.hyprpaper_config(env) == tmp_path / ".config" / "hypr" / "hyprpaper.conf"


def test_config_dir_override_expands_tilde(tmp_path: Path) -> None:
    env = {"HOME": str(tmp_path), "CHROMASH_CONFIG_DIR": "~/dotfiles/chromash"}
    assert runtime_paths.config_dir(env) == tmp_path / "dotfiles" / "chromash"


def test_pictures_dir_override(tmp_path: Path) -> None:
    env = {"HOME": str(tmp_path), "XDG_PICTURES_DIR": str(tmp_path / "Bilder")}
    assert runtime_paths.wallpaper_dir(env) == tmp_path / "Bilder" / "Wallpapers"


def test_expand_user_only_touches_leading_tilde(tmp_path: Path) -> None:
    env = {"HOME": str(tmp_path)}
    assert runtime_paths.expand_user("~", env) == tmp_path
    assert runtime_paths.expand_user("~/a/b.png", env) == tmp_path / "a" / "b.png"
    assert runtime_paths.expand_user("/abs/~/x", env) == Path("/abs/~/x")
    assert runtime_paths.expand_user("~other/x", env) == Path("~other/x")


def test_process_environment_is_default(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("CHROMASH_CONFIG_DIR", raising=False)
    assert runtime_paths.config_dir() == tmp_path / ".config" / "chromash"


def test_is_image_file(tmp_path: Path) -> None:
    image = tmp_path / "Photo.JPG"
    image.write_bytes(b"")
    text = tmp_path / "notes.txt"
    text.write_text("x", encoding="utf-8")
    folder = tmp_path / "dir.png"
    folder.mkdir()

    assert runtime_paths.is_image_file(image)
    assert not runtime_paths.is_image_file(text)
    assert not runtime_paths.is_image_file(folder)
    assert not runtime_paths.is_image_file(tmp_path / "missing.png")
