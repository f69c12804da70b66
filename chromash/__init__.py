"""Chromash: wallpaper-driven theme manager."""

__version__ = "0.1.0"
