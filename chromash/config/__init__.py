"""Configuration for Chromash."""
