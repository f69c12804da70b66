"""Fallback display mode and scheme derived from a color."""

from __future__ import annotations

from chromash.core.color import ColorMode, SchemeVariant

LUMA_THRESHOLD = 128
NEUTRAL_CHROMA_LIMIT = 30
TONAL_SPOT_CHROMA_LIMIT = 60


def perceived_luma(r: int, g: int, b: int) -> int:
    return (299 * r + 587 * g + 114 * b) // 1000


def chroma(r: int, g: int, b: int) -> int:
    return max(r, g, b) - min(r, g, b)


def derive_mode(r: int, g: int, b: int) -> ColorMode:
    """Light for bright colors, dark otherwise."""
    if perceived_luma(r, g, b) > LUMA_THRESHOLD:
        return ColorMode.LIGHT
    return ColorMode.DARK


def derive_scheme(r: int, g: int, b: int) -> SchemeVariant:
    """Pick a scheme from how colorful the input is."""
    value = chroma(r, g, b)
    if value < NEUTRAL_CHROMA_LIMIT:
        return SchemeVariant.NEUTRAL
    if value < TONAL_SPOT_CHROMA_LIMIT:
        return SchemeVariant.TONAL_SPOT
    return SchemeVariant.EXPRESSIVE
