"""Color primitives shared by extraction and theming."""

from __future__ import annotations

import re
from enum import Enum

RGB = tuple[int, int, int]

_NAME_STRIP_RE = re.compile(r"[-_\s]")


class ColorMode(Enum):
    """Light/dark display mode handed to the paint tool."""

    LIGHT = "light"
    DARK = "dark"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, text: str) -> ColorMode | None:
        cleaned = (text or "").strip().lower()
        for mode in cls:
            if mode.value == cleaned:
                return mode
        return None


class SchemeVariant(Enum):
    """Material scheme variants understood by the paint tool."""

    CONTENT = "content"
    EXPRESSIVE = "expressive"
    FIDELITY = "fidelity"
    FRUIT_SALAD = "fruit-salad"
    MONOCHROME = "monochrome"
    NEUTRAL = "neutral"
    RAINBOW = "rainbow"
    TONAL_SPOT = "tonal-spot"

    def __str__(self) -> str:
        return self.value

    @property
    def scheme_name(self) -> str:
        """Argument form, e.g. ``scheme-tonal-spot``."""
        return f"scheme-{self.value}"

    @classmethod
    def parse(cls, text: str) -> SchemeVariant | None:
        """Parse ignoring case, '-', '_' and an optional 'scheme' prefix."""
        key = _NAME_STRIP_RE.sub("", (text or "").lower())
        if key.startswith("scheme") and key != "scheme":
            key = key[len("scheme"):]
        return _SCHEME_ALIASES.get(key)


_SCHEME_ALIASES: dict[str, SchemeVariant] = {
    variant.value.replace("-", ""): variant for variant in SchemeVariant
}


def to_hex(color: RGB) -> str:
    return "{:02x}{:02x}{:02x}".format(*color)
