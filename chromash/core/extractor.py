"""Dominant accent color extraction.

The image is downsampled so its longest side is at most ``MAX_SAMPLE_EDGE``
pixels, every channel is floored to a 16-level bucket, and each bucket is
scored by chroma, lightness and how often it occurs. The best bucket wins;
this approximates an "accent color" pick without real clustering.
"""

from __future__ import annotations

import io
import math
from collections import Counter
from pathlib import Path
from typing import BinaryIO, Iterable, Mapping, Union

from PIL import Image, UnidentifiedImageError

from chromash.core.color import RGB
from chromash.errors import ChromashError, ErrorCode, classify_exception

ImageInput = Union[bytes, bytearray, str, Path, BinaryIO]

MAX_SAMPLE_EDGE = 128
BUCKET_SIZE = 16
FALLBACK_COLOR: RGB = (128, 128, 128)

CHROMA_SATURATION_POINT = 30
LIGHTNESS_FLOOR = 50
LIGHTNESS_CEILING = 200
OFF_RANGE_LIGHTNESS_WEIGHT = 0.5


def extract_dominant_color(source: ImageInput) -> RGB:
    """Return the best-guess accent color of an image.

    Raises:
        ChromashError: ``IMAGE_DECODE_FAILED`` when the data is not a
            decodable image, ``FILE_NOT_FOUND`` for a missing path.
    """
    image = decode_image(source)
    sample = downscale(image)
    return pick_dominant(quantize_pixels(_iter_pixels(sample)))


def decode_image(source: ImageInput) -> Image.Image:
    """Decode *source* into an RGB image, dropping any alpha channel."""
    path = Path(source) if isinstance(source, (str, Path)) else None
    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(source)
    try:
        with Image.open(source) as opened:
            opened.load()
            return opened.convert("RGB")
    except FileNotFoundError as exc:
        raise classify_exception(exc, path) from exc
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError, SyntaxError) as exc:
        raise ChromashError(
            ErrorCode.IMAGE_DECODE_FAILED,
            message=f"Failed to decode image: {exc}",
            path=path,
        ) from exc


def downscale(image: Image.Image, max_edge: int = MAX_SAMPLE_EDGE) -> Image.Image:
    """Shrink so the longest side is *max_edge*, keeping aspect ratio."""
    width, height = image.size
    if width <= max_edge and height <= max_edge:
        return image
    scale = max_edge / max(width, height)
    size = (_scaled_side(width, scale), _scaled_side(height, scale))
    return image.resize(size, Image.Resampling.BICUBIC)


def _scaled_side(side: int, scale: float) -> int:
    return max(1, int(math.floor(side * scale + 0.5)))


def _iter_pixels(image: Image.Image) -> Iterable[RGB]:
    data = image.tobytes()
    for offset in range(0, len(data), 3):
        yield data[offset], data[offset + 1], data[offset + 2]


def quantize_channel(value: int) -> int:
    return (value // BUCKET_SIZE) * BUCKET_SIZE


def quantize_pixels(pixels: Iterable[RGB]) -> Counter[RGB]:
    """Count pixels per quantized color, in first-seen order."""
    counts: Counter[RGB] = Counter()
    for r, g, b in pixels:
        counts[(quantize_channel(r), quantize_channel(g), quantize_channel(b))] += 1
    return counts


def score_bucket(color: RGB, count: int) -> float:
    r, g, b = color
    chroma = max(r, g, b) - min(r, g, b)
    lightness = (r + g + b) // 3

    if chroma > CHROMA_SATURATION_POINT:
        chroma_score = 1.0
    else:
        chroma_score = chroma / CHROMA_SATURATION_POINT
    if LIGHTNESS_FLOOR < lightness < LIGHTNESS_CEILING:
        lightness_score = 1.0
    else:
        lightness_score = OFF_RANGE_LIGHTNESS_WEIGHT
    frequency_score = math.log(count)

    return chroma_score * lightness_score * frequency_score


def pick_dominant(counts: Mapping[RGB, int]) -> RGB:
    """Highest scoring bucket; the first one seen wins a tie."""
    best_color = FALLBACK_COLOR
    best_score = -math.inf
    for color, count in counts.items():
        if count <= 0:
            continue
        score = score_bucket(color, count)
        if score > best_score:
            best_score = score
            best_color = color
    return best_color
