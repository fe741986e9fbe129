"""
annotation/colors.py

Display color resolution for imported annotations.

A color map has the shape::

    {
        "default": "#FF0000",
        "span": {"Person": "#00FF00"},
        "one-way": {"cites": "#0000FF"},
        "palette": ["#a6cee3", ...],      # optional
    }

Lookups go ``color_map[type][text]`` first, then ``color_map["default"]``.
Maps without a default fall back to a palette picked by batch index.
"""

from __future__ import annotations

import random
import threading
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from PyQt6.QtGui import QColor

from utils import hex_to_qcolor, qcolor_to_hex

PALETTE_PASTEL = [
    "#8dd3c7", "#ffffb3", "#bebada", "#fb8072", "#80b1d3", "#fdb462",
    "#b3de69", "#fccde5", "#d9d9d9", "#bc80bd", "#ccebc5", "#ffed6f",
]

PALETTE_NORMAL = [
    "#a6cee3", "#1f78b4", "#b2df8a", "#33a02c", "#fb9a99", "#e31a1c",
    "#fdbf6f", "#ff7f00", "#cab2d6", "#6a3d9a", "#ffff99", "#b15928",
]

# Squared RGB distance under which two colors count as the same
_SIMILARITY_THRESHOLD = 768
_MAX_ATTEMPTS = 1000


def get_color(color_map: Optional[Dict[str, Any]], index: int, anno_type: str, text: str) -> str:
    """Resolve the display color for an annotation.

    Args:
        color_map: Color configuration of the import batch.
        index: Position of the record in the batch; selects the palette entry
            when the map has no default.
        anno_type: ``'span'`` or a relation direction.
        text: The annotation's display text.

    Returns:
        The configured color string.
    """
    color_map = color_map or {}
    by_type = color_map.get(anno_type)
    if isinstance(by_type, dict) and by_type.get(text):
        return by_type[text]
    default = color_map.get("default")
    if default:
        return default
    palette = color_map.get("palette")
    if not isinstance(palette, list) or not palette:
        palette = PALETTE_NORMAL
    return palette_color(index, palette)


def palette_color(index: int, palette: Sequence[str] = PALETTE_NORMAL) -> str:
    """Return the palette entry for *index*.

    Past the end of the palette, pastel colors that differ from every
    palette entry (and from each other) are generated deterministically.
    Generated colors are cached per palette.  Once no further differing
    color can be found, the extended palette is cycled.
    """
    index = max(0, int(index))
    if index < len(palette):
        return palette[index]
    colors = _extended_palette(tuple(palette), index + 1)
    return colors[index % len(colors)]


class _GeneratedPalette:
    """A palette plus the pastel colors generated after it so far."""

    def __init__(self, palette: Tuple[str, ...]):
        self.colors: List[str] = list(palette)
        self.taken: List[QColor] = [hex_to_qcolor(c, QColor(0, 0, 0)) for c in palette]
        self.rng = random.Random(0)
        self.exhausted = False

    def extend_to(self, length: int) -> None:
        while len(self.colors) < length and not self.exhausted:
            c = generate_differing_pastel_color(self.taken, self.rng)
            if any(too_similar(c, d) for d in self.taken):
                self.exhausted = True
                break
            self.taken.append(c)
            self.colors.append(encode_rgb(c))


_generated: Dict[Tuple[str, ...], _GeneratedPalette] = {}
_generated_lock = threading.Lock()


def _extended_palette(palette: Tuple[str, ...], length: int) -> List[str]:
    with _generated_lock:
        entry = _generated.get(palette)
        if entry is None:
            entry = _generated[palette] = _GeneratedPalette(palette)
        entry.extend_to(length)
        return entry.colors or [encode_rgb(QColor(255, 255, 255))]


def too_similar(c: QColor, b: QColor) -> bool:
    """True when two colors are within the similarity threshold."""
    distance = ((c.red() - b.red()) ** 2
                + (c.green() - b.green()) ** 2
                + (c.blue() - b.blue()) ** 2)
    return distance < _SIMILARITY_THRESHOLD


def generate_pastel_color(mix: Optional[QColor], rng: random.Random) -> QColor:
    """Random color, averaged with *mix* when given (white gives pastels)."""
    red = rng.randrange(256)
    green = rng.randrange(256)
    blue = rng.randrange(256)

    if mix is not None:
        red = (red + mix.red()) // 2
        green = (green + mix.green()) // 2
        blue = (blue + mix.blue()) // 2

    return QColor(red, green, blue)


def generate_differing_pastel_color(taken: Iterable[QColor], rng: Optional[random.Random] = None) -> QColor:
    """Generate a pastel color that is not too similar to any in *taken*.

    Without *rng* the generator is seeded identically on every call, so
    results are reproducible.  After 1000 attempts the last candidate is
    returned, even though it is too similar.
    """
    taken = list(taken)
    seed_color = QColor(255, 255, 255)
    rng = rng or random.Random(0)

    c = seed_color
    for _ in range(_MAX_ATTEMPTS):
        c = generate_pastel_color(seed_color, rng)
        if not any(too_similar(c, d) for d in taken):
            return c
    return c


def encode_rgb(color: QColor) -> str:
    """Encode *color* as an upper-case ``#RRGGBB`` string."""
    if color is None:
        raise ValueError("color must not be None")
    return qcolor_to_hex(color)
