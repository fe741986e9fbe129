"""
models.py

Data models and constants for the pdfanno annotation core.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


# ----------------------------
# Annotation type constants
# ----------------------------

class AnnotationType:
    """Type tags carried by annotation entities."""
    SPAN = "span"
    RELATION = "relation"


class Direction:
    """Relation direction constants."""
    ONE_WAY = "one-way"
    TWO_WAY = "two-way"
    LINK = "link"

    ALL = (ONE_WAY, TWO_WAY, LINK)


# Keys of a color map that are not annotation types.
RESERVED_COLOR_KEYS = frozenset({"default", "palette"})


# ----------------------------
# Color target → (type, direction) mapping
# ----------------------------

# Color maps and ``change_color`` address annotations either by their type
# ("span", "relation") or, for relations, by direction.  Each key maps to the
# entity type it selects and the direction it pins (None = any direction).
COLOR_TARGET_MAP: Dict[str, Tuple[str, Optional[str]]] = {
    "span":     (AnnotationType.SPAN, None),
    "relation": (AnnotationType.RELATION, None),
    "one-way":  (AnnotationType.RELATION, Direction.ONE_WAY),
    "two-way":  (AnnotationType.RELATION, Direction.TWO_WAY),
    "link":     (AnnotationType.RELATION, Direction.LINK),
}


def resolve_color_target(anno_type: str) -> Optional[Tuple[str, Optional[str]]]:
    """Resolve a color-map key to ``(annotation_type, direction)``.

    Args:
        anno_type: A color-map key such as ``'span'`` or ``'two-way'``.

    Returns:
        The ``(type, direction)`` pair, or None for unknown keys.
    """
    return COLOR_TARGET_MAP.get(anno_type)


def normalize_direction(value: Any, fallback: str = Direction.ONE_WAY) -> str:
    """Return *value* if it is a known direction, else *fallback*."""
    if isinstance(value, str) and value in Direction.ALL:
        return value
    return fallback


# ----------------------------
# Import batch
# ----------------------------

@dataclass
class ImportBatch:
    """A batch of serialized annotation records plus its color configuration.

    ``color_map`` is None when the batch does not carry one; the container
    then falls back to the configured colors.
    """
    annotations: List[str] = field(default_factory=list)
    color_map: Optional[Dict[str, Any]] = None
    extras: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ImportBatch":
        """Create a batch from a mapping with ``annotations`` and ``colorMap`` keys.

        ``color_map`` is accepted as an alias of ``colorMap``.  Unknown keys
        are kept in ``extras``.
        """
        if not isinstance(d, dict):
            return cls()
        annotations = d.get("annotations") or []
        if isinstance(annotations, str):
            annotations = [annotations]
        color_map = d.get("colorMap", d.get("color_map"))
        if not isinstance(color_map, dict):
            color_map = None
        extras = {k: v for k, v in d.items()
                  if k not in ("annotations", "colorMap", "color_map")}
        return cls(annotations=list(annotations), color_map=color_map, extras=extras)
