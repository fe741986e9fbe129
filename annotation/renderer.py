"""
annotation/renderer.py

Rendering boundary for annotation entities.  Drawing onto a page overlay
is done by the host application; the container only talks to this protocol.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from debug_trace import trace

if TYPE_CHECKING:
    from annotation.items import AbstractAnnotation


class AnnotationRenderer(Protocol):
    """Interface the host overlay implements."""

    def render(self, annotation: "AbstractAnnotation") -> None:
        """Draw (or redraw) *annotation* with its current color."""

    def set_view_mode(self, annotation: "AbstractAnnotation", enabled: bool) -> None:
        """Switch *annotation* between view and edit interaction."""

    def remove(self, annotation: "AbstractAnnotation") -> None:
        """Drop every visual resource held for *annotation*."""


class NullRenderer:
    """Renderer that draws nothing; used when no overlay is attached."""

    def render(self, annotation):
        trace(f"render {annotation.type} {annotation.uuid} color={annotation.color}", "ENTITY")

    def set_view_mode(self, annotation, enabled):
        trace(f"view mode {annotation.uuid} -> {enabled}", "ENTITY")

    def remove(self, annotation):
        trace(f"remove visual {annotation.uuid}", "ENTITY")


NULL_RENDERER = NullRenderer()
