"""
annotation/mixins.py

Mixin classes for annotation entities providing container linkage and
render/view-mode handling.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from annotation.renderer import NULL_RENDERER, AnnotationRenderer

if TYPE_CHECKING:
    from annotation.container import AnnotationContainer

log = logging.getLogger(__name__)


class LinkedMixin:
    """
    Mixin that links an entity to the container that owns it.

    The uuid is fixed at construction; the container indexes entities by it.
    """

    def __init__(self, uuid: str, container: Optional["AnnotationContainer"] = None):
        self._uuid = str(uuid)
        self._container = container

    @property
    def uuid(self) -> str:
        return self._uuid

    @property
    def container(self) -> Optional["AnnotationContainer"]:
        return self._container

    def bind(self, container: Optional["AnnotationContainer"]) -> None:
        """Attach this entity to *container* (or detach with None)."""
        self._container = container

    def save(self) -> bool:
        """Register this entity in its container.

        Returns:
            True if the entity is registered afterwards.
        """
        if self._container is None:
            log.warning("Annotation %s has no container; not saved", self._uuid)
            return False
        if self._container.find_by_id(self._uuid) is not self:
            self._container.add(self)
        return True

    def destroy(self) -> None:
        """Remove this entity from its container."""
        if self._container is not None:
            self._container.remove(self)


class RenderMixin:
    """
    Mixin that forwards drawing requests to a renderer.

    Provides:
      - render()
      - enable_view_mode() / disable_view_mode()
      - remove_visual()
    """

    def __init__(self, renderer: Optional[AnnotationRenderer] = None):
        self.renderer = renderer
        self.view_mode = False

    def _renderer(self) -> AnnotationRenderer:
        if self.renderer is not None:
            return self.renderer
        container = getattr(self, "_container", None)
        if container is not None and container.renderer is not None:
            return container.renderer
        return NULL_RENDERER

    def render(self) -> None:
        """Draw this entity with its current color."""
        self._renderer().render(self)

    def enable_view_mode(self) -> None:
        """Switch to view (non-edit) interaction."""
        self.view_mode = True
        self._renderer().set_view_mode(self, True)

    def disable_view_mode(self) -> None:
        """Switch to edit interaction."""
        self.view_mode = False
        self._renderer().set_view_mode(self, False)

    def remove_visual(self) -> None:
        """Drop every visual resource held for this entity."""
        self._renderer().remove(self)
