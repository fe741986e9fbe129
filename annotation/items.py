"""
annotation/items.py

Annotation entities: spans anchored to a text region and relations
connecting two spans.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

from annotation.mixins import LinkedMixin, RenderMixin
from annotation.renderer import AnnotationRenderer
from models import AnnotationType, Direction, normalize_direction
from utils import record_text

if TYPE_CHECKING:
    from annotation.container import AnnotationContainer


# Record fields consumed by the constructors; everything else goes to extras.
_SPAN_FIELDS = frozenset({"id", "uuid", "type", "text", "color", "readOnly"})
_RELATION_FIELDS = _SPAN_FIELDS | {"dir", "direction", "head", "tail", "ids", "rel1", "rel2"}


class AbstractAnnotation(RenderMixin, LinkedMixin):
    """
    Base class of the annotation variants.

    ``read_only`` is fixed at construction.  Equality and hashing are by
    identity, so containers hold entities as a set would.
    """

    type: str = ""

    def __init__(
        self,
        uuid: str,
        text: str = "",
        color: Optional[str] = None,
        read_only: bool = False,
        extras: Optional[Dict[str, Any]] = None,
        container: Optional["AnnotationContainer"] = None,
        renderer: Optional[AnnotationRenderer] = None,
    ):
        LinkedMixin.__init__(self, uuid, container)
        RenderMixin.__init__(self, renderer)
        self.text = text
        self.color = color
        self._read_only = bool(read_only)
        self.selected = False
        self.extras: Dict[str, Any] = dict(extras or {})

    @property
    def read_only(self) -> bool:
        return self._read_only

    def destroy(self) -> None:
        """Drop the visuals, then remove this entity from its container."""
        self.remove_visual()
        LinkedMixin.destroy(self)

    @property
    def direction(self) -> Optional[str]:
        return None

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(uuid={self.uuid!r}, text={self.text!r}, "
                f"color={self.color!r}, read_only={self.read_only})")


class SpanAnnotation(AbstractAnnotation):
    """An annotation anchored to a single text region."""

    type = AnnotationType.SPAN

    @classmethod
    def from_record(
        cls,
        rec: Dict[str, Any],
        uuid: str,
        read_only: bool,
        color: Optional[str] = None,
        container: Optional["AnnotationContainer"] = None,
    ) -> "SpanAnnotation":
        """Build a span from a parsed record entry.

        Args:
            rec: The span entry (``text``/``label``, ``page``, ``textrange``, ...).
            uuid: Identifier assigned by the importer.
            read_only: Partition flag of the import batch.
            color: Resolved display color.
            container: Container the span will be saved into.
        """
        extras = {k: v for k, v in rec.items() if k not in _SPAN_FIELDS}
        return cls(
            uuid,
            text=record_text(rec),
            color=color,
            read_only=read_only,
            extras=extras,
            container=container,
        )


class RelationAnnotation(AbstractAnnotation):
    """
    An annotation connecting two spans.

    ``rel1`` and ``rel2`` are span uuids used as lookup keys, not owned
    references; either may be None when the endpoint could not be resolved.
    """

    type = AnnotationType.RELATION

    def __init__(
        self,
        uuid: str,
        direction: str = Direction.ONE_WAY,
        rel1: Optional[str] = None,
        rel2: Optional[str] = None,
        **kwargs: Any,
    ):
        super().__init__(uuid, **kwargs)
        self._direction = normalize_direction(direction)
        self.rel1 = rel1
        self.rel2 = rel2

    @property
    def direction(self) -> str:
        return self._direction

    @property
    def span1(self) -> Optional[AbstractAnnotation]:
        """The head span, if it is still registered."""
        return self._resolve(self.rel1)

    @property
    def span2(self) -> Optional[AbstractAnnotation]:
        """The tail span, if it is still registered."""
        return self._resolve(self.rel2)

    def _resolve(self, ref: Optional[str]) -> Optional[AbstractAnnotation]:
        if ref is None or self._container is None:
            return None
        found = self._container.find_by_id(ref)
        return found if isinstance(found, SpanAnnotation) else None

    @property
    def is_dangling(self) -> bool:
        return self.rel1 is None or self.rel2 is None

    @classmethod
    def from_record(
        cls,
        rec: Dict[str, Any],
        uuid: str,
        read_only: bool,
        rel1: Optional[str],
        rel2: Optional[str],
        color: Optional[str] = None,
        default_direction: str = Direction.ONE_WAY,
        container: Optional["AnnotationContainer"] = None,
    ) -> "RelationAnnotation":
        """Build a relation from a parsed record entry.

        The direction is read from ``dir`` (or ``direction``) and falls back
        to *default_direction*.
        """
        extras = {k: v for k, v in rec.items() if k not in _RELATION_FIELDS}
        direction = normalize_direction(rec.get("dir", rec.get("direction")), default_direction)
        return cls(
            uuid,
            direction=direction,
            rel1=rel1,
            rel2=rel2,
            text=record_text(rec),
            color=color,
            read_only=read_only,
            extras=extras,
            container=container,
        )

    def __repr__(self) -> str:
        return (f"RelationAnnotation(uuid={self.uuid!r}, direction={self.direction!r}, "
                f"rel1={self.rel1!r}, rel2={self.rel2!r}, text={self.text!r}, "
                f"color={self.color!r}, read_only={self.read_only})")
