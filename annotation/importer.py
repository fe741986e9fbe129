"""
annotation/importer.py

Versioned import of parsed annotation records.

Two record formats exist:

* legacy (version <= 0.4.0): a flat mapping whose values are either the
  version string or entries with ``type = "span" | "relation"``;
  relations point at sibling keys through ``ids``.
* current (version > 0.4.0): ``spans`` and ``relations`` arrays; relations
  point at span ``id`` values through ``head`` / ``tail``.

Both branches build spans before relations so that relation endpoints can
be resolved to the uuids assigned to their spans.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

import semver

from annotation.colors import get_color
from annotation.items import AbstractAnnotation, RelationAnnotation, SpanAnnotation
from debug_trace import trace
from models import AnnotationType, Direction
from utils import record_text

if TYPE_CHECKING:
    from annotation.container import AnnotationContainer

log = logging.getLogger(__name__)

FORMAT_THRESHOLD = "0.4.0"


# -------------------------------------------------------------------------
# Version dispatch
# -------------------------------------------------------------------------

def parse_version(value: Any) -> Optional[semver.Version]:
    """Parse a declared record version; None if missing or malformed.

    Short forms such as ``"0.5"`` are accepted and padded with zeros, and a
    leading ``v`` or ``=`` is ignored.
    """
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip().lstrip("=vV").strip()
    try:
        return semver.Version.parse(text, optional_minor_and_patch=True)
    except (TypeError, ValueError):
        return None


def record_version(record: Dict[str, Any]) -> Optional[semver.Version]:
    """Return the version a record declares in ``pdfanno`` or ``version``."""
    declared = record.get("pdfanno") or record.get("version")
    return parse_version(declared)


def is_current_format(version: semver.Version, threshold: str = FORMAT_THRESHOLD) -> bool:
    """True when *version* is strictly newer than *threshold*."""
    return version > semver.Version.parse(threshold, optional_minor_and_patch=True)


# -------------------------------------------------------------------------
# Importers
# -------------------------------------------------------------------------

class VersionedImporter(ABC):
    """
    Base class of the importers; builds annotation entities from one
    parsed record.

    Args:
        container: Container the entities are saved into.
        read_only: Partition flag of the batch.
        color_map: Color configuration of the batch.
        record_index: Position of the record in the batch.
        make_id: Identifier generator.
        default_direction: Direction for relations that declare none.
    """

    def __init__(
        self,
        container: "AnnotationContainer",
        read_only: bool,
        color_map: Optional[Dict[str, Any]],
        record_index: int,
        make_id: Callable[[], str],
        default_direction: str = Direction.ONE_WAY,
    ):
        self.container = container
        self.read_only = read_only
        self.color_map = color_map
        self.record_index = record_index
        self.make_id = make_id
        self.default_direction = default_direction
        self.built: List[AbstractAnnotation] = []

    @abstractmethod
    def run(self, record: Dict[str, Any]) -> List[AbstractAnnotation]:
        """Build, save and render the entities of *record*; return them."""

    def get_color(self, anno_type: str, text: str) -> str:
        return get_color(self.color_map, self.record_index, anno_type, text)

    def _publish(self, annotation: AbstractAnnotation) -> None:
        """Save, draw and switch the new entity to view mode."""
        annotation.save()
        annotation.render()
        annotation.enable_view_mode()
        self.built.append(annotation)
        trace(f"built {annotation!r}", "ENTITY")


class LegacyImporter(VersionedImporter):
    """Importer for flat records (version <= 0.4.0).

    Every entity gets a fresh uuid.  Spans are built in a first pass and
    indexed by their record key; relations are built in a second pass and
    resolve ``ids`` through that index, so key order in the record does
    not matter.
    """

    def run(self, record: Dict[str, Any]) -> List[AbstractAnnotation]:
        key_to_uuid: Dict[str, str] = {}
        relations = []

        for key, d in record.items():
            # Skip if the content is not a table, like the version string.
            if not isinstance(d, dict):
                continue

            kind = d.get("type")
            if kind == AnnotationType.SPAN:
                uuid = self.make_id()
                span = SpanAnnotation.from_record(
                    d, uuid, self.read_only, container=self.container,
                )
                span.color = self.get_color(span.type, span.text)
                self._publish(span)
                key_to_uuid[str(key)] = uuid
            elif kind == AnnotationType.RELATION:
                relations.append((key, d))
            else:
                log.warning("Unknown annotation entry %r: %r", key, d)

        for key, d in relations:
            ids = d.get("ids")
            if not isinstance(ids, (list, tuple)):
                ids = []
            rel1 = key_to_uuid.get(str(ids[0])) if len(ids) > 0 else None
            rel2 = key_to_uuid.get(str(ids[1])) if len(ids) > 1 else None
            if rel1 is None or rel2 is None:
                log.warning("Relation %r refers to unknown span(s) %r", key, ids)

            relation = RelationAnnotation.from_record(
                d, self.make_id(), self.read_only, rel1, rel2,
                default_direction=self.default_direction,
                container=self.container,
            )
            relation.color = self.get_color(relation.direction, relation.text)
            self._publish(relation)

        return self.built


class CurrentImporter(VersionedImporter):
    """Importer for structured records (version > 0.4.0).

    The record must already have passed schema validation.  An entry keeps
    its ``id`` as uuid unless that uuid is already registered, in which case
    a fresh one is generated.  Entry colors win over the color map.
    """

    def run(self, record: Dict[str, Any]) -> List[AbstractAnnotation]:
        spans = record.get("spans")
        if not isinstance(spans, list):
            spans = []
        relations = record.get("relations")
        if not isinstance(relations, list):
            relations = []

        # Order is important: relations resolve against span uuids.
        span_uuids: List[Optional[str]] = []
        for obj in spans:
            if not isinstance(obj, dict):
                span_uuids.append(None)
                continue
            uuid = self._assign_uuid(obj)
            color = obj.get("color") or self.get_color(AnnotationType.SPAN, record_text(obj))
            span = SpanAnnotation.from_record(
                obj, uuid, self.read_only, color=color, container=self.container,
            )
            self._publish(span)
            span_uuids.append(uuid)

        for obj in relations:
            if not isinstance(obj, dict):
                continue
            rel1 = self._find_span_uuid(spans, span_uuids, obj.get("head"))
            rel2 = self._find_span_uuid(spans, span_uuids, obj.get("tail"))
            if rel1 is None or rel2 is None:
                log.warning("Relation head=%r tail=%r has an unresolved endpoint",
                            obj.get("head"), obj.get("tail"))

            relation = RelationAnnotation.from_record(
                obj, self._assign_uuid(obj), self.read_only, rel1, rel2,
                default_direction=self.default_direction,
                container=self.container,
            )
            relation.color = obj.get("color") or self.get_color(relation.direction, relation.text)
            self._publish(relation)

        return self.built

    def _assign_uuid(self, obj: Dict[str, Any]) -> str:
        uuid = obj.get("id")
        uuid = str(uuid) if uuid not in (None, "") else self.make_id()
        if self.container.find_by_id(uuid) is not None:
            fresh = self.make_id()
            log.warning("Annotation id %r is already in use; assigned %r", uuid, fresh)
            uuid = fresh
        return uuid

    @staticmethod
    def _find_span_uuid(spans: List[Any], span_uuids: List[Optional[str]], ref: Any) -> Optional[str]:
        """Uuid assigned to the first span whose ``id`` equals *ref*."""
        if ref is None:
            return None
        for obj, uuid in zip(spans, span_uuids):
            if isinstance(obj, dict) and obj.get("id") == ref:
                return uuid
        return None
