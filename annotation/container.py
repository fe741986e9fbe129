"""
annotation/container.py

Registry of the live annotation entities of a document, with bulk import
of serialized annotation records.
"""

from __future__ import annotations

import logging
import threading
import uuid as uuidlib
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Union

from PyQt6.QtCore import QObject, pyqtSignal

from annotation.errors import AnnotationSchemaError, DuplicateAnnotationError
from annotation.importer import CurrentImporter, LegacyImporter, is_current_format, record_version
from annotation.items import AbstractAnnotation, RelationAnnotation, SpanAnnotation
from annotation.renderer import AnnotationRenderer
from debug_trace import trace, trace_call
from models import AnnotationType, ImportBatch, RESERVED_COLOR_KEYS, resolve_color_target
from schemas import get_validator, validate_document
from settings import AppSettings, get_settings
from utils import from_toml_string

log = logging.getLogger(__name__)


def _default_make_id() -> str:
    return uuidlib.uuid4().hex


class AnnotationContainer(QObject):
    """
    Owns the set of live annotations.

    Entities are indexed by uuid, so at most one entity per uuid can be
    registered.  Every mutation emits ``annotationUpdated``.  Mutations and
    imports are serialized by a re-entrant lock.

    Signals:
        annotationUpdated(): Emitted after add, remove and color changes
        importFinished(int): Emitted with the number of entities built
        importFailed(list): Emitted with the validator's messages
    """

    annotationUpdated = pyqtSignal()
    importFinished = pyqtSignal(int)
    importFailed = pyqtSignal(list)

    def __init__(
        self,
        renderer: Optional[AnnotationRenderer] = None,
        make_id: Optional[Callable[[], str]] = None,
        parser: Optional[Callable[[str], Optional[Dict[str, Any]]]] = None,
        settings: Optional[AppSettings] = None,
        parent: Optional[QObject] = None,
    ):
        """
        Args:
            renderer: Overlay that draws the entities; None draws nothing
            make_id: Generator for fresh annotation uuids
            parser: Turns a serialized record into a dict (None on failure)
            settings: Application settings; defaults to the global settings
            parent: Qt parent object
        """
        super().__init__(parent)
        self.renderer = renderer
        self.make_id = make_id or _default_make_id
        self.parser = parser or from_toml_string
        self.settings = settings if settings is not None else get_settings().settings
        self._annotations: Dict[str, AbstractAnnotation] = {}
        self._lock = threading.RLock()
        self.validator = get_validator()

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    def add(self, annotation: AbstractAnnotation) -> None:
        """Add an annotation to the container.

        Adding an entity that is already registered changes nothing but
        still notifies.

        Raises:
            DuplicateAnnotationError: another entity already uses the uuid.
        """
        with self._lock:
            existing = self._annotations.get(annotation.uuid)
            if existing is not None and existing is not annotation:
                raise DuplicateAnnotationError(annotation.uuid)
            self._annotations[annotation.uuid] = annotation
            if annotation.container is not self:
                annotation.bind(self)
            trace(f"add {annotation.type} {annotation.uuid}", "CONTAINER")
        self.annotationUpdated.emit()

    def remove(self, annotation: AbstractAnnotation) -> None:
        """Remove the annotation from the container, if present."""
        with self._lock:
            if self._annotations.get(annotation.uuid) is annotation:
                del self._annotations[annotation.uuid]
                trace(f"remove {annotation.type} {annotation.uuid}", "CONTAINER")
        self.annotationUpdated.emit()

    def destroy(self) -> None:
        """Destroy every annotation and empty the container."""
        log.debug("AnnotationContainer.destroy: %d annotations", len(self._annotations))
        with self._lock:
            for a in self.get_all_annotations():
                a.destroy()
            self._annotations = {}

    def get_all_annotations(self) -> List[AbstractAnnotation]:
        """Snapshot of all annotations."""
        with self._lock:
            return list(self._annotations.values())

    def get_selected_annotations(self) -> List[AbstractAnnotation]:
        """Annotations the user has selected."""
        return [a for a in self.get_all_annotations() if a.selected]

    def get_annotations_by_type(self, anno_type: str) -> List[AbstractAnnotation]:
        return [a for a in self.get_all_annotations() if a.type == anno_type]

    def get_primary_annotations(self) -> List[AbstractAnnotation]:
        return [a for a in self.get_all_annotations() if not a.read_only]

    def get_reference_annotations(self) -> List[AbstractAnnotation]:
        return [a for a in self.get_all_annotations() if a.read_only]

    def get_relations_for(self, span: AbstractAnnotation) -> List[RelationAnnotation]:
        """Relations whose head or tail is *span*."""
        return [
            a for a in self.get_all_annotations()
            if isinstance(a, RelationAnnotation) and span.uuid in (a.rel1, a.rel2)
        ]

    def find_by_id(self, uuid: Any) -> Optional[AbstractAnnotation]:
        """Find an annotation by its uuid (compared as a string)."""
        with self._lock:
            return self._annotations.get(str(uuid))

    def __len__(self) -> int:
        return len(self._annotations)

    def __iter__(self) -> Iterator[AbstractAnnotation]:
        return iter(self.get_all_annotations())

    def __contains__(self, annotation: object) -> bool:
        uuid = getattr(annotation, "uuid", None)
        return uuid is not None and self._annotations.get(uuid) is annotation

    # ------------------------------------------------------------------
    # Colors
    # ------------------------------------------------------------------

    def change_color(
        self,
        text: Optional[str] = None,
        color: Optional[str] = None,
        uuid: Optional[Any] = None,
        anno_type: Optional[str] = None,
        direction: Optional[str] = None,
    ) -> List[AbstractAnnotation]:
        """Change the color of one annotation, or of every annotation with the same text.

        An explicit *uuid* wins and ignores *text* and *anno_type*.
        Otherwise *anno_type* selects the entities: ``'span'`` for spans,
        ``'relation'`` for relations (restricted to *direction* when given),
        or a direction name (``'one-way'``, ``'two-way'``, ``'link'``) for
        relations with that direction.

        Returns:
            The annotations whose color changed.
        """
        log.debug("change_color: text=%r color=%r uuid=%r type=%r", text, color, uuid, anno_type)
        if uuid:
            a = self.find_by_id(uuid)
            matched = [a] if a is not None else []
        else:
            matched = [
                a for a in self.get_all_annotations()
                if a.text == text and self._matches_color_target(a, anno_type, direction)
            ]

        for a in matched:
            a.color = color
            a.render()
            a.enable_view_mode()
        if matched:
            self.annotationUpdated.emit()
        return matched

    @staticmethod
    def _matches_color_target(a: AbstractAnnotation, anno_type: Optional[str],
                              direction: Optional[str]) -> bool:
        target = resolve_color_target(anno_type) if anno_type else None
        if target is None:
            return False
        kind, pinned = target
        if kind == AnnotationType.SPAN:
            return isinstance(a, SpanAnnotation)
        if not isinstance(a, RelationAnnotation):
            return False
        wanted = pinned if pinned is not None else direction
        return wanted is None or a.direction == wanted

    def set_color(self, color_map: Mapping[str, Any]) -> None:
        """Apply every ``color_map[type][text]`` entry to the matching annotations."""
        log.debug("set_color: %r", color_map)
        for anno_type, table in color_map.items():
            if anno_type in RESERVED_COLOR_KEYS or not isinstance(table, Mapping):
                continue
            for text, color in table.items():
                self.change_color(text=text, color=color, anno_type=anno_type)

    # ------------------------------------------------------------------
    # Import
    # ------------------------------------------------------------------

    @trace_call("IMPORT")
    def import_annotations(self, data: Union[ImportBatch, Mapping[str, Any]], is_primary: bool) -> bool:
        """Import a batch of serialized annotation records.

        Existing annotations of the same partition (primary or read-only
        reference) are destroyed first; the other partition is untouched.
        Records that cannot be parsed, or that declare no usable version,
        are skipped.

        Args:
            data: An :class:`ImportBatch` or a mapping with ``annotations``
                (serialized records) and ``colorMap``.
            is_primary: True for the editable set, False for a reference set.

        Returns:
            True once every record has been processed.

        Raises:
            AnnotationSchemaError: a structured record failed validation.
                Records before it stay imported; later records are not read.
        """
        batch = data if isinstance(data, ImportBatch) else ImportBatch.from_dict(dict(data))
        read_only = not is_primary
        color_map = batch.color_map if batch.color_map is not None else self.settings.colors.to_color_map()
        threshold = self.settings.importer.schema_threshold
        default_direction = self.settings.importer.default_direction

        with self._lock:
            trace(f"import {len(batch.annotations)} record(s), read_only={read_only}", "IMPORT")

            # Delete old ones.
            for a in self.get_all_annotations():
                if a.read_only == read_only:
                    a.destroy()

            built = 0
            for i, serialized in enumerate(batch.annotations):
                record = self.parser(serialized)
                if not isinstance(record, dict):
                    trace(f"record {i}: not parsed, skipped", "IMPORT")
                    continue

                version = record_version(record)
                if version is None:
                    log.warning("Record %d declares no valid version; skipped", i)
                    continue

                if is_current_format(version, threshold):
                    importer_cls = CurrentImporter
                    ok, errors = validate_document(record, self.validator)
                    if not ok:
                        log.error("Record %d failed schema validation: %s", i, errors)
                        self.importFailed.emit(errors)
                        raise AnnotationSchemaError(errors, record_index=i)
                else:
                    importer_cls = LegacyImporter

                trace(f"record {i}: version {version} -> {importer_cls.__name__}", "IMPORT")
                importer = importer_cls(
                    self, read_only, color_map, i, self.make_id,
                    default_direction=default_direction,
                )
                built += len(importer.run(record))

            trace(f"import done, {built} annotation(s) built", "IMPORT")

        self.importFinished.emit(built)
        return True
