"""
annotation package

Annotation entities, the annotation container and the versioned importer.
"""

from annotation.errors import AnnotationError, AnnotationSchemaError, DuplicateAnnotationError
from annotation.renderer import AnnotationRenderer, NullRenderer
from annotation.mixins import LinkedMixin, RenderMixin
from annotation.items import AbstractAnnotation, SpanAnnotation, RelationAnnotation
from annotation.colors import get_color
from annotation.importer import CurrentImporter, LegacyImporter, record_version
from annotation.container import AnnotationContainer

__all__ = [
    "AnnotationError",
    "AnnotationSchemaError",
    "DuplicateAnnotationError",
    "AnnotationRenderer",
    "NullRenderer",
    "LinkedMixin",
    "RenderMixin",
    "AbstractAnnotation",
    "SpanAnnotation",
    "RelationAnnotation",
    "get_color",
    "CurrentImporter",
    "LegacyImporter",
    "record_version",
    "AnnotationContainer",
]
