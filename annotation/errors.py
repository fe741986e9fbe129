"""
annotation/errors.py

Exceptions raised by the annotation container and import pipeline.
"""

from __future__ import annotations

from typing import List, Optional


class AnnotationError(Exception):
    """Base class for annotation registry errors."""


class AnnotationSchemaError(AnnotationError):
    """A structured record failed schema validation.

    The whole import batch is rejected.  Records processed before the failing
    one stay registered.

    Attributes:
        errors: Every validation message reported for the record.
        record_index: Position of the failing record in the batch.
    """

    def __init__(self, errors: List[str], record_index: Optional[int] = None):
        self.errors = list(errors)
        self.record_index = record_index
        where = f"record {record_index}" if record_index is not None else "record"
        super().__init__(f"{where} failed schema validation: {'; '.join(self.errors)}")


class DuplicateAnnotationError(AnnotationError, ValueError):
    """A different annotation with the same uuid is already registered."""

    def __init__(self, uuid: str):
        self.uuid = uuid
        super().__init__(f"annotation uuid {uuid!r} is already in use")
