"""
schemas/__init__.py

JSON Schema definitions and validation utilities for structured pdfanno
annotation records (format versions newer than 0.4.0).
"""

from __future__ import annotations

import json
import os
from typing import Dict, List, Optional, Tuple

from jsonschema import Draft202012Validator

# Schema file paths
SCHEMA_DIR = os.path.dirname(os.path.abspath(__file__))
ANNOTATION_SCHEMA_PATH = os.path.join(SCHEMA_DIR, "pdfanno_schema.json")

# Cached schema and compiled validator
_annotation_schema: Optional[Dict] = None
_validator: Optional[Draft202012Validator] = None


def get_annotation_schema() -> Dict:
    """Load and return the structured record schema."""
    global _annotation_schema
    if _annotation_schema is None:
        with open(ANNOTATION_SCHEMA_PATH, "r", encoding="utf-8") as f:
            _annotation_schema = json.load(f)
    return _annotation_schema


def get_validator() -> Draft202012Validator:
    """Return the compiled record validator, building it on first use."""
    global _validator
    if _validator is None:
        schema = get_annotation_schema()
        Draft202012Validator.check_schema(schema)
        _validator = Draft202012Validator(schema)
    return _validator


def _format_errors(errors) -> List[str]:
    error_messages = []
    for error in sorted(errors, key=lambda e: list(e.absolute_path)):
        path = " -> ".join(str(p) for p in error.absolute_path) if error.absolute_path else "root"
        error_messages.append(f"{path}: {error.message}")
    return error_messages


def validate_document(data: Dict, validator: Optional[Draft202012Validator] = None) -> Tuple[bool, List[str]]:
    """
    Validate a whole structured record against the schema.

    All errors are collected, not just the first one.

    Args:
        data: The parsed record
        validator: Pre-compiled validator; defaults to :func:`get_validator`

    Returns:
        Tuple of (is_valid, list_of_error_messages)
    """
    validator = validator or get_validator()
    errors = list(validator.iter_errors(data))
    if not errors:
        return True, []
    return False, _format_errors(errors)

