"""
utils.py

Utility functions for the pdfanno annotation core.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Dict, Optional

from PyQt6.QtGui import QColor

# TOML reading - use tomllib for Python 3.11+, tomli for earlier versions
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

log = logging.getLogger(__name__)


def from_toml_string(s: str) -> Optional[Dict[str, Any]]:
    """
    Parse a serialized annotation record (TOML text) into a dict.

    Args:
        s: The TOML text of one annotation record

    Returns:
        The parsed record, or None if the text is empty or not valid TOML
    """
    if not isinstance(s, str) or not s.strip():
        return None
    try:
        return tomllib.loads(s)
    except tomllib.TOMLDecodeError as e:
        log.warning("Could not parse annotation record: %s", e)
        return None


def qcolor_to_hex(c: QColor) -> str:
    """
    Convert a QColor to a hex string.

    Args:
        c: The QColor to convert

    Returns:
        Hex string like "#RRGGBB"
    """
    return "#{:02X}{:02X}{:02X}".format(c.red(), c.green(), c.blue())


def hex_to_qcolor(s: str, fallback: QColor) -> QColor:
    """
    Parse a hex string to a QColor.

    Accepts the short "#RGB" form used in color maps as well as
    "#RRGGBB" and "#RRGGBBAA".

    Args:
        s: Hex string
        fallback: Color to return if parsing fails

    Returns:
        Parsed QColor or fallback
    """
    try:
        if not s:
            return QColor(fallback)
        s = s.strip()
        if s.startswith("#"):
            s = s[1:]
        if len(s) == 3:
            s = "".join(ch * 2 for ch in s)
        if len(s) == 6:
            r = int(s[0:2], 16)
            g = int(s[2:4], 16)
            b = int(s[4:6], 16)
            return QColor(r, g, b)
        if len(s) == 8:
            r = int(s[0:2], 16)
            g = int(s[2:4], 16)
            b = int(s[4:6], 16)
            a = int(s[6:8], 16)
            return QColor(r, g, b, a)
    except ValueError:
        pass
    return QColor(fallback)


def record_text(rec: Dict[str, Any]) -> str:
    """Return the display text of a record, falling back to its ``label``."""
    text = rec.get("text")
    if text is None:
        text = rec.get("label", "")
    return str(text) if text is not None else ""
