"""Tests for utils.py helpers."""
from __future__ import annotations

from PyQt6.QtGui import QColor

from utils import from_toml_string, hex_to_qcolor, qcolor_to_hex, record_text


class TestFromTomlString:
    def test_parses_record(self):
        assert from_toml_string('pdfanno = "0.5.0"\n') == {"pdfanno": "0.5.0"}

    def test_empty_is_none(self):
        assert from_toml_string("   \n") is None

    def test_non_string_is_none(self):
        assert from_toml_string(None) is None

    def test_invalid_is_none_and_logged(self, caplog):
        assert from_toml_string("a = = b") is None
        assert "Could not parse annotation record" in caplog.text


class TestHexColors:
    def test_short_form(self):
        c = hex_to_qcolor("#f00", QColor(0, 0, 0))
        assert (c.red(), c.green(), c.blue()) == (255, 0, 0)

    def test_alpha(self):
        c = hex_to_qcolor("#11223344", QColor(0, 0, 0))
        assert c.alpha() == 0x44

    def test_bad_value_uses_fallback(self):
        c = hex_to_qcolor("#zzzzzz", QColor(1, 2, 3))
        assert (c.red(), c.green(), c.blue()) == (1, 2, 3)

    def test_to_hex(self):
        assert qcolor_to_hex(QColor(0x12, 0xAB, 0x00)) == "#12AB00"


class TestRecordText:
    def test_text_wins(self):
        assert record_text({"text": "a", "label": "b"}) == "a"

    def test_label_fallback(self):
        assert record_text({"label": "b"}) == "b"

    def test_missing(self):
        assert record_text({}) == ""
