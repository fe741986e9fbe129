"""Tests for settings.py: TOML persistence and color-map fallback."""
from __future__ import annotations

from settings import AppSettings, ColorSettings, SettingsManager


class TestSettingsManager:
    def test_defaults_without_file(self, tmp_path):
        mgr = SettingsManager(settings_dir=tmp_path)
        assert mgr.settings == AppSettings()
        assert not mgr.get_settings_path().exists()

    def test_ensure_file_complete_writes_defaults(self, tmp_path):
        mgr = SettingsManager(settings_dir=tmp_path)
        mgr.ensure_file_complete()
        text = mgr.get_settings_path().read_text(encoding="utf-8")
        assert "[importer]" in text
        assert 'schema_threshold = "0.4.0"' in text

    def test_save_and_reload(self, tmp_path):
        mgr = SettingsManager(settings_dir=tmp_path)
        mgr.settings.general.debug_trace = True
        mgr.settings.importer.default_direction = "link"
        mgr.settings.colors.default = "#00FF00"
        mgr.settings.colors.palette = ["#111111"]
        mgr.settings.colors.by_type = {"span": {"Person": "#0000FF"}}
        mgr.save()

        loaded = SettingsManager(settings_dir=tmp_path).settings
        assert loaded.general.debug_trace is True
        assert loaded.importer.default_direction == "link"
        assert loaded.colors.default == "#00FF00"
        assert loaded.colors.palette == ["#111111"]
        assert loaded.colors.by_type == {"span": {"Person": "#0000FF"}}

    def test_corrupt_file_falls_back_to_defaults(self, tmp_path):
        (tmp_path / "settings.toml").write_text("[general\ndebug_trace = ", encoding="utf-8")
        assert SettingsManager(settings_dir=tmp_path).settings == AppSettings()

    def test_partial_file_keeps_other_defaults(self, tmp_path):
        (tmp_path / "settings.toml").write_text('[colors]\ndefault = "#123456"\n', encoding="utf-8")
        settings = SettingsManager(settings_dir=tmp_path).settings
        assert settings.colors.default == "#123456"
        assert settings.importer.schema_threshold == "0.4.0"

    def test_to_toml(self, tmp_path):
        assert "[colors]" in SettingsManager(settings_dir=tmp_path).to_toml()


class TestColorSettings:
    def test_default_color_map(self):
        assert ColorSettings().to_color_map() == {"default": "#FF0000"}

    def test_full_color_map(self):
        colors = ColorSettings(default="", palette=["#111"], by_type={"one-way": {"cites": "#00f"}})
        assert colors.to_color_map() == {"palette": ["#111"], "one-way": {"cites": "#00f"}}

    def test_color_map_is_a_copy(self):
        colors = ColorSettings(by_type={"span": {"x": "#f00"}})
        colors.to_color_map()["span"]["x"] = "#000"
        assert colors.by_type["span"]["x"] == "#f00"
