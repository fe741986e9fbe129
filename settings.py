"""
settings.py

Persistent settings management for the pdfanno annotation core.

Handles cross-platform settings storage using TOML format with platformdirs
for proper user config directory detection.

Settings file location:
    - Windows: %APPDATA%/pdfanno/settings.toml
    - macOS: ~/Library/Application Support/pdfanno/settings.toml
    - Linux: ~/.config/pdfanno/settings.toml

Default values are documented in comments throughout this file.
If settings.toml is corrupted, these defaults will be used.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import platformdirs

# TOML reading - use tomllib for Python 3.11+, tomli for earlier versions
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

import tomli_w

APP_NAME = "pdfanno"

# Global settings manager instance (singleton)
_settings_manager: Optional["SettingsManager"] = None


def get_settings() -> "SettingsManager":
    """Get the global settings manager instance.

    Returns:
        The singleton SettingsManager instance.
    """
    global _settings_manager
    if _settings_manager is None:
        _settings_manager = SettingsManager()
    return _settings_manager


# =============================================================================
# General Settings
# =============================================================================

@dataclass
class GeneralSettings:
    """General settings.

    Defaults:
        debug_trace: False
        trace_log_file: ""
    """
    debug_trace: bool = False     # Default: False
    trace_log_file: str = ""      # Default: "" (stderr only)


# =============================================================================
# Importer Settings
# =============================================================================

@dataclass
class ImporterSettings:
    """Import pipeline settings.

    Defaults:
        schema_threshold: "0.4.0"
        default_direction: "one-way"
    """
    schema_threshold: str = "0.4.0"      # Records newer than this use the structured format
    default_direction: str = "one-way"   # Relation direction when a record has none


# =============================================================================
# Color Settings
# =============================================================================

@dataclass
class ColorSettings:
    """Annotation colors used when an import batch carries no color map.

    Defaults:
        default: "#FF0000"
        palette: [] (falls back to the built-in palette when no default is set)
        by_type: {}
    """
    default: str = "#FF0000"   # Default: red
    palette: List[str] = field(default_factory=list)
    # annotation type or relation direction -> {text -> color}
    by_type: Dict[str, Dict[str, str]] = field(default_factory=dict)

    def to_color_map(self) -> Dict[str, Any]:
        """Build a color map in the shape the import pipeline expects."""
        color_map: Dict[str, Any] = {k: dict(v) for k, v in self.by_type.items()}
        if self.default:
            color_map["default"] = self.default
        if self.palette:
            color_map["palette"] = list(self.palette)
        return color_map


# =============================================================================
# Main App Settings
# =============================================================================

@dataclass
class AppSettings:
    """Application settings with default values.

    Attributes:
        general: Tracing and diagnostics.
        importer: Import pipeline settings.
        colors: Fallback color configuration.
    """
    general: GeneralSettings = field(default_factory=GeneralSettings)
    importer: ImporterSettings = field(default_factory=ImporterSettings)
    colors: ColorSettings = field(default_factory=ColorSettings)


# =============================================================================
# Settings Manager
# =============================================================================

class SettingsManager:
    """Manages loading, saving, and accessing application settings.

    Settings are stored in a TOML file at the platform-appropriate location.
    If the settings file doesn't exist, defaults are used and the file is
    created on first save.

    Args:
        app_name: Application name used for the config directory.
        settings_dir: Override for the config directory (tests, portable installs).
    """

    def __init__(self, app_name: str = APP_NAME, settings_dir: Optional[Path] = None):
        if settings_dir is not None:
            self.settings_dir = Path(settings_dir)
        else:
            self.settings_dir = Path(platformdirs.user_config_dir(app_name))
        self.settings_file = self.settings_dir / "settings.toml"
        self.settings = self.load()
        self._needs_save = not self.settings_file.exists()  # Save if file didn't exist

    def ensure_file_complete(self) -> None:
        """Ensure settings file exists with all sections. Call once at startup."""
        if self._needs_save or not self.settings_file.exists():
            self.save()
            self._needs_save = False

    def load(self) -> AppSettings:
        """Load settings from the TOML file.

        Returns:
            AppSettings instance with values from file or defaults if file
            doesn't exist or is invalid.
        """
        if not self.settings_file.exists():
            return AppSettings()

        try:
            with open(self.settings_file, "rb") as f:
                data = tomllib.load(f)

            return self._parse_toml(data)
        except (OSError, tomllib.TOMLDecodeError, AttributeError, TypeError):
            # If file is corrupted or invalid, return defaults
            return AppSettings()

    def _parse_toml(self, data: Dict[str, Any]) -> AppSettings:
        """Parse TOML data into AppSettings.

        Args:
            data: Parsed TOML dictionary.

        Returns:
            AppSettings instance populated from TOML data.
        """
        settings = AppSettings()

        # General section
        general = data.get("general", {})
        settings.general.debug_trace = bool(general.get("debug_trace", settings.general.debug_trace))
        settings.general.trace_log_file = general.get("trace_log_file", settings.general.trace_log_file)

        # Importer section
        importer = data.get("importer", {})
        settings.importer.schema_threshold = importer.get("schema_threshold", settings.importer.schema_threshold)
        settings.importer.default_direction = importer.get("default_direction", settings.importer.default_direction)

        # Colors section: scalar keys are settings, tables are per-type text colors
        colors = data.get("colors", {})
        settings.colors.default = colors.get("default", settings.colors.default)
        palette = colors.get("palette", settings.colors.palette)
        if isinstance(palette, list):
            settings.colors.palette = [str(c) for c in palette]
        for key, value in colors.items():
            if isinstance(value, dict):
                settings.colors.by_type[key] = {str(t): str(c) for t, c in value.items()}

        return settings

    def save(self) -> None:
        """Save current settings to the TOML file.

        Creates the settings directory if it doesn't exist.
        """
        # Ensure directory exists
        self.settings_dir.mkdir(parents=True, exist_ok=True)

        # Convert settings to TOML structure
        data = self._to_toml_dict()

        with open(self.settings_file, "wb") as f:
            tomli_w.dump(data, f)

    def _to_toml_dict(self) -> Dict[str, Any]:
        """Convert settings to a TOML-compatible dictionary structure.

        Returns:
            Dictionary organized by TOML sections.
        """
        s = self.settings
        colors: Dict[str, Any] = {
            "default": s.colors.default,
            "palette": list(s.colors.palette),
        }
        for key, table in s.colors.by_type.items():
            colors[key] = dict(table)
        return {
            "general": {
                "debug_trace": s.general.debug_trace,
                "trace_log_file": s.general.trace_log_file,
            },
            "importer": {
                "schema_threshold": s.importer.schema_threshold,
                "default_direction": s.importer.default_direction,
            },
            "colors": colors,
        }

    def to_toml(self) -> str:
        """Convert current settings to a TOML-formatted string.

        Returns:
            TOML representation of the current settings.
        """
        data = self._to_toml_dict()
        return tomli_w.dumps(data)

    def get_settings_path(self) -> Path:
        """Get the path to the settings file.

        Returns:
            Path object pointing to the settings file location.
        """
        return self.settings_file
