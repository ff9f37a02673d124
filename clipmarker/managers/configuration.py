"""
Configuration Manager for Clip Marker.

Handles application settings with JSON persistence and validation. Only
settings are stored here; clips never outlive the session.
"""

import copy
import json
from typing import Any, Dict, Optional
from pathlib import Path
from PyQt6.QtCore import QObject, pyqtSignal

from .base import BaseManager
from ..version import __version__


class ConfigurationManagerSignals(QObject):
    """Signals for ConfigurationManager communication with UI and other managers."""

    setting_changed = pyqtSignal(str, object)  # setting_key, new_value
    settings_loaded = pyqtSignal()
    settings_saved = pyqtSignal()
    settings_reset = pyqtSignal()

    validation_failed = pyqtSignal(str, str)  # setting_key, error_message


class ConfigurationManager(BaseManager):
    """
    Manages application configuration.

    Handles:
    - Video settings (video id for deep links, media source, link host)
    - Playback settings (poll interval, seek-ahead)
    - Logging settings consumed by the LoggingManager
    - Validation and automatic persistence
    """

    DEFAULT_SETTINGS = {
        'app': {
            'version': __version__,
            'first_run': True,
        },

        'video': {
            'video_id': 'BYizgB2FcAQ',
            'source': '',
            'link_host': 'www.youtube.com',
        },

        'playback': {
            'poll_interval_ms': 100,
            'seek_ahead': True,
        },

        'logging': {
            'default_level': 'INFO',
            'debug_mode': False,
            'console_enabled': True,
            'file_enabled': True,
            'max_file_size_mb': 10,
            'max_backup_count': 5,
        },
    }

    def __init__(self, parent_widget, dependency_container, base_dir: Optional[Path] = None):
        """Initialize the ConfigurationManager."""
        super().__init__(parent_widget, dependency_container)

        self.signals = ConfigurationManagerSignals()

        self.settings: Dict[str, Any] = {}
        # Values for this run only (command line arguments); never saved
        self.overrides: Dict[str, Any] = {}

        # Directory structure
        self.base_dir = Path(base_dir) if base_dir else Path.home() / '.clipmarker'
        self.config_dir = self.base_dir / 'config'
        self.logs_dir = self.base_dir / 'logs'
        self.settings_file = self.config_dir / 'settings.json'

        self.validation_rules = self._setup_validation_rules()

        self.logger.debug("ConfigurationManager created")

    def initialize(self) -> bool:
        """
        Initialize configuration manager.

        Returns:
            bool: True if initialization was successful
        """
        try:
            self._create_directory_structure()
            self._load_configuration()

            if not self._validate_configuration():
                self.logger.warning("Configuration validation failed, using defaults")
                self._reset_to_defaults()

            self.settings['app']['version'] = __version__
            self.save_configuration()

            self._mark_initialized()
            return True

        except Exception as e:
            self.handle_error(e, "ConfigurationManager initialization")
            return False

    def cleanup(self) -> None:
        """Save configuration on shutdown."""
        try:
            self._mark_cleanup_started()
            if self._initialized:
                self.save_configuration()
            self.logger.info("ConfigurationManager cleaned up successfully")

        except Exception as e:
            self.handle_error(e, "ConfigurationManager cleanup")

    # ========================================
    # Configuration Management
    # ========================================

    def get_setting(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration setting value.

        Args:
            key: Setting key in dot notation (e.g., 'video.video_id', 'playback.poll_interval_ms')
            default: Default value if setting doesn't exist

        Returns:
            Setting value or default
        """
        if key in self.overrides:
            return self.overrides[key]

        value = self.settings
        for k in key.split('.'):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def set_setting(self, key: str, value: Any, save: bool = True) -> bool:
        """
        Set a configuration setting value.

        Args:
            key: Setting key in dot notation
            value: New value to set
            save: Whether to immediately save to disk

        Returns:
            bool: True if setting was successfully set
        """
        try:
            if not self._validate_setting(key, value):
                return False

            self.overrides.pop(key, None)
            keys = key.split('.')
            current = self.settings
            for k in keys[:-1]:
                if k not in current:
                    current[k] = {}
                current = current[k]

            old_value = current.get(keys[-1])
            current[keys[-1]] = value

            if old_value != value:
                self.signals.setting_changed.emit(key, value)

            if save:
                self.save_configuration()

            self.logger.debug(f"Setting updated: {key} = {value}")
            return True

        except Exception as e:
            self.handle_error(e, f"set_setting({key}, {value})")
            return False

    def override_setting(self, key: str, value: Any) -> bool:
        """
        Use ``value`` for ``key`` until the application exits without saving it.

        Returns:
            bool: True if the value passed validation
        """
        if not self._validate_setting(key, value):
            return False

        self.overrides[key] = value
        self.signals.setting_changed.emit(key, value)
        self.logger.debug(f"Setting overridden for this run: {key} = {value}")
        return True

    def get_all_settings(self) -> Dict[str, Any]:
        return copy.deepcopy(self.settings)

    def reset_setting(self, key: str, save: bool = True) -> bool:
        """Reset a setting to its default value."""
        default_value = self._get_default_setting(key)
        if default_value is None:
            return False
        return self.set_setting(key, default_value, save)

    def save_configuration(self) -> bool:
        """Save current configuration to disk."""
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.settings_file, 'w', encoding='utf-8') as f:
                json.dump(self.settings, f, indent=2, ensure_ascii=False)

            self.signals.settings_saved.emit()
            self.logger.debug("Configuration saved successfully")
            return True

        except OSError as e:
            self.handle_error(e, "save_configuration")
            return False

    def load_configuration(self) -> bool:
        """Reload configuration from disk."""
        self._load_configuration()
        self.signals.settings_loaded.emit()
        return True

    def reset_to_defaults(self) -> bool:
        """Reset all settings to default values."""
        self._reset_to_defaults()
        saved = self.save_configuration()
        self.signals.settings_reset.emit()
        self.logger.info("Configuration reset to defaults")
        return saved

    # ========================================
    # Internal helpers
    # ========================================

    def _load_configuration(self) -> None:
        """Load configuration from file, filling in any missing defaults."""
        settings = self._get_default_settings()
        try:
            if self.settings_file.exists():
                with open(self.settings_file, 'r', encoding='utf-8') as f:
                    stored = json.load(f)
                self._merge_settings(settings, stored)
                self.logger.debug("Configuration loaded from file")
            else:
                self.logger.debug("Using default configuration")

        except (json.JSONDecodeError, OSError) as e:
            self.logger.warning(f"Error loading configuration: {e}, using defaults")
            settings = self._get_default_settings()

        self.settings = settings

    def _merge_settings(self, target: Dict[str, Any], source: Dict[str, Any]) -> None:
        for key, value in source.items():
            if isinstance(value, dict) and isinstance(target.get(key), dict):
                self._merge_settings(target[key], value)
            else:
                target[key] = value

    def _get_default_settings(self) -> Dict[str, Any]:
        """Get a deep copy of default settings."""
        return copy.deepcopy(self.DEFAULT_SETTINGS)

    def _get_default_setting(self, key: str) -> Any:
        value = self.DEFAULT_SETTINGS
        for k in key.split('.'):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return None
        return copy.deepcopy(value)

    def _validate_configuration(self) -> bool:
        """Validate every setting that has a rule."""
        for key, rule in self.validation_rules.items():
            value = self.get_setting(key)
            if value is not None and not self._validate_setting_with_rule(key, value, rule):
                return False
        return True

    def _validate_setting(self, key: str, value: Any) -> bool:
        if key in self.validation_rules:
            return self._validate_setting_with_rule(key, value, self.validation_rules[key])
        return True

    def _validate_setting_with_rule(self, key: str, value: Any, rule: Dict[str, Any]) -> bool:
        """Validate a setting against a specific rule."""
        # bool is an int subclass; never accept it for numeric settings
        if 'type' in rule and (not isinstance(value, rule['type']) or
                               (isinstance(value, bool) and bool not in _as_tuple(rule['type']))):
            self.signals.validation_failed.emit(key, f"Invalid type for {key}")
            return False

        if 'min' in rule and value < rule['min']:
            self.signals.validation_failed.emit(key, f"{key} below minimum value")
            return False

        if 'max' in rule and value > rule['max']:
            self.signals.validation_failed.emit(key, f"{key} above maximum value")
            return False

        if 'choices' in rule and value not in rule['choices']:
            self.signals.validation_failed.emit(key, f"Invalid choice for {key}")
            return False

        return True

    def _setup_validation_rules(self) -> Dict[str, Dict[str, Any]]:
        """Set up validation rules for settings."""
        return {
            'video.video_id': {'type': str},
            'video.source': {'type': str},
            'video.link_host': {'type': str},
            'playback.poll_interval_ms': {'type': int, 'min': 10, 'max': 1000},
            'playback.seek_ahead': {'type': bool},
            'logging.default_level': {'type': str,
                                      'choices': ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']},
            'logging.max_file_size_mb': {'type': int, 'min': 1, 'max': 100},
            'logging.max_backup_count': {'type': int, 'min': 0, 'max': 20},
        }

    def _reset_to_defaults(self) -> None:
        self.settings = self._get_default_settings()

    def _create_directory_structure(self) -> None:
        for directory in [self.base_dir, self.config_dir, self.logs_dir]:
            directory.mkdir(parents=True, exist_ok=True)
            self.logger.debug(f"Created directory: {directory}")


def _as_tuple(types):
    return types if isinstance(types, tuple) else (types,)
