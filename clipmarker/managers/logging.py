"""
Logging Manager for Clip Marker.

Centralized logging with file rotation, a separate error log and a console
handler, configured from the ``logging.*`` settings.
"""

import logging
import logging.handlers
from typing import Dict, List, Optional
from pathlib import Path
from PyQt6.QtCore import QObject, pyqtSignal

from .base import BaseManager


class LoggingManagerSignals(QObject):
    """Signals for LoggingManager communication with UI and other managers."""
    log_level_changed = pyqtSignal(str)  # new_level
    debug_mode_changed = pyqtSignal(bool)  # enabled


class LoggingManager(BaseManager):
    """
    Manages centralized logging with file rotation.

    Handles:
    - Rotating main log and WARNING+ error log under the logs directory
    - Console output
    - Runtime log level and debug mode changes
    """

    LOG_LEVELS = {
        'DEBUG': logging.DEBUG,
        'INFO': logging.INFO,
        'WARNING': logging.WARNING,
        'ERROR': logging.ERROR,
        'CRITICAL': logging.CRITICAL
    }

    # Loggers that receive the managed handlers
    COMPONENT_LOGGERS = [
        'clipmarker',
        'ClipSession',
        'TimeTracker',
        'ClipTimelineManager',
        'ClipPlayer',
        'SeekController',
        'ConfigurationManager',
        'LoggingManager',
        'QMediaPlayerProvider',
        'ui',
    ]

    def __init__(self, parent_widget, dependency_container):
        super().__init__(parent_widget, dependency_container)

        self.signals = LoggingManagerSignals()

        self.current_log_level = 'INFO'
        self.debug_mode = False
        self.log_to_console = True
        self.log_to_file = True

        self.max_file_size_mb = 10
        self.max_backup_count = 5

        self.logs_directory: Optional[Path] = None
        self.main_log_file: Optional[Path] = None
        self.error_log_file: Optional[Path] = None

        self.loggers: Dict[str, logging.Logger] = {}
        self.file_handlers: Dict[str, logging.handlers.RotatingFileHandler] = {}
        self.console_handler: Optional[logging.StreamHandler] = None

        self.logger.debug("LoggingManager created")

    def initialize(self) -> bool:
        try:
            self._configure_logging()
            self._setup_file_handlers()
            self._setup_console_handler()

            for name in self.COMPONENT_LOGGERS:
                self._create_logger(name)

            if self.debug_mode:
                self.set_log_level('DEBUG')

            self._mark_initialized()
            return True

        except Exception as e:
            self.handle_error(e, "LoggingManager initialization")
            return False

    def cleanup(self) -> None:
        """Detach and close every managed handler."""
        try:
            self._mark_cleanup_started()

            handlers = list(self.file_handlers.values())
            if self.console_handler:
                handlers.append(self.console_handler)

            for logger in self.loggers.values():
                for handler in handlers:
                    logger.removeHandler(handler)
                logger.propagate = True

            for handler in self.file_handlers.values():
                handler.close()

            self.file_handlers.clear()
            self.loggers.clear()
            self.console_handler = None
            self.logger.info("LoggingManager cleaned up successfully")

        except Exception as e:
            self.handle_error(e, "LoggingManager cleanup")

    # ========================================
    # Log Level Management
    # ========================================

    def set_log_level(self, level: str) -> bool:
        """
        Set the log level on every managed logger and handler.

        Args:
            level: Log level ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')

        Returns:
            bool: True if level was set successfully
        """
        if level not in self.LOG_LEVELS:
            self.logger.warning(f"Invalid log level: {level}")
            return False

        old_level = self.current_log_level
        self.current_log_level = level
        numeric_level = self.LOG_LEVELS[level]

        for logger in self.loggers.values():
            logger.setLevel(numeric_level)

        main_handler = self.file_handlers.get('main')
        if main_handler:
            main_handler.setLevel(numeric_level)

        if self.console_handler:
            self.console_handler.setLevel(numeric_level)

        self.signals.log_level_changed.emit(level)
        self.logger.info(f"Log level changed from {old_level} to {level}")
        return True

    def get_log_level(self) -> str:
        return self.current_log_level

    def set_debug_mode(self, enabled: bool) -> None:
        """Enable or disable debug mode."""
        self.debug_mode = enabled

        if enabled:
            self.set_log_level('DEBUG')
        else:
            config_manager = self.get_optional_service('configuration')
            default_level = 'INFO'
            if config_manager:
                default_level = config_manager.get_setting('logging.default_level', 'INFO')
            self.set_log_level(default_level)

        self.signals.debug_mode_changed.emit(enabled)
        self.logger.info(f"Debug mode {'enabled' if enabled else 'disabled'}")

    def is_debug_mode(self) -> bool:
        return self.debug_mode

    def get_logger(self, name: str) -> logging.Logger:
        """Get or create a logger that writes to the managed handlers."""
        if name not in self.loggers:
            self._create_logger(name)
        return self.loggers[name]

    def get_log_files(self) -> List[Path]:
        """Get all log files, newest first."""
        if not self.logs_directory or not self.logs_directory.exists():
            return []

        log_files = [p for p in self.logs_directory.iterdir()
                     if p.is_file() and '.log' in p.name]
        return sorted(log_files, key=lambda x: x.stat().st_mtime, reverse=True)

    # ========================================
    # Setup
    # ========================================

    def _configure_logging(self) -> None:
        """Read logging settings from the ConfigurationManager when available."""
        config_manager = self.get_optional_service('configuration')
        if config_manager and config_manager.is_initialized():
            self.current_log_level = config_manager.get_setting('logging.default_level', 'INFO')
            self.debug_mode = config_manager.get_setting('logging.debug_mode', False)
            self.log_to_console = config_manager.get_setting('logging.console_enabled', True)
            self.log_to_file = config_manager.get_setting('logging.file_enabled', True)
            self.max_file_size_mb = config_manager.get_setting('logging.max_file_size_mb', 10)
            self.max_backup_count = config_manager.get_setting('logging.max_backup_count', 5)
            self.logs_directory = config_manager.logs_dir
        else:
            self.logs_directory = Path.home() / '.clipmarker' / 'logs'

        self.main_log_file = self.logs_directory / 'clipmarker.log'
        self.error_log_file = self.logs_directory / 'errors.log'

    def _setup_file_handlers(self) -> None:
        """Set up rotating file handlers."""
        if not self.log_to_file or not self.logs_directory:
            return

        self.logs_directory.mkdir(parents=True, exist_ok=True)
        max_bytes = self.max_file_size_mb * 1024 * 1024

        main_handler = logging.handlers.RotatingFileHandler(
            self.main_log_file,
            maxBytes=max_bytes,
            backupCount=self.max_backup_count,
            encoding='utf-8'
        )
        main_handler.setLevel(self.LOG_LEVELS[self.current_log_level])
        main_handler.setFormatter(self._get_file_formatter())
        self.file_handlers['main'] = main_handler

        error_handler = logging.handlers.RotatingFileHandler(
            self.error_log_file,
            maxBytes=max_bytes,
            backupCount=self.max_backup_count,
            encoding='utf-8'
        )
        error_handler.setLevel(logging.WARNING)
        error_handler.setFormatter(self._get_file_formatter())
        self.file_handlers['error'] = error_handler

    def _setup_console_handler(self) -> None:
        if not self.log_to_console:
            return

        self.console_handler = logging.StreamHandler()
        self.console_handler.setLevel(self.LOG_LEVELS[self.current_log_level])
        self.console_handler.setFormatter(self._get_console_formatter())

    def _create_logger(self, name: str) -> None:
        logger = logging.getLogger(name)
        logger.setLevel(self.LOG_LEVELS[self.current_log_level])

        for handler in self.file_handlers.values():
            logger.addHandler(handler)

        if self.console_handler:
            logger.addHandler(self.console_handler)

        # Prevent duplicate logs
        logger.propagate = False

        self.loggers[name] = logger

    def _get_file_formatter(self) -> logging.Formatter:
        return logging.Formatter(
            '%(asctime)s [%(levelname)s] %(name)s (%(filename)s:%(lineno)d): %(message)s'
        )

    def _get_console_formatter(self) -> logging.Formatter:
        return logging.Formatter('%(asctime)s [%(levelname)s] %(name)s: %(message)s',
                                 datefmt='%H:%M:%S')
