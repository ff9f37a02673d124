"""
Error reporting for Clip Marker.

Marking errors and manager failures are logged with their context, turned
into a short message for the user and emitted for the window to display.
"""

import logging
from collections import deque
from datetime import datetime
from enum import Enum
from typing import Deque, NamedTuple, Optional

from PyQt6.QtCore import QObject, pyqtSignal


class ErrorSeverity(Enum):
    """How loudly an error is reported."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorContext:
    """Where an error happened and what the user was doing at the time."""

    def __init__(self, component: str, operation: str, user_action: Optional[str] = None):
        self.component = component
        self.operation = operation
        self.user_action = user_action
        self.timestamp = datetime.now()

    def __str__(self) -> str:
        text = f"[{self.component}] {self.operation}"
        if self.user_action:
            text += f" | User action: {self.user_action}"
        return text


class ReportedError(NamedTuple):
    error: Exception
    context: ErrorContext
    severity: ErrorSeverity
    message: str


class ErrorHandler(QObject):
    """
    Logs errors and emits a user-facing message for each one.

    CRITICAL errors go out on ``critical_error``; everything else on
    ``error_occurred`` with the severity name, a title built from the
    component, and the message.
    """

    error_occurred = pyqtSignal(str, str, str)  # severity, title, message
    critical_error = pyqtSignal(str)  # message

    MESSAGES = {
        'NoStartMarker': "Please set a start time first",
        'InvalidRange': "End time must be after start time",
    }

    _LOG_LEVELS = {
        ErrorSeverity.INFO: logging.INFO,
        ErrorSeverity.WARNING: logging.WARNING,
        ErrorSeverity.ERROR: logging.ERROR,
        ErrorSeverity.CRITICAL: logging.CRITICAL,
    }

    def __init__(self, history_size: int = 10):
        super().__init__()
        self.logger = logging.getLogger(__name__)
        self.recent: Deque[ReportedError] = deque(maxlen=history_size)

    def handle_error(self, error: Exception, context: ErrorContext,
                     severity: ErrorSeverity = ErrorSeverity.ERROR) -> str:
        """
        Log ``error`` and notify the UI.

        Returns:
            The message shown to the user
        """
        # Marking errors are expected user mistakes; no traceback for them
        with_traceback = severity in (ErrorSeverity.ERROR, ErrorSeverity.CRITICAL)
        self.logger.log(self._LOG_LEVELS[severity], f"{context} | {error}",
                        exc_info=error if with_traceback else None)

        message = self.user_message(error, context)
        self.recent.append(ReportedError(error, context, severity, message))

        if severity == ErrorSeverity.CRITICAL:
            self.critical_error.emit(message)
        else:
            self.error_occurred.emit(severity.value, f"{context.component} Error", message)
        return message

    def user_message(self, error: Exception, context: ErrorContext) -> str:
        known = self.MESSAGES.get(type(error).__name__)
        if known:
            return known
        return f"An error occurred during {context.operation}: {error}"
