"""
Time Tracker

Polls the provider's playback position while the video is playing and
republishes it to the rest of the application.
"""

from typing import Optional
from PyQt6.QtCore import QObject, pyqtSignal

from .base import ProviderBoundManager, ignore_when_unavailable
from ..state import AppState, PlaybackPosition
from .. import utils


DEFAULT_POLL_INTERVAL_MS = 100


class TimeTrackerSignals(QObject):
    """Signal emitter for TimeTracker."""
    position_changed = pyqtSignal(float)  # current_time
    duration_changed = pyqtSignal(float)  # duration
    tracking_changed = pyqtSignal(bool)  # is_tracking


class TimeTracker(ProviderBoundManager):
    """
    Owns the playback position and the single poll timer.

    ``start`` always cancels the running poll before starting a new one, so
    there is never more than one active poll timer.
    """

    def __init__(self, parent_widget, dependency_container):
        super().__init__(parent_widget, dependency_container)
        self.signals = TimeTrackerSignals()

        self.poll_interval_ms = DEFAULT_POLL_INTERVAL_MS
        self.app_state: Optional[AppState] = None
        self._timer_factory = None
        self._poll_timer = None
        self._tick_count = 0

    def initialize(self) -> bool:
        try:
            self.app_state = self.container.get_service('app_state')
            self._timer_factory = self.container.get_service('timer_factory')

            config_manager = self.get_optional_service('configuration')
            if config_manager:
                self.poll_interval_ms = config_manager.get_setting(
                    'playback.poll_interval_ms', DEFAULT_POLL_INTERVAL_MS)

            self._mark_initialized()
            return True

        except Exception as e:
            self.handle_error(e, "TimeTracker initialization")
            return False

    def cleanup(self) -> None:
        self._mark_cleanup_started()
        self.stop()
        self.detach_provider()

    @property
    def position(self) -> PlaybackPosition:
        return self.app_state.position

    @property
    def current_time(self) -> float:
        return self.app_state.position.current_time

    @property
    def duration(self) -> float:
        return self.app_state.position.duration

    def is_tracking(self) -> bool:
        return self._poll_timer is not None and self._poll_timer.is_active()

    @ignore_when_unavailable
    def start(self, provider=None) -> None:
        """Start polling ``provider`` (or the attached provider) for its position."""
        if provider is not None:
            self.attach_provider(provider)
        self.require_provider("start tracking")

        self.stop()
        self._poll_timer = self._timer_factory.repeating(self.poll_interval_ms, self._poll)
        self._poll_timer.start()
        self.logger.debug(f"Position polling started ({self.poll_interval_ms} ms)")
        self.signals.tracking_changed.emit(True)

    def stop(self) -> None:
        """Cancel the active poll timer, if any."""
        if self._poll_timer is None:
            return

        self._poll_timer.stop()
        self._poll_timer = None
        self.logger.debug(f"Position polling stopped after {self._tick_count} ticks")
        self._tick_count = 0
        self.signals.tracking_changed.emit(False)

    def reset(self) -> None:
        """Stop polling and forget the position; used when the provider is replaced."""
        self.stop()
        self.app_state.position = PlaybackPosition()
        self.signals.duration_changed.emit(0.0)
        self.signals.position_changed.emit(0.0)

    def set_duration(self, seconds: float) -> None:
        duration = max(0.0, float(seconds))
        self.app_state.position.duration = duration
        self.signals.duration_changed.emit(duration)
        if self.current_time > duration > 0:
            self.update_position(duration)

    def update_position(self, seconds: float) -> float:
        """
        Store a new position and publish it.

        The position is clamped to [0, duration] once the duration is known.

        Returns:
            The stored position
        """
        position = max(0.0, float(seconds))
        if self.duration > 0:
            position = utils.clamp(position, 0.0, self.duration)

        self.app_state.position.current_time = position
        self.signals.position_changed.emit(position)
        return position

    def _poll(self) -> None:
        if self.provider is None:
            self.stop()
            return

        self._tick_count += 1
        position = self.update_position(self.provider.get_current_time())
        if utils.DEBUG_POSITION_UPDATES:
            self.logger.debug(f"Poll tick {self._tick_count}: {position:.3f}s")
