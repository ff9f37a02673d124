"""
Seek Controller

Maps scrub input to provider seeks and updates the tracked position
immediately instead of waiting for the next poll tick.
"""

from typing import Optional

from .base import ProviderBoundManager, ignore_when_unavailable
from .time_tracker import TimeTracker
from .. import utils


class SeekController(ProviderBoundManager):
    """Clamps seek targets to the media and forwards them to the provider."""

    def __init__(self, parent_widget, dependency_container):
        super().__init__(parent_widget, dependency_container)
        self.tracker: Optional[TimeTracker] = None
        self.seek_ahead = True

    def initialize(self) -> bool:
        try:
            self.tracker = self.container.get_service('time_tracker')

            config_manager = self.get_optional_service('configuration')
            if config_manager:
                self.seek_ahead = config_manager.get_setting('playback.seek_ahead', True)

            self._mark_initialized()
            return True

        except Exception as e:
            self.handle_error(e, "SeekController initialization")
            return False

    def cleanup(self) -> None:
        self._mark_cleanup_started()
        self.detach_provider()

    @ignore_when_unavailable
    def seek(self, position: float) -> float:
        """
        Seek to ``position`` seconds, clamped to [0, duration].

        Returns:
            The position actually sought to
        """
        provider = self.require_provider("seek")

        target = utils.clamp(float(position), 0.0, self.tracker.duration)
        self.tracker.update_position(target)
        provider.seek_to(target, self.seek_ahead)

        if utils.DEBUG_POSITION_UPDATES:
            self.logger.debug(f"Seek {position:.3f}s -> {target:.3f}s")
        return target

    def seek_fraction(self, fraction: float) -> Optional[float]:
        """Seek to a normalized [0, 1] position along the media."""
        fraction = utils.clamp(float(fraction), 0.0, 1.0)
        return self.seek(fraction * self.tracker.duration)

    def seek_relative(self, delta: float) -> Optional[float]:
        """Skip ``delta`` seconds forwards (positive) or backwards (negative)."""
        return self.seek(self.tracker.current_time + delta)
