"""
Clip Player

Replays a committed clip: seek to its start, play, and pause again once the
clip's duration has elapsed.
"""

from typing import Optional
from PyQt6.QtCore import QObject, pyqtSignal

from .base import ProviderBoundManager, ignore_when_unavailable
from ..state import Clip


class ClipPlayerSignals(QObject):
    """Signal emitter for ClipPlayer."""
    clip_started = pyqtSignal(object)  # Clip
    clip_finished = pyqtSignal(object)  # Clip
    clip_cancelled = pyqtSignal(object)  # Clip


class ClipPlayer(ProviderBoundManager):
    """
    Drives the provider through a bounded clip replay.

    Every ``play`` and ``invalidate`` advances the playback session id. The
    scheduled stop remembers the id it was created for and does nothing if a
    newer session has started since, so a stale stop can never pause
    unrelated playback.
    """

    def __init__(self, parent_widget, dependency_container):
        super().__init__(parent_widget, dependency_container)
        self.signals = ClipPlayerSignals()

        self.seek_ahead = True
        self._timer_factory = None
        self._stop_timer = None
        self._session_id = 0
        self._active_clip: Optional[Clip] = None

    def initialize(self) -> bool:
        try:
            self._timer_factory = self.container.get_service('timer_factory')

            config_manager = self.get_optional_service('configuration')
            if config_manager:
                self.seek_ahead = config_manager.get_setting('playback.seek_ahead', True)

            self._mark_initialized()
            return True

        except Exception as e:
            self.handle_error(e, "ClipPlayer initialization")
            return False

    def cleanup(self) -> None:
        self._mark_cleanup_started()
        self.invalidate()
        self.detach_provider()

    @property
    def session_id(self) -> int:
        return self._session_id

    @property
    def active_clip(self) -> Optional[Clip]:
        return self._active_clip

    def has_pending_stop(self) -> bool:
        return self._stop_timer is not None and self._stop_timer.is_active()

    @ignore_when_unavailable
    def play(self, clip: Clip) -> int:
        """
        Play ``clip`` and schedule its stop.

        Returns:
            The playback session id assigned to this replay
        """
        provider = self.require_provider("play clip")

        self.invalidate()
        session_id = self._session_id

        provider.seek_to(clip.start_time, self.seek_ahead)
        provider.play_video()

        delay_ms = int(round(clip.duration * 1000))
        self._stop_timer = self._timer_factory.single_shot(
            delay_ms, lambda: self._stop_clip(session_id))
        self._stop_timer.start()
        self._active_clip = clip

        self.logger.info(
            f"Playing clip {clip.id} from {clip.start_time:.2f}s for {clip.duration:.2f}s "
            f"(session {session_id})"
        )
        self.signals.clip_started.emit(clip)
        return session_id

    def invalidate(self) -> None:
        """Cancel any pending stop and start a new playback session."""
        self._session_id += 1

        if self._stop_timer is not None:
            self._stop_timer.stop()
            self._stop_timer = None

        if self._active_clip is not None:
            cancelled = self._active_clip
            self._active_clip = None
            self.logger.debug(f"Clip {cancelled.id} superseded")
            self.signals.clip_cancelled.emit(cancelled)

    def _stop_clip(self, session_id: int) -> None:
        if session_id != self._session_id:
            self.logger.debug(f"Ignoring stale stop for session {session_id}")
            return

        self._stop_timer = None
        clip = self._active_clip
        self._active_clip = None

        if self.provider is None:
            self.logger.debug("Provider detached before clip stop")
            return

        self.provider.pause_video()
        if clip is not None:
            self.logger.info(f"Clip {clip.id} finished")
            self.signals.clip_finished.emit(clip)
