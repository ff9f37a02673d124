"""
Clip Session

Composition root for one playback session. Builds the dependency container
and the managers, receives the playback provider from an initializer
supplied by the application, routes provider notifications and turns user
commands into manager calls.
"""

import logging
from pathlib import Path
from typing import Callable, Optional, Tuple

from PyQt6.QtCore import QObject, pyqtSignal

from . import utils
from .exceptions import ClipRangeError, ProviderUnavailable
from .managers import (DependencyContainer, ErrorHandler, ErrorContext, ErrorSeverity,
                       ConfigurationManager, LoggingManager, TimeTracker,
                       ClipTimelineManager, ClipPlayer, SeekController,
                       ignore_when_unavailable)
from .provider import PlaybackProvider, PlayerState
from .state import AppState, Clip
from .timers import QtTimerFactory


class ClipSessionSignals(QObject):
    """Signal emitter for ClipSession."""
    provider_ready = pyqtSignal(float)  # duration
    provider_reset = pyqtSignal()
    playing_changed = pyqtSignal(bool)  # is_playing


class ClipSession:
    """
    Wires the provider, the managers and the user commands together.

    Usage::

        session = ClipSession()
        session.initialize()
        session.initialize_provider(lambda: QMediaPlayerProvider(player))
        ...
        session.teardown()
    """

    def __init__(self, parent_widget=None, timer_factory=None,
                 config_base_dir: Optional[Path] = None, manage_logging: bool = True):
        self.parent_widget = parent_widget
        self.logger = logging.getLogger(self.__class__.__name__)
        self.signals = ClipSessionSignals()
        self.app_state = AppState()
        self.provider: Optional[PlaybackProvider] = None

        self._timer_factory = timer_factory or QtTimerFactory(parent_widget)
        self._config_base_dir = config_base_dir
        self._manage_logging = manage_logging
        self._initialized = False
        self._torn_down = False

        self.container: Optional[DependencyContainer] = None
        self.error_handler: Optional[ErrorHandler] = None
        self.config_manager: Optional[ConfigurationManager] = None
        self.logging_manager: Optional[LoggingManager] = None
        self.tracker: Optional[TimeTracker] = None
        self.timeline: Optional[ClipTimelineManager] = None
        self.clip_player: Optional[ClipPlayer] = None
        self.seek_controller: Optional[SeekController] = None

    # ========================================
    # Lifecycle
    # ========================================

    def initialize(self) -> bool:
        """Create the container and managers and initialize them in order."""
        self.container = DependencyContainer()

        self.error_handler = ErrorHandler()
        self.container.register_service('error_handler', self.error_handler)
        self.container.register_service('app_state', self.app_state)
        self.container.register_service('timer_factory', self._timer_factory)

        self.config_manager = ConfigurationManager(
            self.parent_widget, self.container, base_dir=self._config_base_dir)
        self.container.register_service('configuration', self.config_manager)

        managers = [('ConfigurationManager', self.config_manager)]

        if self._manage_logging:
            self.logging_manager = LoggingManager(self.parent_widget, self.container)
            self.container.register_service('logging', self.logging_manager)
            managers.append(('LoggingManager', self.logging_manager))

        self.tracker = TimeTracker(self.parent_widget, self.container)
        self.timeline = ClipTimelineManager(self.parent_widget, self.container)
        self.clip_player = ClipPlayer(self.parent_widget, self.container)
        self.seek_controller = SeekController(self.parent_widget, self.container)

        self.container.register_service('time_tracker', self.tracker)
        self.container.register_service('timeline', self.timeline)
        self.container.register_service('clip_player', self.clip_player)
        self.container.register_service('seek_controller', self.seek_controller)

        managers += [
            ('TimeTracker', self.tracker),
            ('ClipTimelineManager', self.timeline),
            ('ClipPlayer', self.clip_player),
            ('SeekController', self.seek_controller),
        ]

        for name, manager in managers:
            if not manager.initialize():
                self.logger.error(f"Failed to initialize {name}")
                return False
            self.logger.debug(f"{name} initialized")

        self._initialized = True
        self.logger.info("Clip session initialized")
        return True

    def is_initialized(self) -> bool:
        return self._initialized

    def initialize_provider(self, initializer: Callable[[], PlaybackProvider]) -> PlaybackProvider:
        """
        Create the playback provider by calling ``initializer`` once.

        Calling this again replaces the provider: the previous one is
        released and the pending start marker and playback position are
        reset. Committed clips are kept.
        """
        if self.provider is not None:
            self.logger.info("Re-initializing playback provider")
            self._release_provider()

        provider = initializer()
        self.provider = provider
        provider.signals.ready.connect(self._on_provider_ready)
        provider.signals.state_changed.connect(self._on_state_changed)

        self.logger.info(f"Playback provider created: {type(provider).__name__}")
        return provider

    def teardown(self) -> None:
        """Stop all timers and clean up every manager."""
        if self._torn_down:
            return
        self._torn_down = True

        if self.tracker is not None:
            self.tracker.stop()
        if self.clip_player is not None:
            self.clip_player.invalidate()
        if self.provider is not None:
            self._disconnect_provider(self.provider)
            self.provider.release()
            self.provider = None

        if self.container is not None:
            self.container.clear()
        self.logger.info("Clip session torn down")

    # ========================================
    # Provider notifications
    # ========================================

    def _on_provider_ready(self, duration: float) -> None:
        self.app_state.provider_ready = True
        for manager in self._provider_bound_managers():
            manager.attach_provider(self.provider)

        self.tracker.set_duration(duration)
        self.logger.info(f"Provider ready, duration {utils.format_time(duration)}")
        self.signals.provider_ready.emit(float(duration))

    def _on_state_changed(self, state: PlayerState) -> None:
        is_playing = state == PlayerState.PLAYING

        if is_playing and self.app_state.provider_ready:
            if self.tracker.duration <= 0:
                self.tracker.set_duration(self.provider.get_duration())
            self.tracker.start(self.provider)
        else:
            self.tracker.stop()

        if is_playing != self.app_state.is_playing:
            self.app_state.is_playing = is_playing
            self.signals.playing_changed.emit(is_playing)

    def _release_provider(self) -> None:
        provider = self.provider
        self._disconnect_provider(provider)

        self.tracker.reset()
        self.clip_player.invalidate()
        self.timeline.clear_pending_marker()
        for manager in self._provider_bound_managers():
            manager.detach_provider()

        self.app_state.provider_ready = False
        if self.app_state.is_playing:
            self.app_state.is_playing = False
            self.signals.playing_changed.emit(False)

        provider.release()
        self.provider = None
        self.signals.provider_reset.emit()

    def _disconnect_provider(self, provider: PlaybackProvider) -> None:
        try:
            provider.signals.ready.disconnect(self._on_provider_ready)
            provider.signals.state_changed.disconnect(self._on_state_changed)
        except TypeError:
            self.logger.debug("Provider signals were already disconnected")

    def _provider_bound_managers(self):
        return [self.tracker, self.clip_player, self.seek_controller]

    def _require_ready_provider(self, operation: str) -> PlaybackProvider:
        if self.provider is None or not self.app_state.provider_ready:
            raise ProviderUnavailable(operation)
        return self.provider

    # ========================================
    # Transport commands
    # ========================================

    @ignore_when_unavailable
    def play(self) -> None:
        provider = self._require_ready_provider("play")
        self.clip_player.invalidate()
        provider.play_video()

    @ignore_when_unavailable
    def pause(self) -> None:
        provider = self._require_ready_provider("pause")
        self.clip_player.invalidate()
        provider.pause_video()

    def toggle_play_pause(self) -> None:
        if self.app_state.is_playing:
            self.pause()
        else:
            self.play()

    @ignore_when_unavailable
    def seek(self, seconds: float) -> Optional[float]:
        self._require_ready_provider("seek")
        self.clip_player.invalidate()
        return self.seek_controller.seek(seconds)

    @ignore_when_unavailable
    def seek_fraction(self, fraction: float) -> Optional[float]:
        self._require_ready_provider("seek")
        self.clip_player.invalidate()
        return self.seek_controller.seek_fraction(fraction)

    @ignore_when_unavailable
    def seek_relative(self, delta: float) -> Optional[float]:
        self._require_ready_provider("seek")
        self.clip_player.invalidate()
        return self.seek_controller.seek_relative(delta)

    # ========================================
    # Clip commands
    # ========================================

    @property
    def current_time(self) -> float:
        return self.tracker.current_time

    @property
    def duration(self) -> float:
        return self.tracker.duration

    def mark_start(self) -> float:
        """Mark the current playback position as the pending clip start."""
        position = self.tracker.current_time
        self.timeline.mark_start(position)
        return position

    def mark_end(self) -> Optional[Clip]:
        """
        Commit a clip ending at the current playback position.

        Marking errors are reported through the error handler as a
        warning and None is returned; the pending start is kept.
        """
        try:
            return self.timeline.mark_end(self.tracker.current_time)
        except ClipRangeError as e:
            context = ErrorContext(
                component="Clip Timeline",
                operation="mark_end",
                user_action="Set End Time & Create Clip"
            )
            self.error_handler.handle_error(e, context, ErrorSeverity.WARNING)
            return None

    def play_clip(self, clip_id: int) -> Optional[int]:
        clip = self.timeline.get_clip(clip_id)
        if clip is None:
            self.logger.warning(f"Cannot play unknown clip {clip_id}")
            return None
        return self.clip_player.play(clip)

    def delete_clip(self, clip_id: int) -> bool:
        return self.timeline.delete_clip(clip_id)

    def list_clips(self) -> Tuple[Clip, ...]:
        return self.timeline.list_clips()

    def deep_link(self, clip: Clip) -> str:
        return utils.build_deep_link(
            self.config_manager.get_setting('video.video_id'),
            clip.start_time,
            host=self.config_manager.get_setting('video.link_host', utils.DEFAULT_LINK_HOST),
        )

    def embed_link(self, clip: Clip) -> str:
        return utils.build_embed_link(
            self.config_manager.get_setting('video.video_id'),
            clip.start_time,
            clip.end_time,
            host=self.config_manager.get_setting('video.link_host', utils.DEFAULT_LINK_HOST),
        )
