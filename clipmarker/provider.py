"""
Playback Provider

The capability set the core needs from a video widget. The managers only
ever talk to this interface, so any player (or a test double) can sit
behind it.
"""

from abc import ABC, abstractmethod
from enum import Enum

from PyQt6.QtCore import QObject, pyqtSignal


class PlayerState(Enum):
    """Playback states reported by a provider."""
    UNSTARTED = "unstarted"
    PLAYING = "playing"
    PAUSED = "paused"
    BUFFERING = "buffering"
    ENDED = "ended"


class ProviderSignals(QObject):
    """Signal emitter for PlaybackProvider notifications."""
    ready = pyqtSignal(float)  # initial_duration
    state_changed = pyqtSignal(object)  # PlayerState


class PlaybackProvider(ABC):
    """
    Abstract video playback provider.

    Implementations emit ``signals.ready`` once, when the media duration is
    known, and ``signals.state_changed`` on every transport state change.
    All commands are fire-and-forget.
    """

    def __init__(self):
        self.signals = ProviderSignals()

    @abstractmethod
    def get_current_time(self) -> float:
        """Current playback position in seconds."""

    @abstractmethod
    def get_duration(self) -> float:
        """Media duration in seconds, 0 if unknown."""

    @abstractmethod
    def seek_to(self, seconds: float, allow_seek_ahead: bool = True) -> None:
        """Move the playhead to ``seconds``."""

    @abstractmethod
    def play_video(self) -> None:
        pass

    @abstractmethod
    def pause_video(self) -> None:
        pass

    def release(self) -> None:
        """Release any resources held by the provider."""
