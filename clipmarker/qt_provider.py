"""
QMediaPlayer-backed Playback Provider.
"""

import logging

from PyQt6.QtCore import QUrl
from PyQt6.QtMultimedia import QMediaPlayer

from .provider import PlaybackProvider, PlayerState


_PLAYBACK_STATES = {
    QMediaPlayer.PlaybackState.PlayingState: PlayerState.PLAYING,
    QMediaPlayer.PlaybackState.PausedState: PlayerState.PAUSED,
    QMediaPlayer.PlaybackState.StoppedState: PlayerState.UNSTARTED,
}


class QMediaPlayerProvider(PlaybackProvider):
    """Adapts a QMediaPlayer (milliseconds, Qt enums) to the provider interface."""

    def __init__(self, player: QMediaPlayer):
        super().__init__()
        self.player = player
        self.logger = logging.getLogger(self.__class__.__name__)
        self._ready = False
        self._last_state = PlayerState.UNSTARTED

        player.mediaStatusChanged.connect(self._handle_media_status_changed)
        player.playbackStateChanged.connect(self._handle_playback_state_changed)

    def is_ready(self) -> bool:
        return self._ready

    def get_current_time(self) -> float:
        return max(0, self.player.position()) / 1000.0

    def get_duration(self) -> float:
        return max(0, self.player.duration()) / 1000.0

    def seek_to(self, seconds: float, allow_seek_ahead: bool = True) -> None:
        # QMediaPlayer always fetches unbuffered ranges, so seek-ahead is implied
        self.player.setPosition(int(round(seconds * 1000)))

    def play_video(self) -> None:
        self.player.play()

    def pause_video(self) -> None:
        self.player.pause()

    def release(self) -> None:
        try:
            self.player.mediaStatusChanged.disconnect(self._handle_media_status_changed)
            self.player.playbackStateChanged.disconnect(self._handle_playback_state_changed)
        except TypeError:
            self.logger.debug("Player signals were already disconnected")
        self.player.stop()
        self.player.setSource(QUrl())

    def _handle_media_status_changed(self, status) -> None:
        """Translate media status into ready and ENDED/BUFFERING notifications."""
        if status in (QMediaPlayer.MediaStatus.LoadedMedia,
                      QMediaPlayer.MediaStatus.BufferedMedia) and not self._ready:
            self._ready = True
            duration = self.get_duration()
            self.logger.info(f"Media ready, duration {duration:.2f}s")
            self.signals.ready.emit(duration)
        elif status == QMediaPlayer.MediaStatus.EndOfMedia:
            self._emit_state(PlayerState.ENDED)
        elif status in (QMediaPlayer.MediaStatus.BufferingMedia,
                        QMediaPlayer.MediaStatus.StalledMedia):
            if self._last_state == PlayerState.PLAYING:
                self._emit_state(PlayerState.BUFFERING)
        elif status == QMediaPlayer.MediaStatus.BufferedMedia:
            if self._last_state == PlayerState.BUFFERING:
                self._emit_state(PlayerState.PLAYING)
        elif status == QMediaPlayer.MediaStatus.InvalidMedia:
            self.logger.warning(f"Invalid media: {self.player.errorString()}")

    def _handle_playback_state_changed(self, state) -> None:
        mapped = _PLAYBACK_STATES.get(state, PlayerState.UNSTARTED)
        if (mapped == PlayerState.UNSTARTED and
                self.player.mediaStatus() == QMediaPlayer.MediaStatus.EndOfMedia):
            mapped = PlayerState.ENDED
        self._emit_state(mapped)

    def _emit_state(self, state: PlayerState) -> None:
        if state == self._last_state:
            return
        self._last_state = state
        self.logger.debug(f"Player state -> {state.value}")
        self.signals.state_changed.emit(state)
