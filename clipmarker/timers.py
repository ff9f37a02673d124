"""
Timer handles for polling and delayed playback commands.

Every timer used by the managers is an owned TimerHandle with explicit
start/stop, created through a timer factory registered in the dependency
container. Tests swap the factory for a manual clock.
"""

from typing import Callable, Optional

from PyQt6.QtCore import QObject, QTimer


class TimerHandle:
    """An owned, cancellable QTimer."""

    def __init__(self, interval_ms: int, callback: Callable[[], None],
                 single_shot: bool = False, parent: Optional[QObject] = None):
        self._timer = QTimer(parent)
        self._timer.setSingleShot(single_shot)
        self._timer.setInterval(max(0, int(interval_ms)))
        self._timer.timeout.connect(callback)

    @property
    def interval_ms(self) -> int:
        return self._timer.interval()

    @property
    def single_shot(self) -> bool:
        return self._timer.isSingleShot()

    def start(self) -> None:
        """Start the timer, restarting it if it is already running."""
        self._timer.start()

    def stop(self) -> None:
        self._timer.stop()

    def is_active(self) -> bool:
        return self._timer.isActive()


class QtTimerFactory:
    """Creates TimerHandle instances backed by the Qt event loop."""

    def __init__(self, parent: Optional[QObject] = None):
        self.parent = parent

    def repeating(self, interval_ms: int, callback: Callable[[], None]) -> TimerHandle:
        return TimerHandle(interval_ms, callback, single_shot=False, parent=self.parent)

    def single_shot(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle:
        return TimerHandle(delay_ms, callback, single_shot=True, parent=self.parent)
