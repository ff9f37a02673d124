"""Shared fixtures: a Qt core application, a manual clock and a fake provider."""

import pytest
from PyQt6.QtCore import QCoreApplication

from clipmarker.managers import (DependencyContainer, ErrorHandler, TimeTracker,
                                 ClipTimelineManager, ClipPlayer, SeekController)
from clipmarker.provider import PlaybackProvider
from clipmarker.session import ClipSession
from clipmarker.state import AppState


@pytest.fixture(scope="session", autouse=True)
def qapp():
    """QObjects and signals need a core application; no display is required."""
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


# ── Manual clock ─────────────────────────────────────────────────────


class FakeTimer:
    """Timer handle driven by ManualClock instead of the Qt event loop."""

    def __init__(self, clock, interval_ms, callback, single_shot, seq):
        self.clock = clock
        self.interval_ms = int(interval_ms)
        self.callback = callback
        self.single_shot = single_shot
        self.seq = seq
        self.due_ms = None

    def start(self):
        self.due_ms = self.clock.now_ms + self.interval_ms

    def stop(self):
        self.due_ms = None

    def is_active(self):
        return self.due_ms is not None

    def fire(self):
        if self.single_shot:
            self.due_ms = None
        else:
            self.due_ms += max(1, self.interval_ms)
        self.callback()


class ManualClock:
    """Timer factory with simulated time, advanced explicitly by tests."""

    def __init__(self):
        self.now_ms = 0
        self.timers = []

    def repeating(self, interval_ms, callback):
        return self._create(interval_ms, callback, single_shot=False)

    def single_shot(self, delay_ms, callback):
        return self._create(delay_ms, callback, single_shot=True)

    def _create(self, interval_ms, callback, single_shot):
        timer = FakeTimer(self, interval_ms, callback, single_shot, len(self.timers))
        self.timers.append(timer)
        return timer

    @property
    def now(self):
        return self.now_ms / 1000.0

    def active_timers(self):
        return [t for t in self.timers if t.is_active()]

    def advance(self, seconds):
        """Move time forward, firing every timer that falls due on the way."""
        target_ms = self.now_ms + int(round(seconds * 1000))
        while True:
            due = [t for t in self.timers if t.is_active() and t.due_ms <= target_ms]
            if not due:
                break
            timer = min(due, key=lambda t: (t.due_ms, t.seq))
            self.now_ms = timer.due_ms
            timer.fire()
        self.now_ms = target_ms


# ── Fake provider ────────────────────────────────────────────────────


class FakeProvider(PlaybackProvider):
    """Records every command with the simulated time it was issued at."""

    def __init__(self, clock=None, duration=120.0):
        super().__init__()
        self.clock = clock
        self.duration = duration
        self.current_time = 0.0
        self.calls = []
        self.released = False

    def _record(self, name, *args):
        at = self.clock.now if self.clock is not None else None
        self.calls.append((name, args, at))

    def get_current_time(self):
        return self.current_time

    def get_duration(self):
        return self.duration

    def seek_to(self, seconds, allow_seek_ahead=True):
        self._record('seek_to', seconds, allow_seek_ahead)
        self.current_time = seconds

    def play_video(self):
        self._record('play_video')

    def pause_video(self):
        self._record('pause_video')

    def release(self):
        self.released = True

    def become_ready(self):
        self.signals.ready.emit(self.duration)

    def set_state(self, state):
        self.signals.state_changed.emit(state)

    def command_names(self):
        return [name for name, _, _ in self.calls]

    def calls_named(self, name):
        return [call for call in self.calls if call[0] == name]


# ── Fixtures ─────────────────────────────────────────────────────────


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def provider(clock):
    return FakeProvider(clock=clock)


@pytest.fixture
def app_state():
    return AppState()


@pytest.fixture
def error_handler():
    return ErrorHandler()


@pytest.fixture
def container(clock, app_state, error_handler):
    container = DependencyContainer()
    container.register_service('error_handler', error_handler)
    container.register_service('app_state', app_state)
    container.register_service('timer_factory', clock)
    yield container
    container.clear()


@pytest.fixture
def tracker(container):
    tracker = TimeTracker(None, container)
    assert tracker.initialize()
    container.register_service('time_tracker', tracker)
    return tracker


@pytest.fixture
def timeline(container):
    timeline = ClipTimelineManager(None, container)
    assert timeline.initialize()
    return timeline


@pytest.fixture
def clip_player(container):
    player = ClipPlayer(None, container)
    assert player.initialize()
    return player


@pytest.fixture
def seek_controller(container, tracker):
    controller = SeekController(None, container)
    assert controller.initialize()
    return controller


@pytest.fixture
def session(clock, tmp_path):
    session = ClipSession(timer_factory=clock, config_base_dir=tmp_path, manage_logging=False)
    assert session.initialize()
    yield session
    session.teardown()


@pytest.fixture
def ready_session(session, provider):
    """A session whose provider has reported ready with a 120 s duration."""
    session.initialize_provider(lambda: provider)
    provider.become_ready()
    return session


@pytest.fixture
def make_provider(clock):
    """Factory for additional providers sharing the test clock."""
    def factory(duration=120.0):
        return FakeProvider(clock=clock, duration=duration)
    return factory
