import math
from dataclasses import dataclass, field

from .exceptions import InvalidRange


@dataclass(frozen=True)
class Clip:
    """A committed start/end range over the source video."""
    id: int
    start_time: float
    end_time: float

    def __post_init__(self):
        if not (math.isfinite(self.start_time) and math.isfinite(self.end_time)
                and 0 <= self.start_time < self.end_time):
            raise InvalidRange(self.start_time, self.end_time)

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time


@dataclass
class PlaybackPosition:
    """Holds the last known playback position, in seconds."""
    current_time: float = 0.0
    duration: float = 0.0


@dataclass
class TimelineState:
    """Holds the pending start marker and the committed clips."""
    pending_start: float | None = None
    clips: list[Clip] = field(default_factory=list)


@dataclass
class AppState:
    """Holds the primary state for the application."""
    is_playing: bool = False
    provider_ready: bool = False

    # Nested state objects
    position: PlaybackPosition = field(default_factory=PlaybackPosition)
    timeline: TimelineState = field(default_factory=TimelineState)
