"""
Exception types raised by the clip timeline and playback managers.
"""


class ClipMarkerError(Exception):
    """Base class for all Clip Marker errors."""


class ClipRangeError(ClipMarkerError):
    """A start/end mark could not be committed into a clip."""


class NoStartMarker(ClipRangeError):
    """Raised when an end mark is requested before any start mark."""

    def __init__(self):
        super().__init__("No start time has been set")


class InvalidRange(ClipRangeError):
    """Raised when an end time does not come after its start time."""

    def __init__(self, start_time: float, end_time: float):
        self.start_time = start_time
        self.end_time = end_time
        super().__init__(
            f"End time {end_time:.2f}s must be after start time {start_time:.2f}s"
        )


class ProviderUnavailable(ClipMarkerError):
    """Raised when a playback command is issued before the provider is ready."""

    def __init__(self, operation: str = ""):
        self.operation = operation
        message = "Playback provider is not ready"
        if operation:
            message = f"{message} for {operation}"
        super().__init__(message)
