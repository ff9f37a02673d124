"""
Clip Timeline Manager

Holds the pending start marker and the ordered collection of committed
clips. Turns start/end marks into clips and supports deletion.
"""

import itertools
import math
from typing import Optional, Tuple
from PyQt6.QtCore import QObject, pyqtSignal

from .base import BaseManager
from ..exceptions import NoStartMarker, InvalidRange
from ..state import AppState, Clip
from .. import utils


class ClipTimelineManagerSignals(QObject):
    """Signal emitter for ClipTimelineManager."""
    clip_created = pyqtSignal(object)  # Clip
    clip_deleted = pyqtSignal(object)  # Clip
    clips_changed = pyqtSignal()
    pending_marker_changed = pyqtSignal(object)  # float or None


class ClipTimelineManager(BaseManager):
    """
    Manages the pending start marker and the clip collection.

    The collection only grows by ``mark_end`` and shrinks by ``delete_clip``;
    it is never reordered. A failed ``mark_end`` leaves both the pending
    marker and the collection untouched so the user can retry.
    """

    def __init__(self, parent_widget, dependency_container):
        super().__init__(parent_widget, dependency_container)
        self.signals = ClipTimelineManagerSignals()
        self.app_state: Optional[AppState] = None
        self._ids = itertools.count(1)

    def initialize(self) -> bool:
        try:
            self.app_state = self.container.get_service('app_state')
            self._mark_initialized()
            return True

        except Exception as e:
            self.handle_error(e, "ClipTimelineManager initialization")
            return False

    def cleanup(self) -> None:
        self._mark_cleanup_started()
        self.logger.info(f"Discarding {len(self.app_state.timeline.clips)} clips")

    @property
    def pending_start(self) -> Optional[float]:
        return self.app_state.timeline.pending_start

    def has_pending_marker(self) -> bool:
        return self.app_state.timeline.pending_start is not None

    def mark_start(self, position: float) -> None:
        """
        Set the pending start marker, replacing any earlier one.

        Negative positions are clamped to 0.

        Raises:
            ValueError: ``position`` is not a finite number
        """
        position = float(position)
        if not math.isfinite(position):
            raise ValueError(f"Start position must be finite, got {position}")

        position = max(0.0, position)
        self.app_state.timeline.pending_start = position
        self.logger.info(f"Start marked at {utils.format_time(position)} ({position:.3f}s)")
        self.signals.pending_marker_changed.emit(self.app_state.timeline.pending_start)

    def mark_end(self, position: float) -> Clip:
        """
        Commit the pending start marker and ``position`` as a new clip.

        Raises:
            NoStartMarker: No start marker has been set
            InvalidRange: ``position`` is not after the pending start
        """
        start = self.app_state.timeline.pending_start
        if start is None:
            raise NoStartMarker()

        end = float(position)
        if not math.isfinite(end) or end <= start:
            raise InvalidRange(start, end)

        clip = Clip(id=next(self._ids), start_time=start, end_time=end)
        self.app_state.timeline.clips.append(clip)
        self.app_state.timeline.pending_start = None

        self.logger.info(
            f"Created clip {clip.id}: {utils.format_time(clip.start_time)} -> "
            f"{utils.format_time(clip.end_time)} ({clip.duration:.2f}s)"
        )
        self.signals.pending_marker_changed.emit(None)
        self.signals.clip_created.emit(clip)
        self.signals.clips_changed.emit()
        return clip

    def clear_pending_marker(self) -> None:
        if self.app_state.timeline.pending_start is None:
            return
        self.app_state.timeline.pending_start = None
        self.signals.pending_marker_changed.emit(None)

    def delete_clip(self, clip_id: int) -> bool:
        """
        Remove the clip with ``clip_id``.

        Returns:
            True if a clip was removed, False if no clip has that id
        """
        clips = self.app_state.timeline.clips
        for index, clip in enumerate(clips):
            if clip.id == clip_id:
                del clips[index]
                self.logger.info(f"Deleted clip {clip_id}")
                self.signals.clip_deleted.emit(clip)
                self.signals.clips_changed.emit()
                return True

        self.logger.debug(f"No clip with id {clip_id} to delete")
        return False

    def list_clips(self) -> Tuple[Clip, ...]:
        """All clips in creation order."""
        return tuple(self.app_state.timeline.clips)

    def get_clip(self, clip_id: int) -> Optional[Clip]:
        for clip in self.app_state.timeline.clips:
            if clip.id == clip_id:
                return clip
        return None

    def clip_number(self, clip_id: int) -> int:
        """1-based position of the clip in the list, 0 if it does not exist."""
        for index, clip in enumerate(self.app_state.timeline.clips, start=1):
            if clip.id == clip_id:
                return index
        return 0
