from PyQt6.QtWidgets import (QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton,
                             QSlider, QStyle, QStyleOptionSlider)
from PyQt6.QtCore import Qt, pyqtSignal, QPoint, QRect
from PyQt6.QtGui import QPainter, QColor, QPen

from . import utils


class ClipScrubber(QSlider):
    """Millisecond seek slider that paints committed clips and the pending start."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.clip_ranges = []  # (start_ms, end_ms)
        self.pending_start_ms = None

    def set_clip_ranges(self, ranges):
        self.clip_ranges = list(ranges)
        self.update()

    def set_pending_start(self, start_ms):
        self.pending_start_ms = start_ms
        self.update()

    def _value_to_pixel(self, value):
        return QStyle.sliderPositionFromValue(self.minimum(), self.maximum(), int(value), self.width())

    def get_style_option(self):
        opt = QStyleOptionSlider()
        self.initStyleOption(opt)
        return opt

    def paintEvent(self, event):
        super().paintEvent(event)
        if self.maximum() <= self.minimum():
            return

        painter = QPainter(self)
        groove_rect = self.style().subControlRect(QStyle.ComplexControl.CC_Slider, self.get_style_option(),
                                                  QStyle.SubControl.SC_SliderGroove, self)

        painter.setBrush(QColor(78, 205, 196, 80))
        painter.setPen(Qt.PenStyle.NoPen)
        for start_ms, end_ms in self.clip_ranges:
            start_px = self._value_to_pixel(start_ms)
            end_px = self._value_to_pixel(end_ms)
            painter.drawRect(QRect(QPoint(start_px, groove_rect.y()),
                                   QPoint(end_px, groove_rect.y() + groove_rect.height())))

        if self.pending_start_ms is not None:
            start_px = self._value_to_pixel(self.pending_start_ms)
            painter.setPen(QPen(QColor(30, 220, 100), 2))
            painter.drawLine(start_px, 0, start_px, self.height())

        painter.end()


class ClipListItemWidget(QWidget):
    """One row of the clip list: title, range, duration and actions."""
    play_requested = pyqtSignal(int)  # clip_id
    open_requested = pyqtSignal(int)  # clip_id
    delete_requested = pyqtSignal(int)  # clip_id

    def __init__(self, clip, number, parent=None):
        super().__init__(parent)
        self.clip_id = clip.id

        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 6, 8, 6)

        self.title_label = QLabel(f"Clip {number}")
        self.title_label.setStyleSheet("font-weight: 600;")
        self.times_label = QLabel(f"{utils.format_time(clip.start_time)} → {utils.format_time(clip.end_time)}")
        self.duration_label = QLabel(f"Duration: {utils.format_time(clip.duration)}")
        for w in [self.title_label, self.times_label, self.duration_label]:
            layout.addWidget(w)

        actions = QHBoxLayout()
        self.play_btn = QPushButton("▶ Play")
        self.play_btn.clicked.connect(lambda: self.play_requested.emit(self.clip_id))
        self.open_btn = QPushButton("Open")
        self.open_btn.clicked.connect(lambda: self.open_requested.emit(self.clip_id))
        self.delete_btn = QPushButton("Delete")
        self.delete_btn.clicked.connect(lambda: self.delete_requested.emit(self.clip_id))
        for btn in [self.play_btn, self.open_btn, self.delete_btn]:
            actions.addWidget(btn)
        actions.addStretch()
        layout.addLayout(actions)
