import logging
import os

from PyQt6.QtWidgets import (QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton,
                             QMessageBox, QListWidget, QListWidgetItem)
from PyQt6.QtMultimedia import QMediaPlayer, QAudioOutput
from PyQt6.QtMultimediaWidgets import QVideoWidget
from PyQt6.QtCore import Qt, QUrl, QSettings
from PyQt6.QtGui import QAction, QKeySequence, QDesktopServices

from . import utils
from . import widgets
from .qt_provider import QMediaPlayerProvider
from .session import ClipSession

logger = logging.getLogger('ui')


class ClipMakerWindow(QWidget):
    def __init__(self, source: str = "", video_id: str = ""):
        super().__init__()
        self.settings = QSettings()

        self.setWindowTitle("Clip Marker")
        self.setMinimumSize(1100, 640)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self._layout = QHBoxLayout(self)
        self._layout.setSpacing(12)
        self._layout.setContentsMargins(12, 12, 12, 12)

        self.session = ClipSession(parent_widget=self)
        if not self.session.initialize():
            QMessageBox.critical(self, "Initialization Error",
                                 "Failed to initialize the clip session. See the log for details.")

        if video_id:
            self.session.config_manager.override_setting('video.video_id', video_id)
        if source:
            self.session.config_manager.override_setting('video.source', source)

        self._create_video_section()
        self._create_clips_section()
        self._create_actions_and_shortcuts()
        self._create_player()
        self._connect_session_signals()

        self.load_settings()
        self._refresh_clip_list()
        self._update_pending_marker(None)

        source = self.session.config_manager.get_setting('video.source', '')
        if source:
            self.load_source(source)

    # ========================================
    # Layout
    # ========================================

    def _create_video_section(self):
        video_section = QVBoxLayout()

        self.video_widget = QVideoWidget()
        self.video_widget.setMinimumSize(640, 360)
        video_section.addWidget(self.video_widget, 1)

        control_layout = QHBoxLayout(); control_layout.setSpacing(8)
        self.skip_bwd_btn = QPushButton("« 15s"); self.skip_bwd_btn.clicked.connect(lambda: self.session.seek_relative(-15))
        self.play_btn = QPushButton("▶ Play"); self.play_btn.clicked.connect(self.session.toggle_play_pause)
        self.skip_fwd_btn = QPushButton("15s »"); self.skip_fwd_btn.clicked.connect(lambda: self.session.seek_relative(15))
        self.time_label = QLabel("0:00 / 0:00")
        for w in [self.skip_bwd_btn, self.play_btn, self.skip_fwd_btn, self.time_label]:
            control_layout.addWidget(w)
        control_layout.addStretch()
        video_section.addLayout(control_layout)

        self.scrubber = widgets.ClipScrubber(Qt.Orientation.Horizontal)
        self.scrubber.setRange(0, 0)
        self.scrubber.sliderMoved.connect(self._handle_scrubber_moved)
        self.scrubber.sliderReleased.connect(self._handle_scrubber_release)
        video_section.addWidget(self.scrubber)

        clip_controls = QVBoxLayout()
        self.mark_start_btn = QPushButton("Set Start Time"); self.mark_start_btn.clicked.connect(self.mark_start_time)
        self.start_time_label = QLabel("")
        self.start_time_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.mark_end_btn = QPushButton("Set End Time && Create Clip"); self.mark_end_btn.clicked.connect(self.mark_end_time)
        for w in [self.mark_start_btn, self.start_time_label, self.mark_end_btn]:
            clip_controls.addWidget(w)
        video_section.addLayout(clip_controls)

        self._layout.addLayout(video_section, 1)

    def _create_clips_section(self):
        clips_section = QVBoxLayout()
        self.clips_title = QLabel("Your Clips (0)")
        self.clips_title.setStyleSheet("font-size: 16px; font-weight: bold;")
        self.empty_label = QLabel("No clips yet. Set a start and end time to create your first clip!")
        self.empty_label.setWordWrap(True)
        self.clip_list = QListWidget()
        self.clip_list.setMinimumWidth(340)

        clips_section.addWidget(self.clips_title)
        clips_section.addWidget(self.empty_label)
        clips_section.addWidget(self.clip_list, 1)
        self._layout.addLayout(clips_section)

    def _create_actions_and_shortcuts(self):
        play_pause_action = QAction("Play/Pause", self)
        play_pause_action.setShortcut(QKeySequence(Qt.Key.Key_Space))
        play_pause_action.triggered.connect(self.session.toggle_play_pause)
        self.addAction(play_pause_action)

        mark_start_action = QAction("Set Start Time", self)
        mark_start_action.setShortcut(QKeySequence(Qt.Key.Key_I))
        mark_start_action.triggered.connect(self.mark_start_time)
        self.addAction(mark_start_action)

        mark_end_action = QAction("Set End Time", self)
        mark_end_action.setShortcut(QKeySequence(Qt.Key.Key_O))
        mark_end_action.triggered.connect(self.mark_end_time)
        self.addAction(mark_end_action)

    def _create_player(self):
        self.player = QMediaPlayer(self)
        self.audio_output = QAudioOutput(self)
        self.player.setAudioOutput(self.audio_output)
        self.player.setVideoOutput(self.video_widget)
        self.session.initialize_provider(lambda: QMediaPlayerProvider(self.player))

    def _connect_session_signals(self):
        session = self.session
        session.error_handler.error_occurred.connect(self._on_manager_error)
        session.error_handler.critical_error.connect(self._on_critical_error)
        session.signals.playing_changed.connect(self._on_playing_changed)
        session.tracker.signals.position_changed.connect(self._on_position_changed)
        session.tracker.signals.duration_changed.connect(self._on_duration_changed)
        session.timeline.signals.pending_marker_changed.connect(self._update_pending_marker)
        session.timeline.signals.clips_changed.connect(self._refresh_clip_list)

    # ========================================
    # Media
    # ========================================

    def load_source(self, source: str):
        """Load a local file path or URL into the player."""
        if os.path.exists(source):
            url = QUrl.fromLocalFile(os.path.abspath(source))
        else:
            url = QUrl.fromUserInput(source)
        logger.info(f"Loading media: {url.toString()}")
        self.player.setSource(url)

    # ========================================
    # User actions
    # ========================================

    def mark_start_time(self):
        self.session.mark_start()

    def mark_end_time(self):
        if not self.mark_end_btn.isEnabled():
            return
        self.session.mark_end()

    def _handle_scrubber_moved(self, value_ms):
        self.session.seek(value_ms / 1000.0)

    def _handle_scrubber_release(self):
        self.session.seek(self.scrubber.value() / 1000.0)

    def _play_clip(self, clip_id):
        self.session.play_clip(clip_id)

    def _open_clip(self, clip_id):
        clip = self.session.timeline.get_clip(clip_id)
        if clip is None:
            return
        link = self.session.deep_link(clip)
        logger.info(f"Opening {link}")
        QDesktopServices.openUrl(QUrl(link))

    def _delete_clip(self, clip_id):
        self.session.delete_clip(clip_id)

    # ========================================
    # Session signal handlers
    # ========================================

    def _on_playing_changed(self, is_playing: bool):
        self.play_btn.setText("⏸ Pause" if is_playing else "▶ Play")

    def _on_position_changed(self, position: float):
        if not self.scrubber.isSliderDown():
            self.scrubber.blockSignals(True)
            self.scrubber.setValue(int(position * 1000))
            self.scrubber.blockSignals(False)
        self._update_time_label()

    def _on_duration_changed(self, duration: float):
        self.scrubber.setRange(0, int(duration * 1000))
        self._update_time_label()

    def _update_time_label(self):
        self.time_label.setText(f"{utils.format_time(self.session.current_time)} / "
                                f"{utils.format_time(self.session.duration)}")

    def _update_pending_marker(self, pending_start):
        if pending_start is None:
            self.start_time_label.setText("")
            self.scrubber.set_pending_start(None)
        else:
            self.start_time_label.setText(f"Start: {utils.format_time(pending_start)}")
            self.scrubber.set_pending_start(int(pending_start * 1000))
        self.mark_end_btn.setEnabled(pending_start is not None)

    def _refresh_clip_list(self):
        clips = self.session.list_clips()
        self.clips_title.setText(f"Your Clips ({len(clips)})")
        self.empty_label.setVisible(not clips)
        self.clip_list.setVisible(bool(clips))

        self.clip_list.clear()
        for number, clip in enumerate(clips, start=1):
            row = widgets.ClipListItemWidget(clip, number)
            row.play_requested.connect(self._play_clip)
            row.open_requested.connect(self._open_clip)
            row.delete_requested.connect(self._delete_clip)

            item = QListWidgetItem(self.clip_list)
            item.setSizeHint(row.sizeHint())
            self.clip_list.addItem(item)
            self.clip_list.setItemWidget(item, row)

        self.scrubber.set_clip_ranges(
            (int(c.start_time * 1000), int(c.end_time * 1000)) for c in clips)

    def _on_manager_error(self, severity: str, title: str, message: str) -> None:
        """Show marking and manager errors to the user."""
        if severity == "critical":
            QMessageBox.critical(self, title, message)
        elif severity in ("error", "warning"):
            QMessageBox.warning(self, title, message)
        else:
            logger.info(f"{title}: {message}")

    def _on_critical_error(self, message: str) -> None:
        QMessageBox.critical(self, "Critical Error",
                             f"A critical error occurred:\n\n{message}\n\n"
                             "The application may not function correctly.")

    def show_error_message(self, message: str) -> None:
        QMessageBox.warning(self, "Error", message)

    # ========================================
    # Settings and shutdown
    # ========================================

    def load_settings(self):
        geometry = self.settings.value("windowGeometry")
        if geometry is not None:
            self.restoreGeometry(geometry)

    def save_settings(self):
        self.settings.setValue("windowGeometry", self.saveGeometry())

    def closeEvent(self, event):
        self.save_settings()
        self.session.teardown()
        super().closeEvent(event)
