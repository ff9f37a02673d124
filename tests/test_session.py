"""Tests for the clip session wiring."""

import pytest

from clipmarker.provider import PlayerState


class TestLifecycle:
    """Test session initialization and teardown."""

    def test_initialize_registers_managers(self, session):
        for name in ['error_handler', 'app_state', 'timer_factory', 'configuration',
                     'time_tracker', 'timeline', 'clip_player', 'seek_controller']:
            assert session.container.has_service(name)
        assert session.is_initialized()

    def test_provider_initializer_called_once(self, session, provider):
        calls = []

        def initializer():
            calls.append(True)
            return provider

        assert session.initialize_provider(initializer) is provider
        assert calls == [True]
        assert session.provider is provider

    def test_ready_attaches_provider(self, ready_session, provider):
        assert ready_session.app_state.provider_ready
        assert ready_session.duration == 120.0
        for manager in [ready_session.tracker, ready_session.clip_player,
                        ready_session.seek_controller]:
            assert manager.provider is provider

    def test_provider_ready_signal(self, session, provider):
        durations = []
        session.signals.provider_ready.connect(durations.append)
        session.initialize_provider(lambda: provider)

        provider.become_ready()

        assert durations == [120.0]

    def test_teardown_stops_timers(self, ready_session, provider, clock):
        provider.set_state(PlayerState.PLAYING)
        ready_session.timeline.mark_start(0.0)
        clip = ready_session.timeline.mark_end(5.0)
        ready_session.play_clip(clip.id)

        ready_session.teardown()

        assert clock.active_timers() == []
        assert provider.released

    def test_teardown_is_idempotent(self, ready_session):
        ready_session.teardown()
        ready_session.teardown()


class TestPlaybackState:
    """Test reactions to provider state changes."""

    def test_playing_starts_tracking(self, ready_session, provider, clock):
        provider.set_state(PlayerState.PLAYING)
        provider.current_time = 12.0

        clock.advance(0.1)

        assert ready_session.tracker.is_tracking()
        assert ready_session.current_time == 12.0
        assert ready_session.app_state.is_playing

    @pytest.mark.parametrize("state", [PlayerState.PAUSED, PlayerState.BUFFERING,
                                       PlayerState.ENDED, PlayerState.UNSTARTED])
    def test_other_states_stop_tracking(self, ready_session, provider, clock, state):
        provider.set_state(PlayerState.PLAYING)

        provider.set_state(state)

        assert not ready_session.tracker.is_tracking()
        assert clock.active_timers() == []
        assert not ready_session.app_state.is_playing

    def test_repeated_playing_keeps_one_timer(self, ready_session, provider, clock):
        provider.set_state(PlayerState.PLAYING)
        provider.set_state(PlayerState.PAUSED)
        provider.set_state(PlayerState.PLAYING)

        assert len(clock.active_timers()) == 1

    def test_playing_before_ready_does_not_track(self, session, provider, clock):
        session.initialize_provider(lambda: provider)

        provider.set_state(PlayerState.PLAYING)

        assert clock.active_timers() == []

    def test_playing_changed_signal(self, ready_session, provider):
        changes = []
        ready_session.signals.playing_changed.connect(changes.append)

        provider.set_state(PlayerState.PLAYING)
        provider.set_state(PlayerState.BUFFERING)
        provider.set_state(PlayerState.PAUSED)

        assert changes == [True, False]


class TestCommands:
    """Test transport commands."""

    def test_commands_before_ready_are_noops(self, session, provider):
        session.initialize_provider(lambda: provider)

        assert session.seek(10.0) is None
        session.play()
        session.pause()
        session.seek_relative(5)
        session.seek_fraction(0.5)

        assert provider.calls == []

    def test_commands_without_provider_are_noops(self, session):
        session.play()
        session.toggle_play_pause()
        assert session.seek(1.0) is None

    def test_toggle_play_pause(self, ready_session, provider):
        ready_session.toggle_play_pause()
        provider.set_state(PlayerState.PLAYING)
        ready_session.toggle_play_pause()

        assert provider.command_names() == ['play_video', 'pause_video']

    def test_seek_updates_position(self, ready_session, provider):
        assert ready_session.seek(200.0) == 120.0
        assert ready_session.current_time == 120.0
        assert ready_session.seek_fraction(0.5) == 60.0
        assert ready_session.seek_relative(-15) == 45.0

    @pytest.mark.parametrize("command", [
        lambda s: s.play(),
        lambda s: s.pause(),
        lambda s: s.seek(3.0),
        lambda s: s.seek_relative(1.0),
        lambda s: s.seek_fraction(0.1),
    ])
    def test_manual_command_cancels_clip_stop(self, ready_session, provider, clock, command):
        ready_session.timeline.mark_start(10.0)
        clip = ready_session.timeline.mark_end(20.0)
        ready_session.play_clip(clip.id)
        clock.advance(2.0)

        command(ready_session)
        pauses_before = len(provider.calls_named('pause_video'))
        clock.advance(20.0)

        assert len(provider.calls_named('pause_video')) == pauses_before
        assert not ready_session.clip_player.has_pending_stop()


class TestClips:
    """Test clip commands through the session."""

    def test_mark_start_and_end_use_current_time(self, ready_session):
        ready_session.seek(5.0)
        assert ready_session.mark_start() == 5.0

        ready_session.seek(12.5)
        clip = ready_session.mark_end()

        assert (clip.start_time, clip.end_time) == (5.0, 12.5)
        assert ready_session.list_clips() == (clip,)
        assert ready_session.timeline.pending_start is None

    def test_mark_end_without_start_reports_warning(self, ready_session):
        errors = []
        ready_session.error_handler.error_occurred.connect(
            lambda severity, title, message: errors.append((severity, title, message)))

        assert ready_session.mark_end() is None

        assert errors == [("warning", "Clip Timeline Error", "Please set a start time first")]
        assert ready_session.list_clips() == ()

    def test_mark_end_before_start_keeps_marker(self, ready_session):
        errors = []
        ready_session.error_handler.error_occurred.connect(
            lambda severity, title, message: errors.append(message))
        ready_session.seek(30.0)
        ready_session.mark_start()
        ready_session.seek(30.0)

        assert ready_session.mark_end() is None

        assert errors == ["End time must be after start time"]
        assert ready_session.timeline.pending_start == 30.0
        assert ready_session.list_clips() == ()

    def test_play_clip(self, ready_session, provider, clock):
        ready_session.timeline.mark_start(10.0)
        clip = ready_session.timeline.mark_end(25.0)

        ready_session.play_clip(clip.id)
        clock.advance(15.0)

        assert provider.command_names() == ['seek_to', 'play_video', 'pause_video']
        assert provider.calls_named('pause_video')[0][2] == pytest.approx(15.0, abs=0.05)

    def test_play_unknown_clip(self, ready_session, provider):
        assert ready_session.play_clip(99) is None
        assert provider.calls == []

    def test_delete_clip(self, ready_session):
        ready_session.timeline.mark_start(1.0)
        clip = ready_session.timeline.mark_end(2.0)

        assert ready_session.delete_clip(clip.id)
        assert not ready_session.delete_clip(clip.id)
        assert ready_session.list_clips() == ()

    def test_deep_link_uses_configured_video(self, ready_session):
        ready_session.config_manager.set_setting('video.video_id', 'abc123')
        ready_session.timeline.mark_start(10.7)
        clip = ready_session.timeline.mark_end(20.2)

        assert ready_session.deep_link(clip) == "https://www.youtube.com/watch?v=abc123&t=10s"
        assert ready_session.embed_link(clip) == \
            "https://www.youtube.com/embed/abc123?start=10&end=21"


class TestReinitialization:
    """Test replacing the provider."""

    def test_resets_marker_and_position_keeps_clips(self, ready_session, provider, clock, make_provider):
        ready_session.timeline.mark_start(1.0)
        clip = ready_session.timeline.mark_end(4.0)
        ready_session.seek(50.0)
        ready_session.mark_start()
        provider.set_state(PlayerState.PLAYING)

        replacement = make_provider(60.0)
        ready_session.initialize_provider(lambda: replacement)

        assert provider.released
        assert ready_session.timeline.pending_start is None
        assert ready_session.current_time == 0.0
        assert ready_session.duration == 0.0
        assert ready_session.list_clips() == (clip,)
        assert clock.active_timers() == []
        assert not ready_session.app_state.provider_ready

    def test_old_provider_notifications_are_ignored(self, ready_session, provider, clock, make_provider):
        replacement = make_provider(60.0)
        ready_session.initialize_provider(lambda: replacement)

        provider.set_state(PlayerState.PLAYING)
        provider.become_ready()

        assert clock.active_timers() == []
        assert not ready_session.app_state.provider_ready

    def test_new_provider_becomes_ready(self, ready_session, clock, make_provider):
        replacement = make_provider(60.0)
        ready_session.initialize_provider(lambda: replacement)

        replacement.become_ready()
        ready_session.seek(10.0)

        assert ready_session.duration == 60.0
        assert replacement.calls_named('seek_to')[0][1][0] == 10.0

    def test_pending_clip_stop_is_cancelled(self, ready_session, provider, clock, make_provider):
        ready_session.timeline.mark_start(0.0)
        clip = ready_session.timeline.mark_end(5.0)
        ready_session.play_clip(clip.id)

        ready_session.initialize_provider(lambda: make_provider())
        clock.advance(10.0)

        assert provider.calls_named('pause_video') == []

    def test_reset_signal(self, ready_session, clock, make_provider):
        resets = []
        ready_session.signals.provider_reset.connect(lambda: resets.append(True))

        ready_session.initialize_provider(lambda: make_provider())

        assert resets == [True]
