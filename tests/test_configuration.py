"""Tests for the JSON-backed configuration manager."""

import json

import pytest

from clipmarker.managers import ConfigurationManager, DependencyContainer


@pytest.fixture
def config(tmp_path):
    container = DependencyContainer()
    manager = ConfigurationManager(None, container, base_dir=tmp_path)
    assert manager.initialize()
    yield manager
    container.clear()


class TestDefaults:
    """Test default settings and directory layout."""

    def test_defaults(self, config):
        assert config.get_setting('video.video_id') == 'BYizgB2FcAQ'
        assert config.get_setting('video.link_host') == 'www.youtube.com'
        assert config.get_setting('playback.poll_interval_ms') == 100
        assert config.get_setting('playback.seek_ahead') is True

    def test_missing_key_returns_default(self, config):
        assert config.get_setting('video.missing') is None
        assert config.get_setting('nope.nothing', 'fallback') == 'fallback'

    def test_creates_directories_and_file(self, config, tmp_path):
        assert (tmp_path / 'config' / 'settings.json').exists()
        assert (tmp_path / 'logs').is_dir()

    def test_get_all_settings_is_a_copy(self, config):
        settings = config.get_all_settings()
        settings['video']['video_id'] = 'changed'

        assert config.get_setting('video.video_id') == 'BYizgB2FcAQ'


class TestSetSetting:
    """Test updates and validation."""

    def test_set_and_get(self, config):
        changes = []
        config.signals.setting_changed.connect(lambda key, value: changes.append((key, value)))

        assert config.set_setting('video.video_id', 'xyz')

        assert config.get_setting('video.video_id') == 'xyz'
        assert changes == [('video.video_id', 'xyz')]

    def test_unchanged_value_emits_nothing(self, config):
        changes = []
        config.signals.setting_changed.connect(lambda key, value: changes.append(key))

        config.set_setting('playback.poll_interval_ms', 100)

        assert changes == []

    @pytest.mark.parametrize("key, value", [
        ('playback.poll_interval_ms', 5),
        ('playback.poll_interval_ms', 5000),
        ('playback.poll_interval_ms', '100'),
        ('playback.poll_interval_ms', True),
        ('playback.seek_ahead', 'yes'),
        ('logging.default_level', 'VERBOSE'),
        ('video.video_id', 42),
    ])
    def test_rejects_invalid_values(self, config, key, value):
        failures = []
        config.signals.validation_failed.connect(lambda k, message: failures.append(k))
        before = config.get_setting(key)

        assert not config.set_setting(key, value)

        assert config.get_setting(key) == before
        assert failures == [key]

    def test_reset_setting(self, config):
        config.set_setting('playback.poll_interval_ms', 250)

        assert config.reset_setting('playback.poll_interval_ms')
        assert config.get_setting('playback.poll_interval_ms') == 100

    def test_reset_unknown_setting(self, config):
        assert not config.reset_setting('video.unknown')

    def test_reset_to_defaults(self, config):
        config.set_setting('video.video_id', 'xyz')

        assert config.reset_to_defaults()
        assert config.get_setting('video.video_id') == 'BYizgB2FcAQ'


class TestPersistence:
    """Test saving and loading."""

    def test_settings_survive_reload(self, config, tmp_path):
        config.set_setting('video.video_id', 'persisted')

        reloaded = ConfigurationManager(None, DependencyContainer(), base_dir=tmp_path)
        assert reloaded.initialize()

        assert reloaded.get_setting('video.video_id') == 'persisted'

    def test_stored_settings_are_merged_with_defaults(self, tmp_path):
        settings_file = tmp_path / 'config' / 'settings.json'
        settings_file.parent.mkdir(parents=True)
        settings_file.write_text(json.dumps({'video': {'video_id': 'stored'}}))

        manager = ConfigurationManager(None, DependencyContainer(), base_dir=tmp_path)
        assert manager.initialize()

        assert manager.get_setting('video.video_id') == 'stored'
        assert manager.get_setting('video.link_host') == 'www.youtube.com'
        assert manager.get_setting('playback.poll_interval_ms') == 100

    def test_corrupt_file_falls_back_to_defaults(self, tmp_path):
        settings_file = tmp_path / 'config' / 'settings.json'
        settings_file.parent.mkdir(parents=True)
        settings_file.write_text("{not json")

        manager = ConfigurationManager(None, DependencyContainer(), base_dir=tmp_path)
        assert manager.initialize()

        assert manager.get_setting('video.video_id') == 'BYizgB2FcAQ'

    def test_invalid_stored_value_resets_to_defaults(self, tmp_path):
        settings_file = tmp_path / 'config' / 'settings.json'
        settings_file.parent.mkdir(parents=True)
        settings_file.write_text(json.dumps({'playback': {'poll_interval_ms': 1}}))

        manager = ConfigurationManager(None, DependencyContainer(), base_dir=tmp_path)
        assert manager.initialize()

        assert manager.get_setting('playback.poll_interval_ms') == 100

    def test_clips_are_never_stored(self, tmp_path, clock):
        from clipmarker.session import ClipSession

        session = ClipSession(config_base_dir=tmp_path, manage_logging=False,
                              timer_factory=clock)
        assert session.initialize()
        session.timeline.mark_start(1.0)
        session.timeline.mark_end(2.0)
        session.teardown()

        stored = json.loads((tmp_path / 'config' / 'settings.json').read_text())
        assert 'clips' not in json.dumps(stored)


class TestOverrides:
    """Test run-only overrides such as command line arguments."""

    def test_override_wins_over_stored_value(self, config):
        assert config.override_setting('video.source', 'clip.mp4')

        assert config.get_setting('video.source') == 'clip.mp4'

    def test_override_is_never_saved(self, config, tmp_path):
        config.override_setting('video.video_id', 'one-off')
        config.set_setting('playback.poll_interval_ms', 200)
        config.cleanup()

        stored = json.loads((tmp_path / 'config' / 'settings.json').read_text())
        assert stored['video']['video_id'] == 'BYizgB2FcAQ'

        reloaded = ConfigurationManager(None, DependencyContainer(), base_dir=tmp_path)
        assert reloaded.initialize()
        assert reloaded.get_setting('video.video_id') == 'BYizgB2FcAQ'
        assert reloaded.get_setting('playback.poll_interval_ms') == 200

    def test_invalid_override_is_rejected(self, config):
        assert not config.override_setting('playback.poll_interval_ms', 1)

        assert config.get_setting('playback.poll_interval_ms') == 100

    def test_set_setting_replaces_override(self, config):
        config.override_setting('video.video_id', 'one-off')

        config.set_setting('video.video_id', 'chosen')

        assert config.get_setting('video.video_id') == 'chosen'
