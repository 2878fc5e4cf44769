"""
Tests for YAML configuration loading.
"""

import pytest

from watchdir.config import AppConfig, ConfigError, load_config
from watchdir.events import EventKind


class TestLoadConfig:
    def test_no_file_gives_defaults(self):
        config = load_config(None)

        assert config == AppConfig()
        assert config.watcher.command == "inotifywait"
        assert config.query.args == ["-a", "-x"]
        assert config.query.timeout is None

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "watchdir.yaml"
        path.write_text("")

        assert load_config(path) == AppConfig()

    def test_overrides(self, tmp_path):
        path = tmp_path / "watchdir.yaml"
        path.write_text(
            "watcher:\n"
            "  command: /usr/local/bin/inotifywait\n"
            "  events: [CREATE, modify]\n"
            "  recursive: false\n"
            "  extra_args: ['--exclude', 'tmp']\n"
            "query:\n"
            "  command: pgrep\n"
            "  args: ['-a', '-f']\n"
            "  timeout: 2\n"
        )

        config = load_config(path)

        assert config.watcher.command == "/usr/local/bin/inotifywait"
        assert config.watcher.events == [EventKind.CREATE, EventKind.MODIFY]
        assert config.watcher.recursive is False
        assert config.watcher.extra_args == ["--exclude", "tmp"]
        assert config.query.args == ["-a", "-f"]
        assert config.query.timeout == 2.0

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "absent.yaml")

    @pytest.mark.parametrize(
        "text, message",
        [
            ("- just\n- a list\n", "root must be a mapping"),
            ("watcher: nope\n", "'watcher' section"),
            ("watcher:\n  events: [explode]\n", "watcher.events"),
            ("watcher:\n  recursive: 'yes'\n", "watcher.recursive"),
            ("query:\n  timeout: -1\n", "query.timeout must be positive"),
            ("query:\n  timeout: soon\n", "query.timeout must be numeric"),
            ("query:\n  args: [1, 2]\n", "query.args"),
        ],
    )
    def test_invalid(self, tmp_path, text, message):
        path = tmp_path / "watchdir.yaml"
        path.write_text(text)

        with pytest.raises(ConfigError, match=message):
            load_config(path)
