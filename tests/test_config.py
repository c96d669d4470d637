"""Tests for configuration loading."""

import logging

import pytest

from skillflow.config import (
    Config,
    LayoutConfig,
    LoggingConfig,
    load_config,
    setup_logging,
)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove override variables that may be set in the shell."""
    for name in ("SKILLFLOW_LOG_LEVEL", "SKILLFLOW_DEFAULT_OWNER", "SKILLFLOW_PRUNE_ORPHANS"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestDefaults:
    """Tests for default values."""

    def test_layout_defaults(self):
        layout = LayoutConfig()
        assert (layout.spacing_x, layout.spacing_y) == (500, 800)
        assert layout.requirement_offset_y == 200
        assert (layout.sibling_offset_x, layout.sibling_offset_y) == (250, 100)
        assert (layout.first_child_offset_x, layout.first_child_offset_y) == (150, 200)
        assert (layout.orphan_x, layout.orphan_y) == (100, 100)

    def test_editor_defaults(self):
        config = Config()
        assert config.editor.default_owner == "Octoio"
        assert config.editor.json_indent == 2
        assert config.editor.prune_orphans_on_export is False


class TestLoadConfig:
    """Tests for load_config."""

    def test_load_yaml(self, tmp_path, clean_env):
        """Sections in the file replace the defaults."""
        path = tmp_path / "config.yaml"
        path.write_text(
            "layout:\n"
            "  spacing_x: 300\n"
            "editor:\n"
            "  default_owner: Studio\n"
            "logging:\n"
            "  level: DEBUG\n"
        )

        config = load_config(str(path))
        assert config.layout.spacing_x == 300
        assert config.layout.spacing_y == 800
        assert config.editor.default_owner == "Studio"
        assert config.logging.level == "DEBUG"

    def test_missing_file_uses_defaults(self, tmp_path, clean_env):
        config = load_config(str(tmp_path / "nope.yaml"))
        assert config.layout == LayoutConfig()

    def test_empty_file(self, tmp_path, clean_env):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(str(path)).editor.id_prefix == "node_"

    def test_env_overrides(self, tmp_path, clean_env):
        """Environment variables win over the file."""
        path = tmp_path / "config.yaml"
        path.write_text("editor:\n  default_owner: Studio\n")
        clean_env.setenv("SKILLFLOW_DEFAULT_OWNER", "EnvOwner")
        clean_env.setenv("SKILLFLOW_LOG_LEVEL", "WARNING")
        clean_env.setenv("SKILLFLOW_PRUNE_ORPHANS", "yes")

        config = load_config(str(path))
        assert config.editor.default_owner == "EnvOwner"
        assert config.logging.level == "WARNING"
        assert config.editor.prune_orphans_on_export is True


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_file_handler(self, tmp_path):
        """A log file is created when configured."""
        log_file = tmp_path / "logs" / "skillflow.log"
        root = logging.getLogger()
        saved = (root.handlers[:], root.level)
        try:
            root.handlers = []
            setup_logging(LoggingConfig(level="DEBUG", file=str(log_file)))
            logging.getLogger("skillflow.test").info("hello")
            for handler in root.handlers:
                handler.flush()
            assert log_file.exists()
            assert root.level == logging.DEBUG
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers, level = saved
            root.setLevel(level)
