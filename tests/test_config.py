"""Tests for settings loading and logging setup."""

from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog

from stylegraph.config import (
    StyleGraphSettings,
    apply_env_overrides,
    load_settings,
    read_yaml_config,
)
from stylegraph.errors import ConfigError
from stylegraph.log_setup import configure_logging


class TestLoadSettings:
    """Test YAML loading, env overrides and validation."""

    def test_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        """Test a missing config file means defaults."""
        settings = load_settings(tmp_path / "absent.yaml", environ={})
        assert settings.model_dump() == StyleGraphSettings().model_dump()
        assert settings.extraction.max_depth == 5
        assert settings.registry.parent_threshold == 0.8
        assert settings.merge.min_score == 0.6
        assert settings.logging.json_output is False

    def test_yaml_values(self, tmp_path: Path) -> None:
        """Test YAML sections override defaults."""
        config = tmp_path / "stylegraph.yaml"
        config.write_text(
            "extraction:\n"
            "  max_depth: 3\n"
            "  default_font_family: Inter\n"
            "merge:\n"
            "  auto_apply: true\n"
            "logging:\n"
            "  json: true\n"
        )
        settings = load_settings(config, environ={})
        assert settings.extraction.max_depth == 3
        assert settings.extraction.default_font_family == "Inter"
        assert settings.merge.auto_apply is True
        assert settings.logging.json_output is True

    def test_env_overrides_yaml(self, tmp_path: Path) -> None:
        """Test environment variables win over YAML."""
        config = tmp_path / "stylegraph.yaml"
        config.write_text("extraction:\n  max_depth: 3\n")
        environ = {
            "STYLEGRAPH_MAX_DEPTH": "9",
            "STYLEGRAPH_INCLUDE_HIDDEN": "true",
            "STYLEGRAPH_PARENT_THRESHOLD": "0.9",
            "STYLEGRAPH_MERGE_MIN_SCORE": "0.75",
            "STYLEGRAPH_AUTO_MERGE": "1",
            "STYLEGRAPH_LOG_LEVEL": "DEBUG",
            "STYLEGRAPH_LOG_JSON": "false",
        }
        settings = load_settings(config, environ=environ)
        assert settings.extraction.max_depth == 9
        assert settings.extraction.include_hidden is True
        assert settings.registry.parent_threshold == 0.9
        assert settings.merge.min_score == 0.75
        assert settings.merge.auto_apply is True
        assert settings.logging.level == "DEBUG"
        assert settings.logging.json_output is False

    def test_empty_env_value_ignored(self) -> None:
        """Test blank environment values do not override."""
        assert apply_env_overrides({}, environ={"STYLEGRAPH_MAX_DEPTH": ""}) == {}

    def test_env_overrides_do_not_mutate(self) -> None:
        """Test overrides return a new mapping."""
        data = {"extraction": {"max_depth": 2}}
        result = apply_env_overrides(data, environ={"STYLEGRAPH_MAX_DEPTH": "4"})
        assert result["extraction"]["max_depth"] == "4"
        assert data["extraction"]["max_depth"] == 2

    def test_invalid_value(self, tmp_path: Path) -> None:
        """Test out-of-range values raise ConfigError."""
        config = tmp_path / "stylegraph.yaml"
        config.write_text("registry:\n  parent_threshold: 1.5\n")
        with pytest.raises(ConfigError):
            load_settings(config, environ={})

    def test_invalid_env_value(self, tmp_path: Path) -> None:
        """Test unparsable overrides raise ConfigError."""
        with pytest.raises(ConfigError):
            load_settings(tmp_path / "absent.yaml", environ={"STYLEGRAPH_MAX_DEPTH": "deep"})

    def test_section_must_be_mapping(self, tmp_path: Path) -> None:
        """Test scalar sections are rejected."""
        config = tmp_path / "stylegraph.yaml"
        config.write_text("merge: fast\n")
        with pytest.raises(ConfigError):
            load_settings(config, environ={})

    def test_bad_yaml(self, tmp_path: Path) -> None:
        """Test broken YAML raises ConfigError."""
        config = tmp_path / "stylegraph.yaml"
        config.write_text("extraction: [unclosed\n")
        with pytest.raises(ConfigError):
            read_yaml_config(config)

    def test_top_level_must_be_mapping(self, tmp_path: Path) -> None:
        """Test a YAML list is rejected."""
        config = tmp_path / "stylegraph.yaml"
        config.write_text("- a\n- b\n")
        with pytest.raises(ConfigError):
            read_yaml_config(config)

    def test_empty_file(self, tmp_path: Path) -> None:
        """Test an empty file means defaults."""
        config = tmp_path / "stylegraph.yaml"
        config.write_text("")
        assert read_yaml_config(config) == {}

    def test_shipped_config_is_valid(self) -> None:
        """Test the example config validates to the defaults."""
        path = Path(__file__).resolve().parent.parent / "config" / "stylegraph.yaml"
        assert load_settings(path, environ={}).model_dump() == StyleGraphSettings().model_dump()


class TestConfigureLogging:
    """Test structlog setup."""

    @pytest.fixture(autouse=True)
    def restore_structlog(self) -> Iterator[None]:
        """Reset structlog after each test."""
        yield
        structlog.reset_defaults()

    def test_json_output(self, capsys: pytest.CaptureFixture) -> None:
        """Test JSON lines carry the event and level."""
        configure_logging(level="INFO", json_output=True)
        structlog.get_logger("stylegraph.test").info("token_created", token_id="color_1")
        out = capsys.readouterr().out
        assert '"event": "token_created"' in out
        assert '"level": "info"' in out
        assert '"token_id": "color_1"' in out

    def test_level_filtering(self, capsys: pytest.CaptureFixture) -> None:
        """Test events below the level are dropped."""
        configure_logging(level="WARNING", json_output=True)
        logger = structlog.get_logger("stylegraph.test")
        logger.info("hidden_event")
        logger.warning("shown_event")
        out = capsys.readouterr().out
        assert "hidden_event" not in out
        assert "shown_event" in out

    def test_unknown_level_defaults_to_info(self, capsys: pytest.CaptureFixture) -> None:
        """Test an unknown level name falls back to INFO."""
        configure_logging(level="chatty", json_output=True)
        logger = structlog.get_logger("stylegraph.test")
        logger.debug("debug_event")
        logger.info("info_event")
        out = capsys.readouterr().out
        assert "debug_event" not in out
        assert "info_event" in out
