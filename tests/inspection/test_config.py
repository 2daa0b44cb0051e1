"""Tests for inspection configuration."""

import pytest

from rubocheck.inspection.config import DEFAULT_BUFFER_SIZE, InspectionConfig, load_config


class TestInspectionConfig:
    """Test InspectionConfig defaults."""

    def test_defaults(self) -> None:
        config = InspectionConfig()

        assert config.tool == "rubocop"
        assert config.format_args == ("--format", "json")
        assert config.virtualization_marker == "Vagrantfile"
        assert config.bundler_marker == "Gemfile"
        assert config.version_manager_marker == "rvm"
        assert config.expected_sdk_kind == "RUBY_SDK"
        assert config.buffer_size == DEFAULT_BUFFER_SIZE == 5 * 1024 * 1024
        assert config.timeout_seconds == 300

    def test_rejects_non_positive_buffer(self) -> None:
        with pytest.raises(ValueError):
            InspectionConfig(buffer_size=0)


class TestLoadConfig:
    """Test load_config environment overrides."""

    def test_empty_environment_gives_defaults(self) -> None:
        assert load_config({}) == InspectionConfig()

    def test_overrides(self) -> None:
        config = load_config(
            {
                "RUBOCHECK_TOOL": "rubocop-daemon",
                "RUBOCHECK_TIMEOUT_SECONDS": "42.5",
                "RUBOCHECK_BUFFER_SIZE": "1048576",
                "RUBOCHECK_RVM_PATH": ".rvm/wrappers/rvm",
            }
        )

        assert config.tool == "rubocop-daemon"
        assert config.timeout_seconds == 42.5
        assert config.buffer_size == 1048576
        assert config.version_manager_path == ".rvm/wrappers/rvm"

    def test_timeout_none_disables(self) -> None:
        assert load_config({"RUBOCHECK_TIMEOUT_SECONDS": "none"}).timeout_seconds is None

    def test_invalid_value_raises(self) -> None:
        with pytest.raises(ValueError):
            load_config({"RUBOCHECK_TIMEOUT_SECONDS": "soon"})

    def test_negative_timeout_rejected(self) -> None:
        with pytest.raises(ValueError):
            load_config({"RUBOCHECK_TIMEOUT_SECONDS": "-1"})
