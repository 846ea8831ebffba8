"""Unit tests for user settings and run configuration."""

from pathlib import Path
from unittest.mock import patch

import pytest
from crabclean.core.config import (
    DEFAULT_CONFIRM_THRESHOLD,
    ConfigError,
    ConfigParseError,
    RunConfig,
    Settings,
    load_settings,
)
from crabclean.models.clean import CleanMode
from pydantic import ValidationError


class TestSettings:
    """Tests for Settings model."""

    def test_defaults(self) -> None:
        """Settings default to the built-in behaviour."""
        settings = Settings()
        assert settings.confirm_threshold == DEFAULT_CONFIRM_THRESHOLD
        assert settings.ignored_patterns is None
        assert settings.cargo_command == "cargo"

    def test_patterns_are_validated(self) -> None:
        """Configured patterns must be exclude patterns."""
        with pytest.raises(ValidationError, match="must start with '!'"):
            Settings(ignored_patterns=["target/**"])

    def test_patterns_are_stripped(self) -> None:
        """Whitespace around configured patterns is removed."""
        settings = Settings(ignored_patterns=[" !vendor/** "])
        assert settings.ignored_patterns == ["!vendor/**"]

    def test_negative_threshold_rejected(self) -> None:
        """The confirmation threshold cannot be negative."""
        with pytest.raises(ValidationError):
            Settings(confirm_threshold=-1)

    def test_unknown_keys_rejected(self) -> None:
        """Typos in the config file are reported."""
        with pytest.raises(ValidationError):
            Settings(confirm_treshold=5)  # type: ignore[call-arg]


class TestLoadSettings:
    """Tests for load_settings function."""

    def test_missing_file_returns_defaults(self, tmp_path: Path) -> None:
        """A missing config file is not an error."""
        assert load_settings(tmp_path / "config.toml") == Settings()

    def test_loads_values(self, tmp_path: Path) -> None:
        """Values from the file override the defaults."""
        config_file = tmp_path / "config.toml"
        config_file.write_text(
            'confirm_threshold = 10\nignored_patterns = ["!**/vendor/**"]\n'
            'cargo_command = "cargo-nightly"\n'
        )

        settings = load_settings(config_file)

        assert settings.confirm_threshold == 10
        assert settings.ignored_patterns == ["!**/vendor/**"]
        assert settings.cargo_command == "cargo-nightly"

    def test_uses_default_path(self, tmp_path: Path) -> None:
        """Without an explicit path the XDG config path is used."""
        config_file = tmp_path / "config.toml"
        config_file.write_text("confirm_threshold = 3\n")

        with patch("crabclean.core.config.get_config_path", return_value=config_file):
            settings = load_settings()

        assert settings.confirm_threshold == 3

    def test_invalid_toml_raises_parse_error(self, tmp_path: Path) -> None:
        """Broken TOML raises ConfigParseError."""
        config_file = tmp_path / "config.toml"
        config_file.write_text("confirm_threshold = \n")

        with pytest.raises(ConfigParseError, match="Invalid TOML"):
            load_settings(config_file)

    def test_invalid_content_raises_config_error(self, tmp_path: Path) -> None:
        """Schema violations raise ConfigError."""
        config_file = tmp_path / "config.toml"
        config_file.write_text('ignored_patterns = ["target"]\n')

        with pytest.raises(ConfigError, match="Invalid config content"):
            load_settings(config_file)

    def test_directory_as_config_raises(self, tmp_path: Path) -> None:
        """An unreadable config path raises ConfigError."""
        with pytest.raises(ConfigError, match="Failed to read config"):
            load_settings(tmp_path)


class TestRunConfig:
    """Tests for RunConfig dataclass."""

    def test_defaults(self, tmp_path: Path) -> None:
        """A run cleans everything and asks above the default threshold."""
        config = RunConfig(base_dir=tmp_path)
        assert config.mode == CleanMode.ALL
        assert config.dry_run is False
        assert config.ignored_patterns == ()

    @pytest.mark.parametrize(
        ("count", "expected"),
        [(0, False), (100, False), (101, True), (600, True)],
    )
    def test_threshold(self, tmp_path: Path, count: int, expected: bool) -> None:
        """Confirmation is required strictly above the threshold."""
        assert RunConfig(base_dir=tmp_path).needs_confirmation(count) is expected

    def test_dry_run_never_confirms(self, tmp_path: Path) -> None:
        """Dry runs never prompt."""
        config = RunConfig(base_dir=tmp_path, dry_run=True)
        assert config.needs_confirmation(10_000) is False

    def test_assume_yes_never_confirms(self, tmp_path: Path) -> None:
        """--yes skips the prompt."""
        config = RunConfig(base_dir=tmp_path, assume_yes=True)
        assert config.needs_confirmation(10_000) is False

    def test_custom_threshold(self, tmp_path: Path) -> None:
        """A custom threshold moves the boundary."""
        config = RunConfig(base_dir=tmp_path, confirm_threshold=0)
        assert config.needs_confirmation(1) is True

    def test_is_frozen(self, tmp_path: Path) -> None:
        """RunConfig is immutable."""
        config = RunConfig(base_dir=tmp_path)
        with pytest.raises(AttributeError):
            config.dry_run = True  # type: ignore[misc]
