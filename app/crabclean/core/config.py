"""Configuration for crabclean runs.

Two layers exist:

- ``Settings``: optional user defaults read from
  ~/.config/crabclean/config.toml.
- ``RunConfig``: the explicit, immutable configuration of a single run,
  built once by the CLI from the command line and the settings and
  passed to every component that needs it.
"""

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from crabclean.core.paths import get_config_path
from crabclean.discovery.patterns import InvalidPatternError, validate_pattern
from crabclean.models.clean import CleanMode

DEFAULT_CONFIRM_THRESHOLD = 100


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


class Settings(BaseModel):
    """User defaults for crabclean.

    Attributes:
        confirm_threshold: Ask for confirmation when more projects than
            this would be cleaned.
        ignored_patterns: Exclude patterns replacing the built-in defaults.
            None keeps the defaults.
        cargo_command: Cargo executable used for the clean action.
    """

    model_config = ConfigDict(extra="forbid")

    confirm_threshold: Annotated[
        int,
        Field(ge=0, description="Project count above which confirmation is required"),
    ] = DEFAULT_CONFIRM_THRESHOLD
    ignored_patterns: Annotated[
        list[str] | None,
        Field(description="Exclude patterns ('!'-prefixed globs)"),
    ] = None
    cargo_command: Annotated[
        str,
        Field(min_length=1, description="Cargo executable"),
    ] = "cargo"

    @field_validator("ignored_patterns")
    @classmethod
    def validate_patterns(cls, v: list[str] | None) -> list[str] | None:
        """Validate that every configured pattern is an exclude pattern."""
        if v is None:
            return None
        try:
            return [validate_pattern(p) for p in v]
        except InvalidPatternError as e:
            raise ValueError(str(e)) from None


def load_settings(path: Path | None = None) -> Settings:
    """Load user settings from a TOML file.

    A missing file is not an error; defaults are returned.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated Settings object.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the file cannot be read or the content is invalid.
    """
    config_path = path or get_config_path()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return Settings()
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config {config_path}: {e}") from e

    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config content in {config_path}: {e}") from e


@dataclass(frozen=True, slots=True)
class RunConfig:
    """Immutable configuration of one crabclean run.

    Attributes:
        base_dir: Directory to scan for projects.
        mode: Which artifacts to clean.
        dry_run: Print the plan without cleaning anything.
        assume_yes: Skip the confirmation prompt.
        ignored_patterns: Exclude patterns; empty applies the defaults.
        confirm_threshold: Project count above which confirmation is required.
        cargo_command: Cargo executable used for the clean action.
    """

    base_dir: Path
    mode: CleanMode = CleanMode.ALL
    dry_run: bool = False
    assume_yes: bool = False
    ignored_patterns: tuple[str, ...] = ()
    confirm_threshold: int = DEFAULT_CONFIRM_THRESHOLD
    cargo_command: str = "cargo"

    def needs_confirmation(self, project_count: int) -> bool:
        """Check if a run over ``project_count`` projects must be confirmed.

        Args:
            project_count: Number of projects that would be cleaned.

        Returns:
            True if the prompt must be shown.
        """
        if self.dry_run or self.assume_yes:
            return False
        return project_count > self.confirm_threshold
