"""Clean command implementation.

Discovers Cargo projects below a base directory, skips workspace members
and runs ``cargo clean`` for the remaining projects concurrently.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
from rich.logging import RichHandler
from rich.markup import escape

from crabclean import __version__
from crabclean.cli.display import (
    print_banner,
    print_clean_result,
    print_clean_summary,
    print_discovery_summary,
    print_plan,
    print_plan_json,
)
from crabclean.core.config import ConfigError, RunConfig, Settings, load_settings
from crabclean.core.executor import clean_projects, get_cleaner
from crabclean.discovery import (
    InvalidPatternError,
    ManifestError,
    ProjectScanner,
    ScanError,
    discover_projects,
    parse_patterns,
)
from crabclean.models.clean import CleanMode
from crabclean.utils.formatting import err_console, print_error, print_info, print_warning

logger = logging.getLogger(__name__)


class OutputFormat(str, Enum):
    """Output format options for the dry-run plan."""

    TABLE = "table"
    JSON = "json"


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"crabclean version {__version__}")
        raise typer.Exit()


def clean(
    base_dir: Annotated[
        Path,
        typer.Argument(help="Directory to search for cargo projects."),
    ] = Path("."),
    release: Annotated[
        bool,
        typer.Option("--release", "-r", help="Clean only the release build artifacts."),
    ] = False,
    doc: Annotated[
        bool,
        typer.Option("--doc", "-d", help="Clean only the documentation build artifacts."),
    ] = False,
    dry: Annotated[
        bool,
        typer.Option("--dry", help="Show what would be cleaned without cleaning."),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
    ignored_patterns: Annotated[
        str | None,
        typer.Option(
            "--ignored-patterns",
            help="Comma-separated exclude globs, each starting with '!'. Replaces the defaults.",
        ),
    ] = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format of the dry-run plan.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", help="Read defaults from this config file."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose output."),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
) -> None:
    """Clean all Cargo projects recursively below BASE_DIR.

    Workspace members are skipped because cleaning their workspace
    already removes their artifacts.
    """
    if release and doc:
        raise typer.BadParameter("--release and --doc cannot be used together.")

    _setup_logging(verbose)
    config = _build_run_config(
        base_dir=base_dir,
        mode=_select_mode(release, doc),
        dry=dry,
        yes=yes,
        ignored_patterns=ignored_patterns,
        settings=_require_settings(config_path),
    )
    run(config, output_format=output_format)


def run(config: RunConfig, output_format: OutputFormat = OutputFormat.TABLE) -> None:
    """Execute one clean run for a fully built configuration.

    Args:
        config: Configuration of this run.
        output_format: Output format of the dry-run plan.

    Raises:
        typer.Exit: With code 1 on fatal discovery errors, 0 when aborted.
    """
    logger.debug("Run configuration: %s", config)
    print_banner(config.mode)

    try:
        scanner = ProjectScanner(config.base_dir, patterns=config.ignored_patterns)
        projects = discover_projects(scanner)
    except (InvalidPatternError, ScanError, ManifestError) as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    print_discovery_summary(projects, config.base_dir)

    if not len(projects):
        print_info("No cargo projects found.")
        return

    if config.dry_run:
        if output_format == OutputFormat.JSON:
            print_plan_json(projects)
        else:
            print_plan(projects)
        return

    cleanable = projects.cleanable
    if config.needs_confirmation(len(cleanable)) and not _confirm(len(cleanable)):
        print_info("Aborted.")
        raise typer.Exit(code=0)

    cleaner = get_cleaner(config)
    if not cleaner.is_available():
        print_warning(f"'{config.cargo_command}' was not found on PATH; cleaning will fail.")

    summary = clean_projects(cleanable, cleaner, on_complete=print_clean_result)
    print_clean_summary(summary)


# === Private helper functions ===


def _select_mode(release: bool, doc: bool) -> CleanMode:
    """Map the mode flags to a CleanMode."""
    if release:
        return CleanMode.RELEASE
    if doc:
        return CleanMode.DOC
    return CleanMode.ALL


def _require_settings(config_path: Path | None) -> Settings:
    """Load settings or exit with an error message."""
    try:
        return load_settings(config_path)
    except ConfigError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e


def _build_run_config(
    *,
    base_dir: Path,
    mode: CleanMode,
    dry: bool,
    yes: bool,
    ignored_patterns: str | None,
    settings: Settings,
) -> RunConfig:
    """Combine command-line options and settings into a RunConfig.

    Command-line patterns win over configured patterns; both replace the
    built-in defaults. Validation happens here, before any scanning.

    Raises:
        typer.Exit: With code 1 if a pattern is invalid.
    """
    try:
        if ignored_patterns is not None:
            patterns = parse_patterns(ignored_patterns)
        else:
            patterns = tuple(settings.ignored_patterns or ())
    except InvalidPatternError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    return RunConfig(
        base_dir=base_dir,
        mode=mode,
        dry_run=dry,
        assume_yes=yes,
        ignored_patterns=patterns,
        confirm_threshold=settings.confirm_threshold,
        cargo_command=settings.cargo_command,
    )


def _confirm(count: int) -> bool:
    """Ask whether to clean ``count`` projects; only y/Y confirms."""
    try:
        answer = typer.prompt(
            f"\nAbout to clean {count} projects. Proceed? [y/N]",
            default="",
            show_default=False,
        )
    except typer.Abort:
        return False
    return answer.strip() in ("y", "Y")


def _setup_logging(verbose: bool) -> None:
    """Route log records through Rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )
