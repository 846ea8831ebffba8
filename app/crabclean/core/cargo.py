"""Cargo clean operator.

Runs ``cargo clean`` for a single project root and captures its outcome.
"""

import logging
import subprocess

from crabclean.models.clean import CleanMode, CleanResult
from crabclean.models.project import Project
from crabclean.utils.shell import command_exists, run_command

logger = logging.getLogger(__name__)

_MODE_FLAGS: dict[CleanMode, tuple[str, ...]] = {
    CleanMode.ALL: (),
    CleanMode.RELEASE: ("--release",),
    CleanMode.DOC: ("--doc",),
}


class CargoCleaner:
    """Executes the clean action for Cargo projects.

    Every call is independent, so one instance may be shared by
    concurrent workers.

    Args:
        mode: Which artifacts to clean.
        cargo_command: Cargo executable.
    """

    def __init__(self, mode: CleanMode = CleanMode.ALL, cargo_command: str = "cargo") -> None:
        self._mode = mode
        self._cargo_command = cargo_command

    @property
    def mode(self) -> CleanMode:
        """Return the clean mode."""
        return self._mode

    def is_available(self) -> bool:
        """Check if the cargo executable is on PATH."""
        return command_exists(self._cargo_command)

    def build_command(self) -> list[str]:
        """Build the command line for the configured mode.

        Returns:
            Command and arguments, e.g. ``["cargo", "clean", "--release"]``.
        """
        return [self._cargo_command, "clean", *_MODE_FLAGS[self._mode]]

    def clean(self, project: Project) -> CleanResult:
        """Run the clean action with the project root as working directory.

        Never raises for process failures; they are captured in the result.
        No timeout applies: a hanging cargo blocks only this call.

        Args:
            project: Project to clean.

        Returns:
            CleanResult with captured output or the error.
        """
        args = self.build_command()
        logger.debug("Running %s in %s", " ".join(args), project.path)

        try:
            result = run_command(args, timeout=None, cwd=project.path)
        except FileNotFoundError:
            return CleanResult(
                project=project,
                success=False,
                error=f"Command not found: {self._cargo_command}",
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.warning("Clean failed for %s: %s", project.path, e)
            return CleanResult(project=project, success=False, error=str(e))

        if result.success:
            return CleanResult(project=project, success=True, output=result.stdout.strip())

        error = result.stderr.strip() or f"{args[0]} exited with code {result.returncode}"
        return CleanResult(
            project=project,
            success=False,
            output=result.stdout.strip(),
            error=error,
        )
