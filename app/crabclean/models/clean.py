"""Clean action models.

This module defines the clean mode selector and the per-project and
aggregate results of a clean run.
"""

from dataclasses import dataclass
from enum import Enum

from crabclean.models.project import Project


class CleanMode(str, Enum):
    """Which artifacts ``cargo clean`` removes.

    Attributes:
        ALL: Every build artifact (plain ``cargo clean``).
        RELEASE: Only the release profile (``cargo clean --release``).
        DOC: Only generated documentation (``cargo clean --doc``).
    """

    ALL = "all"
    RELEASE = "release"
    DOC = "doc"

    @property
    def description(self) -> str:
        """Human-readable banner text for this mode."""
        if self is CleanMode.RELEASE:
            return "Cleaning only release artifacts"
        if self is CleanMode.DOC:
            return "Cleaning only documentation artifacts"
        return "Cleaning all artifacts"


@dataclass(frozen=True, slots=True)
class CleanResult:
    """Outcome of the clean action for one project.

    Attributes:
        project: The project that was cleaned.
        success: Whether the clean action completed successfully.
        output: Captured standard output of the clean action.
        error: Error message if the action failed, None otherwise.
    """

    project: Project
    success: bool
    output: str = ""
    error: str | None = None

    @property
    def failed(self) -> bool:
        """Check if the clean action failed."""
        return not self.success


@dataclass(frozen=True, slots=True)
class CleanSummary:
    """Aggregate of every clean action of a run.

    Attributes:
        results: Per-project results in completion order.
    """

    results: tuple[CleanResult, ...] = ()

    @property
    def completed(self) -> int:
        """Number of clean invocations that finished, failed ones included."""
        return len(self.results)

    @property
    def failures(self) -> list[CleanResult]:
        """Results of the failed clean invocations."""
        return [r for r in self.results if r.failed]

    @property
    def succeeded(self) -> int:
        """Number of successful clean invocations."""
        return sum(1 for r in self.results if r.success)
