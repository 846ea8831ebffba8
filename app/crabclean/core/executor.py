"""Concurrent clean execution.

Fans the clean action out to one worker thread per project and joins
them all before returning. Workers are independent: a failure is
recorded in its result and never cancels the others.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import TYPE_CHECKING

from crabclean.core.cargo import CargoCleaner
from crabclean.models.clean import CleanResult, CleanSummary

if TYPE_CHECKING:
    from crabclean.core.config import RunConfig
    from crabclean.models.project import Project

logger = logging.getLogger(__name__)

CompletionCallback = Callable[[CleanResult], None]


def get_cleaner(config: RunConfig) -> CargoCleaner:
    """Create the cleaner for a run configuration.

    Args:
        config: Configuration of the current run.

    Returns:
        CargoCleaner for the configured mode and executable.
    """
    return CargoCleaner(mode=config.mode, cargo_command=config.cargo_command)


def clean_projects(
    projects: Sequence[Project],
    cleaner: CargoCleaner,
    on_complete: CompletionCallback | None = None,
) -> CleanSummary:
    """Clean all projects concurrently and wait for every invocation.

    All projects are submitted at once, one worker per project.
    ``on_complete`` runs in the calling thread as each result arrives.

    Args:
        projects: Projects to clean; workspace members must already be removed.
        cleaner: Operator executing the clean action.
        on_complete: Optional callback invoked per finished project.

    Returns:
        CleanSummary with results in completion order.

    Raises:
        ValueError: If a workspace member is passed in.
    """
    members = [p for p in projects if p.is_member]
    if members:
        msg = f"Workspace members must not be cleaned directly: {members[0].path}"
        raise ValueError(msg)

    if not projects:
        return CleanSummary()

    results: list[CleanResult] = []
    with ThreadPoolExecutor(max_workers=len(projects), thread_name_prefix="clean") as pool:
        future_map = {pool.submit(cleaner.clean, project): project for project in projects}
        for future in as_completed(future_map):
            project = future_map[future]
            try:
                result = future.result()
            except Exception as e:  # noqa: BLE001
                logger.exception("Unexpected error cleaning %s", project.path)
                result = CleanResult(project=project, success=False, error=str(e))
            results.append(result)
            if on_complete is not None:
                on_complete(result)

    summary = CleanSummary(results=tuple(results))
    logger.debug(
        "Clean finished: %d completed, %d failed", summary.completed, len(summary.failures)
    )
    return summary
