"""Discovery pipeline: scan, inspect, resolve.

Runs sequentially and single-threaded; the result is immutable.
"""

import logging

from crabclean.discovery.manifest import inspect_manifest
from crabclean.discovery.resolver import resolve_workspaces
from crabclean.discovery.scanner import ProjectScanner
from crabclean.models.project import ProjectSet

logger = logging.getLogger(__name__)


def discover_projects(scanner: ProjectScanner) -> ProjectSet:
    """Scan, inspect and resolve the projects below the scanner's base.

    Args:
        scanner: Configured project scanner.

    Returns:
        Resolved, immutable project set.

    Raises:
        ScanError: If the base directory cannot be scanned.
        ManifestError: If a workspace manifest cannot be parsed or validated.
    """
    logger.debug(
        "Discovering projects under %s, excluding %s",
        scanner.base_dir,
        ", ".join(scanner.patterns),
    )
    roots = scanner.scan()
    return resolve_workspaces({root: inspect_manifest(root) for root in roots})
