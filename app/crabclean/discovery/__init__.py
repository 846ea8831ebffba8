"""Project discovery.

This module provides the filesystem scanner, manifest inspection and
workspace resolution that together produce the project set of a run.
"""

from crabclean.discovery.manifest import (
    ManifestError,
    ManifestParseError,
    ManifestValidationError,
    inspect_manifest,
)
from crabclean.discovery.patterns import (
    DEFAULT_IGNORED_PATTERNS,
    InvalidPatternError,
    PatternError,
    parse_patterns,
)
from crabclean.discovery.pipeline import discover_projects
from crabclean.discovery.resolver import resolve_workspaces
from crabclean.discovery.scanner import MANIFEST_NAME, ProjectScanner, ScanError

__all__ = [
    "DEFAULT_IGNORED_PATTERNS",
    "MANIFEST_NAME",
    "InvalidPatternError",
    "ManifestError",
    "ManifestParseError",
    "ManifestValidationError",
    "PatternError",
    "ProjectScanner",
    "ScanError",
    "discover_projects",
    "inspect_manifest",
    "parse_patterns",
    "resolve_workspaces",
]
