"""Data models for crabclean.

This module exports the project and clean result models.
"""

from crabclean.models.clean import CleanMode, CleanResult, CleanSummary
from crabclean.models.project import (
    ManifestInfo,
    Member,
    Project,
    ProjectRole,
    ProjectSet,
    Standalone,
    Workspace,
    WorkspaceRelation,
)

__all__ = [
    "CleanMode",
    "CleanResult",
    "CleanSummary",
    "ManifestInfo",
    "Member",
    "Project",
    "ProjectRole",
    "ProjectSet",
    "Standalone",
    "Workspace",
    "WorkspaceRelation",
]
