"""Project models for workspace-aware discovery.

This module defines the data structures describing discovered Cargo
projects and their relation to Cargo workspaces. Every structure is
immutable: the project set is built once per run and only read
afterwards.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class ProjectRole(str, Enum):
    """Role of a project in its workspace hierarchy.

    Attributes:
        STANDALONE: Project without a workspace declaration.
        WORKSPACE: Project whose manifest declares workspace members.
        MEMBER: Project listed as a member of another project's workspace.
    """

    STANDALONE = "standalone"
    WORKSPACE = "workspace"
    MEMBER = "member"


@dataclass(frozen=True, slots=True)
class Standalone:
    """Relation of a project that neither declares nor belongs to a workspace."""

    @property
    def role(self) -> ProjectRole:
        return ProjectRole.STANDALONE


@dataclass(frozen=True, slots=True)
class Workspace:
    """Relation of a project that declares workspace members.

    Attributes:
        members: Discovered member project paths in declared order.
    """

    members: tuple[Path, ...] = ()

    @property
    def role(self) -> ProjectRole:
        return ProjectRole.WORKSPACE


@dataclass(frozen=True, slots=True)
class Member:
    """Relation of a project listed in another project's workspace.

    Attributes:
        parent: Path of the declaring workspace project.
    """

    parent: Path

    @property
    def role(self) -> ProjectRole:
        return ProjectRole.MEMBER


WorkspaceRelation = Standalone | Workspace | Member


@dataclass(frozen=True, slots=True)
class ManifestInfo:
    """Workspace information read from a single project manifest.

    Attributes:
        path: Absolute path of the project root.
        members: Absolute member paths in declared order, or None if the
            manifest declares no workspace.
    """

    path: Path
    members: tuple[Path, ...] | None = None

    @property
    def declares_workspace(self) -> bool:
        """Check if the manifest declares a workspace section."""
        return self.members is not None


@dataclass(frozen=True, slots=True)
class Project:
    """A discovered Cargo project and its resolved workspace relation.

    Attributes:
        path: Absolute path of the project root (unique key).
        relation: Resolved workspace relation.
    """

    path: Path
    relation: WorkspaceRelation = Standalone()

    def __post_init__(self) -> None:
        """Validate project data after initialization."""
        if not self.path.is_absolute():
            msg = f"Project path must be absolute, got {self.path}"
            raise ValueError(msg)

    @property
    def role(self) -> ProjectRole:
        """Return the role derived from the workspace relation."""
        return self.relation.role

    @property
    def is_member(self) -> bool:
        """Check if the project is cleaned through its parent workspace."""
        return isinstance(self.relation, Member)

    @property
    def should_clean(self) -> bool:
        """Check if the clean action runs for this project."""
        return not self.is_member

    @property
    def parent(self) -> Path | None:
        """Return the parent workspace path for members, None otherwise."""
        if isinstance(self.relation, Member):
            return self.relation.parent
        return None


@dataclass(frozen=True, slots=True)
class ProjectSet:
    """Resolved projects of one run, ordered by path.

    Attributes:
        projects: All discovered projects in lexicographic path order.
    """

    projects: tuple[Project, ...] = ()

    def __len__(self) -> int:
        return len(self.projects)

    @property
    def cleanable(self) -> list[Project]:
        """Projects whose clean action must run (workspaces and standalones)."""
        return [p for p in self.projects if p.should_clean]

    @property
    def members(self) -> list[Project]:
        """Projects skipped because their workspace cleans them."""
        return [p for p in self.projects if p.is_member]

    def get(self, path: Path) -> Project | None:
        """Look up a project by its root path.

        Args:
            path: Absolute project root path.

        Returns:
            The matching project, or None if it was not discovered.
        """
        for project in self.projects:
            if project.path == path:
                return project
        return None
