"""Workspace relation resolution.

Turns the per-manifest workspace declarations of one run into the final
relation of every discovered project. This is a pure computation over
already collected data: no filesystem access, no shared state.

Resolution runs in two passes over immutable records:

1. Every project starts as Standalone; projects declaring members become
   Workspace with their discovered members in declared order.
2. Every declared member that was discovered (and is not the declaring
   project itself) becomes Member of the declaring project.

Declaring projects are processed in lexicographic path order. When a path
is claimed by several workspaces, the last claim wins and the overwrite is
logged. Membership cycles are not broken; they are logged as warnings.
"""

import logging
from collections.abc import Mapping
from pathlib import Path

from crabclean.models.project import (
    ManifestInfo,
    Member,
    Project,
    ProjectSet,
    Standalone,
    Workspace,
    WorkspaceRelation,
)

logger = logging.getLogger(__name__)


def resolve_workspaces(manifests: Mapping[Path, ManifestInfo]) -> ProjectSet:
    """Compute the workspace relation of every discovered project.

    Args:
        manifests: Inspection result per discovered project root.

    Returns:
        ProjectSet with every project in lexicographic path order.
    """
    ordered = sorted(manifests)
    discovered = set(ordered)

    # First pass: own declarations only
    relations: dict[Path, WorkspaceRelation] = {}
    for path in ordered:
        info = manifests[path]
        if not info.declares_workspace:
            relations[path] = Standalone()
        else:
            members = tuple(m for m in info.members or () if m in discovered and m != path)
            relations[path] = Workspace(members=members)

    # Second pass: membership claims, last declaring workspace wins
    claims: dict[Path, Path] = {}
    for path in ordered:
        info = manifests[path]
        if not info.declares_workspace:
            continue
        for member in info.members or ():
            if member == path:
                continue
            if member not in discovered:
                logger.debug("Ignoring undiscovered member %s of workspace %s", member, path)
                continue
            previous = claims.get(member)
            if previous is not None and previous != path:
                logger.warning(
                    "Project %s is claimed by workspaces %s and %s; using %s",
                    member,
                    previous,
                    path,
                    path,
                )
            claims[member] = path

    for member, parent in claims.items():
        if isinstance(relations[member], Workspace):
            logger.warning("Workspace %s is itself a member of workspace %s", member, parent)
        relations[member] = Member(parent=parent)

    _warn_on_cycles(claims)

    return ProjectSet(
        projects=tuple(Project(path=path, relation=relations[path]) for path in ordered)
    )


def find_cycles(claims: Mapping[Path, Path]) -> list[tuple[Path, ...]]:
    """Find membership cycles in a member-to-parent mapping.

    Args:
        claims: Mapping of member path to the workspace that claims it.

    Returns:
        Each cycle once, as the tuple of paths starting at its smallest path.
    """
    cycles: list[tuple[Path, ...]] = []
    seen: set[Path] = set()

    for start in sorted(claims):
        chain: list[Path] = []
        node: Path | None = start
        while node is not None and node not in seen and node not in chain:
            chain.append(node)
            node = claims.get(node)
        if node is not None and node in chain:
            cycle = chain[chain.index(node) :]
            pivot = cycle.index(min(cycle))
            cycles.append(tuple(cycle[pivot:] + cycle[:pivot]))
        seen.update(chain)

    return cycles


def _warn_on_cycles(claims: Mapping[Path, Path]) -> None:
    """Log every membership cycle; all projects in a cycle stay members."""
    for cycle in find_cycles(claims):
        logger.warning(
            "Workspace membership cycle, none of these projects will be cleaned: %s",
            " -> ".join(str(p) for p in cycle),
        )
