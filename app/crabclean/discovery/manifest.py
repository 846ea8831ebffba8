"""Cargo manifest inspection.

Reads a project's ``Cargo.toml`` and extracts its workspace member list.
Manifests without a workspace section are never parsed, and unreadable
manifests are logged and treated as standalone, so a broken manifest of a
plain package does not stop a run. A manifest that declares a workspace
but cannot be parsed is fatal.
"""

import logging
import os
import re
import tomllib
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from crabclean.discovery.scanner import MANIFEST_NAME
from crabclean.models.project import ManifestInfo

logger = logging.getLogger(__name__)

# A "[workspace]" table header, one of its sub-tables ("[workspace.dependencies]"),
# a top-level dotted key ("workspace.members = ...") or an inline table
_WORKSPACE_HEADER = re.compile(
    r"^\s*(?:\[\s*workspace\s*[\].]|workspace\s*\.|workspace\s*=\s*\{)", re.MULTILINE
)

_GLOB_CHARS = frozenset("*?[")


class ManifestError(Exception):
    """Base exception for manifest-related errors."""


class ManifestParseError(ManifestError):
    """Raised when a workspace manifest is not valid TOML."""


class ManifestValidationError(ManifestError):
    """Raised when the workspace section does not match the expected schema."""


class WorkspaceSection(BaseModel):
    """The ``[workspace]`` table of a Cargo manifest.

    Only the keys that decide membership are validated; dependency,
    lint and metadata sub-tables are accepted as-is.
    """

    model_config = ConfigDict(extra="allow")

    members: Annotated[
        list[str],
        Field(description="Member paths or globs relative to the workspace root"),
    ] = []
    exclude: Annotated[
        list[str],
        Field(description="Paths excluded from membership"),
    ] = []


def declares_workspace(text: str) -> bool:
    """Check if manifest text declares a workspace section.

    Args:
        text: Raw manifest contents.

    Returns:
        True if a ``[workspace]`` header, a sub-table header or a
        top-level ``workspace.`` dotted key is present.
    """
    return _WORKSPACE_HEADER.search(text) is not None


def inspect_manifest(project_root: Path) -> ManifestInfo:
    """Read a project's manifest and resolve its workspace members.

    Args:
        project_root: Absolute project root directory.

    Returns:
        ManifestInfo with absolute member paths in declared order, or
        with ``members=None`` if no workspace is declared.

    Raises:
        ManifestParseError: If a workspace manifest is not valid TOML.
        ManifestValidationError: If the workspace section is malformed.
    """
    manifest_path = project_root / MANIFEST_NAME

    try:
        text = manifest_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("No manifest in %s, treating as standalone", project_root)
        return ManifestInfo(path=project_root)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Cannot read manifest %s, treating as standalone: %s", manifest_path, e)
        return ManifestInfo(path=project_root)

    if not declares_workspace(text):
        return ManifestInfo(path=project_root)

    section = _parse_workspace_section(text, manifest_path)
    if section is None:
        return ManifestInfo(path=project_root)

    members = _resolve_members(project_root, section)
    logger.debug("Workspace %s declares %d member(s)", project_root, len(members))
    return ManifestInfo(path=project_root, members=members)


def _parse_workspace_section(text: str, manifest_path: Path) -> WorkspaceSection | None:
    """Parse the manifest and validate its workspace table.

    Args:
        text: Raw manifest contents.
        manifest_path: Manifest path, used in error messages.

    Returns:
        The validated section, or None if the parsed document has no
        ``workspace`` table (the header matched inside a multi-line string).

    Raises:
        ManifestParseError: If the TOML syntax is invalid.
        ManifestValidationError: If the workspace table is malformed.
    """
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ManifestParseError(f"Invalid TOML syntax in {manifest_path}: {e}") from e

    raw = data.get("workspace")
    if raw is None:
        return None

    try:
        return WorkspaceSection.model_validate(raw)
    except ValidationError as e:
        raise ManifestValidationError(f"Invalid workspace section in {manifest_path}: {e}") from e


def _resolve_members(project_root: Path, section: WorkspaceSection) -> tuple[Path, ...]:
    """Resolve declared members to absolute paths.

    Glob members expand to the matching directories in sorted order.
    Excluded paths and everything below them are dropped. Duplicates
    keep their first position.

    Args:
        project_root: Absolute workspace root.
        section: Validated workspace section.

    Returns:
        Absolute member paths in declared order.
    """
    excluded = [_normalize(project_root / entry) for entry in section.exclude]

    resolved: list[Path] = []
    for member in section.members:
        for candidate in _expand_member(project_root, member):
            if any(candidate == ex or ex in candidate.parents for ex in excluded):
                logger.debug("Member %s is excluded by the workspace", candidate)
                continue
            if candidate not in resolved:
                resolved.append(candidate)
    return tuple(resolved)


def _expand_member(project_root: Path, member: str) -> list[Path]:
    """Expand one member entry into absolute paths.

    Args:
        project_root: Absolute workspace root.
        member: Member entry as written in the manifest.

    Returns:
        A single normalised path, or the sorted directories matching a glob.
    """
    if not _GLOB_CHARS.intersection(member):
        return [_normalize(project_root / member)]

    # Path.glob only takes relative patterns; absolute ones are globbed from their anchor
    pattern = Path(member)
    if pattern.is_absolute():
        search_root = Path(pattern.anchor)
        pattern = pattern.relative_to(search_root)
    else:
        search_root = project_root

    try:
        matches = sorted(p for p in search_root.glob(str(pattern)) if p.is_dir())
    except (OSError, ValueError, NotImplementedError) as e:
        logger.warning("Cannot expand workspace member glob %r in %s: %s", member, project_root, e)
        return []
    return [_normalize(p) for p in matches]


def _normalize(path: Path) -> Path:
    """Collapse ``.`` and ``..`` segments without following symlinks."""
    return Path(os.path.normpath(path))
