"""Filesystem scanner for Cargo project roots.

Walks a base directory recursively and yields every directory that
directly contains a ``Cargo.toml`` manifest. Directories matched by an
exclude pattern are pruned and never descended into.
"""

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path, PurePosixPath

from crabclean.discovery.patterns import ExcludeMatcher, effective_patterns

logger = logging.getLogger(__name__)

MANIFEST_NAME = "Cargo.toml"


class ScanError(Exception):
    """Raised when the base directory itself cannot be scanned."""


class ProjectScanner:
    """Discovers Cargo project roots below a base directory.

    Unreadable directories below the base are reported as warnings and
    skipped; an inaccessible base directory aborts the scan.

    Args:
        base_dir: Directory to scan.
        patterns: Exclude patterns. None or empty applies
            DEFAULT_IGNORED_PATTERNS; explicit patterns replace them.

    Raises:
        InvalidPatternError: If any pattern lacks the exclude marker.
    """

    def __init__(self, base_dir: Path, *, patterns: Iterable[str] | None = None) -> None:
        self._base_dir = base_dir
        self._matcher = ExcludeMatcher(effective_patterns(patterns))

    @property
    def base_dir(self) -> Path:
        """Return the directory this scanner walks."""
        return self._base_dir

    @property
    def patterns(self) -> tuple[str, ...]:
        """Return the exclude patterns in effect."""
        return self._matcher.patterns

    def scan(self) -> list[Path]:
        """Scan the base directory for project roots.

        Returns:
            Absolute project root paths, deduplicated and sorted.

        Raises:
            ScanError: If the base directory is missing or unreadable.
        """
        base = self._resolve_base()
        roots = sorted(set(self._walk(base)))
        logger.debug("Found %d project root(s) under %s", len(roots), base)
        return roots

    def _resolve_base(self) -> Path:
        """Resolve and check the base directory.

        Returns:
            Absolute, resolved base directory.

        Raises:
            ScanError: If the base directory is missing or unreadable.
        """
        try:
            base = self._base_dir.expanduser().resolve(strict=True)
        except (FileNotFoundError, RuntimeError) as e:
            msg = f"Base directory not found: {self._base_dir}"
            raise ScanError(msg) from e
        except OSError as e:
            msg = f"Cannot access base directory {self._base_dir}: {e}"
            raise ScanError(msg) from e

        if not base.is_dir():
            msg = f"Base path is not a directory: {self._base_dir}"
            raise ScanError(msg)

        try:
            next(base.iterdir(), None)
        except OSError as e:
            msg = f"Cannot read base directory {base}: {e}"
            raise ScanError(msg) from e

        return base

    def _walk(self, base: Path) -> Iterator[Path]:
        """Walk the tree depth-first, yielding directories holding a manifest.

        Args:
            base: Resolved base directory.

        Yields:
            Project root directories.
        """
        stack = [base]
        while stack:
            directory = stack.pop()
            try:
                entries = sorted(directory.iterdir())
            except OSError as e:
                logger.warning("Cannot read directory %s: %s", directory, e)
                continue

            subdirs: list[Path] = []
            for entry in entries:
                relative = PurePosixPath(entry.relative_to(base).as_posix())
                try:
                    if entry.is_dir():
                        if entry.is_symlink():
                            continue
                        if self._matcher.is_excluded(relative):
                            logger.debug("Excluded directory: %s", entry)
                            continue
                        subdirs.append(entry)
                    elif entry.name == MANIFEST_NAME and entry.is_file():
                        if self._matcher.is_excluded(relative):
                            logger.debug("Excluded manifest: %s", entry)
                            continue
                        yield directory
                except OSError as e:
                    logger.warning("Cannot inspect %s: %s", entry, e)

            # Reverse so the stack pops subdirectories in sorted order
            stack.extend(reversed(subdirs))
