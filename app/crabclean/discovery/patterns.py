"""Exclude patterns for project discovery.

Patterns are glob-style and must carry the exclude marker ``!``
(e.g. ``!**/target/**``). The glob after the marker is matched with
fnmatch against the path relative to the scan base, tested as ``<rel>``,
``<rel>/``, ``/<rel>`` and ``/<rel>/``. With these forms ``!**/target``
and ``!**/target/**`` exclude a ``target`` directory at any depth, the
top level included, and ``!vendor/**`` excludes ``vendor`` below the base.
fnmatch's ``*`` also crosses ``/``, so ``*`` and ``**`` behave the same.
"""

import fnmatch
from collections.abc import Iterable
from pathlib import PurePosixPath

EXCLUDE_MARKER = "!"

# Dependency caches and build outputs never contain projects worth cleaning.
DEFAULT_IGNORED_PATTERNS: tuple[str, ...] = (
    "!**/target/**",
    "!**/node_modules/**",
    "!**/.git/**",
    "!**/.cargo/registry/**",
    "!**/.cargo/git/**",
)


class PatternError(Exception):
    """Base exception for exclude pattern errors."""


class InvalidPatternError(PatternError):
    """Raised when a pattern is not a valid exclude pattern."""


def validate_pattern(pattern: str) -> str:
    """Check that a pattern is a well-formed exclude pattern.

    Args:
        pattern: Raw pattern as supplied by the user.

    Returns:
        The pattern with surrounding whitespace removed.

    Raises:
        InvalidPatternError: If the marker or the glob is missing.
    """
    stripped = pattern.strip()
    if not stripped.startswith(EXCLUDE_MARKER):
        msg = f"Ignore pattern must start with '{EXCLUDE_MARKER}': {pattern!r}"
        raise InvalidPatternError(msg)
    if not stripped[len(EXCLUDE_MARKER) :].strip():
        msg = f"Ignore pattern has no glob after '{EXCLUDE_MARKER}': {pattern!r}"
        raise InvalidPatternError(msg)
    return stripped


def parse_patterns(raw: str) -> tuple[str, ...]:
    """Split and validate a comma-separated pattern list.

    Empty items (e.g. from a trailing comma) are dropped.

    Args:
        raw: Comma-separated patterns, e.g. ``"!**/target/**,!vendor/**"``.

    Returns:
        Tuple of validated patterns in the given order.

    Raises:
        InvalidPatternError: If any item is not a valid exclude pattern.
    """
    return tuple(validate_pattern(item) for item in raw.split(",") if item.strip())


def effective_patterns(patterns: Iterable[str] | None) -> tuple[str, ...]:
    """Return the patterns for a scan, falling back to the defaults.

    Explicit patterns replace the defaults entirely; they never extend them.

    Args:
        patterns: Explicit patterns, or None / empty to use the defaults.

    Returns:
        Validated patterns to apply.

    Raises:
        InvalidPatternError: If any explicit pattern is invalid.
    """
    explicit = tuple(validate_pattern(p) for p in patterns or ())
    return explicit or DEFAULT_IGNORED_PATTERNS


class ExcludeMatcher:
    """Matches relative paths against a set of exclude patterns.

    Args:
        patterns: Exclude patterns, each starting with ``!``.

    Raises:
        InvalidPatternError: If any pattern lacks the exclude marker.
    """

    def __init__(self, patterns: Iterable[str]) -> None:
        self._patterns = tuple(validate_pattern(p) for p in patterns)
        self._globs = tuple(p[len(EXCLUDE_MARKER) :].strip() for p in self._patterns)

    @property
    def patterns(self) -> tuple[str, ...]:
        """Return the validated patterns."""
        return self._patterns

    def is_excluded(self, relative: PurePosixPath | str) -> bool:
        """Check if a path relative to the scan base is excluded.

        Args:
            relative: Path relative to the scan base ("." is never excluded).

        Returns:
            True if any pattern matches the path.
        """
        rel = str(relative).strip("/")
        if rel in ("", "."):
            return False
        candidates = (f"/{rel}", f"/{rel}/")
        return any(
            fnmatch.fnmatchcase(candidate, glob)
            or fnmatch.fnmatchcase(candidate[1:], glob)
            for glob in self._globs
            for candidate in candidates
        )
