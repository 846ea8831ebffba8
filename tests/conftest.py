"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from collections.abc import Callable
from pathlib import Path

import pytest

PACKAGE_MANIFEST = """[package]
name = "{name}"
version = "0.1.0"
edition = "2021"
"""


def _write_manifest(directory: Path, content: str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "Cargo.toml").write_text(content)
    return directory


@pytest.fixture
def make_package() -> Callable[[Path], Path]:
    """Factory creating a plain Cargo package directory."""

    def _make(directory: Path) -> Path:
        return _write_manifest(directory, PACKAGE_MANIFEST.format(name=directory.name))

    return _make


@pytest.fixture
def make_workspace() -> Callable[..., Path]:
    """Factory creating a Cargo workspace root declaring the given members."""

    def _make(directory: Path, members: list[str], extra: str = "") -> Path:
        quoted = ", ".join(f'"{m}"' for m in members)
        return _write_manifest(directory, f"[workspace]\nmembers = [{quoted}]\n{extra}")

    return _make


@pytest.fixture
def workspace_tree(
    tmp_path: Path,
    make_package: Callable[[Path], Path],
    make_workspace: Callable[..., Path],
) -> Path:
    """Directory holding workspace `root` with members a and b, plus `standalone`.

    Layout::

        base/
          root/        (workspace: a, b)
            a/
            b/
          standalone/
    """
    base = tmp_path / "base"
    make_workspace(base / "root", ["a", "b"])
    make_package(base / "root" / "a")
    make_package(base / "root" / "b")
    make_package(base / "standalone")
    return base
