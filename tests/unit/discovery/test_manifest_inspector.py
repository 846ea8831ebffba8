"""Unit tests for Cargo manifest inspection."""

import logging
import os
from collections.abc import Callable
from pathlib import Path

import pytest
from crabclean.discovery.manifest import (
    ManifestError,
    ManifestParseError,
    ManifestValidationError,
    declares_workspace,
    inspect_manifest,
)


def _write(directory: Path, content: str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "Cargo.toml").write_text(content)
    return directory


class TestDeclaresWorkspace:
    """Tests for the textual workspace check."""

    @pytest.mark.parametrize(
        "text",
        [
            "[workspace]\nmembers = []\n",
            '[package]\nname = "x"\n\n[workspace]\n',
            "  [ workspace ]\n",
            '[workspace.dependencies]\nserde = "1"\n',
            'workspace.members = ["a"]\n',
            'workspace = { members = ["a"] }\n',
        ],
    )
    def test_detects_workspace_headers(self, text: str) -> None:
        """Workspace tables, sub-tables, dotted keys and inline tables are detected."""
        assert declares_workspace(text) is True

    @pytest.mark.parametrize(
        "text",
        [
            '[package]\nname = "x"\n',
            "# [workspace]\n",
            '[package]\nworkspace = ".."\n',
            '[dependencies]\nworkspace-hack = "0.1"\n',
        ],
    )
    def test_ignores_other_content(self, text: str) -> None:
        """Comments, keys and unrelated tables are not workspace declarations."""
        assert declares_workspace(text) is False


class TestInspectManifest:
    """Tests for inspect_manifest."""

    def test_plain_package_is_standalone(
        self, tmp_path: Path, make_package: Callable[[Path], Path]
    ) -> None:
        """A manifest without [workspace] yields no members."""
        root = make_package(tmp_path / "pkg")

        info = inspect_manifest(root)

        assert info.path == root
        assert info.members is None
        assert info.declares_workspace is False

    def test_missing_manifest_is_standalone(self, tmp_path: Path) -> None:
        """A root without Cargo.toml is treated as standalone."""
        info = inspect_manifest(tmp_path)
        assert info.members is None

    def test_members_resolved_in_declared_order(
        self, tmp_path: Path, make_workspace: Callable[..., Path]
    ) -> None:
        """Members are resolved relative to the root, order preserved."""
        root = make_workspace(tmp_path / "ws", ["crates/zeta", "crates/alpha"])

        info = inspect_manifest(root)

        assert info.members == (root / "crates" / "zeta", root / "crates" / "alpha")

    def test_members_need_not_exist(
        self, tmp_path: Path, make_workspace: Callable[..., Path]
    ) -> None:
        """Inspection resolves paths without checking that they exist."""
        root = make_workspace(tmp_path / "ws", ["missing"])
        assert inspect_manifest(root).members == (root / "missing",)

    def test_dot_segments_are_normalized(
        self, tmp_path: Path, make_workspace: Callable[..., Path]
    ) -> None:
        """'./a' and '../sibling' collapse to clean absolute paths."""
        root = make_workspace(tmp_path / "ws", ["./a", "../sibling", "."])

        info = inspect_manifest(root)

        assert info.members == (root / "a", tmp_path / "sibling", root)

    def test_duplicate_members_keep_first_position(
        self, tmp_path: Path, make_workspace: Callable[..., Path]
    ) -> None:
        """Repeated members appear once."""
        root = make_workspace(tmp_path / "ws", ["a", "b", "./a"])
        assert inspect_manifest(root).members == (root / "a", root / "b")

    def test_workspace_without_members_key(self, tmp_path: Path) -> None:
        """A bare [workspace] table is a workspace with no members."""
        root = _write(tmp_path / "ws", '[package]\nname = "ws"\n\n[workspace]\n')

        info = inspect_manifest(root)

        assert info.members == ()
        assert info.declares_workspace is True

    def test_glob_members_expand_to_directories(
        self, tmp_path: Path, make_workspace: Callable[..., Path]
    ) -> None:
        """Glob members expand to matching directories in sorted order."""
        root = make_workspace(tmp_path / "ws", ["crates/*"])
        (root / "crates" / "b").mkdir(parents=True)
        (root / "crates" / "a").mkdir()
        (root / "crates" / "README.md").write_text("docs")

        info = inspect_manifest(root)

        assert info.members == (root / "crates" / "a", root / "crates" / "b")

    def test_exclude_drops_members(self, tmp_path: Path) -> None:
        """Paths in workspace.exclude, and paths below them, are dropped."""
        root = _write(
            tmp_path / "ws",
            '[workspace]\nmembers = ["crates/*", "tools"]\nexclude = ["crates/legacy"]\n',
        )
        for name in ("core", "legacy"):
            (root / "crates" / name).mkdir(parents=True)

        info = inspect_manifest(root)

        assert info.members == (root / "crates" / "core", root / "tools")

    def test_extra_workspace_keys_are_accepted(self, tmp_path: Path) -> None:
        """Dependency and package sub-tables do not break validation."""
        root = _write(
            tmp_path / "ws",
            '[workspace]\nmembers = ["a"]\nresolver = "2"\n\n'
            '[workspace.package]\nversion = "0.1.0"\n\n'
            '[workspace.dependencies]\nserde = { version = "1", features = ["derive"] }\n',
        )
        assert inspect_manifest(root).members == (root / "a",)

    def test_header_inside_string_is_not_a_workspace(self, tmp_path: Path) -> None:
        """A header that only appears inside a multi-line string is ignored."""
        root = _write(
            tmp_path / "pkg",
            '[package]\nname = "pkg"\ndescription = """\n[workspace]\n"""\n',
        )
        assert inspect_manifest(root).members is None


class TestInspectManifestErrors:
    """Tests for unreadable and malformed manifests."""

    def test_invalid_toml_with_workspace_is_fatal(self, tmp_path: Path) -> None:
        """Broken TOML in a workspace manifest raises ManifestParseError."""
        root = _write(tmp_path / "ws", '[workspace]\nmembers = ["a",\n')

        with pytest.raises(ManifestParseError, match="Invalid TOML"):
            inspect_manifest(root)

    def test_invalid_toml_without_workspace_is_ignored(self, tmp_path: Path) -> None:
        """Broken TOML in a plain package manifest is not parsed at all."""
        root = _write(tmp_path / "pkg", "[package\nname = ")
        assert inspect_manifest(root).members is None

    def test_members_not_a_list_is_fatal(self, tmp_path: Path) -> None:
        """A members value of the wrong type raises ManifestValidationError."""
        root = _write(tmp_path / "ws", '[workspace]\nmembers = "a"\n')

        with pytest.raises(ManifestValidationError, match="Invalid workspace section"):
            inspect_manifest(root)

    def test_member_entry_not_a_string_is_fatal(self, tmp_path: Path) -> None:
        """Non-string member entries are rejected."""
        root = _write(tmp_path / "ws", "[workspace]\nmembers = [1, 2]\n")

        with pytest.raises(ManifestValidationError):
            inspect_manifest(root)

    def test_errors_share_base_class(self) -> None:
        """Parse and validation errors are ManifestErrors."""
        assert issubclass(ManifestParseError, ManifestError)
        assert issubclass(ManifestValidationError, ManifestError)

    def test_undecodable_manifest_is_standalone(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A manifest that is not UTF-8 is warned about and treated as standalone."""
        root = tmp_path / "bad"
        root.mkdir()
        (root / "Cargo.toml").write_bytes(b"\xff\xfe[workspace]")

        with caplog.at_level(logging.WARNING, logger="crabclean.discovery.manifest"):
            info = inspect_manifest(root)

        assert info.members is None
        assert "Cannot read manifest" in caplog.text

    @pytest.mark.skipif(
        not hasattr(os, "geteuid") or os.geteuid() == 0,
        reason="root can read files regardless of permissions",
    )
    def test_unreadable_manifest_is_standalone(
        self, tmp_path: Path, make_package: Callable[[Path], Path]
    ) -> None:
        """A manifest without read permission does not abort inspection."""
        root = make_package(tmp_path / "pkg")
        manifest = root / "Cargo.toml"
        manifest.chmod(0o000)
        try:
            info = inspect_manifest(root)
        finally:
            manifest.chmod(0o644)

        assert info.members is None


class TestWorkspaceDeclarationForms:
    """Tests for workspaces declared without a [workspace] header."""

    def test_dotted_key_members_are_resolved(self, tmp_path: Path) -> None:
        """A top-level workspace.members key declares a workspace."""
        root = _write(tmp_path / "ws", 'workspace.members = ["a", "b"]\n')

        info = inspect_manifest(root)

        assert info.declares_workspace is True
        assert info.members == (root / "a", root / "b")

    def test_inline_table_members_are_resolved(self, tmp_path: Path) -> None:
        """An inline workspace table declares a workspace."""
        root = _write(tmp_path / "ws", 'workspace = { members = ["crates/core"] }\n')

        assert inspect_manifest(root).members == (root / "crates" / "core",)


class TestAbsoluteMembers:
    """Tests for members given as absolute paths."""

    def test_absolute_glob_member_expands(self, tmp_path: Path) -> None:
        """An absolute glob is expanded from the filesystem root."""
        for name in ("y", "x"):
            (tmp_path / "other" / name).mkdir(parents=True)
        root = _write(tmp_path / "ws", f'[workspace]\nmembers = ["{tmp_path}/other/*"]\n')

        info = inspect_manifest(root)

        assert info.members == (tmp_path / "other" / "x", tmp_path / "other" / "y")

    def test_absolute_plain_member_is_kept(self, tmp_path: Path) -> None:
        """An absolute member without glob characters is used as written."""
        target = tmp_path / "elsewhere"
        root = _write(tmp_path / "ws", f'[workspace]\nmembers = ["{target}"]\n')

        assert inspect_manifest(root).members == (target,)
