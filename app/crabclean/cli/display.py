"""Shared Rich display functions for plans and results.

Paths are printed with ``soft_wrap=True`` so long project paths stay on
one line and remain copyable.
"""

import json
from pathlib import Path

from rich.markup import escape
from rich.table import Table

from crabclean.models.clean import CleanMode, CleanResult, CleanSummary
from crabclean.models.project import Project, ProjectRole, ProjectSet, Workspace
from crabclean.utils.formatting import console, print_info, print_success, print_warning

_ROLE_STYLES: dict[ProjectRole, str] = {
    ProjectRole.WORKSPACE: "role_workspace",
    ProjectRole.STANDALONE: "role_standalone",
    ProjectRole.MEMBER: "role_member",
}


def format_role(project: Project) -> str:
    """Format a project's role annotation with Rich markup.

    Args:
        project: Project to describe.

    Returns:
        Markup such as ``workspace, 2 members`` or ``member of /src/app``.
    """
    style = _ROLE_STYLES[project.role]
    if isinstance(project.relation, Workspace):
        count = len(project.relation.members)
        label = f"workspace, {count} member{'s' if count != 1 else ''}"
    elif project.is_member:
        label = f"member of {escape(str(project.parent))}"
    else:
        label = project.role.value
    return f"[{style}]{label}[/{style}]"


def print_banner(mode: CleanMode) -> None:
    """Print which artifacts this run cleans."""
    console.print(f"[banner]{mode.description}[/banner]")


def print_discovery_summary(projects: ProjectSet, base_dir: Path) -> None:
    """Print how many projects were found and how many are skipped.

    Args:
        projects: Resolved project set.
        base_dir: Scanned base directory as given by the user.
    """
    console.print(
        f"Found {len(projects)} cargo projects under: [path]{escape(str(base_dir))}[/path]",
        soft_wrap=True,
    )
    skipped = len(projects.members)
    if skipped:
        console.print(
            f"[muted]Skipping {skipped} workspace member(s) cleaned by their workspace[/muted]"
        )
    console.print()


def print_plan(projects: ProjectSet) -> None:
    """Print the dry-run plan: every project that would be cleaned, then the skipped ones.

    Args:
        projects: Resolved project set.
    """
    console.print("[bold_header]Planned clean (dry run)[/bold_header]")
    for project in projects.cleanable:
        console.print(
            f"  Would clean: [path]{escape(str(project.path))}[/path] ({format_role(project)})",
            soft_wrap=True,
        )

    members = projects.members
    if members:
        console.print("\n[bold_header]Skipped workspace members[/bold_header]")
        for project in members:
            console.print(
                f"  Skipping: [muted]{escape(str(project.path))}[/muted] ({format_role(project)})",
                soft_wrap=True,
            )

    console.print()
    print_info(f"Dry-run: {len(projects.cleanable)} project(s) would be cleaned.")


def print_plan_json(projects: ProjectSet) -> None:
    """Print the dry-run plan as JSON.

    Args:
        projects: Resolved project set.
    """
    data: list[dict[str, object]] = []
    for project in projects.projects:
        entry: dict[str, object] = {
            "path": str(project.path),
            "role": project.role.value,
            "clean": project.should_clean,
        }
        if isinstance(project.relation, Workspace):
            entry["members"] = [str(m) for m in project.relation.members]
        if project.parent is not None:
            entry["parent"] = str(project.parent)
        data.append(entry)
    console.print_json(json.dumps(data))


def print_clean_result(result: CleanResult) -> None:
    """Print a single clean outcome as soon as it completes.

    Args:
        result: Finished clean result.
    """
    path = escape(str(result.project.path))
    if result.success:
        output = f" [output]{escape(result.output)}[/output]" if result.output else ""
        console.print(f"Cleaned: [path]{path}[/path]{output}", soft_wrap=True)
    else:
        console.print(
            f"[error]Error:[/error] {path}: {escape(result.error or 'Unknown error')}",
            soft_wrap=True,
        )


def create_failures_table(failures: list[CleanResult]) -> Table:
    """Create a Rich table listing failed projects.

    Args:
        failures: Failed clean results.

    Returns:
        Rich Table with Project and Error columns.
    """
    table = Table(
        title="Failed Projects",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Project", overflow="fold")
    table.add_column("Error", style="muted", overflow="fold")

    for result in failures:
        table.add_row(escape(str(result.project.path)), escape(result.error or "Unknown error"))

    return table


def print_clean_summary(summary: CleanSummary) -> None:
    """Print the aggregate result of a clean run.

    Args:
        summary: Aggregate of all clean results.
    """
    failures = summary.failures
    console.print(f"\nCleaned [success]{summary.completed}[/success] projects")

    if not failures:
        print_success(f"All {summary.succeeded} project(s) cleaned successfully.")
        return

    console.print(create_failures_table(failures))
    print_warning(f"{summary.succeeded} succeeded, {len(failures)} failed")
