"""Implementation of the 'projects' command."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape
from rich.table import Table

from fleet_release.cli.commands.common import load_config_or_exit, load_projects_or_exit

if TYPE_CHECKING:
    from rich.console import Console


def run_projects(config_path: str | None, console: Console, err_console: Console) -> None:
    """List the configured projects with their branches."""
    config = load_config_or_exit(config_path, err_console)
    projects = load_projects_or_exit(config, err_console)

    if not len(projects):
        console.print("[yellow]No projects configured.[/]")
        return

    table = Table(title="Projects")
    table.add_column("Project", style="bold")
    table.add_column("Repository", style="cyan")
    table.add_column("Branches")
    table.add_column("Release branch", style="green")

    for project in projects.all():
        if project.has_branches():
            release_branch = escape(project.default_branch().name)
        else:
            release_branch = "[dim]none[/]"
        name = escape(project.name)
        if project.abandoned:
            name += " [dim](abandoned)[/]"
        table.add_row(
            name,
            escape(str(project.repository)),
            escape(", ".join(project.branch_names)),
            release_branch,
        )

    console.print(table)
