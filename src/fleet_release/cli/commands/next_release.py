"""Implementation of the 'next-release' command.

The next-release command shows, per project, the state of the branch to
release, the merged pull requests, the next version and its changelog.
"""

from __future__ import annotations

from contextlib import ExitStack
from dataclasses import replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import httpx
from rich.markup import escape

from fleet_release.cli.commands.common import load_config_or_exit, load_projects_or_exit
from fleet_release.config import get_github_token
from fleet_release.core.release import DetermineNextRelease, determine_next_releases
from fleet_release.core.stability import Stability
from fleet_release.exceptions import ConfigError
from fleet_release.github import GitHubClient

if TYPE_CHECKING:
    from rich.console import Console

    from fleet_release.core.release import NextRelease, ReleaseSource
    from fleet_release.github import PullRequest

STABILITY_COLORS = {
    Stability.MINOR: "green",
    Stability.PATCH: "blue",
    Stability.PEDANTIC: "yellow",
    Stability.UNKNOWN: "red",
}

LABEL_COLORS = {
    "patch": "blue",
    "bug": "red",
    "docs": "yellow",
    "minor": "green",
    "pedantic": "cyan",
}


def run_next_release(
    config_path: str | None,
    project_names: list[str],
    branch: str | None,
    console: Console,
    err_console: Console,
    *,
    source: ReleaseSource | None = None,
) -> None:
    """Run the next-release command.

    Args:
        config_path: Optional path to the configuration file
        project_names: Projects to inspect, all when empty
        branch: Branch to release instead of each default branch
        console: Console for standard output
        err_console: Console for error output
        source: Hosting client, built from the configuration if omitted
    """
    config = load_config_or_exit(config_path, err_console)
    projects = load_projects_or_exit(config, err_console)

    try:
        selected = projects.by_names(project_names) if project_names else projects.all()
    except ConfigError as e:
        err_console.print(f"[red]Error:[/] {escape(str(e))}")
        raise SystemExit(1) from e

    with ExitStack() as stack:
        if source is None:
            github = GitHubClient.from_config(config.github, get_github_token(config))
            source = stack.enter_context(github)

        determine = DetermineNextRelease(source, config.github.bot_login)

        try:
            result = determine_next_releases(determine, selected, branch)
        except httpx.HTTPError as e:
            err_console.print(f"[red]GitHub request failed:[/] {escape(str(e))}")
            raise SystemExit(1) from e

    for release in result.releases:
        render_next_release(release, console)

    for project, error in result.failures:
        console.rule(f"[bold]{escape(project.name)}[/]")
        console.print(f"[yellow]{escape(str(error))}[/]\n")


def render_next_release(release: NextRelease, console: Console) -> None:
    """Print a next release like the release manager reads it."""
    project = release.project
    console.rule(f"[bold]{escape(project.name)}[/] [dim]{escape(release.branch.name)}[/]")
    console.print(f"Current release: [cyan]{escape(str(release.current_tag))}[/]")

    console.print("\n[bold]Checks[/]")
    _render_checks(release, console)

    console.print("\n[bold]Pull requests[/]")
    for pull_request in release.pull_requests:
        _render_pull_request(pull_request, console)

    console.print("[bold]Release[/]")
    if not release.is_needed():
        console.print("[yellow]Release is not needed[/]\n")
        return

    console.print(f"[green]Next release will be: {escape(str(release.next_tag))}[/]")
    if not release.can_be_released():
        console.print("[yellow]Some pull requests lack a stability label or a changelog.[/]")

    console.print("\n[bold]Changelog[/]")
    changelog = replace(release.changelog, headline=release_heading(release))
    console.print(changelog.as_markdown(), markup=False, highlight=False)


def release_heading(release: NextRelease, today: datetime | None = None) -> str:
    """Markdown heading of the release, linking the comparison with the last one."""
    date = (today or datetime.now(UTC)).strftime("%Y-%m-%d")
    next_tag = release.next_tag
    if release.current_tag.is_placeholder:
        return f"## {next_tag} - {date}"
    return (
        f"## [{next_tag}]({release.project.repository.html_url}"
        f"/compare/{release.current_tag}...{next_tag}) - {date}"
    )


def _check_color(successful: bool, waiting: bool) -> str:
    if successful:
        return "green"
    return "yellow" if waiting else "red"


def _render_checks(release: NextRelease, console: Console) -> None:
    status = release.combined_status
    check_runs = release.check_runs
    if status.is_unknown():
        console.print("    [dim]Status unknown[/]")
    elif status.is_successful() and check_runs.is_successful():
        console.print("    [green]All checks passed[/]")

    for item in status.statuses:
        color = _check_color(item.is_successful(), item.state == "pending")
        console.print(f"    [{color}]{escape(item.description or item.context)}[/]")
        if item.target_url:
            console.print(f"     {escape(item.target_url)}", highlight=False)

    for run in check_runs.all():
        waiting = run.status != "completed" or run.conclusion in ("neutral", "skipped")
        color = _check_color(run.is_successful(), waiting)
        console.print(f"    [{color}]{escape(run.name)}[/]")
        if run.details_url:
            console.print(f"     {escape(run.details_url)}", highlight=False)


def _render_pull_request(pull_request: PullRequest, console: Console) -> None:
    stability = pull_request.stability()
    parts = [
        f"[black on {STABILITY_COLORS[stability]}]\\[{stability.upper()}][/]",
        f"[green]{escape(pull_request.title)}[/]",
    ]
    for name in pull_request.label_names:
        color = LABEL_COLORS.get(name, "default")
        parts.append(f"[{color}]\\[{escape(name)}][/]")

    if not pull_request.labels:
        parts.append("[black on yellow]\\[No labels][/]")

    has_changelog = pull_request.has_changelog()
    if not has_changelog and pull_request.needs_changelog():
        parts.append("[red]\\[Changelog not found][/]")
    elif not has_changelog:
        parts.append("[black on green]\\[Changelog not found][/]")
    elif not pull_request.needs_changelog():
        parts.append("[black on yellow]\\[Changelog found][/]")
    else:
        parts.append("[black on green]\\[Changelog found][/]")

    console.print(" ".join(parts))
    console.print(escape(pull_request.html_url), highlight=False)
    console.print()

