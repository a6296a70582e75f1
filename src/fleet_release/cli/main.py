"""Command line entry point."""

from __future__ import annotations

import argparse

from rich.console import Console

from fleet_release import __version__
from fleet_release.cli.commands.next_release import run_next_release
from fleet_release.cli.commands.projects import run_projects
from fleet_release.log import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fleet-release",
        description="Plan the next releases of a fleet of repositories.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-c",
        "--config",
        help="Configuration file (default: fleet-release.yaml or projects.yaml)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Show more log output, repeat for debug output",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    next_release = subparsers.add_parser(
        "next-release",
        help="Show the next version and changelog of projects",
        description=(
            "Analyze the pull requests merged since the last release of each project "
            "and show the next version to release with its changelog."
        ),
    )
    next_release.add_argument("projects", nargs="*", help="Projects to inspect (default: all)")
    next_release.add_argument("-b", "--branch", help="Branch to release (default: stable branch)")

    subparsers.add_parser("projects", help="List the configured projects")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    console = Console()
    err_console = Console(stderr=True)
    configure_logging(args.verbose, err_console)

    if args.command == "next-release":
        run_next_release(args.config, args.projects, args.branch, console, err_console)
    elif args.command == "projects":
        run_projects(args.config, console, err_console)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
