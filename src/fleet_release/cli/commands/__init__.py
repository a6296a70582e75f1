"""CLI command implementations."""

from __future__ import annotations

from fleet_release.cli.commands.next_release import run_next_release
from fleet_release.cli.commands.projects import run_projects

__all__ = ["run_next_release", "run_projects"]
