"""Configuration management for fleet-release."""

from __future__ import annotations

from fleet_release.config.loader import get_github_token, load_config
from fleet_release.config.models import (
    Branch,
    BranchConfig,
    FleetConfig,
    GitHubConfig,
    PackagistConfig,
    Project,
    ProjectConfig,
    Repository,
)
from fleet_release.config.projects import Projects

__all__ = [
    "Branch",
    "BranchConfig",
    "FleetConfig",
    "GitHubConfig",
    "PackagistConfig",
    "Project",
    "ProjectConfig",
    "Projects",
    "Repository",
    "get_github_token",
    "load_config",
]
