"""Exception hierarchy for fleet-release.

All errors raised by this package derive from FleetReleaseError.
Transport and authentication failures of the HTTP clients are not
wrapped: they surface as ``httpx.HTTPError``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

    from fleet_release.config.models import Branch, Project, Repository


class FleetReleaseError(Exception):
    """Base class for all fleet-release errors."""


# Values


class InvalidTagError(FleetReleaseError, ValueError):
    """A tag string is empty or not a version."""


class ChangelogValidationError(FleetReleaseError, ValueError):
    """A changelog section violates its invariants."""


# Configuration


class ConfigError(FleetReleaseError):
    """Base class for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """The configuration file does not exist."""


class ConfigValidationError(ConfigError):
    """The configuration file has invalid content."""


class UnknownProjectError(ConfigError):
    """A project name is not configured."""

    def __init__(self, name: str) -> None:
        super().__init__(f'Could not find project "{name}".')
        self.name = name


class UnknownBranchError(ConfigError):
    """A branch is not configured for a project."""

    def __init__(self, project: Project, name: str) -> None:
        super().__init__(f'Could not find branch "{name}" of project "{project.name}".')
        self.project = project
        self.name = name


# GitHub


class GitHubError(FleetReleaseError):
    """Base class for errors of the hosting client."""


class LatestReleaseNotFoundError(GitHubError):
    """A repository has no release on the requested branch."""

    def __init__(self, repository: Repository, branch: str | None = None) -> None:
        if branch is None:
            message = f'Could not find latest release for "{repository}".'
        else:
            message = f'Could not find latest release for branch "{branch}" of "{repository}".'
        super().__init__(message)
        self.repository = repository
        self.branch = branch


# Release determination


class CannotDetermineNextReleaseError(FleetReleaseError):
    """The next release of a project cannot be computed.

    Batch callers catch this and continue with the remaining projects.
    """


class NoBranchesAvailableError(CannotDetermineNextReleaseError):
    """A project has no configured branches."""

    def __init__(self, project: Project) -> None:
        super().__init__(f'No branches available for project "{project.name}".')
        self.project = project


class NoReleaseBaselineError(CannotDetermineNextReleaseError):
    """A branch without releases has no previous major version to start from."""

    def __init__(self, project: Project, branch: Branch) -> None:
        super().__init__(
            f'No release and no previous major version for branch "{branch.name}" '
            f'of project "{project.name}".'
        )
        self.project = project
        self.branch = branch


class NoPullRequestsMergedSinceLastReleaseError(CannotDetermineNextReleaseError):
    """Nothing was merged on a branch since its last release."""

    def __init__(self, project: Project, branch: Branch, last_release: datetime | None) -> None:
        since = last_release.strftime("%Y-%m-%d %H:%M:%S") if last_release else "never"
        super().__init__(
            f'No pull requests merged since last release "{since}" '
            f'for branch "{branch.name}" of project "{project.name}".'
        )
        self.project = project
        self.branch = branch
        self.last_release = last_release
