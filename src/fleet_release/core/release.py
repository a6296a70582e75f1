"""Next release determination.

DetermineNextRelease combines the queries against the hosting service
with the pure version and changelog logic into a NextRelease.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

import httpx
from pydantic import ValidationError

from fleet_release.core.changelog import Changelog, aggregate_changelogs
from fleet_release.core.stability import Stability, highest
from fleet_release.core.version import Tag, calculate_next_tag
from fleet_release.exceptions import (
    CannotDetermineNextReleaseError,
    InvalidTagError,
    LatestReleaseNotFoundError,
    NoPullRequestsMergedSinceLastReleaseError,
    NoReleaseBaselineError,
    UnknownBranchError,
)
from fleet_release.github.models import CheckRuns, CombinedStatus

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime

    from fleet_release.config.models import Branch, Project, Repository
    from fleet_release.github.models import GitHubBranch, PullRequest, Release

logger = logging.getLogger(__name__)


class ReleaseSource(Protocol):
    """Read-only queries against the hosting service."""

    def latest_release(self, repository: Repository, branch: str) -> Release: ...

    def search_merged_pull_requests(
        self,
        repository: Repository,
        branch: str,
        since: datetime | None = None,
        excluded_author: str | None = None,
    ) -> list[PullRequest]: ...

    def branch(self, repository: Repository, name: str) -> GitHubBranch: ...

    def combined_status(self, repository: Repository, sha: str) -> CombinedStatus: ...

    def check_runs(self, repository: Repository, sha: str) -> CheckRuns: ...


@dataclass(frozen=True)
class NextRelease:
    """The release a branch of a project is heading for."""

    project: Project
    branch: Branch
    current_tag: Tag
    next_tag: Tag
    combined_status: CombinedStatus
    check_runs: CheckRuns
    pull_requests: tuple[PullRequest, ...]
    changelog: Changelog
    last_release_at: datetime | None = None

    def is_needed(self) -> bool:
        if self.project.abandoned:
            return False
        return self.next_tag != self.current_tag

    def stability(self) -> Stability:
        return highest(pr.stability() for pr in self.pull_requests)

    def pull_requests_without_stability_label(self) -> list[PullRequest]:
        return [pr for pr in self.pull_requests if pr.stability() is Stability.UNKNOWN]

    def pull_requests_without_changelog(self) -> list[PullRequest]:
        return [pr for pr in self.pull_requests if pr.needs_changelog() and not pr.has_changelog()]

    def can_be_released(self) -> bool:
        """All pull requests are labelled and documented, and a release is needed."""
        return (
            self.is_needed()
            and bool(self.pull_requests)
            and not self.pull_requests_without_stability_label()
            and not self.pull_requests_without_changelog()
            and self.stability() is not Stability.PEDANTIC
        )


class DetermineNextRelease:
    """Compute the next release of a project branch.

    Args:
        source: Hosting service client
        bot_login: Author whose pull requests are ignored
    """

    def __init__(self, source: ReleaseSource, bot_login: str | None = None) -> None:
        self._source = source
        self._bot_login = bot_login

    def __call__(self, project: Project, branch: Branch | None = None) -> NextRelease:
        """Determine the next release.

        Args:
            project: Project to release
            branch: Branch to release, defaults to the project's default
                branch

        Raises:
            NoBranchesAvailableError: If the project has no branches
            NoReleaseBaselineError: If the branch has no release and its
                name has no previous major version
            NoPullRequestsMergedSinceLastReleaseError: If nothing was merged
                since the last release
        """
        if branch is None:
            branch = project.default_branch()
        repository = project.repository

        try:
            release = self._source.latest_release(repository, branch.name)
        except LatestReleaseNotFoundError:
            try:
                current_tag = Tag.placeholder_for_next_major(branch.name)
            except InvalidTagError as e:
                raise NoReleaseBaselineError(project, branch) from e
            since = None
            logger.info(
                "No release found for %s %s, starting from %s", project.name, branch.name, current_tag
            )
        else:
            current_tag = release.tag
            since = release.published_at

        pull_requests = self._source.search_merged_pull_requests(
            repository,
            branch.name,
            since,
            self._bot_login,
        )
        if not pull_requests:
            raise NoPullRequestsMergedSinceLastReleaseError(project, branch, since)

        next_tag = calculate_next_tag(current_tag, [pr.stability() for pr in pull_requests])
        changelog = aggregate_changelogs(str(next_tag), [pr.changelog() for pr in pull_requests])
        combined_status, check_runs = self._fetch_status(repository, branch)

        logger.debug(
            "%s %s: %s -> %s from %d pull requests",
            project.name,
            branch.name,
            current_tag,
            next_tag,
            len(pull_requests),
        )

        return NextRelease(
            project=project,
            branch=branch,
            current_tag=current_tag,
            next_tag=next_tag,
            combined_status=combined_status,
            check_runs=check_runs,
            pull_requests=tuple(pull_requests),
            changelog=changelog,
            last_release_at=since,
        )

    def _fetch_status(self, repository: Repository, branch: Branch) -> tuple[CombinedStatus, CheckRuns]:
        """Status of the branch tip. Failures are reported as unknown."""
        try:
            tip = self._source.branch(repository, branch.name)
        except (httpx.HTTPError, ValidationError) as e:
            logger.warning("Could not fetch branch %s of %s: %s", branch.name, repository, e)
            return CombinedStatus.unknown(), CheckRuns()

        try:
            combined_status = self._source.combined_status(repository, tip.sha)
        except (httpx.HTTPError, ValidationError) as e:
            logger.warning("Could not fetch combined status of %s@%s: %s", repository, tip.sha, e)
            combined_status = CombinedStatus.unknown(tip.sha)

        try:
            check_runs = self._source.check_runs(repository, tip.sha)
        except (httpx.HTTPError, ValidationError) as e:
            logger.warning("Could not fetch check runs of %s@%s: %s", repository, tip.sha, e)
            check_runs = CheckRuns()

        return combined_status, check_runs


@dataclass
class BatchResult:
    """Outcome of determining the next releases of several projects."""

    releases: list[NextRelease] = field(default_factory=list)
    failures: list[tuple[Project, Exception]] = field(default_factory=list)


def determine_next_releases(
    determine: DetermineNextRelease,
    projects: Iterable[Project],
    branch_name: str | None = None,
) -> BatchResult:
    """Determine the next release of every project.

    A project whose release cannot be determined is recorded as a
    failure and does not stop the others. Transport errors propagate.

    Args:
        determine: Configured orchestrator
        projects: Projects to process
        branch_name: Branch to release instead of each default branch
    """
    result = BatchResult()
    for project in projects:
        try:
            branch = project.branch(branch_name) if branch_name else None
            result.releases.append(determine(project, branch))
        except (CannotDetermineNextReleaseError, UnknownBranchError) as e:
            logger.info("Skipping %s: %s", project.name, e)
            result.failures.append((project, e))
    return result
