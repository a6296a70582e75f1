"""GitHub access for fleet-release."""

from __future__ import annotations

from fleet_release.github.client import GitHubClient, pull_requests_since_query
from fleet_release.github.models import (
    CheckRun,
    CheckRuns,
    CombinedStatus,
    GitHubBranch,
    Label,
    PullRequest,
    Release,
    Status,
    User,
)

__all__ = [
    "CheckRun",
    "CheckRuns",
    "CombinedStatus",
    "GitHubBranch",
    "GitHubClient",
    "Label",
    "PullRequest",
    "Release",
    "Status",
    "User",
    "pull_requests_since_query",
]
