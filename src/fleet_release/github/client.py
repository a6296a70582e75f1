"""GitHub REST API client.

A thin httpx wrapper exposing the read-only queries the release
planning needs. Error responses raise ``httpx.HTTPStatusError`` and are
not wrapped, except for a missing release which is an expected answer.
"""

from __future__ import annotations

import logging
from datetime import UTC
from typing import TYPE_CHECKING, Any

import httpx

from fleet_release.exceptions import InvalidTagError, LatestReleaseNotFoundError
from fleet_release.github.models import (
    CheckRuns,
    CombinedStatus,
    GitHubBranch,
    PullRequest,
    Release,
)

if TYPE_CHECKING:
    from collections.abc import Iterator
    from datetime import datetime

    from fleet_release.config.models import GitHubConfig, Repository

logger = logging.getLogger(__name__)

API_VERSION = "2022-11-28"
PER_PAGE = 100


def pull_requests_since_query(
    repository: Repository,
    branch: str,
    since: datetime | None,
    excluded_author: str | None = None,
) -> str:
    """Build the search query for pull requests merged on a branch.

    Without ``since`` every merged pull request of the branch matches.
    """
    terms = [f"repo:{repository}", "type:pr", "is:merged", f"base:{branch}"]
    if since is not None:
        if since.tzinfo is not None:
            since = since.astimezone(UTC)
        terms.append(f"merged:>{since.strftime('%Y-%m-%dT%H:%M:%SZ')}")
    if excluded_author:
        terms.append(f"-author:{excluded_author}")
    return " ".join(terms)


class GitHubClient:
    """Read-only GitHub API client."""

    def __init__(
        self,
        token: str | None = None,
        *,
        api_url: str = "https://api.github.com",
        timeout: float = 30.0,
        client: httpx.Client | None = None,
    ) -> None:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"

        if client is None:
            client = httpx.Client(base_url=api_url, headers=headers, timeout=timeout)
        else:
            client.headers.update(headers)
        self._client = client

    @classmethod
    def from_config(cls, config: GitHubConfig, token: str | None = None) -> GitHubClient:
        return cls(token, api_url=config.api_url, timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # Releases

    def find_latest_release(self, repository: Repository, branch: str) -> Release | None:
        """Return the latest published release of a branch, if any.

        Releases are listed newest first; the first one targeting the
        branch wins. Drafts and releases whose tag is not a version are
        skipped.
        """
        path = f"/repos/{repository}/releases"
        try:
            for item in self._paginate(path):
                if item.get("draft") or not item.get("published_at"):
                    continue
                if item.get("target_commitish") != branch:
                    continue
                try:
                    return Release.from_response(item)
                except InvalidTagError as e:
                    logger.warning("Skipping release of %s: %s", repository, e)
        except httpx.HTTPStatusError as e:
            if e.response.status_code == httpx.codes.NOT_FOUND:
                logger.debug("No releases found for %s", repository)
                return None
            raise

        logger.debug("No release found for branch %s of %s", branch, repository)
        return None

    def latest_release(self, repository: Repository, branch: str) -> Release:
        """Like find_latest_release(), but a missing release is an error.

        Raises:
            LatestReleaseNotFoundError: If the branch has no release
        """
        release = self.find_latest_release(repository, branch)
        if release is None:
            raise LatestReleaseNotFoundError(repository, branch)
        return release

    # Pull requests

    def pull_request(self, repository: Repository, number: int) -> PullRequest:
        response = self._client.get(f"/repos/{repository}/pulls/{number}")
        response.raise_for_status()
        return PullRequest.from_response(response.json())

    def search_merged_pull_requests(
        self,
        repository: Repository,
        branch: str,
        since: datetime | None = None,
        excluded_author: str | None = None,
    ) -> list[PullRequest]:
        """Pull requests merged on a branch after ``since``.

        Search results lack some fields, so every hit is fetched again.
        The order of the search results is kept.
        """
        query = pull_requests_since_query(repository, branch, since, excluded_author)
        logger.debug("Searching pull requests: %s", query)

        pull_requests = []
        for item in self._paginate(
            "/search/issues",
            params={"q": query, "sort": "created", "order": "asc"},
            items_key="items",
        ):
            pull_requests.append(self.pull_request(repository, item["number"]))
        return pull_requests

    # Commits

    def branch(self, repository: Repository, name: str) -> GitHubBranch:
        response = self._client.get(f"/repos/{repository}/branches/{name}")
        response.raise_for_status()
        return GitHubBranch.from_response(response.json())

    def combined_status(self, repository: Repository, sha: str) -> CombinedStatus:
        response = self._client.get(f"/repos/{repository}/commits/{sha}/status")
        response.raise_for_status()
        return CombinedStatus.from_response(response.json())

    def check_runs(self, repository: Repository, sha: str) -> CheckRuns:
        response = self._client.get(
            f"/repos/{repository}/commits/{sha}/check-runs",
            params={"per_page": PER_PAGE},
        )
        response.raise_for_status()
        return CheckRuns.from_response(response.json())

    def _paginate(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        items_key: str | None = None,
    ) -> Iterator[dict[str, Any]]:
        """Yield the items of every page, following ``Link: rel="next"``."""
        url: str | None = path
        request_params: dict[str, Any] | None = {"per_page": PER_PAGE, **(params or {})}

        while url is not None:
            response = self._client.get(url, params=request_params)
            response.raise_for_status()

            data = response.json()
            yield from data[items_key] if items_key else data

            next_link = response.links.get("next")
            url = next_link["url"] if next_link else None
            # the next link carries the query string
            request_params = None
