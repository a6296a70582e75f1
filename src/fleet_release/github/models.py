"""Pydantic models for GitHub API responses.

Only the fields the release planning reads are modelled, everything
else in a response is ignored.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from fleet_release.core.changelog import parse_changelog
from fleet_release.core.stability import Stability, classify
from fleet_release.core.version import Tag

CheckRunStatus = Literal["queued", "in_progress", "completed", "waiting", "requested", "pending"]
CheckRunConclusion = Literal[
    "action_required",
    "cancelled",
    "failure",
    "neutral",
    "skipped",
    "stale",
    "success",
    "timed_out",
    "startup_failure",
]
CombinedState = Literal["success", "pending", "failure", "error", "unknown"]


class _Response(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class User(_Response):
    """Author of a pull request."""

    login: str
    html_url: str


class Label(_Response):
    name: str
    color: str = ""


class PullRequest(_Response):
    """A merged or open pull request."""

    number: int
    title: str
    body: str = ""
    html_url: str
    user: User
    labels: tuple[Label, ...] = ()
    updated_at: datetime
    merged_at: datetime | None = None

    @classmethod
    def from_response(cls, response: dict[str, Any]) -> PullRequest:
        # GitHub sends null for an empty body
        return cls.model_validate({**response, "body": response.get("body") or ""})

    @property
    def label_names(self) -> list[str]:
        return [label.name for label in self.labels]

    def stability(self) -> Stability:
        return classify(self.label_names)

    def changelog(self) -> dict[str, list[str]]:
        """Changelog lines per section, parsed from the body."""
        return parse_changelog(
            self.body,
            number=self.number,
            html_url=self.html_url,
            login=self.user.login,
            user_html_url=self.user.html_url,
        )

    def has_changelog(self) -> bool:
        return bool(self.changelog())

    def needs_changelog(self) -> bool:
        return self.stability() is not Stability.PEDANTIC


class Release(_Response):
    """A published release."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    tag: Tag
    published_at: datetime
    target_commitish: str = ""
    draft: bool = False
    prerelease: bool = False

    @classmethod
    def from_response(cls, response: dict[str, Any]) -> Release:
        return cls(
            tag=Tag.parse(response["tag_name"]),
            published_at=response["published_at"],
            target_commitish=response.get("target_commitish") or "",
            draft=response.get("draft", False),
            prerelease=response.get("prerelease", False),
        )


class GitHubBranch(_Response):
    """A branch and the sha of its tip."""

    name: str
    sha: str

    @classmethod
    def from_response(cls, response: dict[str, Any]) -> GitHubBranch:
        return cls(name=response["name"], sha=response["commit"]["sha"])


class Status(_Response):
    state: Literal["error", "failure", "pending", "success"]
    context: str = ""
    description: str | None = None
    target_url: str | None = None

    def is_successful(self) -> bool:
        return self.state == "success"


class CombinedStatus(_Response):
    """Combined commit status of a sha.

    The ``unknown`` state is used when the status could not be fetched.
    """

    state: CombinedState
    sha: str = ""
    statuses: tuple[Status, ...] = ()

    @classmethod
    def from_response(cls, response: dict[str, Any]) -> CombinedStatus:
        return cls.model_validate(response)

    @classmethod
    def unknown(cls, sha: str = "") -> CombinedStatus:
        return cls(state="unknown", sha=sha)

    def is_successful(self) -> bool:
        return self.state == "success"

    def is_unknown(self) -> bool:
        return self.state == "unknown"


class CheckRun(_Response):
    name: str
    status: CheckRunStatus
    conclusion: CheckRunConclusion | None = None
    details_url: str | None = None

    def is_successful(self) -> bool:
        return self.conclusion == "success"


class CheckRuns(_Response):
    check_runs: tuple[CheckRun, ...] = Field(default=())

    @classmethod
    def from_response(cls, response: dict[str, Any]) -> CheckRuns:
        return cls.model_validate(response)

    def all(self) -> list[CheckRun]:
        return list(self.check_runs)

    def is_successful(self) -> bool:
        """Every run completed with a success, neutral or skipped conclusion."""
        return all(
            run.status == "completed" and run.conclusion in ("success", "neutral", "skipped")
            for run in self.check_runs
        )
