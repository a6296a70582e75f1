"""Shared fixtures for fleet-release tests."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from fleet_release.config.models import Branch, Project, Repository
from fleet_release.github.models import PullRequest

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

CONFIG_YAML = """\
github:
  bot_login: SonataCI
projects:
  admin-bundle:
    repository: sonata-project/SonataAdminBundle
    branches:
      "5.x":
        php: ["8.1", "8.2"]
      "4.x":
        php: ["7.4", "8.2"]
        target_php: "8.1"
  twig-extensions:
    repository: https://github.com/sonata-project/twig-extensions.git
    branches:
      "2.x": {}
"""


@pytest.fixture
def pull_request_response() -> Callable[..., dict[str, Any]]:
    """Factory for GitHub pull request payloads."""

    def factory(
        number: int = 1,
        *,
        title: str = "Fix something",
        labels: tuple[str, ...] = (),
        body: str | None = "",
        login: str = "alice",
        merged_at: str | None = "2024-01-02T10:00:00Z",
    ) -> dict[str, Any]:
        return {
            "number": number,
            "title": title,
            "body": body,
            "html_url": f"https://github.com/sonata-project/SonataAdminBundle/pull/{number}",
            "user": {"login": login, "html_url": f"https://github.com/{login}"},
            "labels": [{"name": name, "color": "ededed"} for name in labels],
            "updated_at": "2024-01-02T10:00:00Z",
            "merged_at": merged_at,
            "mergeable": None,
        }

    return factory


@pytest.fixture
def make_pull_request(
    pull_request_response: Callable[..., dict[str, Any]],
) -> Callable[..., PullRequest]:
    """Factory for PullRequest models."""

    def factory(number: int = 1, **kwargs: Any) -> PullRequest:
        return PullRequest.from_response(pull_request_response(number, **kwargs))

    return factory


@pytest.fixture
def repository() -> Repository:
    return Repository(owner="sonata-project", name="SonataAdminBundle")


@pytest.fixture
def project(repository: Repository) -> Project:
    """Project with a development branch 5.x and a stable branch 4.x."""
    return Project(
        name="admin-bundle",
        repository=repository,
        branches=(Branch(name="5.x"), Branch(name="4.x")),
    )


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "fleet-release.yaml"
    path.write_text(CONFIG_YAML)
    return path


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("FLEET_RELEASE_CONFIG", raising=False)
