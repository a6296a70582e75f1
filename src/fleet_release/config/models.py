"""Pydantic models for the fleet configuration.

The YAML file is validated into FleetConfig once at load time. Projects
are then resolved into the immutable Project, Branch and Repository
records the rest of the package works with.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from fleet_release.exceptions import NoBranchesAvailableError, UnknownBranchError

_REPOSITORY_PATTERN = re.compile(
    r"^(?:https?://github\.com/)?(?P<owner>[\w.-]+)/(?P<name>[\w.-]+?)(?:\.git)?/?$"
)


class GitHubConfig(BaseModel):
    """GitHub API access."""

    model_config = ConfigDict(extra="forbid")

    api_url: str = "https://api.github.com"
    token: str | None = None
    token_env: str = "GITHUB_TOKEN"
    bot_login: str | None = Field(
        default=None,
        description="Pull requests of this author are not part of releases",
    )
    timeout: float = 30.0


class PackagistConfig(BaseModel):
    """Package registry access."""

    model_config = ConfigDict(extra="forbid")

    api_url: str = "https://packagist.org"
    timeout: float = 30.0


class BranchConfig(BaseModel):
    """Settings of one maintained branch."""

    model_config = ConfigDict(extra="forbid")

    php: list[str] = Field(default_factory=list)
    target_php: str | None = None
    php_extensions: list[str] = Field(default_factory=list)
    variants: dict[str, list[str]] = Field(default_factory=dict)
    frontend: bool = False
    docs_path: str = "docs"
    tests_path: str = "tests"


class ProjectConfig(BaseModel):
    """Settings of one project.

    Either the repository or the registry package must be given; the
    repository of a package is looked up on the registry.
    """

    model_config = ConfigDict(extra="forbid")

    repository: str | None = None
    package: str | None = None
    abandoned: bool = False
    branches: dict[str, BranchConfig] = Field(default_factory=dict)

    @field_validator("branches", mode="before")
    @classmethod
    def _empty_branches(cls, value: object) -> object:
        return {} if value is None else value

    @model_validator(mode="after")
    def _repository_or_package(self) -> ProjectConfig:
        if self.repository is None and self.package is None:
            raise ValueError("either 'repository' or 'package' is required")
        return self


class FleetConfig(BaseModel):
    """Root configuration."""

    model_config = ConfigDict(extra="forbid")

    github: GitHubConfig = Field(default_factory=GitHubConfig)
    packagist: PackagistConfig = Field(default_factory=PackagistConfig)
    projects: dict[str, ProjectConfig] = Field(default_factory=dict)


# Resolved records


class Repository(BaseModel):
    """A repository on the hosting service."""

    model_config = ConfigDict(frozen=True)

    owner: str
    name: str

    @classmethod
    def from_string(cls, value: str) -> Repository:
        """Parse ``owner/name`` or a ``https://github.com/owner/name`` URL.

        Raises:
            ValueError: If the value is neither
        """
        match = _REPOSITORY_PATTERN.match(value.strip())
        if match is None:
            raise ValueError(f'"{value}" is not a GitHub repository.')
        return cls(owner=match.group("owner"), name=match.group("name"))

    @property
    def html_url(self) -> str:
        return f"https://github.com/{self}"

    def __str__(self) -> str:
        return f"{self.owner}/{self.name}"


class Branch(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    php: tuple[str, ...] = ()
    target_php: str | None = None
    php_extensions: tuple[str, ...] = ()
    variants: tuple[tuple[str, str], ...] = ()
    frontend: bool = False
    docs_path: str = "docs"
    tests_path: str = "tests"

    @classmethod
    def from_config(cls, name: str, config: BranchConfig) -> Branch:
        return cls(
            name=name,
            php=tuple(config.php),
            target_php=config.target_php,
            php_extensions=tuple(config.php_extensions),
            variants=tuple(
                (package, version)
                for package, versions in config.variants.items()
                for version in versions
            ),
            frontend=config.frontend,
            docs_path=config.docs_path,
            tests_path=config.tests_path,
        )


class Project(BaseModel):
    """A configured project.

    Branches are ordered: the first one is the development branch, the
    second one (if any) the stable branch.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    repository: Repository
    package: str | None = None
    abandoned: bool = False
    branches: tuple[Branch, ...] = ()

    @classmethod
    def from_config(
        cls,
        name: str,
        config: ProjectConfig,
        repository: Repository,
        *,
        abandoned: bool = False,
    ) -> Project:
        return cls(
            name=name,
            repository=repository,
            package=config.package,
            abandoned=config.abandoned or abandoned,
            branches=tuple(
                Branch.from_config(branch_name, branch_config)
                for branch_name, branch_config in config.branches.items()
            ),
        )

    @property
    def branch_names(self) -> list[str]:
        return [branch.name for branch in self.branches]

    def has_branches(self) -> bool:
        return bool(self.branches)

    def branch(self, name: str) -> Branch:
        for branch in self.branches:
            if branch.name == name:
                return branch
        raise UnknownBranchError(self, name)

    def unstable_branch(self) -> Branch:
        if not self.branches:
            raise NoBranchesAvailableError(self)
        return self.branches[0]

    def stable_branch(self) -> Branch | None:
        if not self.branches:
            raise NoBranchesAvailableError(self)
        return self.branches[1] if len(self.branches) > 1 else None

    def default_branch(self) -> Branch:
        """Branch releases are made from by default."""
        return self.stable_branch() or self.unstable_branch()
