"""Registry of configured projects."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fleet_release.config.models import Project, Repository
from fleet_release.exceptions import ConfigValidationError, UnknownProjectError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from fleet_release.config.models import FleetConfig
    from fleet_release.registry.packagist import PackagistClient

logger = logging.getLogger(__name__)


class Projects:
    """Configured projects, in configuration order."""

    def __init__(self, projects: Iterable[Project]) -> None:
        self._projects = {project.name: project for project in projects}

    @classmethod
    def from_config(
        cls,
        config: FleetConfig,
        packagist: PackagistClient | None = None,
    ) -> Projects:
        """Resolve every configured project.

        Projects that only name a registry package get their repository
        from the registry, which requires ``packagist``.

        Raises:
            ConfigValidationError: If a repository cannot be resolved
        """
        projects = []
        for name, project_config in config.projects.items():
            abandoned = False
            if project_config.repository is not None:
                url = project_config.repository
            elif packagist is not None and project_config.package is not None:
                package = packagist.get(project_config.package)
                url = package.repository
                abandoned = package.abandoned
            else:
                raise ConfigValidationError(
                    f'Project "{name}" has no repository and no registry client is available.'
                )

            try:
                repository = Repository.from_string(url)
            except ValueError as e:
                raise ConfigValidationError(f'Project "{name}": {e}') from e

            logger.debug("Resolved project %s to %s", name, repository)
            projects.append(Project.from_config(name, project_config, repository, abandoned=abandoned))

        return cls(projects)

    def all(self) -> list[Project]:
        return list(self._projects.values())

    def names(self) -> list[str]:
        return list(self._projects)

    def by_name(self, name: str) -> Project:
        try:
            return self._projects[name]
        except KeyError:
            raise UnknownProjectError(name) from None

    def by_names(self, names: Iterable[str]) -> list[Project]:
        return [self.by_name(name) for name in names]

    def __len__(self) -> int:
        return len(self._projects)

    def __contains__(self, name: object) -> bool:
        return name in self._projects
