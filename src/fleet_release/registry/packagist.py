"""Packagist package registry client.

Only package metadata is read: it maps a configured package to the
repository that hosts it.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)


class Package(BaseModel):
    """Metadata of a registry package."""

    model_config = ConfigDict(frozen=True)

    name: str
    repository: str
    description: str = ""
    keywords: tuple[str, ...] = ()
    abandoned: bool = False

    @classmethod
    def from_response(cls, response: dict[str, Any]) -> Package:
        package = response["package"]
        versions = package.get("versions") or {}
        # Packagist lists the most recent version first.
        latest = next(iter(versions.values()), {})
        return cls(
            name=package["name"],
            repository=package["repository"],
            description=package.get("description") or "",
            keywords=tuple(latest.get("keywords") or ()),
            # "abandoned" is either a bool or the name of a replacement package
            abandoned=bool(package.get("abandoned", False)),
        )


class PackagistClient:
    """Read-only Packagist API client."""

    def __init__(
        self,
        api_url: str = "https://packagist.org",
        *,
        timeout: float = 30.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._client = client or httpx.Client(base_url=api_url, timeout=timeout)

    def get(self, name: str) -> Package:
        """Fetch a package by its ``vendor/name``.

        Raises:
            httpx.HTTPStatusError: If the registry answers with an error
        """
        logger.debug("Fetching package %s", name)
        response = self._client.get(f"/packages/{name}.json")
        response.raise_for_status()
        return Package.from_response(response.json())

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> PackagistClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

