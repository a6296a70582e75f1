"""Release tags and next version calculation.

Tags follow ``MAJOR.MINOR.PATCH``, optionally with a ``v`` prefix and a
pre-release suffix (``4.0.0-alpha-1``). The placeholder form ``MAJOR.x``
stands for a branch that has no release yet.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from fleet_release.core.stability import Stability
from fleet_release.exceptions import InvalidTagError

if TYPE_CHECKING:
    from collections.abc import Iterable

_SEMVER_PATTERN = re.compile(
    r"^(?P<prefix>v?)(?P<major>\d+)\.(?P<minor>\d+)\.(?P<patch>\d+)"
    r"(?:[-.](?P<prerelease>[0-9A-Za-z][0-9A-Za-z.-]*))?$"
)
_PLACEHOLDER_PATTERN = re.compile(r"^(?P<prefix>v?)(?P<major>\d+)\.x$")
_BRANCH_MAJOR_PATTERN = re.compile(r"^v?(\d+)")


def _parse(value: str) -> re.Match[str]:
    match = _SEMVER_PATTERN.match(value) or _PLACEHOLDER_PATTERN.match(value)
    if match is None:
        raise InvalidTagError(f'"{value}" is not a valid tag.')
    return match


@dataclass(frozen=True)
class Tag:
    """An immutable release tag. Two tags are equal when their text is."""

    value: str

    def __post_init__(self) -> None:
        if not self.value.strip():
            raise InvalidTagError("Tag must not be empty.")
        _parse(self.value)

    @classmethod
    def parse(cls, value: str) -> Tag:
        """Parse a tag, stripping surrounding whitespace.

        Raises:
            InvalidTagError: If the value is empty or not a version
        """
        return cls(value.strip())

    @classmethod
    def placeholder_for_next_major(cls, branch_name: str) -> Tag:
        """Build the synthetic baseline of a branch without releases.

        ``4.x`` and ``4.2`` both give ``3.x``.

        Raises:
            InvalidTagError: If the branch name has no leading major version
                or the major version is 0
        """
        match = _BRANCH_MAJOR_PATTERN.match(branch_name.strip())
        if match is None:
            raise InvalidTagError(f'Branch "{branch_name}" does not start with a major version.')
        major = int(match.group(1))
        if major == 0:
            raise InvalidTagError(f'Branch "{branch_name}" has no previous major version.')
        return cls(f"{major - 1}.x")

    @property
    def is_placeholder(self) -> bool:
        return _PLACEHOLDER_PATTERN.match(self.value) is not None

    @property
    def prefix(self) -> str:
        return self._match().group("prefix")

    @property
    def major(self) -> int:
        return int(self._match().group("major"))

    @property
    def minor(self) -> int | None:
        if self.is_placeholder:
            return None
        return int(self._match().group("minor"))

    @property
    def patch(self) -> int | None:
        if self.is_placeholder:
            return None
        return int(self._match().group("patch"))

    @property
    def prerelease(self) -> str | None:
        if self.is_placeholder:
            return None
        return self._match().group("prerelease")

    def _match(self) -> re.Match[str]:
        return _parse(self.value)

    def __str__(self) -> str:
        return self.value


def calculate_next_tag(current: Tag, stabilities: Iterable[Stability]) -> Tag:
    """Compute the tag of the next release.

    A MINOR pull request bumps the minor version and resets the patch
    version, otherwise a PATCH pull request bumps the patch version.
    PEDANTIC and UNKNOWN pull requests never require a release.

    A pre-release is completed (``2.0.0-alpha-1`` becomes ``2.0.0``) and
    a placeholder ``N.x`` becomes the first release ``N+1.0.0`` of the
    branch, as soon as anything releasable was merged.

    Args:
        current: Tag of the current release
        stabilities: One stability per merged pull request

    Returns:
        The next tag, or ``current`` when no release is needed
    """
    present = set(stabilities)

    if Stability.MINOR in present:
        bump = Stability.MINOR
    elif Stability.PATCH in present:
        bump = Stability.PATCH
    else:
        return current

    if current.is_placeholder:
        return Tag(f"{current.prefix}{current.major + 1}.0.0")

    match = _parse(current.value)
    major, minor, patch = (int(match.group(name)) for name in ("major", "minor", "patch"))

    if current.prerelease is not None:
        return Tag(f"{current.prefix}{major}.{minor}.{patch}")

    if bump is Stability.MINOR:
        return Tag(f"{current.prefix}{major}.{minor + 1}.0")
    return Tag(f"{current.prefix}{major}.{minor}.{patch + 1}")
