"""Changelog extraction from pull request bodies and aggregation.

Contributors describe their change inside the pull request body::

    ## Changelog

    ```markdown
    ### Fixed
    - Fixed a thing
    ```

Every pull request yields a mapping of section headline to rendered
lines. The mappings of all pull requests of a release are merged into
one Changelog with sections in alphabetical order.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from fleet_release.exceptions import ChangelogValidationError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

logger = logging.getLogger(__name__)

SECTION_HEADLINES = ("Added", "Changed", "Deprecated", "Fixed", "Removed")

_HTML_COMMENT_PATTERN = re.compile(r"<!--.*?-->", re.IGNORECASE | re.DOTALL)
_CHANGELOG_BLOCK_PATTERN = re.compile(
    r"## Changelog.*?```\s*?markdown\s*?\n(.*?)\n```",
    re.IGNORECASE | re.DOTALL,
)
_HEADING_MARKER_PATTERN = re.compile(r"^#*\s?")
_LIST_MARKER_PATTERN = re.compile(r"^- ")


@dataclass(frozen=True)
class ChangelogSection:
    """A group of changelog lines under one of the fixed headlines."""

    headline: str
    lines: tuple[str, ...]

    def __post_init__(self) -> None:
        if self.headline not in SECTION_HEADLINES:
            raise ChangelogValidationError(
                f'Section headline "{self.headline}" is not one of {", ".join(SECTION_HEADLINES)}.'
            )
        if not self.lines:
            raise ChangelogValidationError(f'Section "{self.headline}" has no lines.')
        if any(not line.strip() for line in self.lines):
            raise ChangelogValidationError(f'Section "{self.headline}" has an empty line.')

    def as_markdown(self) -> str:
        return "\n".join([f"### {self.headline}", *self.lines])


@dataclass(frozen=True)
class Changelog:
    """Changelog of one release."""

    headline: str
    sections: tuple[ChangelogSection, ...] = ()

    def __post_init__(self) -> None:
        if not self.headline.strip():
            raise ChangelogValidationError("Changelog headline must not be empty.")

    def is_empty(self) -> bool:
        return not self.sections

    def as_markdown(self) -> str:
        """Render the changelog as markdown.

        The headline and every section are followed by a blank line.
        """
        parts = [self.headline, ""]
        for section in self.sections:
            parts.append(section.as_markdown())
            parts.append("")
        return "\n".join(parts)


def parse_changelog(
    body: str | None,
    *,
    number: int,
    html_url: str,
    login: str,
    user_html_url: str,
) -> dict[str, list[str]]:
    """Extract the changelog of one pull request from its body.

    HTML comments are ignored. Headline text is not validated here,
    see aggregate_changelogs().

    Args:
        body: Raw pull request body
        number: Pull request number
        html_url: Pull request URL
        login: Login of the author
        user_html_url: Profile URL of the author

    Returns:
        Rendered lines per section headline, empty when the body has no
        changelog block
    """
    if not body:
        return {}

    body = _HTML_COMMENT_PATTERN.sub("", body)
    match = _CHANGELOG_BLOCK_PATTERN.search(body)
    if match is None:
        return {}

    changelog: dict[str, list[str]] = {}
    section = ""
    for raw_line in match.group(1).splitlines():
        line = raw_line.strip()
        if not line:
            continue

        if line.startswith("#"):
            section = _HEADING_MARKER_PATTERN.sub("", line, count=1).strip()
        elif section:
            entry = _LIST_MARKER_PATTERN.sub("", line, count=1)
            changelog.setdefault(section, []).append(
                f"- [#{number}]({html_url}) {entry[:1].upper()}{entry[1:]} (@{login})({user_html_url})"
            )

    return changelog


def aggregate_changelogs(
    headline: str,
    changelogs: Iterable[Mapping[str, Sequence[str]]],
) -> Changelog:
    """Merge the changelogs of several pull requests.

    Lines are concatenated per section in the given order, repeated
    lines are kept once. Sections with an unknown headline are dropped.

    Args:
        headline: Headline of the release, usually the next tag
        changelogs: Per pull request changelogs as returned by
            parse_changelog(), in pull request order

    Returns:
        Changelog with sections sorted by headline
    """
    merged: dict[str, list[str]] = {}
    for changelog in changelogs:
        for section, lines in changelog.items():
            bucket = merged.setdefault(section, [])
            for line in lines:
                if line not in bucket:
                    bucket.append(line)

    sections = []
    for section in sorted(merged):
        lines = merged[section]
        if not lines:
            continue
        try:
            sections.append(ChangelogSection(section, tuple(lines)))
        except ChangelogValidationError as e:
            logger.warning("Dropping changelog section: %s", e)

    return Changelog(headline, tuple(sections))
