"""Core business logic for fleet-release.

This module contains the fundamental building blocks:
- Release tags and next version calculation
- Pull request stability classification
- Changelog parsing and aggregation

Release determination against the hosting service lives in
fleet_release.core.release.
"""

from __future__ import annotations

from fleet_release.core.changelog import (
    SECTION_HEADLINES,
    Changelog,
    ChangelogSection,
    aggregate_changelogs,
    parse_changelog,
)
from fleet_release.core.stability import Stability, classify
from fleet_release.core.version import Tag, calculate_next_tag

__all__ = [
    # Changelog
    "SECTION_HEADLINES",
    "Changelog",
    "ChangelogSection",
    # Stability
    "Stability",
    # Version
    "Tag",
    "aggregate_changelogs",
    "calculate_next_tag",
    "classify",
    "parse_changelog",
]
