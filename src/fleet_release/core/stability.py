"""Pull request stability classification.

The stability of a pull request decides how large a version bump it
requires. It is derived from the labels attached to the pull request.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


class Stability(StrEnum):
    """Impact of a pull request on the next release."""

    MINOR = "minor"
    PATCH = "patch"
    PEDANTIC = "pedantic"
    UNKNOWN = "unknown"


# Checked in order, first match wins.
LABEL_STABILITIES: tuple[tuple[frozenset[str], Stability], ...] = (
    (frozenset({"minor"}), Stability.MINOR),
    (frozenset({"patch"}), Stability.PATCH),
    (frozenset({"docs", "pedantic"}), Stability.PEDANTIC),
)


def classify(labels: Iterable[str]) -> Stability:
    """Classify a pull request by the names of its labels.

    Args:
        labels: Label names attached to one pull request

    Returns:
        The matching stability, UNKNOWN if no label matches
    """
    names = frozenset(labels)
    for candidates, stability in LABEL_STABILITIES:
        if names & candidates:
            return stability
    return Stability.UNKNOWN


def highest(stabilities: Iterable[Stability]) -> Stability:
    """Return the stability with the largest impact.

    Pull requests without a stability label do not raise the impact
    above PEDANTIC.
    """
    present = set(stabilities)
    for stability in (Stability.MINOR, Stability.PATCH):
        if stability in present:
            return stability
    return Stability.PEDANTIC
