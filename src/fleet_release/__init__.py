"""fleet-release: release planning for a fleet of repositories.

Determines the next version and changelog of every configured project
from the pull requests merged since its last release.
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
