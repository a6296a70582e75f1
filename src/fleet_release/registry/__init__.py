"""Package registry access."""

from __future__ import annotations

from fleet_release.registry.packagist import Package, PackagistClient

__all__ = ["Package", "PackagistClient"]
