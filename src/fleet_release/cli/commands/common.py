"""Helpers shared by the CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import httpx
from rich.markup import escape

from fleet_release.config import Projects, load_config
from fleet_release.exceptions import ConfigError
from fleet_release.registry import PackagistClient

if TYPE_CHECKING:
    from rich.console import Console

    from fleet_release.config import FleetConfig


def load_config_or_exit(config_path: str | None, err_console: Console) -> FleetConfig:
    try:
        return load_config(Path(config_path) if config_path else None)
    except ConfigError as e:
        err_console.print(f"[red]Error loading config:[/] {escape(str(e))}")
        raise SystemExit(1) from e


def load_projects_or_exit(config: FleetConfig, err_console: Console) -> Projects:
    """Resolve the configured projects, asking the registry only when needed."""
    needs_registry = any(project.repository is None for project in config.projects.values())
    try:
        if not needs_registry:
            return Projects.from_config(config)
        with PackagistClient(config.packagist.api_url, timeout=config.packagist.timeout) as packagist:
            return Projects.from_config(config, packagist)
    except ConfigError as e:
        err_console.print(f"[red]Error loading projects:[/] {escape(str(e))}")
        raise SystemExit(1) from e
    except httpx.HTTPError as e:
        err_console.print(f"[red]Package registry request failed:[/] {escape(str(e))}")
        raise SystemExit(1) from e
