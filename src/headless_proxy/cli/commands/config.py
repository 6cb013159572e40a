"""Config command group: inspect and initialize server configuration."""

from __future__ import annotations

__all__ = ["config"]

import json
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from headless_proxy.config import (
    ServerConfig,
    get_server_config_path,
    load_server_config,
    save_server_config,
)
from headless_proxy.registry import Project
from headless_proxy.utils.file_helpers import write_json_atomic

from ..styling import style_error, style_label, style_success, style_warning


@click.group()
def config() -> None:
    """Server configuration commands."""
    pass


@config.command("show")
def show() -> None:
    """Show the effective server configuration."""
    click.echo(json.dumps(load_server_config().model_dump(), indent=2))


@config.command("path")
def path() -> None:
    """Show config and project list file locations."""
    server_config = load_server_config()
    config_path = get_server_config_path()
    projects_path = server_config.resolved_projects_path()
    click.echo(style_label("Server config") + f" {config_path}" + ("" if config_path.exists() else " (missing)"))
    click.echo(style_label("Project list") + f" {projects_path}" + ("" if projects_path.exists() else " (missing)"))


@config.command("init")
@click.option("--force", is_flag=True, help="Overwrite existing files")
@click.option(
    "--projects-from",
    type=click.Path(exists=True, path_type=Path, dir_okay=False),
    default=None,
    help="Seed the project list from this JSON file",
)
def init(force: bool, projects_from: Path | None) -> None:
    """Create the server config and project list files."""
    config_path = get_server_config_path()
    if config_path.exists() and not force:
        click.echo(style_warning(f"Config already exists: {config_path} (use --force to overwrite)"))
        server_config = load_server_config()
    else:
        server_config = ServerConfig()
        save_server_config(server_config, config_path)
        click.echo(style_success(f"Wrote {config_path}"))

    projects: list[dict[str, str]] = []
    if projects_from is not None:
        try:
            raw = json.loads(projects_from.read_text(encoding="utf-8"))
            projects = [Project.model_validate(p).to_dict() for p in raw]
        except (json.JSONDecodeError, TypeError, ValidationError) as e:
            click.echo(style_error(f"Invalid project list in {projects_from}: {e}"), err=True)
            sys.exit(1)

    projects_path = server_config.resolved_projects_path()
    if projects_path.exists() and not force:
        click.echo(style_warning(f"Project list already exists: {projects_path}"))
        return
    write_json_atomic(projects_path, projects)
    click.echo(style_success(f"Wrote {projects_path} ({len(projects)} project(s))"))
