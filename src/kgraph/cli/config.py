"""CLI commands for managing kgraph settings."""

from __future__ import annotations

import json
from pathlib import Path

import typer

from kgraph.configuration.settings import DEFAULT_CONFIG_PATH, Settings, bootstrap_settings
from kgraph.exceptions import SettingsError


config_app = typer.Typer(help="Manage kgraph configuration")


@config_app.command("init")
def init_config(
    config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, "--config", help="Path to config file"),
) -> None:
    """Create the settings file with defaults if it does not exist."""

    settings = _bootstrap(config_path)
    typer.echo(f"Configuration initialized at {config_path}")
    typer.echo(_summarize_settings(settings))


@config_app.command("show")
def show_config(
    config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, "--config", help="Path to config file"),
) -> None:
    """Display effective configuration, including environment overrides."""

    typer.echo(_summarize_settings(_bootstrap(config_path)))


def _bootstrap(config_path: Path) -> Settings:
    try:
        return bootstrap_settings(path=config_path)
    except SettingsError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)


def _summarize_settings(settings: Settings) -> str:
    return json.dumps(settings.model_dump(mode="json"), indent=2)
