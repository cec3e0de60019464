#!/usr/bin/env python3
################################################################################
# TAR-DOCKA
#
# @file:        __main__.py
# @module:      tar_docka
# @description: Typer-based CLI entry point orchestrating Tar-Docka operations.
# @author:      Markus F. (TZERO78) & KI-Assistenten
# @repository:  https://github.com/TZERO78/tar-docka
# @version:     1.0.0
#
# ------------------------------------------------------------------------------
# MIT-Lizenz: siehe LICENSE oder https://opensource.org/licenses/MIT
################################################################################

"""
Tar-Docka - main CLI

Configuration and logging are set up once in the callback; commands
fetch the config from the typer context.
"""

from __future__ import annotations

import configparser
import sys
from pathlib import Path
from typing import Optional

import typer

from .commands import backup_commands, config_commands, dependency_commands
from .helpers import Config, get_logger, log_manager
from .helpers.constants import VERSION

app = typer.Typer(
    add_completion=False,
    help="Tar-Docka - plain tar backups of Docker containers, images and volumes.",
)
logger = get_logger(__name__)


# -------------------------
# Application Context
# -------------------------

@app.callback()
def initialize_context(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to configuration file."
    ),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR)."
    ),
):
    """
    Initialize application context before any command runs.
    Loads configuration and sets up logging once.
    """
    ctx.ensure_object(dict)

    cfg: Optional[Config]
    try:
        cfg = Config(config_path)
    except (configparser.Error, OSError, UnicodeDecodeError) as e:
        typer.echo(f"Could not load configuration: {e}", err=True)
        cfg = None

    level = log_level
    log_file = None
    max_size_mb, backup_count = 100, 5
    if cfg:
        try:
            settings = cfg.settings
            level = level or settings.log_level
            log_file = settings.log_file
            max_size_mb = settings.log_max_size_mb
            backup_count = settings.log_backup_count
        except ValueError:
            # reported by the command that needs the settings
            pass

    try:
        log_manager.configure(
            level=(level or "INFO").upper(),
            log_file=log_file,
            max_size_mb=max_size_mb,
            backup_count=backup_count,
        )
    except ValueError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=2)

    ctx.obj["config"] = cfg
    ctx.obj["config_path"] = config_path


# -------------------------
# Register Commands
# -------------------------

backup_commands.register(app)
config_commands.register(app)
dependency_commands.register(app)


@app.command("version")
def cmd_version():
    """Show Tar-Docka version."""
    typer.echo(f"Tar-Docka {VERSION}")


# -------------------------
# Entrypoint
# -------------------------

def main():
    """Main entry point for the application."""
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("\nInterrupted.")
        sys.exit(130)


if __name__ == "__main__":
    main()
