"""Configuration management commands."""

import configparser
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from ..helpers import Config, create_default_config, get_logger
from ..helpers.ui_utils import console, print_error, print_info, print_success, print_warning

logger = get_logger(__name__)


def get_config(ctx: typer.Context) -> Optional[Config]:
    """Get config from context."""
    return (ctx.obj or {}).get("config")


# -------------------------
# Commands
# -------------------------

def cmd_show_config(ctx: typer.Context):
    """Show effective configuration."""
    cfg = get_config(ctx)
    if not cfg:
        print_error("Configuration could not be loaded")
        raise typer.Exit(code=1)

    source = cfg.config_file if cfg.config_file.exists() else f"{cfg.config_file} (not present, defaults)"
    console.print(f"Configuration file: {escape(str(source))}")
    console.print("=" * 60)

    for section, values in cfg.sections().items():
        console.print(f"\n[bold]{escape(f'[{section}]')}[/bold]")
        for option, value in values.items():
            console.print(f"  {escape(option)} = {escape(value)}")

    errors = cfg.validate()
    console.print()
    if errors:
        for error in errors:
            print_error(error)
        raise typer.Exit(code=1)

    print_info(f"Effective backup root: {cfg.backup_root}")
    print_success("Configuration valid")


def cmd_new_config(force: bool = False, path: Optional[Path] = None):
    """Create new configuration file from the template."""
    target = Config.find_config_file(path)
    if target.exists() and not force:
        try:
            Config(target)
        except (configparser.Error, OSError, UnicodeDecodeError) as e:
            print_error(f"Existing config at {target} cannot be read: {e}")
        else:
            print_warning(f"Config already exists at: {target}")
        print_info("Use --force to overwrite")
        raise typer.Exit(code=1)

    try:
        created = create_default_config(target, force=True)
    except OSError as e:
        print_error(f"Could not create config: {e}")
        raise typer.Exit(code=1)

    print_success(f"Config created at: {created}")


# -------------------------
# Registration
# -------------------------

def register(app: typer.Typer):
    """Register all configuration commands."""

    @app.command("show-config")
    def _show_config_cmd(ctx: typer.Context):
        """Show current configuration."""
        cmd_show_config(ctx)

    @app.command("new-config")
    def _new_config_cmd(
        force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing config"),
        path: Optional[Path] = typer.Option(None, "--path", help="Custom config path"),
    ):
        """Create new configuration file."""
        cmd_new_config(force, path)
