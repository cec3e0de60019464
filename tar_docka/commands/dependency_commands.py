"""Dependency and environment check commands."""

import typer

from ..helpers import SystemUtils, get_logger
from ..helpers.constants import DOCKER_INSTALL_URL
from ..helpers.ui_utils import console, create_table, print_error, print_info, print_success, print_warning

logger = get_logger(__name__)


def cmd_check(ctx: typer.Context):
    """Check Docker availability, privileges and free space of the backup root."""
    cfg = (ctx.obj or {}).get("config")
    if not cfg:
        print_error("Configuration could not be loaded")
        raise typer.Exit(code=1)
    try:
        settings = cfg.settings
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(code=1)

    binary = settings.docker_binary
    docker_ok = SystemUtils.check_docker(binary)
    version = SystemUtils.get_docker_version(binary) if docker_ok else None
    root = cfg.backup_root
    free_gb = SystemUtils.get_available_disk_space(str(root))

    table = create_table(
        "Environment",
        [
            ("Check", "cyan", 18),
            ("Status", "white", 10),
            ("Details", "dim", 40),
        ],
    )
    table.add_row(
        "Docker",
        "[green]OK[/green]" if docker_ok else "[red]Missing[/red]",
        ".".join(map(str, version)) if version else binary,
    )
    table.add_row(
        "Root privileges",
        "[green]Yes[/green]" if SystemUtils.is_root() else "[yellow]No[/yellow]",
        "needed for restore",
    )
    table.add_row(
        "Backup root",
        "[green]Exists[/green]" if root.is_dir() else "[yellow]Missing[/yellow]",
        str(root),
    )
    low_space = free_gb < settings.min_free_gb
    table.add_row(
        "Free space",
        "[yellow]Low[/yellow]" if low_space else "[green]OK[/green]",
        f"{free_gb:.2f} GB",
    )
    console.print(table)

    if not docker_ok:
        print_error("Docker is not available")
        print_info(f"Install Docker first: {DOCKER_INSTALL_URL}")
        raise typer.Exit(code=1)
    if low_space:
        print_warning(f"Less than {settings.min_free_gb} GB free at {root}")
    print_success("Ready")


def register(app: typer.Typer):
    """Register dependency commands."""

    @app.command("check")
    def _check_cmd(ctx: typer.Context):
        """Check system requirements."""
        cmd_check(ctx)
