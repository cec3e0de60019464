################################################################################
# TAR-DOCKA
#
# @file:        backup_commands.py
# @module:      tar_docka.commands
# @description: Backup, restore and list commands
# @author:      Markus F. (TZERO78) & KI-Assistenten
# @repository:  https://github.com/TZERO78/tar-docka
# @version:     1.0.0
#
# ------------------------------------------------------------------------------
# Copyright (c) 2025 Markus F. (TZERO78)
# MIT-Lizenz: siehe LICENSE oder https://opensource.org/licenses/MIT
################################################################################

"""Backup, restore and list commands."""

from pathlib import Path
from typing import List, Optional

import typer
from rich.markup import escape

from ..cores import BackupManager, RestoreManager, list_backup_sets, resolve_backup_dir
from ..helpers import Config, SystemUtils, get_logger
from ..helpers.constants import DOCKER_INSTALL_URL
from ..helpers.errors import EngineUnavailableError, FatalError
from ..helpers.naming import filesystem_archive_name, image_archive_name, env_file_name, volume_archive_name
from ..helpers.ui_utils import (
    console,
    create_table,
    print_error,
    print_header,
    print_info,
    print_next_steps,
    print_success,
    print_warning,
    require_sudo,
)
from ..types import BackupReport, RestoreReport

logger = get_logger(__name__)


def get_config(ctx: typer.Context) -> Optional[Config]:
    """Get config from context."""
    return (ctx.obj or {}).get("config")


def ensure_config(ctx: typer.Context) -> Config:
    """Ensure config exists or exit."""
    cfg = get_config(ctx)
    if not cfg:
        print_error("Configuration could not be loaded")
        print_info("Check it with: tar-docka show-config")
        raise typer.Exit(code=1)
    try:
        cfg.settings
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    return cfg


def _fail(error: FatalError) -> None:
    print_error(str(error))
    if isinstance(error, EngineUnavailableError):
        print_info(f"Install Docker first: {DOCKER_INSTALL_URL}")
    raise typer.Exit(code=1)


# -------------------------
# Commands
# -------------------------

def cmd_backup(ctx: typer.Context, dry_run: bool = False):
    """Back up all containers, their images, env vars and named volumes."""
    cfg = ensure_config(ctx)
    manager = BackupManager(cfg)

    if dry_run:
        _show_plan(manager)
        return

    print_header("Docker Backup", f"Backup root: {manager.backup_root}")
    try:
        report = manager.run()
    except FatalError as e:
        _fail(e)

    _print_backup_report(report)


def _show_plan(manager: BackupManager) -> None:
    try:
        records, volumes = manager.plan()
    except FatalError as e:
        _fail(e)

    print_header("Backup Plan (dry run)", f"Backup root: {manager.backup_root}")
    if not records:
        print_warning("No containers found")
        return

    table = create_table(
        "Containers",
        [
            ("Container", "cyan", 18),
            ("Image", "white", 20),
            ("Artifacts", "green", 30),
        ],
    )
    for record in records:
        artifacts = [filesystem_archive_name(record.name), env_file_name(record.name)]
        if record.image_id:
            artifacts.insert(1, image_archive_name(record.name))
        table.add_row(
            escape(record.name),
            escape(record.image_id[:19] or "-"),
            escape(", ".join(artifacts)),
        )
    console.print(table)

    if volumes:
        console.print("\n[bold]Named volumes:[/bold]")
        for volume in volumes:
            console.print(f"  • {escape(volume)} → {escape(volume_archive_name(volume))}")
    print_info("Dry run: no container was stopped and nothing was written")


def _print_backup_report(report: BackupReport) -> None:
    console.print()
    for warning in report.warnings:
        print_warning(warning)
    for error in report.errors:
        print_error(error)

    print_success(
        f"Backed up {len(report.containers)} container(s) and {len(report.volumes)} volume(s) "
        f"in {SystemUtils.format_duration(report.duration_seconds)}"
    )
    if report.success:
        print_success("All backups completed")
    else:
        print_warning(f"Backup finished with {len(report.errors)} error(s)")
    print_info(f"Backups stored in: {report.backup_dir}")


def cmd_restore(ctx: typer.Context, backup: Optional[str] = None):
    """Restore images and volumes from a backup set."""
    require_sudo("restore")
    cfg = ensure_config(ctx)

    try:
        backup_dir = resolve_backup_dir(backup, cfg.backup_root)
    except FatalError as e:
        _fail(e)

    print_header("Docker Restore", f"Backup directory: {backup_dir}")
    manager = RestoreManager(cfg)
    try:
        report = manager.restore(backup_dir)
    except FatalError as e:
        _fail(e)

    _print_restore_report(report)


def _print_restore_report(report: RestoreReport) -> None:
    if report.images_loaded:
        print_success(f"Loaded {len(report.images_loaded)} image(s)")
        for name in report.images_loaded:
            console.print(f"   → {escape(name)}")
    else:
        print_warning("No image tarballs found")

    if report.volumes_restored:
        print_success(f"Restored {len(report.volumes_restored)} volume(s)")
        for volume in report.volumes_restored:
            created = " (created)" if volume in report.volumes_created else ""
            console.print(f"   → {escape(volume)}{created}")
    else:
        print_warning("No volume archives found")

    for error in report.errors:
        print_error(error)

    if report.env_files:
        _print_env_hint(report.env_files)

    console.print()
    if report.success:
        print_success("Restore complete")
    else:
        print_warning(f"Restore finished with {len(report.errors)} error(s)")
    print_next_steps(["docker images", "docker volume ls"])


def _print_env_hint(env_files: List[Path]) -> None:
    console.print("\n[bold]Found .env files:[/bold]")
    for path in env_files:
        console.print(f"   {escape(path.name)}")

    example = env_files[0]
    container = example.name[: -len(".env")]
    console.print("\n[dim]Recreate containers manually, for example:[/dim]")
    console.print(
        f"[cyan]docker run -d --name {escape(container)} \\\n"
        f"  --env-file \"{escape(str(example))}\" \\\n"
        f"  -v <volume>:<path> <image>[/cyan]"
    )


def cmd_list(ctx: typer.Context):
    """List backup sets below the backup root."""
    cfg = ensure_config(ctx)
    root = cfg.backup_root

    sets = list_backup_sets(root)
    if not sets:
        print_warning(f"No backup folders found in {root}")
        return

    table = create_table(
        f"Backup sets in {root}",
        [
            ("Name", "cyan", 24),
            ("Containers", "white", 10),
            ("Images", "white", 6),
            ("Volumes", "yellow", 7),
            ("Env", "white", 3),
            ("Size", "green", 10),
        ],
    )
    for idx, info in enumerate(sets):
        name = escape(info.name)
        if idx == len(sets) - 1:
            name += " [green](latest)[/green]"
        table.add_row(
            name,
            str(info.filesystems),
            str(info.images),
            str(info.volumes),
            str(info.env_files),
            SystemUtils.format_bytes(info.size_bytes),
        )
    console.print(table)
    print_info(f"Total: {len(sets)} backup set(s)")


# -------------------------
# Registration
# -------------------------

def register(app: typer.Typer):
    """Register backup, restore and list commands."""

    @app.command("backup")
    def _backup_cmd(
        ctx: typer.Context,
        dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be backed up"),
    ):
        """Back up all containers, images, env vars and named volumes."""
        cmd_backup(ctx, dry_run)

    @app.command("restore")
    def _restore_cmd(
        ctx: typer.Context,
        backup: Optional[str] = typer.Argument(
            None,
            help="Backup directory (path or name below the backup root). Default: latest",
        ),
    ):
        """Load images and restore volumes from a backup set."""
        cmd_restore(ctx, backup)

    @app.command("list")
    def _list_cmd(ctx: typer.Context):
        """List available backup sets."""
        cmd_list(ctx)
