"""
CLI Utilities for Tar-Docka

Rich-based helpers for CLI output plus the subprocess wrapper every
docker invocation goes through.
"""

import os
import subprocess
import sys
from typing import List, Optional, Sequence

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .logging import get_logger

console = Console()
logger = get_logger(__name__)


class SubprocessError(Exception):
    """An external command exited non-zero or could not be executed."""

    def __init__(self, cmd: Sequence[str], returncode: int, stderr: str = ""):
        self.cmd = list(cmd)
        self.returncode = returncode
        self.stderr = (stderr or "").strip()
        message = f"Command failed ({returncode}): {' '.join(self.cmd)}"
        if self.stderr:
            message += f"\n{self.stderr}"
        super().__init__(message)


def run_command(
    cmd: List[str],
    description: str,
    timeout: Optional[int] = None,
    check: bool = True,
    **kwargs,
) -> subprocess.CompletedProcess:
    """
    Run an external command with logging.

    Args:
        cmd: Command and arguments
        description: Human readable description for the log
        timeout: Optional timeout in seconds
        check: Raise SubprocessError on non-zero exit code
        **kwargs: Passed through to subprocess.run

    Returns:
        CompletedProcess with text stdout/stderr

    Raises:
        SubprocessError: If the command fails and check is True, or the
            executable does not exist
    """
    logger.debug(f"{description}: {' '.join(cmd)}")
    kwargs.setdefault("capture_output", True)
    kwargs.setdefault("text", True)

    try:
        result = subprocess.run(cmd, timeout=timeout, **kwargs)
    except FileNotFoundError as e:
        raise SubprocessError(cmd, 127, str(e)) from e
    except subprocess.TimeoutExpired as e:
        raise SubprocessError(cmd, -1, f"Timed out after {timeout}s") from e

    if check and result.returncode != 0:
        stderr = result.stderr if isinstance(result.stderr, str) else ""
        raise SubprocessError(cmd, result.returncode, stderr)

    return result


def require_sudo(command_name: str = "this command") -> None:
    """
    Check if running with sudo/root privileges.

    Args:
        command_name: Name of command requiring sudo (for error message)

    Raises:
        typer.Exit: If not running as root
    """
    if os.geteuid() != 0:
        print_error("Root privileges required")
        console.print(f"[yellow]{escape(command_name)} needs sudo to manage Docker images and volumes.[/yellow]")
        print_info("Please run with sudo:")
        console.print(f"  [cyan]sudo {escape(' '.join(sys.argv))}[/cyan]\n")
        raise typer.Exit(1)


def print_header(title: str, subtitle: str = ""):
    """Print styled header with optional subtitle"""
    content = f"[bold cyan]{escape(title)}[/bold cyan]"
    if subtitle:
        content += f"\n[dim]{escape(subtitle)}[/dim]"

    console.print(Panel(content, border_style="cyan"))


def print_success(message: str):
    """Print success message with green checkmark"""
    console.print(f"[green]✓[/green] {escape(message)}")


def print_error(message: str):
    """Print error message with red X"""
    console.print(f"[red]✗[/red] {escape(message)}")


def print_warning(message: str):
    """Print warning message with yellow warning symbol"""
    console.print(f"[yellow]⚠[/yellow]  {escape(message)}")


def print_info(message: str):
    """Print info message with cyan arrow"""
    console.print(f"[cyan]→[/cyan] {escape(message)}")


def print_next_steps(steps: List[str]) -> None:
    """Print a numbered list of follow-up commands."""
    console.print("\n[bold]Next steps:[/bold]")
    for idx, step in enumerate(steps, 1):
        console.print(f"  {idx}. [cyan]{escape(step)}[/cyan]")


def create_table(title: str, columns: List[tuple]) -> Table:
    """
    Create a styled Rich table

    Args:
        title: Table title
        columns: List of (name, style, width) tuples

    Returns:
        Rich Table instance
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    for name, style, width in columns:
        table.add_column(name, style=style, width=width)
    return table
