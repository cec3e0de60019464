"""CLI command modules for Tar-Docka."""

from . import (
    backup_commands,
    config_commands,
    dependency_commands,
)

__all__ = [
    'backup_commands',
    'config_commands',
    'dependency_commands',
]
