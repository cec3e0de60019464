"""Core business logic modules for Tar-Docka."""

from .backup_manager import BackupManager
from .restore_manager import RestoreManager
from .container_engine import ContainerEngine, DockerCliEngine
from .backup_catalog import list_backup_sets, latest_backup_set, resolve_backup_dir

__all__ = [
    'BackupManager',
    'RestoreManager',
    'ContainerEngine',
    'DockerCliEngine',
    'list_backup_sets',
    'latest_backup_set',
    'resolve_backup_dir',
]
