"""
Backup set discovery for Tar-Docka.

A backup set is a subdirectory of the backup root. Restore selects one
explicitly (path or name) or takes the latest; `list` shows all of them.
"""

from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from ..helpers.errors import BackupNotFoundError, BackupRootMissingError, NoBackupSetsError
from ..helpers.logging import get_logger
from ..helpers.naming import ArtifactKind, parse_artifact_name
from ..types import BackupSetInfo

logger = get_logger(__name__)


def backup_set_dirs(root: Path) -> List[Path]:
    """Subdirectories of root sorted by name (timestamp names sort by time)."""
    if not root.is_dir():
        return []
    return sorted((p for p in root.iterdir() if p.is_dir()), key=lambda p: p.name)


def latest_backup_set(root: Path) -> Path:
    """
    Most recent backup set below root.

    Raises:
        BackupRootMissingError: root does not exist
        NoBackupSetsError: root has no subdirectories
    """
    if not root.is_dir():
        raise BackupRootMissingError(root)
    dirs = backup_set_dirs(root)
    if not dirs:
        raise NoBackupSetsError(root)
    return dirs[-1]


def resolve_backup_dir(selector: Optional[Union[str, Path]], root: Path) -> Path:
    """
    Resolve the backup set a restore should use.

    Args:
        selector: Absolute or relative directory, or a set name below root.
            None or empty selects the latest set.
        root: Backup root

    Returns:
        Path of the backup set directory

    Raises:
        BackupNotFoundError: selector matches nothing
        BackupRootMissingError / NoBackupSetsError: no selector and no sets
    """
    if not selector:
        chosen = latest_backup_set(root)
        logger.debug(f"Selected latest backup set {chosen}", extra={"backup_dir": str(chosen)})
        return chosen

    direct = Path(selector).expanduser()
    if direct.is_dir():
        return direct

    candidate = root / str(selector)
    if candidate.is_dir():
        return candidate

    raise BackupNotFoundError(str(selector), root)


def describe_backup_set(path: Path) -> BackupSetInfo:
    """Count the artifacts of one backup set by filename."""
    info = BackupSetInfo(name=path.name, path=path)
    for entry in path.iterdir():
        if not entry.is_file():
            continue
        try:
            stat = entry.stat()
        except OSError as e:
            logger.debug(f"Cannot stat {entry}: {e}")
            continue
        info.size_bytes += stat.st_size

        artifact = parse_artifact_name(entry.name)
        if artifact is None:
            continue
        if artifact.kind is ArtifactKind.VOLUME:
            info.volumes += 1
        elif artifact.kind is ArtifactKind.IMAGE:
            info.images += 1
        elif artifact.kind is ArtifactKind.FILESYSTEM:
            info.filesystems += 1
        elif artifact.kind is ArtifactKind.ENV:
            info.env_files += 1

    try:
        info.created = datetime.fromtimestamp(path.stat().st_mtime)
    except OSError:
        info.created = None
    return info


def list_backup_sets(root: Path) -> List[BackupSetInfo]:
    """All backup sets below root, oldest first."""
    return [describe_backup_set(p) for p in backup_set_dirs(root)]
