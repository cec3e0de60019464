"""
System utilities module for Tar-Docka.

Resource checks and small formatting helpers used by the preflight
checks and the CLI.
"""

import os
import pwd
import shutil
import subprocess
from pathlib import Path
from typing import Optional, Tuple

import psutil

from .constants import DEFAULT_BACKUP_ROOT_NAME, DEFAULT_DOCKER_BINARY, DOCKER_PROBE_TIMEOUT
from .logging import get_logger

logger = get_logger(__name__)


class SystemUtils:
    """
    System utilities for resource management and dependency checking.
    """

    @staticmethod
    def check_docker(binary: str = DEFAULT_DOCKER_BINARY) -> bool:
        """
        Check if Docker is installed and the daemon answers.

        Returns:
            True if Docker is available
        """
        if shutil.which(binary) is None:
            return False
        try:
            result = subprocess.run(
                [binary, 'version'],
                capture_output=True,
                text=True,
                timeout=DOCKER_PROBE_TIMEOUT
            )
            return result.returncode == 0
        except (FileNotFoundError, subprocess.TimeoutExpired):
            return False

    @staticmethod
    def get_docker_version(binary: str = DEFAULT_DOCKER_BINARY) -> Optional[Tuple[int, int, int]]:
        """
        Get Docker server version.

        Returns:
            Version tuple (major, minor, patch) or None
        """
        try:
            result = subprocess.run(
                [binary, 'version', '--format', '{{.Server.Version}}'],
                capture_output=True,
                text=True,
                timeout=DOCKER_PROBE_TIMEOUT
            )
            if result.returncode == 0:
                parts = result.stdout.strip().split('.')
                if len(parts) >= 3:
                    patch = ''.join(ch for ch in parts[2] if ch.isdigit()) or '0'
                    return (int(parts[0]), int(parts[1]), int(patch))
        except (OSError, ValueError, subprocess.TimeoutExpired) as e:
            logger.error(f"Failed to get Docker version: {e}")

        return None

    @staticmethod
    def get_available_disk_space(path: str = '/') -> float:
        """
        Get available disk space in gigabytes.

        Walks up to the nearest existing parent so a not yet created
        backup root can be checked too.
        """
        probe = Path(path)
        while not probe.exists() and probe != probe.parent:
            probe = probe.parent
        try:
            usage = psutil.disk_usage(str(probe))
            return usage.free / (1024 ** 3)
        except OSError as e:
            logger.error(f"Failed to get disk space: {e}")
            return 0.0

    @staticmethod
    def is_root() -> bool:
        return os.geteuid() == 0

    @staticmethod
    def invoking_user_home() -> Path:
        """
        Home directory of the user who invoked the tool.

        Under sudo HOME usually points at /root; SUDO_USER tells us whose
        backups are meant.
        """
        sudo_user = os.environ.get('SUDO_USER')
        if sudo_user and sudo_user != 'root':
            try:
                return Path(pwd.getpwnam(sudo_user).pw_dir)
            except KeyError:
                logger.debug(f"Unknown SUDO_USER {sudo_user}, falling back to /home")
                return Path('/home') / sudo_user
        return Path.home()

    @staticmethod
    def default_backup_root() -> Path:
        return SystemUtils.invoking_user_home() / DEFAULT_BACKUP_ROOT_NAME

    @staticmethod
    def format_bytes(size_bytes: float) -> str:
        """
        Format bytes into human-readable string.

        Returns:
            Formatted string (e.g., "1.50 GB")
        """
        for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
            if size_bytes < 1024.0:
                return f"{size_bytes:.2f} {unit}"
            size_bytes /= 1024.0
        return f"{size_bytes:.2f} PB"

    @staticmethod
    def format_duration(seconds: float) -> str:
        """
        Format duration into human-readable string.

        Returns:
            Formatted string (e.g., "2h 15m 30s")
        """
        hours = int(seconds // 3600)
        minutes = int((seconds % 3600) // 60)
        secs = int(seconds % 60)

        parts = []
        if hours > 0:
            parts.append(f"{hours}h")
        if minutes > 0:
            parts.append(f"{minutes}m")
        if secs > 0 or not parts:
            parts.append(f"{secs}s")

        return " ".join(parts)
