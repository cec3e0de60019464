################################################################################
# TAR-DOCKA
#
# @file:        __init__.py
# @module:      tar_docka
# @description: Exposes version, logging, and core managers for package consumers.
# @author:      Markus F. (TZERO78) & KI-Assistenten
# @repository:  https://github.com/TZERO78/tar-docka
# @version:     1.0.0
#
# ------------------------------------------------------------------------------
# Copyright (c) 2025 Markus F. (TZERO78)
# MIT-Lizenz: siehe LICENSE oder https://opensource.org/licenses/MIT
################################################################################

"""
Tar-Docka: plain tar backups for Docker environments.

Backs up container filesystems, images, environment variables and named
volumes into timestamped directories and restores them again.
"""

from .helpers.constants import VERSION

__version__ = VERSION
__author__ = "Tar-Docka Development Team"

from .helpers.logging import (
    get_logger,
    log_manager,
    StructuredFormatter,
    Colors,
)

from .types import (
    BackupReport,
    BackupSetInfo,
    ContainerRecord,
    RestoreReport,
    VolumeBackupEntry,
)

from .helpers.config import Config
from .cores.backup_manager import BackupManager
from .cores.restore_manager import RestoreManager
from .cores.container_engine import ContainerEngine, DockerCliEngine

__all__ = [
    "VERSION",
    "BackupReport",
    "BackupSetInfo",
    "ContainerRecord",
    "RestoreReport",
    "VolumeBackupEntry",
    "Config",
    "BackupManager",
    "RestoreManager",
    "ContainerEngine",
    "DockerCliEngine",
    "get_logger",
    "log_manager",
    "StructuredFormatter",
    "Colors",
]
