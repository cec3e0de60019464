################################################################################
# TAR-DOCKA
#
# @file:        types.py
# @module:      tar_docka.types
# @description: Shared data models for backup runs, restore runs and backup sets.
# @author:      Markus F. (TZERO78) & KI-Assistenten
# @repository:  https://github.com/TZERO78/tar-docka
# @version:     1.0.0
#
# ------------------------------------------------------------------------------
# Copyright (c) 2025 Markus F. (TZERO78)
# MIT-Lizenz: siehe LICENSE oder https://opensource.org/licenses/MIT
# ==============================================================================
# Hinweise:
# - ContainerRecord lives for one iteration of the backup loop
# - VolumeBackupEntry pairs a volume name with its archive path
# - BackupReport / RestoreReport collect warnings instead of aborting
################################################################################

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional


# ---- Backup ----

@dataclass
class ContainerRecord:
    name: str
    image_id: str = ""
    volumes: List[str] = field(default_factory=list)  # named volumes, mount order


@dataclass
class VolumeBackupEntry:
    volume: str
    archive_path: Path


@dataclass
class BackupReport:
    backup_dir: Path
    started_at: datetime
    duration_seconds: float = 0.0
    containers: List[ContainerRecord] = field(default_factory=list)
    volumes: List[VolumeBackupEntry] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors


# ---- Restore ----

@dataclass
class RestoreReport:
    backup_dir: Path
    images_loaded: List[str] = field(default_factory=list)
    volumes_restored: List[str] = field(default_factory=list)
    volumes_created: List[str] = field(default_factory=list)
    env_files: List[Path] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors


# ---- Backup sets on disk ----

@dataclass
class BackupSetInfo:
    name: str
    path: Path
    filesystems: int = 0
    images: int = 0
    env_files: int = 0
    volumes: int = 0
    size_bytes: int = 0
    created: Optional[datetime] = None
