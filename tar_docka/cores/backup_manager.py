"""
Backup management module for Tar-Docka.

This module handles the backup run: stopping each container, exporting its
filesystem, saving its image, dumping its environment, restarting it and
finally archiving every named volume once.
"""

import time
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..helpers.config import Config
from ..helpers.constants import BACKUP_SET_TIMESTAMP_FORMAT
from ..helpers.errors import NoContainersError
from ..helpers.logging import get_logger
from ..helpers.naming import (
    env_file_name,
    filesystem_archive_name,
    image_archive_name,
    volume_archive_name,
)
from ..helpers.system_utils import SystemUtils
from ..helpers.ui_utils import SubprocessError
from ..types import BackupReport, ContainerRecord, VolumeBackupEntry
from .container_engine import ContainerEngine, DockerCliEngine

logger = get_logger(__name__)


def named_volumes(inspect_data: Dict[str, Any]) -> List[str]:
    """
    Names of the named volumes a container mounts, in mount order.

    Bind mounts, tmpfs and anonymous entries without a name are skipped.
    """
    names = []
    for mount in inspect_data.get('Mounts') or []:
        if mount.get('Type') == 'volume' and mount.get('Name'):
            names.append(mount['Name'])
    return names


def container_env(inspect_data: Dict[str, Any]) -> List[str]:
    """KEY=VALUE entries of the container configuration."""
    config = inspect_data.get('Config') or {}
    return list(config.get('Env') or [])


def dedupe_volume_names(per_container: Iterable[Iterable[str]]) -> List[str]:
    """Flatten volume names, keeping the first occurrence of each."""
    seen = set()
    ordered = []
    for volumes in per_container:
        for name in volumes:
            if not name or name in seen:
                continue
            seen.add(name)
            ordered.append(name)
    return ordered


class BackupManager:
    """
    Produces one backup set per run.

    The run is strictly sequential. Per-container image and env failures
    are warnings, everything else that fails for a single container or
    volume is recorded as an error; neither aborts the run.
    """

    def __init__(
        self,
        config: Config,
        engine: Optional[ContainerEngine] = None,
        backup_root: Optional[Path] = None,
    ):
        """
        Initialize backup manager.

        Args:
            config: Application configuration
            engine: Container engine (default: docker CLI)
            backup_root: Override of the configured backup root
        """
        self.config = config
        self.engine = engine or DockerCliEngine(config.docker_binary, config.helper_image)
        self.backup_root = Path(backup_root) if backup_root else config.backup_root
        self.stop_timeout = config.stop_timeout
        self.min_free_gb = config.settings.min_free_gb

    def run(self, started_at: Optional[datetime] = None) -> BackupReport:
        """
        Perform a complete backup run.

        Args:
            started_at: Timestamp naming the backup set (default: now)

        Returns:
            Report of the run

        Raises:
            EngineUnavailableError: Docker cannot be used
            NoContainersError: Nothing to back up; no directory is created
        """
        self.engine.ensure_available()

        containers = self.engine.list_containers()
        if not containers:
            logger.warning("No containers found")
            raise NoContainersError()

        started_at = started_at or datetime.now()
        start_time = time.time()
        backup_dir = self._create_backup_dir(started_at)
        report = BackupReport(backup_dir=backup_dir, started_at=started_at)

        logger.info(f"Backup directory: {backup_dir}", extra={'backup_dir': str(backup_dir)})
        self._check_disk_space(report)

        for container in containers:
            record = self.backup_container(container, backup_dir, report)
            report.containers.append(record)

        volumes = dedupe_volume_names(r.volumes for r in report.containers)
        logger.info(f"Backing up {len(volumes)} named volume(s)")
        for volume in volumes:
            entry = self.backup_volume(volume, backup_dir, report)
            if entry:
                report.volumes.append(entry)

        report.duration_seconds = time.time() - start_time

        if report.errors or report.warnings:
            logger.warning(
                f"Backup completed with {len(report.errors)} error(s) and "
                f"{len(report.warnings)} warning(s) in {report.duration_seconds:.2f}s",
                extra={'backup_dir': str(backup_dir)}
            )
        else:
            logger.info(
                f"Backup completed successfully in {report.duration_seconds:.2f}s",
                extra={'backup_dir': str(backup_dir)}
            )
        return report

    def plan(self) -> Tuple[List[ContainerRecord], List[str]]:
        """
        Inspect what a run would back up, without touching any container.

        Returns:
            Container records and the deduplicated volume names
        """
        self.engine.ensure_available()
        records = []
        for container in self.engine.list_containers():
            record = ContainerRecord(name=container)
            try:
                data = self.engine.inspect_container(container)
                record.image_id = data.get('Image') or ''
                record.volumes = named_volumes(data)
            except SubprocessError as e:
                logger.warning(f"Could not inspect {container}: {e}", extra={'container': container})
            records.append(record)
        return records, dedupe_volume_names(r.volumes for r in records)

    # --------------- per container ---------------

    def backup_container(self, container: str, backup_dir: Path, report: BackupReport) -> ContainerRecord:
        """
        Stop, export, save, dump env and restart one container.

        Args:
            container: Container name
            backup_dir: Backup set directory
            report: Collects warnings and errors

        Returns:
            Record with image id and named volumes of the container
        """
        extra = {'container': container}
        logger.info(f"Backing up container: {container}", extra=extra)
        record = ContainerRecord(name=container)

        inspect_data = None
        try:
            inspect_data = self.engine.inspect_container(container)
            record.image_id = inspect_data.get('Image') or ''
            record.volumes = named_volumes(inspect_data)
        except SubprocessError as e:
            self._warn(report, f"Could not inspect {container}: {e}", extra)

        try:
            self.engine.stop_container(container, timeout=self.stop_timeout)
        except SubprocessError as e:
            self._error(report, f"Failed to stop {container}: {e}", extra)

        try:
            self._export_filesystem(container, backup_dir, report)
            self._save_image(record, backup_dir, report)
            self._write_env(container, inspect_data, backup_dir, report)
            for volume in record.volumes:
                logger.info(f"Found named volume: {volume}", extra={**extra, 'volume': volume})
        finally:
            try:
                self.engine.start_container(container)
            except SubprocessError as e:
                self._error(report, f"Failed to start {container}, left stopped: {e}", extra)

        return record

    def _export_filesystem(self, container: str, backup_dir: Path, report: BackupReport) -> None:
        dest = backup_dir / filesystem_archive_name(container)
        try:
            self.engine.export_container(container, dest)
            logger.debug(f"Exported filesystem to {dest.name}", extra={'container': container})
        except SubprocessError as e:
            dest.unlink(missing_ok=True)
            self._error(report, f"Failed to export filesystem of {container}: {e}", {'container': container})

    def _save_image(self, record: ContainerRecord, backup_dir: Path, report: BackupReport) -> None:
        extra = {'container': record.name}
        if not record.image_id:
            self._warn(report, f"Could not determine image for {record.name}, skipping image save", extra)
            return

        dest = backup_dir / image_archive_name(record.name)
        try:
            self.engine.save_image(record.image_id, dest)
            logger.debug(f"Saved image {record.image_id} to {dest.name}", extra=extra)
        except SubprocessError as e:
            dest.unlink(missing_ok=True)
            self._warn(
                report,
                f"Could not save image for {record.name} (image ID: {record.image_id}): {e}",
                extra,
            )

    def _write_env(
        self,
        container: str,
        inspect_data: Optional[Dict[str, Any]],
        backup_dir: Path,
        report: BackupReport,
    ) -> None:
        extra = {'container': container}
        if inspect_data is None:
            self._warn(report, f"Could not export env vars for {container}", extra)
            return

        dest = backup_dir / env_file_name(container)
        try:
            dest.write_text("".join(f"{line}\n" for line in container_env(inspect_data)), encoding="utf-8")
            logger.debug(f"Environment variables saved to {dest.name}", extra=extra)
        except OSError as e:
            self._warn(report, f"Could not export env vars for {container}: {e}", extra)

    # --------------- volumes ---------------

    def backup_volume(self, volume: str, backup_dir: Path, report: BackupReport) -> Optional[VolumeBackupEntry]:
        """Archive one named volume into the backup set."""
        extra = {'volume': volume}
        archive_name = volume_archive_name(volume)
        archive_path = backup_dir / archive_name
        logger.info(f"Backing up volume '{volume}' to {archive_name}", extra=extra)
        try:
            self.engine.archive_volume(volume, backup_dir, archive_name)
        except SubprocessError as e:
            archive_path.unlink(missing_ok=True)
            self._error(report, f"Failed to back up volume {volume}: {e}", extra)
            return None
        return VolumeBackupEntry(volume=volume, archive_path=archive_path)

    # --------------- helpers ---------------

    def _create_backup_dir(self, started_at: datetime) -> Path:
        base = started_at.strftime(BACKUP_SET_TIMESTAMP_FORMAT)
        self.backup_root.mkdir(parents=True, exist_ok=True)
        candidate = self.backup_root / base
        suffix = 1
        while True:
            try:
                candidate.mkdir()
                return candidate
            except FileExistsError:
                candidate = self.backup_root / f"{base}-{suffix}"
                suffix += 1

    def _check_disk_space(self, report: BackupReport) -> None:
        if not self.min_free_gb:
            return
        free_gb = SystemUtils.get_available_disk_space(str(self.backup_root))
        if free_gb < self.min_free_gb:
            self._warn(
                report,
                f"Only {free_gb:.2f} GB free at {self.backup_root} (minimum {self.min_free_gb} GB)",
                {'backup_dir': str(report.backup_dir)},
            )

    @staticmethod
    def _warn(report: BackupReport, message: str, extra: Dict[str, str]) -> None:
        report.warnings.append(message)
        logger.warning(message, extra=extra)

    @staticmethod
    def _error(report: BackupReport, message: str, extra: Dict[str, str]) -> None:
        report.errors.append(message)
        logger.error(message, extra=extra)
