"""
Restore management module for Tar-Docka.

Loads the images of a backup set, recreates or overlays its named volumes
and lists the env files for manual container recreation.
"""

from pathlib import Path
from typing import List, Optional

from ..helpers.config import Config
from ..helpers.constants import ENV_FILE_SUFFIX, IMAGE_ARCHIVE_SUFFIX, VOLUME_ARCHIVE_PREFIX, VOLUME_ARCHIVE_SUFFIX
from ..helpers.logging import get_logger
from ..helpers.naming import parse_volume_archive_name
from ..helpers.ui_utils import SubprocessError
from ..types import RestoreReport
from .container_engine import ContainerEngine, DockerCliEngine

logger = get_logger(__name__)


def find_image_archives(backup_dir: Path) -> List[Path]:
    return sorted(p for p in backup_dir.glob(f"*{IMAGE_ARCHIVE_SUFFIX}") if p.is_file())


def find_volume_archives(backup_dir: Path) -> List[Path]:
    """Volume archives whose filename decodes to a non-empty volume name."""
    return sorted(
        p for p in backup_dir.glob(f"{VOLUME_ARCHIVE_PREFIX}*{VOLUME_ARCHIVE_SUFFIX}")
        if p.is_file() and parse_volume_archive_name(p.name)
    )


def find_env_files(backup_dir: Path) -> List[Path]:
    return sorted(p for p in backup_dir.glob(f"*{ENV_FILE_SUFFIX}") if p.is_file())


class RestoreManager:
    """Restores images and volumes of one backup set."""

    def __init__(self, config: Config, engine: Optional[ContainerEngine] = None):
        self.config = config
        self.engine = engine or DockerCliEngine(config.docker_binary, config.helper_image)

    def restore(self, backup_dir: Path) -> RestoreReport:
        """
        Restore a backup set.

        Each step tolerates finding nothing. Failures of a single image or
        volume are recorded in the report and the run continues.

        Raises:
            EngineUnavailableError: Docker cannot be used
        """
        self.engine.ensure_available()
        report = RestoreReport(backup_dir=backup_dir)
        logger.info(f"Restoring from {backup_dir}", extra={'backup_dir': str(backup_dir)})

        self.load_images(backup_dir, report)
        self.restore_volumes(backup_dir, report)
        report.env_files = find_env_files(backup_dir)

        logger.info(
            f"Restore finished: {len(report.images_loaded)} image(s), "
            f"{len(report.volumes_restored)} volume(s), {len(report.env_files)} env file(s)",
            extra={'backup_dir': str(backup_dir)},
        )
        return report

    def load_images(self, backup_dir: Path, report: RestoreReport) -> None:
        archives = find_image_archives(backup_dir)
        if not archives:
            logger.info("No image tarballs found")
            return

        logger.info(f"Loading {len(archives)} image(s)")
        for archive in archives:
            try:
                output = self.engine.load_image(archive)
                report.images_loaded.append(archive.name)
                logger.info(f"Loaded {archive.name}: {output}", extra={'archive': archive.name})
            except SubprocessError as e:
                report.errors.append(f"Failed to load {archive.name}: {e}")
                logger.error(f"Failed to load {archive.name}: {e}", extra={'archive': archive.name})

    def restore_volumes(self, backup_dir: Path, report: RestoreReport) -> None:
        archives = find_volume_archives(backup_dir)
        if not archives:
            logger.info("No volume archives found")
            return

        logger.info(f"Restoring {len(archives)} volume(s)")
        for archive in archives:
            volume = parse_volume_archive_name(archive.name)
            extra = {'volume': volume}
            try:
                if not self.engine.volume_exists(volume):
                    self.engine.create_volume(volume)
                    report.volumes_created.append(volume)
                    logger.debug(f"Created volume {volume}", extra=extra)
                # Overlay: files missing from the archive stay in the volume
                self.engine.extract_volume(volume, backup_dir, archive.name)
                report.volumes_restored.append(volume)
                logger.info(f"Volume {volume} restored", extra=extra)
            except SubprocessError as e:
                report.errors.append(f"Failed to restore volume {volume}: {e}")
                logger.error(f"Failed to restore volume {volume}: {e}", extra=extra)
