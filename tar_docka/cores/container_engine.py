################################################################################
# TAR-DOCKA
#
# @file:        container_engine.py
# @module:      tar_docka.cores.container_engine
# @description: Narrow container engine interface and its docker CLI backend
# @author:      Markus F. (TZERO78) & KI-Assistenten
# @repository:  https://github.com/TZERO78/tar-docka
# @version:     1.0.0
#
# ------------------------------------------------------------------------------
# Copyright (c) 2025 Markus F. (TZERO78)
# MIT-Lizenz: siehe LICENSE oder https://opensource.org/licenses/MIT
################################################################################

"""
Container engine abstraction.

BackupManager and RestoreManager only talk to a ContainerEngine. The
production implementation shells out to the docker CLI; tests substitute
an in-memory fake.
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List

from ..helpers.constants import (
    CONTAINER_STOP_TIMEOUT,
    DEFAULT_DOCKER_BINARY,
    DEFAULT_HELPER_IMAGE,
    DOCKER_INSTALL_URL,
    DOCKER_PROBE_TIMEOUT,
    HELPER_BACKUP_MOUNT,
    HELPER_VOLUME_MOUNT,
)
from ..helpers.errors import EngineUnavailableError
from ..helpers.logging import get_logger
from ..helpers.ui_utils import SubprocessError, run_command

logger = get_logger(__name__)


class ContainerEngine(ABC):
    """
    Everything backup and restore need from a container engine.

    All methods block until the engine is done. Failing operations raise
    SubprocessError; callers decide whether that is fatal.
    """

    @abstractmethod
    def ensure_available(self) -> None:
        """Raise EngineUnavailableError if the engine cannot be used."""

    @abstractmethod
    def list_containers(self) -> List[str]:
        """Names of all containers, running and stopped."""

    @abstractmethod
    def inspect_container(self, container: str) -> Dict[str, Any]:
        """Inspect data of a container (docker inspect layout)."""

    @abstractmethod
    def stop_container(self, container: str, timeout: int = CONTAINER_STOP_TIMEOUT) -> None:
        ...

    @abstractmethod
    def start_container(self, container: str) -> None:
        ...

    @abstractmethod
    def export_container(self, container: str, dest: Path) -> None:
        """Write the container filesystem as tar to dest."""

    @abstractmethod
    def save_image(self, image: str, dest: Path) -> None:
        """Write the image as tar to dest."""

    @abstractmethod
    def load_image(self, archive: Path) -> str:
        """Load an image tar, returns the engine's report."""

    @abstractmethod
    def volume_exists(self, volume: str) -> bool:
        ...

    @abstractmethod
    def create_volume(self, volume: str) -> None:
        ...

    @abstractmethod
    def archive_volume(self, volume: str, backup_dir: Path, archive_name: str) -> None:
        """
        Archive a volume into backup_dir/archive_name (tar.gz) using a
        throwaway container that mounts the volume read-only.
        """

    @abstractmethod
    def extract_volume(self, volume: str, backup_dir: Path, archive_name: str) -> None:
        """
        Extract backup_dir/archive_name into a volume using a throwaway
        container. Existing files are overwritten, others are kept.
        """


class DockerCliEngine(ContainerEngine):
    """ContainerEngine backed by the docker command line client."""

    def __init__(
        self,
        binary: str = DEFAULT_DOCKER_BINARY,
        helper_image: str = DEFAULT_HELPER_IMAGE,
    ):
        self.binary = binary
        self.helper_image = helper_image

    def _docker(self, args: List[str], description: str, **kwargs):
        return run_command([self.binary] + args, description, **kwargs)

    # --------------- availability ---------------

    def ensure_available(self) -> None:
        try:
            self._docker(["version"], "Checking Docker daemon", timeout=DOCKER_PROBE_TIMEOUT)
        except SubprocessError as e:
            if e.returncode == 127:
                raise EngineUnavailableError(
                    f"'{self.binary}' not found, see {DOCKER_INSTALL_URL}"
                ) from e
            raise EngineUnavailableError(e.stderr or "daemon not reachable") from e

    # --------------- containers ---------------

    def list_containers(self) -> List[str]:
        result = self._docker(["ps", "-a", "--format", "{{.Names}}"], "Listing containers")
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    def inspect_container(self, container: str) -> Dict[str, Any]:
        result = self._docker(["inspect", "--type", "container", container],
                              f"Inspecting container {container}")
        try:
            data = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise SubprocessError([self.binary, "inspect", container], 0,
                                  f"Unreadable inspect output: {e}") from e
        if not data:
            raise SubprocessError([self.binary, "inspect", container], 1, "Empty inspect output")
        return data[0]

    def stop_container(self, container: str, timeout: int = CONTAINER_STOP_TIMEOUT) -> None:
        self._docker(["stop", "-t", str(timeout), container], f"Stopping container {container}")

    def start_container(self, container: str) -> None:
        self._docker(["start", container], f"Starting container {container}")

    def export_container(self, container: str, dest: Path) -> None:
        self._docker(["export", container, "-o", str(dest)], f"Exporting container {container}")

    # --------------- images ---------------

    def save_image(self, image: str, dest: Path) -> None:
        self._docker(["save", "-o", str(dest), image], f"Saving image {image}")

    def load_image(self, archive: Path) -> str:
        result = self._docker(["load", "--input", str(archive)], f"Loading image {archive.name}")
        return result.stdout.strip()

    # --------------- volumes ---------------

    def volume_exists(self, volume: str) -> bool:
        result = self._docker(["volume", "inspect", volume], f"Inspecting volume {volume}", check=False)
        return result.returncode == 0

    def create_volume(self, volume: str) -> None:
        self._docker(["volume", "create", volume], f"Creating volume {volume}")

    def archive_volume(self, volume: str, backup_dir: Path, archive_name: str) -> None:
        self._docker(
            [
                "run", "--rm",
                "-v", f"{volume}:{HELPER_VOLUME_MOUNT}:ro",
                "-v", f"{Path(backup_dir).resolve()}:{HELPER_BACKUP_MOUNT}",
                self.helper_image,
                "sh", "-c", f'cd {HELPER_VOLUME_MOUNT} && tar czf "{HELPER_BACKUP_MOUNT}/$1" .',
                "sh", archive_name,
            ],
            f"Archiving volume {volume}",
        )

    def extract_volume(self, volume: str, backup_dir: Path, archive_name: str) -> None:
        self._docker(
            [
                "run", "--rm",
                "-v", f"{volume}:{HELPER_VOLUME_MOUNT}",
                "-v", f"{Path(backup_dir).resolve()}:{HELPER_BACKUP_MOUNT}:ro",
                self.helper_image,
                "sh", "-c", f'tar xzf "{HELPER_BACKUP_MOUNT}/$1" -C {HELPER_VOLUME_MOUNT}',
                "sh", archive_name,
            ],
            f"Restoring volume {volume}",
        )
