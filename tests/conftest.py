"""
Shared pytest fixtures for Tar-Docka tests.

Provides an in-memory container engine, config files and CLI helpers.
"""

import io
import logging
import tarfile
from pathlib import Path
from typing import Any, Dict, List, Optional
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from tar_docka.cores.container_engine import ContainerEngine
from tar_docka.helpers.config import Config
from tar_docka.helpers.errors import EngineUnavailableError
from tar_docka.helpers.ui_utils import SubprocessError


class FakeEngine(ContainerEngine):
    """
    In-memory ContainerEngine.

    Volumes are dicts of relative path -> bytes. Archives written into a
    backup dir are real tar/tar.gz files so restore can read them back.
    Failures are injected via ``fail_on`` as (operation, argument) pairs.
    """

    def __init__(self):
        self.available = True
        self.containers: Dict[str, Dict[str, Any]] = {}
        self.running: Dict[str, bool] = {}
        self.images: set = set()
        self.volumes: Dict[str, Dict[str, bytes]] = {}
        self.calls: List[tuple] = []
        self.fail_on: set = set()

    # ---- setup helpers ----

    def add_container(
        self,
        name: str,
        image: str = "sha256:abc",
        env: Optional[List[str]] = None,
        volumes: Optional[List[str]] = None,
        binds: Optional[List[str]] = None,
        running: bool = True,
    ) -> None:
        mounts = [{"Type": "volume", "Name": v, "Destination": f"/{v}"} for v in volumes or []]
        mounts += [{"Type": "bind", "Source": b, "Destination": b} for b in binds or []]
        self.containers[name] = {
            "Name": f"/{name}",
            "Image": image,
            "Config": {"Env": list(env or []), "Image": "nginx:latest"},
            "Mounts": mounts,
        }
        self.running[name] = running
        if image:
            self.images.add(image)
        for v in volumes or []:
            self.volumes.setdefault(v, {})

    def _check(self, op: str, arg: str) -> None:
        self.calls.append((op, arg))
        if (op, arg) in self.fail_on:
            raise SubprocessError(["docker", op, arg], 1, f"{op} {arg} failed")

    def ops(self, op: str) -> List[str]:
        return [arg for name, arg in self.calls if name == op]

    # ---- ContainerEngine ----

    def ensure_available(self) -> None:
        if not self.available:
            raise EngineUnavailableError("daemon not reachable")

    def list_containers(self) -> List[str]:
        self.calls.append(("ps", ""))
        return list(self.containers)

    def inspect_container(self, container: str) -> Dict[str, Any]:
        self._check("inspect", container)
        return self.containers[container]

    def stop_container(self, container: str, timeout: int = 10) -> None:
        self._check("stop", container)
        self.running[container] = False

    def start_container(self, container: str) -> None:
        self._check("start", container)
        self.running[container] = True

    def export_container(self, container: str, dest: Path) -> None:
        self._check("export", container)
        with tarfile.open(dest, "w") as tar:
            _add_bytes(tar, "etc/hostname", container.encode())

    def save_image(self, image: str, dest: Path) -> None:
        self._check("save", image)
        dest.write_text(image)

    def load_image(self, archive: Path) -> str:
        self._check("load", archive.name)
        image = archive.read_text()
        self.images.add(image)
        return f"Loaded image ID: {image}"

    def volume_exists(self, volume: str) -> bool:
        self.calls.append(("volume_inspect", volume))
        return volume in self.volumes

    def create_volume(self, volume: str) -> None:
        self._check("volume_create", volume)
        self.volumes.setdefault(volume, {})

    def archive_volume(self, volume: str, backup_dir: Path, archive_name: str) -> None:
        self._check("archive", volume)
        with tarfile.open(Path(backup_dir) / archive_name, "w:gz") as tar:
            for rel, data in sorted(self.volumes.get(volume, {}).items()):
                _add_bytes(tar, f"./{rel}", data)

    def extract_volume(self, volume: str, backup_dir: Path, archive_name: str) -> None:
        self._check("extract", volume)
        target = self.volumes.setdefault(volume, {})
        with tarfile.open(Path(backup_dir) / archive_name, "r:gz") as tar:
            for member in tar.getmembers():
                if not member.isfile():
                    continue
                rel = member.name[2:] if member.name.startswith("./") else member.name
                target[rel] = tar.extractfile(member).read()


def _add_bytes(tar: tarfile.TarFile, name: str, data: bytes) -> None:
    info = tarfile.TarInfo(name)
    info.size = len(data)
    tar.addfile(info, io.BytesIO(data))


@pytest.fixture
def fake_engine():
    """Empty in-memory engine."""
    return FakeEngine()


@pytest.fixture
def backup_root(tmp_path):
    return tmp_path / "docker-backups"


@pytest.fixture
def config_file(tmp_path, backup_root):
    """Config file pointing the backup root into tmp_path."""
    path = tmp_path / "tar-docka.conf"
    path.write_text(
        "[backup]\n"
        f"root = {backup_root}\n"
        "stop_timeout = 5\n"
        "min_free_gb = 0\n"
        "\n[logging]\n"
        "level = WARNING\n"
    )
    return path


@pytest.fixture
def config(config_file):
    return Config(config_file)


@pytest.fixture
def cli_runner():
    """Typer CLI runner for testing commands."""
    return CliRunner()


@pytest.fixture
def mock_root():
    """Mock os.geteuid() to return 0 (root)."""
    with patch("os.geteuid", return_value=0):
        yield


@pytest.fixture
def mock_non_root():
    """Mock os.geteuid() to return non-zero (not root)."""
    with patch("os.geteuid", return_value=1000):
        yield


@pytest.fixture
def use_fake_engine(fake_engine):
    """Make BackupManager/RestoreManager build the fake instead of the docker CLI."""
    with patch("tar_docka.cores.backup_manager.DockerCliEngine", return_value=fake_engine), \
         patch("tar_docka.cores.restore_manager.DockerCliEngine", return_value=fake_engine):
        yield fake_engine


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers the CLI callback attached to stream objects of CliRunner."""
    yield
    package_logger = logging.getLogger("tar_docka")
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def make_backup_set(backup_root):
    """Factory creating a backup set below backup_root with the given files."""

    def _make(name: str, files: Dict[str, bytes] = None) -> Path:
        path = backup_root / name
        path.mkdir(parents=True)
        for filename, data in (files or {}).items():
            (path / filename).write_bytes(data)
        return path

    return _make
