"""Unit tests for backup set discovery and resolution."""

import pytest

from tar_docka.cores.backup_catalog import (
    backup_set_dirs,
    describe_backup_set,
    latest_backup_set,
    list_backup_sets,
    resolve_backup_dir,
)
from tar_docka.helpers.errors import (
    BackupNotFoundError,
    BackupRootMissingError,
    FatalError,
    NoBackupSetsError,
)


@pytest.mark.unit
class TestLatestBackupSet:

    def test_picks_greatest_name(self, backup_root, make_backup_set):
        make_backup_set("2025-06-01_00-00-00")
        make_backup_set("2025-01-01_00-00-00")

        assert latest_backup_set(backup_root).name == "2025-06-01_00-00-00"

    def test_suffixed_set_sorts_after_base(self, backup_root, make_backup_set):
        make_backup_set("2025-06-01_00-00-00")
        make_backup_set("2025-06-01_00-00-00-1")

        assert latest_backup_set(backup_root).name == "2025-06-01_00-00-00-1"

    def test_files_in_root_are_ignored(self, backup_root, make_backup_set):
        make_backup_set("2025-01-01_00-00-00")
        (backup_root / "zzz-notes.txt").write_text("x")

        assert backup_set_dirs(backup_root) == [backup_root / "2025-01-01_00-00-00"]

    def test_missing_root(self, tmp_path):
        with pytest.raises(BackupRootMissingError) as exc_info:
            latest_backup_set(tmp_path / "nope")
        assert "does not exist" in str(exc_info.value)

    def test_empty_root(self, backup_root):
        backup_root.mkdir()
        with pytest.raises(NoBackupSetsError) as exc_info:
            latest_backup_set(backup_root)
        assert "No backup folders found" in str(exc_info.value)


@pytest.mark.unit
class TestResolveBackupDir:

    def test_no_selector_means_latest(self, backup_root, make_backup_set):
        make_backup_set("2025-01-01_00-00-00")
        newest = make_backup_set("2025-06-01_00-00-00")

        assert resolve_backup_dir(None, backup_root) == newest
        assert resolve_backup_dir("", backup_root) == newest

    def test_existing_path(self, backup_root, tmp_path):
        elsewhere = tmp_path / "copied-set"
        elsewhere.mkdir()

        assert resolve_backup_dir(str(elsewhere), backup_root) == elsewhere

    def test_name_below_root(self, backup_root, make_backup_set, monkeypatch, tmp_path):
        target = make_backup_set("2025-01-01_00-00-00")
        monkeypatch.chdir(tmp_path)

        assert resolve_backup_dir("2025-01-01_00-00-00", backup_root) == target

    def test_not_found(self, backup_root, make_backup_set, monkeypatch, tmp_path):
        make_backup_set("2025-01-01_00-00-00")
        monkeypatch.chdir(tmp_path)

        with pytest.raises(BackupNotFoundError) as exc_info:
            resolve_backup_dir("2030-01-01_00-00-00", backup_root)
        assert str(exc_info.value) == "Not found: 2030-01-01_00-00-00"

    def test_resolution_errors_are_fatal(self, tmp_path):
        with pytest.raises(FatalError):
            resolve_backup_dir(None, tmp_path / "missing")


@pytest.mark.unit
class TestDescribeBackupSet:

    def test_counts_artifacts(self, make_backup_set):
        path = make_backup_set("2025-01-01_00-00-00", {
            "web_fs.tar": b"12345",
            "web_image.tar": b"123",
            "web.env": b"A=1\n",
            "volume_data.tar.gz": b"12",
            "volume_logs.tar.gz": b"1",
            "notes.txt": b"x",
        })

        info = describe_backup_set(path)

        assert (info.filesystems, info.images, info.env_files, info.volumes) == (1, 1, 1, 2)
        assert info.size_bytes == 5 + 3 + 4 + 2 + 1 + 1
        assert info.created is not None

    def test_list_is_oldest_first(self, backup_root, make_backup_set):
        make_backup_set("2025-06-01_00-00-00")
        make_backup_set("2025-01-01_00-00-00")

        assert [i.name for i in list_backup_sets(backup_root)] == [
            "2025-01-01_00-00-00",
            "2025-06-01_00-00-00",
        ]

    def test_list_without_root(self, tmp_path):
        assert list_backup_sets(tmp_path / "missing") == []
