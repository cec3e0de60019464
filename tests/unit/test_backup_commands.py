"""
Unit tests for backup commands (backup, restore, list).

The docker CLI engine is replaced by the in-memory FakeEngine.
"""

import pytest

from tar_docka.__main__ import app


def invoke(cli_runner, config_file, *args):
    return cli_runner.invoke(app, ["--config", str(config_file), *args])


def flat(result):
    """Output with rich line wrapping undone."""
    return " ".join(result.output.split())


@pytest.mark.unit
class TestBackupCommand:
    """Tests for backup command."""

    def test_backup_writes_set(self, cli_runner, config_file, use_fake_engine, backup_root):
        use_fake_engine.add_container("web", volumes=["data"])

        result = invoke(cli_runner, config_file, "backup")

        assert result.exit_code == 0, result.output
        assert "All backups completed" in result.output
        assert "Backups stored in" in result.output
        sets = list(backup_root.iterdir())
        assert len(sets) == 1
        assert (sets[0] / "volume_data.tar.gz").exists()

    def test_backup_does_not_require_root(self, cli_runner, config_file, use_fake_engine, mock_non_root):
        use_fake_engine.add_container("web")

        result = invoke(cli_runner, config_file, "backup")

        assert result.exit_code == 0, result.output

    def test_backup_reports_warnings(self, cli_runner, config_file, use_fake_engine):
        use_fake_engine.add_container("web", image="sha256:x")
        use_fake_engine.fail_on.add(("save", "sha256:x"))

        result = invoke(cli_runner, config_file, "backup")

        assert result.exit_code == 0
        assert "Could not save image for web" in result.output
        assert "All backups completed" in result.output

    def test_backup_reports_errors(self, cli_runner, config_file, use_fake_engine):
        use_fake_engine.add_container("web")
        use_fake_engine.fail_on.add(("export", "web"))

        result = invoke(cli_runner, config_file, "backup")

        assert result.exit_code == 0
        assert "Backup finished with 1 error(s)" in flat(result)
        assert "All backups completed" not in result.output

    def test_no_containers_exits_1(self, cli_runner, config_file, use_fake_engine, backup_root):
        result = invoke(cli_runner, config_file, "backup")

        assert result.exit_code == 1
        assert "No containers found" in result.output
        assert not backup_root.exists()

    def test_docker_unavailable(self, cli_runner, config_file, use_fake_engine):
        use_fake_engine.available = False

        result = invoke(cli_runner, config_file, "backup")

        assert result.exit_code == 1
        assert "Docker is not available" in result.output
        assert "Install Docker first" in result.output

    def test_dry_run_changes_nothing(self, cli_runner, config_file, use_fake_engine, backup_root):
        use_fake_engine.add_container("web", volumes=["data"])

        result = invoke(cli_runner, config_file, "backup", "--dry-run")

        assert result.exit_code == 0, result.output
        assert "Dry run" in result.output
        assert "volume_data.tar.gz" in result.output
        assert use_fake_engine.ops("stop") == []
        assert not backup_root.exists()

    def test_invalid_config_exits_1(self, cli_runner, tmp_path, use_fake_engine):
        bad = tmp_path / "bad.conf"
        bad.write_text("[backup]\nstop_timeout = -3\n")

        result = invoke(cli_runner, bad, "backup")

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output


@pytest.mark.unit
class TestRestoreCommand:
    """Tests for restore command."""

    def test_restore_requires_root(self, cli_runner, config_file, use_fake_engine, mock_non_root):
        result = invoke(cli_runner, config_file, "restore")

        assert result.exit_code == 1
        assert "Root privileges required" in result.output
        assert use_fake_engine.calls == []

    def test_restore_latest(self, cli_runner, config_file, use_fake_engine, mock_root, make_backup_set):
        make_backup_set("2025-01-01_00-00-00", {"old_image.tar": b"sha256:old"})
        make_backup_set("2025-06-01_00-00-00", {"new_image.tar": b"sha256:new", "new.env": b"A=1\n"})

        result = invoke(cli_runner, config_file, "restore")

        assert result.exit_code == 0, result.output
        assert use_fake_engine.ops("load") == ["new_image.tar"]
        assert "No volume archives found" in result.output
        assert "--env-file" in result.output
        assert "Restore complete" in result.output

    def test_restore_by_name(self, cli_runner, config_file, use_fake_engine, mock_root,
                             make_backup_set, monkeypatch, tmp_path):
        make_backup_set("2025-01-01_00-00-00", {"old_image.tar": b"sha256:old"})
        make_backup_set("2025-06-01_00-00-00", {"new_image.tar": b"sha256:new"})
        monkeypatch.chdir(tmp_path)

        result = invoke(cli_runner, config_file, "restore", "2025-01-01_00-00-00")

        assert result.exit_code == 0, result.output
        assert use_fake_engine.ops("load") == ["old_image.tar"]

    def test_restore_unknown_name(self, cli_runner, config_file, use_fake_engine, mock_root,
                                  make_backup_set, monkeypatch, tmp_path):
        make_backup_set("2025-01-01_00-00-00")
        monkeypatch.chdir(tmp_path)

        result = invoke(cli_runner, config_file, "restore", "nope")

        assert result.exit_code == 1
        assert "Not found: nope" in result.output
        assert use_fake_engine.calls == []

    def test_restore_without_backup_root(self, cli_runner, config_file, use_fake_engine, mock_root):
        result = invoke(cli_runner, config_file, "restore")

        assert result.exit_code == 1
        assert "does not exist" in flat(result)

    def test_restore_empty_set(self, cli_runner, config_file, use_fake_engine, mock_root, make_backup_set):
        make_backup_set("2025-01-01_00-00-00")

        result = invoke(cli_runner, config_file, "restore")

        assert result.exit_code == 0, result.output
        assert "No image tarballs found" in result.output
        assert "No volume archives found" in result.output

    def test_restore_reports_failed_load(self, cli_runner, config_file, use_fake_engine, mock_root, make_backup_set):
        make_backup_set("2025-01-01_00-00-00", {"web_image.tar": b"sha256:web"})
        use_fake_engine.fail_on.add(("load", "web_image.tar"))

        result = invoke(cli_runner, config_file, "restore")

        assert result.exit_code == 0
        assert "Failed to load web_image.tar" in flat(result)
        assert "Restore finished with 1 error(s)" in flat(result)
        assert "Restore complete" not in result.output


@pytest.mark.unit
class TestListCommand:
    """Tests for list command."""

    def test_list_marks_latest(self, cli_runner, config_file, make_backup_set):
        make_backup_set("2025-01-01_00-00-00", {"web_fs.tar": b"x"})
        make_backup_set("2025-06-01_00-00-00", {"web_fs.tar": b"x"})

        result = invoke(cli_runner, config_file, "list")

        assert result.exit_code == 0, result.output
        assert "(latest)" in result.output
        assert "Total: 2 backup set(s)" in result.output

    def test_list_empty(self, cli_runner, config_file):
        result = invoke(cli_runner, config_file, "list")

        assert result.exit_code == 0
        assert "No backup folders found" in flat(result)
