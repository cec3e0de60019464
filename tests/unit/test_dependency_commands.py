"""Unit tests for the check command."""

from unittest.mock import patch

import pytest

from tar_docka.__main__ import app

SYSTEM_UTILS = "tar_docka.commands.dependency_commands.SystemUtils"


@pytest.mark.unit
class TestCheckCommand:

    def test_ready(self, cli_runner, config_file):
        with patch(f"{SYSTEM_UTILS}.check_docker", return_value=True), \
             patch(f"{SYSTEM_UTILS}.get_docker_version", return_value=(27, 3, 1)), \
             patch(f"{SYSTEM_UTILS}.get_available_disk_space", return_value=50.0):
            result = cli_runner.invoke(app, ["--config", str(config_file), "check"])

        assert result.exit_code == 0, result.output
        assert "27.3.1" in result.output
        assert "Ready" in result.output

    def test_docker_missing(self, cli_runner, config_file):
        with patch(f"{SYSTEM_UTILS}.check_docker", return_value=False), \
             patch(f"{SYSTEM_UTILS}.get_available_disk_space", return_value=50.0):
            result = cli_runner.invoke(app, ["--config", str(config_file), "check"])

        assert result.exit_code == 1
        assert "Docker is not available" in result.output
        assert "Install Docker first" in result.output

    def test_low_space_warns(self, cli_runner, tmp_path):
        cfg = tmp_path / "c.conf"
        cfg.write_text(f"[backup]\nroot = {tmp_path}\nmin_free_gb = 5\n")
        with patch(f"{SYSTEM_UTILS}.check_docker", return_value=True), \
             patch(f"{SYSTEM_UTILS}.get_docker_version", return_value=None), \
             patch(f"{SYSTEM_UTILS}.get_available_disk_space", return_value=1.0):
            result = cli_runner.invoke(app, ["--config", str(cfg), "check"])

        assert result.exit_code == 0, result.output
        assert "Less than 5" in result.output
