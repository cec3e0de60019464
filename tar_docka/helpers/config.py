#!/usr/bin/env python3
################################################################################
# TAR-DOCKA
#
# @file:        config.py
# @module:      tar_docka.helpers.config
# @description: INI configuration with validated settings model
# @author:      Markus F. (TZERO78) & KI-Assistenten
# @repository:  https://github.com/TZERO78/tar-docka
# @version:     1.0.0
#
# ------------------------------------------------------------------------------
# MIT-Lizenz: siehe LICENSE oder https://opensource.org/licenses/MIT
################################################################################

"""
Configuration management for Tar-Docka.

Handles loading, validation, and access to configuration settings.
The INI file is optional: without one the built-in defaults apply.
"""

from __future__ import annotations

import configparser
import os
import shutil
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .constants import (
    CONTAINER_STOP_TIMEOUT,
    DEFAULT_CONFIG_PATHS,
    DEFAULT_DOCKER_BINARY,
    DEFAULT_HELPER_IMAGE,
    DEFAULT_MIN_FREE_GB,
)
from .logging import get_logger
from .system_utils import SystemUtils

logger = get_logger(__name__)

TEMPLATE_PATH = Path(__file__).parent.parent / "templates" / "config_template.conf"


class Settings(BaseModel):
    """Typed view of the values Tar-Docka actually uses."""

    backup_root: Optional[Path] = Field(
        default=None,
        description="Directory holding the backup sets (None = ~/docker-backups)"
    )
    stop_timeout: int = Field(default=CONTAINER_STOP_TIMEOUT, ge=0)
    helper_image: str = Field(default=DEFAULT_HELPER_IMAGE, min_length=1)
    min_free_gb: float = Field(default=DEFAULT_MIN_FREE_GB, ge=0)
    docker_binary: str = Field(default=DEFAULT_DOCKER_BINARY, min_length=1)
    log_level: str = Field(default="INFO")
    log_file: Optional[Path] = None
    log_max_size_mb: int = Field(default=100, ge=1)
    log_backup_count: int = Field(default=5, ge=0)

    @field_validator("backup_root", "log_file", mode="before")
    @classmethod
    def validate_path(cls, v: Any) -> Optional[Path]:
        """Empty string means unset"""
        if v is None:
            return None
        if isinstance(v, str):
            v = v.strip()
            if not v:
                return None
            return Path(v).expanduser()
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level


class Config:
    """
    Configuration manager for Tar-Docka.

    Loads configuration from INI files and exposes it via get*/properties.
    """

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize configuration.

        Args:
            config_path: Optional path to config file
        """
        # Interpolation off: paths may contain %
        self._config = configparser.ConfigParser(interpolation=None)
        self._config.read_dict(self._get_default_config())

        self.config_file = self.find_config_file(config_path)
        if self.config_file.exists():
            self._load_config()
        elif config_path:
            logger.warning(f"Config file {self.config_file} not found, using defaults")
        else:
            logger.debug(f"No configuration at {self.config_file}, using defaults")

        self._settings: Optional[Settings] = None

    # --------------- Core Methods ---------------

    def get(self, section: str, option: str, fallback: Any = None) -> Any:
        """Get configuration value with fallback."""
        try:
            return self._config.get(section, option)
        except (configparser.NoSectionError, configparser.NoOptionError):
            return fallback

    def sections(self) -> Dict[str, Dict[str, str]]:
        return {s: dict(self._config.items(s)) for s in self._config.sections()}

    # --------------- Settings ---------------

    @property
    def settings(self) -> Settings:
        """
        Validated settings.

        Raises:
            ValueError: If a value does not validate
        """
        if self._settings is None:
            try:
                self._settings = Settings(
                    backup_root=self.get('backup', 'root', ''),
                    stop_timeout=self.get('backup', 'stop_timeout', CONTAINER_STOP_TIMEOUT),
                    helper_image=self.get('backup', 'helper_image', DEFAULT_HELPER_IMAGE),
                    min_free_gb=self.get('backup', 'min_free_gb', DEFAULT_MIN_FREE_GB),
                    docker_binary=self.get('docker', 'binary', DEFAULT_DOCKER_BINARY),
                    log_level=self.get('logging', 'level', 'INFO'),
                    log_file=self.get('logging', 'file', ''),
                    log_max_size_mb=self.get('logging', 'max_size_mb', 100),
                    log_backup_count=self.get('logging', 'backup_count', 5),
                )
            except ValidationError as e:
                raise ValueError(f"Invalid configuration in {self.config_file}:\n{e}") from e
        return self._settings

    @property
    def backup_root(self) -> Path:
        """Backup root, defaulting to ~/docker-backups of the invoking user."""
        return self.settings.backup_root or SystemUtils.default_backup_root()

    @property
    def stop_timeout(self) -> int:
        return self.settings.stop_timeout

    @property
    def helper_image(self) -> str:
        return self.settings.helper_image

    @property
    def docker_binary(self) -> str:
        return self.settings.docker_binary

    def validate(self) -> List[str]:
        """
        Validate the configuration.

        Returns:
            List of error messages (empty if everything is fine)
        """
        errors = []
        try:
            settings = self.settings
        except ValueError as e:
            return [str(e)]

        root = settings.backup_root
        if root and root.exists() and not root.is_dir():
            errors.append(f"Backup root is not a directory: {root}")
        return errors

    # --------------- Private Methods ---------------

    @staticmethod
    def _get_default_config() -> Dict[str, Dict[str, Any]]:
        """
        Get default configuration structure.

        Returns:
            Dictionary of default configuration sections and values
        """
        return {
            'backup': {
                'root': '',
                'stop_timeout': str(CONTAINER_STOP_TIMEOUT),
                'helper_image': DEFAULT_HELPER_IMAGE,
                'min_free_gb': str(DEFAULT_MIN_FREE_GB),
            },
            'docker': {
                'binary': DEFAULT_DOCKER_BINARY,
            },
            'logging': {
                'level': 'INFO',
                'file': '',
                'max_size_mb': '100',
                'backup_count': '5',
            },
        }

    @staticmethod
    def find_config_file(config_path: Optional[Path] = None) -> Path:
        """
        Find or determine configuration file path.

        Args:
            config_path: Explicitly provided configuration path

        Returns:
            Path to configuration file (may not exist)
        """
        if config_path:
            return Path(config_path).expanduser().resolve()

        search_order = [
            DEFAULT_CONFIG_PATHS['user'],
            DEFAULT_CONFIG_PATHS['root'],
        ]

        for location in search_order:
            expanded_location = Path(location).expanduser()
            if expanded_location.exists():
                if os.access(expanded_location, os.R_OK):
                    logger.debug(f"Using config file: {expanded_location}")
                    return expanded_location
                logger.warning(f"Config file exists but not readable: {expanded_location}")

        if os.geteuid() == 0:
            return Path(DEFAULT_CONFIG_PATHS['root'])
        return Path(DEFAULT_CONFIG_PATHS['user']).expanduser()

    def _load_config(self) -> None:
        """Load configuration from file with UTF-8 encoding."""
        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                self._config.read_file(f)
            logger.debug(f"Configuration loaded from {self.config_file}")
        except (configparser.Error, UnicodeDecodeError) as e:
            logger.error(f"Failed to load configuration {self.config_file}: {e}")
            raise


def create_default_config(path: Optional[Path] = None, force: bool = False) -> Path:
    """
    Create default configuration from template.

    Args:
        path: Optional path where to create the config file
        force: Overwrite existing file if True

    Returns:
        Path to the created config file
    """
    if path is None:
        if os.geteuid() == 0:
            path = Path(DEFAULT_CONFIG_PATHS['root'])
        else:
            path = Path(DEFAULT_CONFIG_PATHS['user']).expanduser()
    else:
        path = Path(path).expanduser()

    if path.exists() and not force:
        logger.warning(f"Configuration file already exists at {path}")
        return path

    if not TEMPLATE_PATH.exists():
        raise FileNotFoundError(
            f"Configuration template not found at {TEMPLATE_PATH}. "
            f"Template missing from package installation."
        )

    path.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(TEMPLATE_PATH, path)
    path.chmod(0o600)

    logger.info(f"Configuration created at {path}")
    return path
