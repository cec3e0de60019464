"""Helper modules and utilities for Tar-Docka."""

from .config import Config, Settings, create_default_config
from .constants import VERSION, DEFAULT_CONFIG_PATHS
from .logging import get_logger, log_manager
from .system_utils import SystemUtils

__all__ = [
    'Config',
    'Settings',
    'create_default_config',
    'VERSION',
    'DEFAULT_CONFIG_PATHS',
    'get_logger',
    'log_manager',
    'SystemUtils',
]
