"""
Constants used throughout the Tar-Docka application.

This module defines all constant values used across different modules
to ensure consistency and ease of maintenance.
"""

from pathlib import Path

# Version information
VERSION = "1.0.0"

# Default paths
DEFAULT_CONFIG_PATHS = {
    'root': Path('/etc/tar-docka.conf'),
    'user': Path.home() / '.config' / 'tar-docka' / 'config.conf'
}

# Backup root (relative to the invoking user's home)
DEFAULT_BACKUP_ROOT_NAME = 'docker-backups'

# Backup set directory names
BACKUP_SET_TIMESTAMP_FORMAT = '%Y-%m-%d_%H-%M-%S'

# Artifact naming convention
FS_ARCHIVE_SUFFIX = '_fs.tar'
IMAGE_ARCHIVE_SUFFIX = '_image.tar'
ENV_FILE_SUFFIX = '.env'
VOLUME_ARCHIVE_PREFIX = 'volume_'
VOLUME_ARCHIVE_SUFFIX = '.tar.gz'

# Helper container
DEFAULT_HELPER_IMAGE = 'alpine'
HELPER_VOLUME_MOUNT = '/data'
HELPER_BACKUP_MOUNT = '/backup'

# Docker
DEFAULT_DOCKER_BINARY = 'docker'
DOCKER_INSTALL_URL = 'https://docs.docker.com/engine/install/'

# Timeouts (in seconds)
CONTAINER_STOP_TIMEOUT = 10
DOCKER_PROBE_TIMEOUT = 5

# Disk space warning threshold (in GB)
DEFAULT_MIN_FREE_GB = 1

# Logging
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
