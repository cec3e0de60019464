################################################################################
# TAR-DOCKA
#
# @file:        naming.py
# @module:      tar_docka.helpers.naming
# @description: Artifact file naming shared by backup and restore
# @author:      Markus F. (TZERO78) & KI-Assistenten
# @repository:  https://github.com/TZERO78/tar-docka
# @version:     1.0.0
#
# ------------------------------------------------------------------------------
# Copyright (c) 2025 Markus F. (TZERO78)
# MIT-Lizenz: siehe LICENSE oder https://opensource.org/licenses/MIT
################################################################################

"""
Artifact naming convention of a backup set.

A backup set has no manifest. Backup writes files following the patterns
below and restore finds them again purely by name:

    <container>_fs.tar        container filesystem export
    <container>_image.tar     saved container image
    <container>.env           environment variables (KEY=VALUE per line)
    volume_<volume>.tar.gz    named volume archive

The parse functions never raise; an unknown name yields None.
"""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple, Optional

from .constants import (
    ENV_FILE_SUFFIX,
    FS_ARCHIVE_SUFFIX,
    IMAGE_ARCHIVE_SUFFIX,
    VOLUME_ARCHIVE_PREFIX,
    VOLUME_ARCHIVE_SUFFIX,
)


class ArtifactKind(str, Enum):
    FILESYSTEM = "filesystem"
    IMAGE = "image"
    ENV = "env"
    VOLUME = "volume"


class ArtifactName(NamedTuple):
    kind: ArtifactKind
    subject: str  # container or volume name


def filesystem_archive_name(container: str) -> str:
    return f"{container}{FS_ARCHIVE_SUFFIX}"


def image_archive_name(container: str) -> str:
    return f"{container}{IMAGE_ARCHIVE_SUFFIX}"


def env_file_name(container: str) -> str:
    return f"{container}{ENV_FILE_SUFFIX}"


def volume_archive_name(volume: str) -> str:
    if not volume:
        raise ValueError("Volume name must not be empty")
    return f"{VOLUME_ARCHIVE_PREFIX}{volume}{VOLUME_ARCHIVE_SUFFIX}"


def _strip(filename: str, prefix: str, suffix: str) -> Optional[str]:
    if not (filename.startswith(prefix) and filename.endswith(suffix)):
        return None
    if len(filename) <= len(prefix) + len(suffix):
        return None
    return filename[len(prefix):len(filename) - len(suffix)]


def parse_volume_archive_name(filename: str) -> Optional[str]:
    """
    Volume name encoded in a volume archive filename.

    Only the fixed prefix and suffix are removed, so names containing
    underscores survive: ``volume_my_data.tar.gz`` -> ``my_data``.

    Returns:
        The volume name, or None if the filename is no volume archive
    """
    return _strip(filename, VOLUME_ARCHIVE_PREFIX, VOLUME_ARCHIVE_SUFFIX)


def parse_image_archive_name(filename: str) -> Optional[str]:
    """Container name of an image archive, or None."""
    return _strip(filename, "", IMAGE_ARCHIVE_SUFFIX)


def parse_env_file_name(filename: str) -> Optional[str]:
    """Container name of an env file, or None."""
    return _strip(filename, "", ENV_FILE_SUFFIX)


def parse_filesystem_archive_name(filename: str) -> Optional[str]:
    """Container name of a filesystem export, or None."""
    return _strip(filename, "", FS_ARCHIVE_SUFFIX)


def parse_artifact_name(filename: str) -> Optional[ArtifactName]:
    """
    Classify a file of a backup set.

    Volume archives are checked first: ``volume_x.tar.gz`` never collides
    with the container suffixes, but a container called ``volume_x`` still
    produces ``volume_x_image.tar`` which must stay an image.
    """
    volume = parse_volume_archive_name(filename)
    if volume is not None:
        return ArtifactName(ArtifactKind.VOLUME, volume)

    for kind, parser in (
        (ArtifactKind.IMAGE, parse_image_archive_name),
        (ArtifactKind.FILESYSTEM, parse_filesystem_archive_name),
        (ArtifactKind.ENV, parse_env_file_name),
    ):
        subject = parser(filename)
        if subject is not None:
            return ArtifactName(kind, subject)

    return None
