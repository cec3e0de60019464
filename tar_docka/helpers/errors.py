################################################################################
# TAR-DOCKA
#
# @file:        errors.py
# @module:      tar_docka.helpers.errors
# @description: Exception hierarchy separating fatal from per-item failures
# @author:      Markus F. (TZERO78) & KI-Assistenten
# @repository:  https://github.com/TZERO78/tar-docka
# @version:     1.0.0
#
# ------------------------------------------------------------------------------
# Copyright (c) 2025 Markus F. (TZERO78)
# MIT-Lizenz: siehe LICENSE oder https://opensource.org/licenses/MIT
################################################################################

"""
Exceptions raised by Tar-Docka.

Everything deriving from FatalError aborts the whole run. SubprocessError
(see ui_utils) is raised per engine command and handled per item by the
managers.
"""

from pathlib import Path
from typing import Optional


class TarDockaError(Exception):
    """Base class for all Tar-Docka errors."""


class FatalError(TarDockaError):
    """Aborts the current backup or restore run."""


class EngineUnavailableError(FatalError):
    """The docker CLI is missing or the daemon is not reachable."""

    def __init__(self, detail: str = ""):
        self.detail = detail
        message = "Docker is not available"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class NoContainersError(FatalError):
    """No containers exist, nothing to back up."""

    def __init__(self):
        super().__init__("No containers found")


class BackupNotFoundError(FatalError):
    """The requested backup set could not be resolved."""

    def __init__(self, selector: str, root: Optional[Path] = None):
        self.selector = selector
        self.root = root
        super().__init__(f"Not found: {selector}")


class BackupRootMissingError(FatalError):
    """The backup root directory does not exist."""

    def __init__(self, root: Path):
        self.root = root
        super().__init__(f"{root} does not exist")


class NoBackupSetsError(FatalError):
    """The backup root exists but holds no backup sets."""

    def __init__(self, root: Path):
        self.root = root
        super().__init__(f"No backup folders found in {root}")
