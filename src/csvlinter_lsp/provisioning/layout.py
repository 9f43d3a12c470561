# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Filesystem layout of an installed validator."""

from __future__ import annotations

import shutil
import sys
from dataclasses import dataclass
from pathlib import Path

from ..constants import ARCHIVE_SUFFIX, PARTIAL_ARCHIVE_SUFFIX, STAGING_DIR_NAME, WINDOWS_EXECUTABLE_SUFFIX


def executable_name(tool: str, *, system: str | None = None) -> str:
    """Return the executable file name for ``tool`` on ``system`` (default: this host)."""

    current = (sys.platform if system is None else system).lower()
    suffix = WINDOWS_EXECUTABLE_SUFFIX if current in {"win32", "cygwin", "windows"} else ""
    return f"{tool}{suffix}"


@dataclass(frozen=True, slots=True)
class InstallLayout:
    """Paths used while installing and running the validator.

    Attributes:
        root: Per-installation storage directory.
        executable_path: Canonical location of the installed executable.
        archive_path: Temporary archive written during download.
        staging_dir: Directory receiving the extracted archive contents.
    """

    root: Path
    executable_path: Path
    archive_path: Path
    staging_dir: Path

    @classmethod
    def for_directory(cls, root: Path, *, tool: str, executable: str) -> InstallLayout:
        """Return the layout rooted at ``root`` for ``tool``."""

        return cls(
            root=root,
            executable_path=root / executable,
            archive_path=root / f"{tool}{ARCHIVE_SUFFIX}{PARTIAL_ARCHIVE_SUFFIX}",
            staging_dir=root / STAGING_DIR_NAME,
        )

    @property
    def staged_executable(self) -> Path:
        """Return where the executable lands after extraction."""

        return self.staging_dir / self.executable_path.name

    def prepare(self) -> None:
        """Create the storage directory and discard leftovers of an interrupted install."""

        self.root.mkdir(parents=True, exist_ok=True)
        self.cleanup()
        self.staging_dir.mkdir()

    def cleanup(self) -> None:
        """Remove the temporary archive and the staging directory."""

        self.archive_path.unlink(missing_ok=True)
        if self.staging_dir.exists():
            shutil.rmtree(self.staging_dir)


__all__ = ["InstallLayout", "executable_name"]
