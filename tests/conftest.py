# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from csvlinter_lsp.config import LinterSettings
from csvlinter_lsp.models import InstalledTool

from .fakes import write_validator


class RecordingReporter:
    """Reporter collecting messages for assertions."""

    def __init__(self) -> None:
        self.infos: list[str] = []
        self.errors: list[str] = []

    def info(self, message: str) -> None:
        self.infos.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)


@pytest.fixture
def reporter() -> RecordingReporter:
    """Return a reporter that records user-visible messages."""
    return RecordingReporter()


@pytest.fixture
def settings(tmp_path: Path) -> LinterSettings:
    """Return settings rooted in a temporary storage directory."""
    return LinterSettings(storage_dir=tmp_path / "storage", debounce_ms=20)


@pytest.fixture
def validator(tmp_path: Path) -> InstalledTool:
    """Return an installed stand-in for the csvlinter executable."""
    return InstalledTool.from_path(write_validator(tmp_path / "bin" / "csvlinter"))
