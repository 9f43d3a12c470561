# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Helpers shared by CLI commands."""

from __future__ import annotations

from pathlib import Path

import typer

from ..config import LinterSettings
from ..errors import ConfigError
from ..logging import fail

STORAGE_DIR_OPTION = typer.Option(
    None,
    "--storage-dir",
    "-s",
    help="Directory holding the csvlinter executable (defaults to the per-user cache).",
)
EMOJI_OPTION = typer.Option(True, "--emoji/--no-emoji", help="Toggle emoji in CLI output.")


def load_settings(storage_dir: Path | None, *, use_emoji: bool) -> LinterSettings:
    """Return settings honouring the ``--storage-dir`` override.

    Raises:
        typer.Exit: If the settings are invalid.
    """

    overrides = {"storage_dir": storage_dir} if storage_dir is not None else None
    try:
        return LinterSettings.load(overrides)
    except ConfigError as exc:
        fail(str(exc), use_emoji=use_emoji)
        raise typer.Exit(code=2) from exc


__all__ = ["EMOJI_OPTION", "STORAGE_DIR_OPTION", "load_settings"]
