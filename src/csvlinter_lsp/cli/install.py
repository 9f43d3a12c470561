# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Implementation of the ``csvlinter-lsp install`` and ``where`` commands."""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer

from ..logging import info, ok, warn
from ..provisioning import ToolProvisioner
from ..reporting import ConsoleReporter
from .shared import EMOJI_OPTION, STORAGE_DIR_OPTION, load_settings


def install_command(
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Delete an existing executable and download it again.",
    ),
    storage_dir: Path | None = STORAGE_DIR_OPTION,
    emoji: bool = EMOJI_OPTION,
) -> None:
    """Download and install the csvlinter executable for this platform."""

    settings = load_settings(storage_dir, use_emoji=emoji)
    provisioner = ToolProvisioner(settings, reporter=ConsoleReporter(use_emoji=emoji))
    if force:
        tool = asyncio.run(provisioner.force_reinstall())
    else:
        tool = asyncio.run(provisioner.ensure_installed())
    if tool is None:
        raise typer.Exit(code=1)
    ok(f"csvlinter is installed at {tool.absolute_path}", use_emoji=emoji)


def where_command(
    storage_dir: Path | None = STORAGE_DIR_OPTION,
    emoji: bool = EMOJI_OPTION,
) -> None:
    """Print where the csvlinter executable is (or would be) installed."""

    settings = load_settings(storage_dir, use_emoji=emoji)
    provisioner = ToolProvisioner(settings)
    path = settings.executable or provisioner.installed_path
    if path.is_file():
        info(str(path), use_emoji=emoji)
        return
    warn(f"{path} (not installed)", use_emoji=emoji)
    raise typer.Exit(code=1)


__all__ = ["install_command", "where_command"]
