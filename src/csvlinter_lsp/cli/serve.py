# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Implementation of the ``csvlinter-lsp serve`` command."""

from __future__ import annotations

from pathlib import Path

import typer

from ..logging import configure_logging
from ..server import start
from .shared import STORAGE_DIR_OPTION, load_settings


def serve_command(
    tcp: bool = typer.Option(False, "--tcp", help="Listen on TCP instead of stdio."),
    host: str = typer.Option("127.0.0.1", "--host", help="TCP host to bind."),
    port: int = typer.Option(2087, "--port", help="TCP port to bind."),
    log_level: str = typer.Option("info", "--log-level", help="Logging level written to stderr."),
    storage_dir: Path | None = STORAGE_DIR_OPTION,
) -> None:
    """Start the language server."""

    configure_logging(log_level)
    settings = load_settings(storage_dir, use_emoji=False)
    start(settings, tcp=tcp, host=host, port=port)


__all__ = ["serve_command"]
