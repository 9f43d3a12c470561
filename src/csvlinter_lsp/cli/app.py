# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands."""

from __future__ import annotations

import typer

from .install import install_command, where_command
from .lint import lint_command
from .serve import serve_command

app = typer.Typer(
    help="CSV validation language server backed by csvlinter.",
    no_args_is_help=True,
    add_completion=False,
)
app.command("serve")(serve_command)
app.command("install")(install_command)
app.command("lint")(lint_command)
app.command("where")(where_command)

__all__ = ["app"]
