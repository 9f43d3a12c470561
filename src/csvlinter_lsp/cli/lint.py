# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Implementation of the ``csvlinter-lsp lint`` command."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

import typer

from ..config import LinterSettings
from ..linting import DiagnosticStateStore, LintService
from ..logging import fail, ok, warn
from ..models import DiagnosticEntry
from ..provisioning import ToolProvisioner
from ..reporting import ConsoleReporter
from .shared import EMOJI_OPTION, STORAGE_DIR_OPTION, load_settings


@dataclass(slots=True)
class LintSummary:
    """Diagnostics collected by one CLI run."""

    diagnostics: dict[Path, tuple[DiagnosticEntry, ...]] = field(default_factory=dict)
    failed: list[Path] = field(default_factory=list)

    @property
    def exit_code(self) -> int:
        """Return 2 on failures, 1 when diagnostics exist, else 0."""
        if self.failed:
            return 2
        if any(self.diagnostics.values()):
            return 1
        return 0


async def lint_paths(
    paths: Sequence[Path],
    settings: LinterSettings,
    *,
    use_stdin: bool,
    reporter: ConsoleReporter,
) -> LintSummary | None:
    """Provision the validator and lint ``paths``; ``None`` when it is unavailable."""

    tool = await ToolProvisioner(settings, reporter=reporter).ensure_installed()
    if tool is None:
        return None
    service = LintService(settings, DiagnosticStateStore(), reporter=reporter)
    service.attach(tool)
    summary = LintSummary()
    for path in paths:
        resolved = path.resolve()
        text = resolved.read_text(encoding="utf-8") if use_stdin else None
        result = await service.lint(resolved.as_uri(), resolved, text)
        if result is None:
            summary.failed.append(path)
        else:
            summary.diagnostics[path] = tuple(result)
    return summary


def lint_command(
    paths: list[Path] = typer.Argument(..., exists=True, dir_okay=False, help="CSV files to validate."),
    stdin: bool = typer.Option(
        False,
        "--stdin",
        help="Stream file contents to the validator on standard input.",
    ),
    storage_dir: Path | None = STORAGE_DIR_OPTION,
    emoji: bool = EMOJI_OPTION,
) -> None:
    """Validate CSV files with csvlinter and print their diagnostics."""

    settings = load_settings(storage_dir, use_emoji=emoji)
    reporter = ConsoleReporter(use_emoji=emoji)
    summary = asyncio.run(lint_paths(paths, settings, use_stdin=stdin, reporter=reporter))
    if summary is None:
        raise typer.Exit(code=2)

    for path, diagnostics in summary.diagnostics.items():
        for entry in diagnostics:
            suffix = f" [{entry.code}]" if entry.code else ""
            warn(f"{path}:{entry.line_index + 1}: {entry.message}{suffix}", use_emoji=emoji)
    for path in summary.failed:
        fail(f"{path}: validation failed", use_emoji=emoji)
    if summary.exit_code == 0:
        ok(f"{len(paths)} file(s) valid.", use_emoji=emoji)
    raise typer.Exit(code=summary.exit_code)


__all__ = ["LintSummary", "lint_command", "lint_paths"]
