# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Allow ``python -m csvlinter_lsp`` to invoke the CLI."""

from __future__ import annotations

from .cli.app import app


def main() -> None:
    """Run the Typer application."""

    app()


if __name__ == "__main__":  # pragma: no cover
    main()
