# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run the csvlinter executable against one document."""

from __future__ import annotations

import logging
from pathlib import Path

from ..errors import InvocationFailureError
from ..models import ValidationOutcome, ValidationRequest
from .process import run_command

LOGGER = logging.getLogger(__name__)

VALIDATE_ARGS: tuple[str, ...] = ("validate", "--format", "json")
STDIN_MARKER = "-"


def build_arguments(executable: Path, request: ValidationRequest) -> list[str]:
    """Return the command line validating ``request``.

    The file path is passed directly, or, when the request carries inline
    text, as ``--filename <path> -`` so the validator reads standard input
    and still reports the document's name.
    """

    args = [str(executable), *VALIDATE_ARGS]
    if request.uses_stdin:
        args.extend(["--filename", str(request.file_path), STDIN_MARKER])
    else:
        args.append(str(request.file_path))
    return args


class ValidationInvoker:
    """Spawn the validator and capture its outcome."""

    def __init__(self, executable: Path, *, timeout: float | None = None) -> None:
        self.executable = executable
        self._timeout = timeout

    async def run(self, request: ValidationRequest) -> ValidationOutcome:
        """Validate ``request`` and return the raw outcome.

        Exit codes are not interpreted here; see
        :meth:`ValidationOutcome.raise_for_status`.

        Raises:
            InvocationFailureError: If the executable cannot be started.
        """

        args = build_arguments(self.executable, request)
        LOGGER.debug("Running %s", " ".join(args))
        try:
            completed = await run_command(args, input_text=request.inline_text, timeout=self._timeout)
        except OSError as exc:
            raise InvocationFailureError(f"Cannot run {self.executable}: {exc}") from exc
        return ValidationOutcome(
            exit_code=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )


__all__ = ["STDIN_MARKER", "VALIDATE_ARGS", "ValidationInvoker", "build_arguments"]
