# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe asynchronous wrappers around subprocess execution."""

from __future__ import annotations

import asyncio

# Bandit: subprocess usage is intentional; commands are argument lists without a shell.
import subprocess  # nosec B404
from collections.abc import Sequence
from contextlib import suppress
from dataclasses import dataclass

from ..constants import TIMEOUT_EXIT_CODE


@dataclass(frozen=True, slots=True)
class CompletedCommand:
    """Exit status and decoded output of a finished command."""

    args: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str


def _encode(text: str | None) -> bytes | None:
    if text is None:
        return None
    # Editor buffers may hold lone surrogates; the validator reads UTF-8.
    return text.encode("utf-8", errors="replace")


def _decode(value: bytes | None) -> str:
    if not value:
        return ""
    return value.decode("utf-8", errors="replace")


async def _terminate(process: asyncio.subprocess.Process) -> None:
    if process.returncode is None:
        with suppress(ProcessLookupError):
            process.kill()
    await process.wait()


async def run_command(
    args: Sequence[str],
    *,
    input_text: str | None = None,
    timeout: float | None = None,
) -> CompletedCommand:
    """Execute *args* without blocking the event loop.

    Args:
        args: Executable path followed by its arguments.
        input_text: Text written to standard input, which is then closed.
            When ``None`` standard input is redirected from ``/dev/null``.
        timeout: Seconds after which the process is killed and reported with
            exit code 124.

    Returns:
        CompletedCommand: Exit status with decoded standard output/error.

    Raises:
        ValueError: If *args* is empty.
        OSError: If the process cannot be spawned.
    """

    if not args:
        msg = "subprocess command requires at least one argument"
        raise ValueError(msg)
    command = tuple(str(arg) for arg in args)
    payload = _encode(input_text)
    process = await asyncio.create_subprocess_exec(
        *command,
        stdin=subprocess.PIPE if payload is not None else subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
    )
    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(payload), timeout=timeout)
    except asyncio.TimeoutError:
        await _terminate(process)
        return CompletedCommand(
            args=command,
            returncode=TIMEOUT_EXIT_CODE,
            stdout="",
            stderr=f"Command timed out after {timeout:.1f}s",
        )
    except BaseException:
        await asyncio.shield(_terminate(process))
        raise
    returncode = process.returncode if process.returncode is not None else 0
    return CompletedCommand(
        args=command,
        returncode=returncode,
        stdout=_decode(stdout),
        stderr=_decode(stderr),
    )


__all__ = ["CompletedCommand", "run_command"]
