# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-visible message sinks shared by the CLI and the language server."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from .logging import fail, info

LOGGER = logging.getLogger(__name__)


@runtime_checkable
class Reporter(Protocol):
    """Surface short status and error messages to the user."""

    def info(self, message: str) -> None:
        """Show an informational message."""

    def error(self, message: str) -> None:
        """Show an error message."""


class LoggingReporter:
    """Reporter that forwards messages to the module logger only."""

    def info(self, message: str) -> None:
        LOGGER.info(message)

    def error(self, message: str) -> None:
        LOGGER.error(message)


class ConsoleReporter:
    """Reporter printing through the Rich console helpers."""

    def __init__(self, *, use_emoji: bool = True) -> None:
        self._use_emoji = use_emoji

    def info(self, message: str) -> None:
        info(message, use_emoji=self._use_emoji)

    def error(self, message: str) -> None:
        fail(message, use_emoji=self._use_emoji)


__all__ = ["ConsoleReporter", "LoggingReporter", "Reporter"]
