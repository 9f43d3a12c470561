# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared constants used across csvlinter_lsp modules."""

from __future__ import annotations

from typing import Final

GITHUB_REPO: Final[str] = "csvlinter/csvlinter"
LINTER_BINARY_NAME: Final[str] = "csvlinter"
LATEST_RELEASE_URL: Final[str] = f"https://api.github.com/repos/{GITHUB_REPO}/releases/latest"
USER_AGENT: Final[str] = "csvlinter-lsp"

SERVER_NAME: Final[str] = "csvlinter-lsp"
DIAGNOSTIC_SOURCE: Final[str] = "csvlinter"
STORAGE_DIR_NAME: Final[str] = "csvlinter-lsp"
ENV_PREFIX: Final[str] = "CSVLINTER_LSP_"

ARCHIVE_SUFFIX: Final[str] = ".tar.gz"
PARTIAL_ARCHIVE_SUFFIX: Final[str] = ".part"
STAGING_DIR_NAME: Final[str] = "staging"
WINDOWS_EXECUTABLE_SUFFIX: Final[str] = ".exe"

DEFAULT_DEBOUNCE_MS: Final[int] = 200
DEFAULT_REQUEST_TIMEOUT: Final[float] = 60.0
DOWNLOAD_CHUNK_SIZE: Final[int] = 64 * 1024
MAX_DOWNLOAD_REDIRECTS: Final[int] = 10

# Exit code reported for validator runs killed after exceeding their timeout.
TIMEOUT_EXIT_CODE: Final[int] = 124

# LSP positions are uintegers; clients clamp the end character to the line length.
END_OF_LINE: Final[int] = 2**31 - 1

REINSTALL_COMMAND: Final[str] = "csvlinter.reinstall"
LINT_COMMAND: Final[str] = "csvlinter.lint"
SETTINGS_SECTION: Final[str] = "csvlinter"

__all__ = [
    "ARCHIVE_SUFFIX",
    "DEFAULT_DEBOUNCE_MS",
    "DEFAULT_REQUEST_TIMEOUT",
    "DIAGNOSTIC_SOURCE",
    "DOWNLOAD_CHUNK_SIZE",
    "END_OF_LINE",
    "ENV_PREFIX",
    "GITHUB_REPO",
    "LATEST_RELEASE_URL",
    "LINTER_BINARY_NAME",
    "LINT_COMMAND",
    "MAX_DOWNLOAD_REDIRECTS",
    "PARTIAL_ARCHIVE_SUFFIX",
    "REINSTALL_COMMAND",
    "SERVER_NAME",
    "SETTINGS_SECTION",
    "STAGING_DIR_NAME",
    "STORAGE_DIR_NAME",
    "TIMEOUT_EXIT_CODE",
    "USER_AGENT",
    "WINDOWS_EXECUTABLE_SUFFIX",
]
