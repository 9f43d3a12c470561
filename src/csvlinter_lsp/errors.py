# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared by provisioning and linting."""

from __future__ import annotations


class CsvLinterError(Exception):
    """Base class for every error raised by csvlinter_lsp."""


class ConfigError(CsvLinterError):
    """Raised when configuration input is invalid."""


class ProvisioningError(CsvLinterError):
    """Raised when the validator executable cannot be provisioned."""


class UnsupportedPlatformError(ProvisioningError):
    """Raised when no release asset exists for the running architecture."""

    def __init__(self, machine: str) -> None:
        super().__init__(f"Unsupported architecture: {machine}")
        self.machine = machine


class ReleaseFetchError(ProvisioningError):
    """Raised when release metadata cannot be retrieved or decoded."""


class AssetNotFoundError(ProvisioningError):
    """Raised when release metadata lacks the asset for this platform."""

    def __init__(self, asset_name: str) -> None:
        super().__init__(f"Could not find asset: {asset_name}")
        self.asset_name = asset_name


class DownloadError(ProvisioningError):
    """Raised when the release archive cannot be downloaded."""


class ExtractionError(ProvisioningError):
    """Raised when the downloaded archive cannot be unpacked or relocated."""


class LintError(CsvLinterError):
    """Raised when a single validation attempt fails."""


class InvocationFailureError(LintError):
    """Raised when the validator exits with a status above one or fails to start."""

    def __init__(self, message: str, *, returncode: int | None = None, stderr: str | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class MalformedOutputError(LintError):
    """Raised when validator output does not contain a usable JSON object."""

    def __init__(self, message: str, *, raw: str = "") -> None:
        super().__init__(message)
        self.raw = raw


__all__ = [
    "AssetNotFoundError",
    "ConfigError",
    "CsvLinterError",
    "DownloadError",
    "ExtractionError",
    "InvocationFailureError",
    "LintError",
    "MalformedOutputError",
    "ProvisioningError",
    "ReleaseFetchError",
    "UnsupportedPlatformError",
]
