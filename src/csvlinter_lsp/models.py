# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the csvlinter_lsp package."""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path

from lsprotocol.types import Diagnostic, DiagnosticSeverity, Position, Range
from pydantic import BaseModel, ConfigDict, Field

from .constants import ARCHIVE_SUFFIX, DIAGNOSTIC_SOURCE, END_OF_LINE, WINDOWS_EXECUTABLE_SUFFIX
from .errors import InvocationFailureError

WINDOWS_OS_TAG = "windows"


class PlatformTarget(BaseModel):
    """Operating system and architecture tokens used in release asset names."""

    model_config = ConfigDict(frozen=True)

    os_tag: str
    arch_tag: str

    @property
    def is_windows(self) -> bool:
        """Return ``True`` when the target is a Windows host."""
        return self.os_tag == WINDOWS_OS_TAG

    @property
    def executable_suffix(self) -> str:
        """Return the file suffix executables carry on this platform."""
        return WINDOWS_EXECUTABLE_SUFFIX if self.is_windows else ""

    def executable_name(self, tool: str) -> str:
        """Return the executable file name for ``tool`` on this platform."""
        return f"{tool}{self.executable_suffix}"

    def asset_name(self, tool: str) -> str:
        """Return the release asset file name, e.g. ``csvlinter-linux-amd64.tar.gz``."""
        return f"{tool}-{self.os_tag}-{self.arch_tag}{ARCHIVE_SUFFIX}"


class AssetDescriptor(BaseModel):
    """Release asset selected for the running platform."""

    model_config = ConfigDict(frozen=True)

    expected_file_name: str
    download_url: str


class InstalledTool(BaseModel):
    """Validator executable that is ready to run."""

    model_config = ConfigDict(frozen=True)

    absolute_path: Path
    executable: bool = True

    @classmethod
    def from_path(cls, path: Path) -> InstalledTool:
        """Describe the executable found at ``path``."""
        resolved = path.resolve()
        return cls(absolute_path=resolved, executable=os.access(resolved, os.X_OK))


class ValidationRequest(BaseModel):
    """Single validator invocation for one document."""

    model_config = ConfigDict(frozen=True)

    document_id: str
    file_path: Path
    inline_text: str | None = None
    sequence: int = 0

    @property
    def uses_stdin(self) -> bool:
        """Return ``True`` when the document text is streamed to standard input."""
        return self.inline_text is not None


class ValidationStatus(str, Enum):
    """Classification of validator exit codes."""

    VALID = "valid"
    FAILURES = "failures"
    INVOCATION_FAILURE = "invocation-failure"


class ValidationOutcome(BaseModel):
    """Exit status and captured output of one validator run."""

    model_config = ConfigDict(frozen=True)

    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def status(self) -> ValidationStatus:
        """Classify the exit code; only ``0`` and ``1`` are expected outcomes."""
        if self.exit_code == 0:
            return ValidationStatus.VALID
        if self.exit_code == 1:
            return ValidationStatus.FAILURES
        return ValidationStatus.INVOCATION_FAILURE

    @property
    def payload(self) -> str:
        """Return the stream carrying the JSON report, preferring standard output."""
        if self.stdout.strip():
            return self.stdout
        if self.stderr.strip():
            return self.stderr
        return ""

    def raise_for_status(self) -> None:
        """Raise :class:`InvocationFailureError` when the validator itself failed."""
        if self.status is not ValidationStatus.INVOCATION_FAILURE:
            return
        detail = self.stderr.strip() or self.stdout.strip() or "<no output>"
        raise InvocationFailureError(
            f"csvlinter exited with status {self.exit_code}: {detail}",
            returncode=self.exit_code,
            stderr=self.stderr,
        )


class ErrorRecord(BaseModel):
    """Validation error reported by the external tool."""

    model_config = ConfigDict(frozen=True)

    line_number: int | None = None
    message: str
    kind: str | None = None

    @property
    def line_index(self) -> int:
        """Return the 0-based line, treating missing or non-positive numbers as line 1."""
        if self.line_number is None or self.line_number <= 0:
            return 0
        return self.line_number - 1


class DiagnosticEntry(BaseModel):
    """Error diagnostic anchored to a whole line of a document."""

    model_config = ConfigDict(frozen=True)

    line_index: int = Field(ge=0)
    message: str
    code: str | None = None

    @classmethod
    def from_record(cls, record: ErrorRecord) -> DiagnosticEntry:
        """Build the diagnostic corresponding to ``record``."""
        return cls(line_index=record.line_index, message=record.message, code=record.kind)

    def to_lsp(self) -> Diagnostic:
        """Return the LSP diagnostic spanning column 0 to the end of the line."""
        return Diagnostic(
            range=Range(
                start=Position(line=self.line_index, character=0),
                end=Position(line=self.line_index, character=END_OF_LINE),
            ),
            message=self.message,
            severity=DiagnosticSeverity.Error,
            code=self.code,
            source=DIAGNOSTIC_SOURCE,
        )


__all__ = [
    "AssetDescriptor",
    "DiagnosticEntry",
    "ErrorRecord",
    "InstalledTool",
    "PlatformTarget",
    "ValidationOutcome",
    "ValidationRequest",
    "ValidationStatus",
]
