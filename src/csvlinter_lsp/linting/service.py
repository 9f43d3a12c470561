# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Compose invocation, translation and state into per-document linting."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path, PurePath
from urllib.parse import unquote, urlparse

from ..config import LinterSettings
from ..errors import InvocationFailureError, MalformedOutputError
from ..models import DiagnosticEntry, InstalledTool, ValidationOutcome, ValidationRequest, ValidationStatus
from ..reporting import LoggingReporter, Reporter
from .debounce import DebounceRegistry
from .invoker import ValidationInvoker
from .state import DiagnosticStateStore
from .translator import translate

LOGGER = logging.getLogger(__name__)


def is_csv_document(uri: str, language_id: str | None, settings: LinterSettings) -> bool:
    """Return ``True`` when the document should be validated."""

    if language_id is not None and language_id in settings.language_ids:
        return True
    suffix = PurePath(unquote(urlparse(uri).path)).suffix.lower()
    return suffix in settings.extensions


class LintService:
    """Validate documents and publish their diagnostics to the store.

    Runs for one document are not serialized. Each run takes a sequence number
    and its result is only stored while that number is still the latest one
    issued for the document, so a slow stale run cannot overwrite a newer
    result.
    """

    def __init__(
        self,
        settings: LinterSettings,
        store: DiagnosticStateStore,
        *,
        reporter: Reporter | None = None,
        registry: DebounceRegistry | None = None,
        invoker: ValidationInvoker | None = None,
    ) -> None:
        self.settings = settings
        self.store = store
        self.registry = registry if registry is not None else DebounceRegistry(default_delay_ms=settings.debounce_ms)
        self._reporter: Reporter = reporter if reporter is not None else LoggingReporter()
        self._invoker = invoker
        self._sequences: dict[str, int] = {}

    @property
    def available(self) -> bool:
        """Return ``True`` once a validator executable is attached."""
        return self._invoker is not None

    def attach(self, tool: InstalledTool | None) -> None:
        """Use ``tool`` for subsequent runs; ``None`` marks the validator unavailable."""
        if tool is None:
            self._invoker = None
            return
        self._invoker = ValidationInvoker(tool.absolute_path, timeout=self.settings.validation_timeout)

    def update_settings(self, settings: LinterSettings) -> None:
        """Apply changed settings to future runs."""
        self.settings = settings
        self.registry.default_delay_ms = settings.debounce_ms
        if self._invoker is not None:
            self._invoker = ValidationInvoker(self._invoker.executable, timeout=settings.validation_timeout)

    def accepts(self, uri: str, language_id: str | None = None) -> bool:
        """Return ``True`` when ``uri`` names a CSV document."""
        return is_csv_document(uri, language_id, self.settings)

    def schedule(self, document_id: str, file_path: Path, text: str | None = None) -> None:
        """Lint ``document_id`` once its edits pause for the debounce window."""
        self.registry.schedule(document_id, self.settings.debounce_ms, self.lint, document_id, file_path, text)

    def forget(self, document_id: str) -> None:
        """Drop every trace of a closed document."""
        self.registry.cancel(document_id)
        self._sequences.pop(document_id, None)
        self.store.delete(document_id)

    async def lint(
        self,
        document_id: str,
        file_path: Path,
        text: str | None = None,
    ) -> Sequence[DiagnosticEntry] | None:
        """Validate one document and store its diagnostics.

        Args:
            document_id: URI identifying the document.
            file_path: Path reported to the validator.
            text: Current document text; when given it is streamed on
                standard input instead of reading ``file_path``.

        Returns:
            Sequence[DiagnosticEntry] | None: Stored diagnostics, or ``None``
            when the run failed, was superseded, or no validator is available.
        """

        sequence = self._sequences.get(document_id, 0) + 1
        self._sequences[document_id] = sequence
        self.store.delete(document_id)
        invoker = self._invoker
        if invoker is None:
            LOGGER.debug("csvlinter unavailable, skipping %s", document_id)
            return None

        request = ValidationRequest(document_id=document_id, file_path=file_path, inline_text=text, sequence=sequence)
        try:
            outcome = await invoker.run(request)
            outcome.raise_for_status()
            diagnostics = _diagnostics_for(outcome)
        except InvocationFailureError as exc:
            LOGGER.error("Linter execution error for %s: %s", document_id, exc)
            if self._is_current(document_id, sequence):
                self._reporter.error(f"Linter error: {exc}")
            return None
        except MalformedOutputError as exc:
            LOGGER.error("Failed to parse linter output for %s: %s", document_id, exc)
            if self._is_current(document_id, sequence):
                self._reporter.error("Error parsing linter output.")
            return None

        if not self._is_current(document_id, sequence):
            LOGGER.debug("Discarding stale result #%d for %s", sequence, document_id)
            return None
        self.store.set(document_id, diagnostics)
        LOGGER.debug("%s: %d diagnostics", document_id, len(diagnostics))
        return tuple(diagnostics)

    def _is_current(self, document_id: str, sequence: int) -> bool:
        return self._sequences.get(document_id) == sequence


def _diagnostics_for(outcome: ValidationOutcome) -> list[DiagnosticEntry]:
    payload = outcome.payload
    if outcome.status is ValidationStatus.VALID:
        if not payload:
            return []
        try:
            return translate(payload)
        except MalformedOutputError:
            LOGGER.debug("Ignoring non-JSON output of a successful run")
            return []
    if not payload:
        raise MalformedOutputError("linter reported validation errors without any output")
    return translate(payload)


__all__ = ["LintService", "is_csv_document"]
