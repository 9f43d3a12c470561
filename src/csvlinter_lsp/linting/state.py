# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Process-wide store of the diagnostics published per document."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator

from ..models import DiagnosticEntry

ChangeListener = Callable[[str, tuple[DiagnosticEntry, ...]], None]


class DiagnosticStateStore:
    """Map document URIs to their current diagnostics.

    This is the only state the client renders from. Every mutation is
    forwarded to the optional ``on_change`` listener, which the language
    server uses to publish diagnostics.
    """

    def __init__(self, on_change: ChangeListener | None = None) -> None:
        self._entries: dict[str, tuple[DiagnosticEntry, ...]] = {}
        self._on_change = on_change

    def __contains__(self, document_id: object) -> bool:
        return document_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def uris(self) -> tuple[str, ...]:
        """Return the tracked document URIs."""
        return tuple(self._entries)

    def get(self, document_id: str) -> tuple[DiagnosticEntry, ...]:
        """Return the diagnostics of ``document_id`` (empty when untracked)."""
        return self._entries.get(document_id, ())

    def set(self, document_id: str, diagnostics: Iterable[DiagnosticEntry]) -> None:
        """Replace every diagnostic of ``document_id`` with ``diagnostics``."""
        snapshot = tuple(diagnostics)
        self._entries[document_id] = snapshot
        self._notify(document_id, snapshot)

    def delete(self, document_id: str) -> None:
        """Remove all diagnostics of ``document_id``."""
        self._entries.pop(document_id, None)
        self._notify(document_id, ())

    def clear_all(self) -> None:
        """Remove the diagnostics of every tracked document."""
        cleared = list(self._entries)
        self._entries.clear()
        for document_id in cleared:
            self._notify(document_id, ())

    def _notify(self, document_id: str, diagnostics: tuple[DiagnosticEntry, ...]) -> None:
        if self._on_change is not None:
            self._on_change(document_id, diagnostics)


__all__ = ["ChangeListener", "DiagnosticStateStore"]
