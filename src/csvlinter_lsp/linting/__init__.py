# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Incremental validation of CSV documents."""

from __future__ import annotations

from .debounce import DebounceRegistry
from .invoker import ValidationInvoker
from .service import LintService, is_csv_document
from .state import DiagnosticStateStore
from .translator import translate

__all__ = [
    "DebounceRegistry",
    "DiagnosticStateStore",
    "LintService",
    "ValidationInvoker",
    "is_csv_document",
    "translate",
]
