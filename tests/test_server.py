# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the language server handlers."""

from __future__ import annotations

import asyncio
from pathlib import Path
from types import SimpleNamespace

from lsprotocol.types import DiagnosticSeverity, MessageType

from csvlinter_lsp import server as server_module
from csvlinter_lsp.constants import END_OF_LINE
from csvlinter_lsp.models import DiagnosticEntry, InstalledTool
from csvlinter_lsp.server import CsvLinterLanguageServer, WindowReporter, create_server

URI = "file:///data/a.csv"


class FakeProvisioner:
    def __init__(self, tool: InstalledTool | None) -> None:
        self.tool = tool
        self.calls: list[str] = []

    async def ensure_installed(self) -> InstalledTool | None:
        self.calls.append("ensure")
        return self.tool

    async def force_reinstall(self) -> InstalledTool | None:
        self.calls.append("force")
        return self.tool


class RecordingService:
    def __init__(self) -> None:
        self.scheduled: list[tuple[str, Path, str | None]] = []
        self.forgotten: list[str] = []

    def accepts(self, uri: str, language_id: str | None = None) -> bool:
        return uri.endswith(".csv") or language_id == "csv"

    def schedule(self, document_id: str, file_path: Path, text: str | None = None) -> None:
        self.scheduled.append((document_id, file_path, text))

    def forget(self, document_id: str) -> None:
        self.forgotten.append(document_id)


def _document(uri: str = URI, language_id: str = "csv", source: str = "a,b\n") -> SimpleNamespace:
    return SimpleNamespace(uri=uri, language_id=language_id, path="/data/a.csv", source=source)


def _fake_ls(settings, *documents: SimpleNamespace) -> SimpleNamespace:
    by_uri = {document.uri: document for document in documents}
    workspace = SimpleNamespace(text_documents=by_uri, get_text_document=by_uri.__getitem__)
    return SimpleNamespace(settings=settings, service=RecordingService(), workspace=workspace)


def test_store_changes_publish_lsp_diagnostics(settings) -> None:
    server = CsvLinterLanguageServer(settings)
    published = []
    server.text_document_publish_diagnostics = published.append

    server.store.set(URI, [DiagnosticEntry(line_index=4, message="bad", code="content")])
    server.store.delete(URI)

    first, second = published
    assert first.uri == URI
    (diagnostic,) = first.diagnostics
    assert diagnostic.range.start.line == 4
    assert diagnostic.range.start.character == 0
    assert diagnostic.range.end.line == 4
    assert diagnostic.range.end.character == END_OF_LINE
    assert diagnostic.severity == DiagnosticSeverity.Error
    assert diagnostic.source == "csvlinter"
    assert diagnostic.code == "content"
    assert second.diagnostics == []


def test_window_reporter_shows_messages() -> None:
    shown = []
    reporter = WindowReporter(SimpleNamespace(window_show_message=shown.append))

    reporter.info("Downloading csvlinter...")
    reporter.error("Error parsing linter output.")

    assert [(params.type, params.message) for params in shown] == [
        (MessageType.Info, "Downloading csvlinter..."),
        (MessageType.Error, "Error parsing linter output."),
    ]


def test_configure_rebuilds_provisioner_only_for_storage_changes(settings, tmp_path: Path) -> None:
    server = CsvLinterLanguageServer(settings)
    provisioner = server.provisioner

    assert server.configure(settings.merged({"debounceMs": 5})) is False
    assert server.provisioner is provisioner
    assert server.service.settings.debounce_ms == 5

    assert server.configure(server.settings.merged({"storageDir": str(tmp_path / "elsewhere")})) is True
    assert server.provisioner is not provisioner
    assert not server.service.available


def test_initialize_applies_client_options(settings) -> None:
    server = CsvLinterLanguageServer(settings)
    params = SimpleNamespace(initialization_options={"csvlinter": {"debounceMs": 75, "lintOnChange": False}})

    server_module.on_initialize(server, params)

    assert server.settings.debounce_ms == 75
    assert server.settings.lint_on_change is False


def test_initialize_ignores_invalid_options(settings) -> None:
    server = CsvLinterLanguageServer(settings)

    server_module.on_initialize(server, SimpleNamespace(initialization_options={"debounceMs": -5}))

    assert server.settings == settings


def test_activate_without_validator_disables_linting(settings) -> None:
    server = CsvLinterLanguageServer(settings)
    server.provisioner = FakeProvisioner(None)

    assert asyncio.run(server.activate()) is None
    assert not server.service.available
    assert server.provisioner.calls == ["ensure"]


def test_did_change_schedules_buffer_text(settings) -> None:
    ls = _fake_ls(settings, _document(source="a,b\nbad\n"))
    params = SimpleNamespace(text_document=SimpleNamespace(uri=URI))

    server_module.did_change(ls, params)

    assert ls.service.scheduled == [(URI, Path("/data/a.csv"), "a,b\nbad\n")]


def test_did_change_respects_lint_on_change(settings) -> None:
    ls = _fake_ls(settings.merged({"lintOnChange": False}), _document())

    server_module.did_change(ls, SimpleNamespace(text_document=SimpleNamespace(uri=URI)))

    assert ls.service.scheduled == []


def test_did_change_ignores_other_languages(settings) -> None:
    other = _document(uri="file:///notes.txt", language_id="plaintext")
    ls = _fake_ls(settings, other)

    server_module.did_change(ls, SimpleNamespace(text_document=SimpleNamespace(uri=other.uri)))

    assert ls.service.scheduled == []


def test_did_close_forgets_document(settings) -> None:
    ls = _fake_ls(settings, _document())

    server_module.did_close(ls, SimpleNamespace(text_document=SimpleNamespace(uri=URI)))

    assert ls.service.forgotten == [URI]


def test_lint_command_ignores_unknown_documents(settings) -> None:
    ls = _fake_ls(settings)

    assert asyncio.run(server_module.lint_command(ls, [URI])) is None
    assert asyncio.run(server_module.lint_command(ls)) is None


def test_reinstall_command_reports_result(settings, reporter, tmp_path: Path) -> None:
    tool = InstalledTool(absolute_path=tmp_path / "csvlinter")

    async def activate(*, force: bool = False) -> InstalledTool:
        assert force is True
        return tool

    ls = SimpleNamespace(activate=activate, reporter=reporter)

    result = asyncio.run(server_module.reinstall_command(ls))

    assert result == {"installed": True, "path": str(tmp_path / "csvlinter")}
    assert reporter.infos == ["csvlinter reinstalled."]


def test_command_arguments_accepts_both_shapes() -> None:
    assert server_module._command_arguments(([URI, 1],)) == [URI, 1]
    assert server_module._command_arguments((URI, 1)) == [URI, 1]


def test_create_server_returns_configured_instance(settings) -> None:
    server = create_server(settings)

    assert isinstance(server, CsvLinterLanguageServer)
    assert server.settings is settings
