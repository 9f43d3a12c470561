# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Language server publishing csvlinter diagnostics for CSV documents."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from lsprotocol.types import (
    INITIALIZE,
    INITIALIZED,
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_CLOSE,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_DID_SAVE,
    WORKSPACE_DID_CHANGE_CONFIGURATION,
    DidChangeConfigurationParams,
    DidChangeTextDocumentParams,
    DidCloseTextDocumentParams,
    DidOpenTextDocumentParams,
    DidSaveTextDocumentParams,
    InitializedParams,
    InitializeParams,
    MessageType,
    PublishDiagnosticsParams,
    ShowMessageParams,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from . import __version__
from .config import LinterSettings
from .constants import LINT_COMMAND, REINSTALL_COMMAND, SERVER_NAME
from .errors import ConfigError
from .linting import DiagnosticStateStore, LintService
from .models import DiagnosticEntry, InstalledTool
from .provisioning import ToolProvisioner

LOGGER = logging.getLogger(__name__)


def _document_path(document: Any) -> Path:
    # Unsaved buffers (``untitled:``) have no filesystem path; report their URI path instead.
    if document.path:
        return Path(document.path)
    return Path(urlparse(document.uri).path or document.uri)


class WindowReporter:
    """Reporter showing messages in the client through ``window/showMessage``."""

    def __init__(self, server: LanguageServer) -> None:
        self._server = server

    def info(self, message: str) -> None:
        LOGGER.info(message)
        self._show(MessageType.Info, message)

    def error(self, message: str) -> None:
        LOGGER.error(message)
        self._show(MessageType.Error, message)

    def _show(self, kind: MessageType, message: str) -> None:
        self._server.window_show_message(ShowMessageParams(type=kind, message=message))


class CsvLinterLanguageServer(LanguageServer):
    """Language server owning the provisioner, the lint service and diagnostic state."""

    def __init__(self, settings: LinterSettings | None = None) -> None:
        super().__init__(SERVER_NAME, __version__, text_document_sync_kind=TextDocumentSyncKind.Full)
        self.settings = settings if settings is not None else LinterSettings.load()
        self.reporter = WindowReporter(self)
        self.store = DiagnosticStateStore(on_change=self.publish)
        self.service = LintService(self.settings, self.store, reporter=self.reporter)
        self.provisioner = ToolProvisioner(self.settings, reporter=self.reporter)

    def configure(self, settings: LinterSettings) -> bool:
        """Apply ``settings`` to the provisioner and the lint service.

        Returns:
            bool: ``True`` when the executable location changed. The previous
            validator is detached until :meth:`activate` provisions the new one.
        """

        storage_changed = (settings.storage_dir, settings.executable) != (
            self.settings.storage_dir,
            self.settings.executable,
        )
        self.settings = settings
        self.service.update_settings(settings)
        if storage_changed:
            self.provisioner = ToolProvisioner(settings, reporter=self.reporter)
            self.service.attach(None)
        return storage_changed

    def publish(self, document_id: str, diagnostics: tuple[DiagnosticEntry, ...]) -> None:
        """Send the diagnostics of ``document_id`` to the client."""

        self.text_document_publish_diagnostics(
            PublishDiagnosticsParams(uri=document_id, diagnostics=[entry.to_lsp() for entry in diagnostics])
        )

    async def activate(self, *, force: bool = False) -> InstalledTool | None:
        """Provision the validator, then lint every open CSV document."""

        if force:
            tool = await self.provisioner.force_reinstall()
        else:
            tool = await self.provisioner.ensure_installed()
        self.service.attach(tool)
        if tool is None:
            LOGGER.warning("csvlinter is unavailable; diagnostics are disabled until it is reinstalled")
            return None
        await self.lint_open_documents()
        return tool

    async def lint_open_documents(self) -> None:
        """Validate every open document that looks like CSV."""

        documents = [
            document
            for document in self.workspace.text_documents.values()
            if self.service.accepts(document.uri, document.language_id)
        ]
        await asyncio.gather(*(self.lint_document(document.uri) for document in documents))

    async def lint_document(self, uri: str, *, from_disk: bool = False) -> None:
        """Validate ``uri`` now.

        Args:
            uri: Document URI.
            from_disk: Pass the file path instead of streaming the buffer.
                Only honoured for ``file`` URIs that exist on disk.
        """

        document = self.workspace.get_text_document(uri)
        path = _document_path(document)
        text = None if from_disk and uri.startswith("file:") and path.is_file() else document.source
        await self.service.lint(uri, path, text)


def on_initialize(ls: CsvLinterLanguageServer, params: InitializeParams) -> None:
    """Read settings from ``initializationOptions``."""

    options = params.initialization_options
    if not isinstance(options, Mapping):
        return
    try:
        ls.configure(ls.settings.merged(options))
    except ConfigError as exc:
        LOGGER.error("%s", exc)


async def on_initialized(ls: CsvLinterLanguageServer, params: InitializedParams) -> None:
    """Provision the validator once the client is ready."""

    del params
    await ls.activate()


async def did_open(ls: CsvLinterLanguageServer, params: DidOpenTextDocumentParams) -> None:
    document = params.text_document
    if ls.service.accepts(document.uri, document.language_id):
        await ls.lint_document(document.uri, from_disk=True)


async def did_save(ls: CsvLinterLanguageServer, params: DidSaveTextDocumentParams) -> None:
    uri = params.text_document.uri
    document = ls.workspace.get_text_document(uri)
    if ls.service.accepts(uri, document.language_id):
        await ls.lint_document(uri, from_disk=True)


def did_change(ls: CsvLinterLanguageServer, params: DidChangeTextDocumentParams) -> None:
    uri = params.text_document.uri
    document = ls.workspace.get_text_document(uri)
    if not ls.settings.lint_on_change or not ls.service.accepts(uri, document.language_id):
        return
    ls.service.schedule(uri, _document_path(document), document.source)


def did_close(ls: CsvLinterLanguageServer, params: DidCloseTextDocumentParams) -> None:
    ls.service.forget(params.text_document.uri)


async def did_change_configuration(ls: CsvLinterLanguageServer, params: DidChangeConfigurationParams) -> None:
    settings = params.settings
    if not isinstance(settings, Mapping):
        return
    try:
        relocated = ls.configure(ls.settings.merged(settings))
    except ConfigError as exc:
        ls.reporter.error(str(exc))
        return
    if relocated:
        await ls.activate()


def _command_arguments(args: tuple[Any, ...]) -> list[Any]:
    # Older clients send the argument list as a single positional value.
    if len(args) == 1 and isinstance(args[0], list):
        return list(args[0])
    return list(args)


async def reinstall_command(ls: CsvLinterLanguageServer, *args: Any) -> dict[str, Any]:
    """Delete and download the validator again, then re-lint open documents."""

    del args
    tool = await ls.activate(force=True)
    if tool is not None:
        ls.reporter.info("csvlinter reinstalled.")
    return {"installed": tool is not None, "path": str(tool.absolute_path) if tool is not None else None}


async def lint_command(ls: CsvLinterLanguageServer, *args: Any) -> int | None:
    """Validate the document whose URI is the first argument (e.g. on focus change)."""

    arguments = _command_arguments(args)
    if not arguments or not isinstance(arguments[0], str):
        return None
    uri = arguments[0]
    if uri not in ls.workspace.text_documents:
        return None
    await ls.lint_document(uri)
    return len(ls.store.get(uri))


def create_server(settings: LinterSettings | None = None) -> CsvLinterLanguageServer:
    """Return a server with every handler registered."""

    server = CsvLinterLanguageServer(settings)
    server.feature(INITIALIZE)(on_initialize)
    server.feature(INITIALIZED)(on_initialized)
    server.feature(TEXT_DOCUMENT_DID_OPEN)(did_open)
    server.feature(TEXT_DOCUMENT_DID_SAVE)(did_save)
    server.feature(TEXT_DOCUMENT_DID_CHANGE)(did_change)
    server.feature(TEXT_DOCUMENT_DID_CLOSE)(did_close)
    server.feature(WORKSPACE_DID_CHANGE_CONFIGURATION)(did_change_configuration)
    server.command(REINSTALL_COMMAND)(reinstall_command)
    server.command(LINT_COMMAND)(lint_command)
    return server


def start(
    settings: LinterSettings | None = None,
    *,
    tcp: bool = False,
    host: str = "127.0.0.1",
    port: int = 2087,
) -> None:
    """Run the language server over stdio, or TCP when ``tcp`` is set."""

    server = create_server(settings)
    if tcp:
        server.start_tcp(host, port)
    else:
        server.start_io()


__all__ = ["CsvLinterLanguageServer", "WindowReporter", "create_server", "start"]
