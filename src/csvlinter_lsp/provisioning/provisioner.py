# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Top-level orchestration of validator provisioning."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path

from ..config import LinterSettings
from ..errors import ProvisioningError
from ..models import InstalledTool, PlatformTarget
from ..reporting import LoggingReporter, Reporter
from . import platform
from .http import HttpSession, create_session
from .installer import ArchiveInstaller
from .layout import executable_name
from .release import ReleaseLocator

LOGGER = logging.getLogger(__name__)


class ToolProvisioner:
    """Make sure the validator executable exists, downloading it when needed.

    Failures never escape :meth:`ensure_installed`; they are reported to the
    user and turned into ``None`` so callers can keep running in a
    "validator unavailable" state.
    """

    def __init__(
        self,
        settings: LinterSettings,
        *,
        reporter: Reporter | None = None,
        session: HttpSession | None = None,
        resolve_platform: Callable[[], PlatformTarget] = platform.resolve,
    ) -> None:
        self._settings = settings
        self._reporter: Reporter = reporter if reporter is not None else LoggingReporter()
        self._session = session
        self._resolve_platform = resolve_platform
        self._lock = asyncio.Lock()
        self._current: InstalledTool | None = None

    @property
    def installed_path(self) -> Path:
        """Return the canonical path of the installed executable."""

        return self._settings.storage_dir / executable_name(self._settings.tool_name)

    @property
    def current(self) -> InstalledTool | None:
        """Return the tool found by the last successful provisioning call."""

        return self._current

    def is_installed(self) -> bool:
        """Return ``True`` when the canonical executable exists."""

        return self.installed_path.is_file()

    async def ensure_installed(self) -> InstalledTool | None:
        """Return the installed validator, provisioning it on first use."""

        async with self._lock:
            self._current = await self._ensure_installed_locked()
            return self._current

    async def force_reinstall(self) -> InstalledTool | None:
        """Delete the installed validator and provision it again."""

        async with self._lock:
            path = self.installed_path
            try:
                path.unlink(missing_ok=True)
            except OSError as exc:
                LOGGER.error("Cannot remove %s: %s", path, exc)
                self._reporter.error(f"Failed to remove existing csvlinter: {exc}")
                self._current = None
                return None
            LOGGER.info("Removed %s, reinstalling", path)
            self._current = await self._ensure_installed_locked()
            return self._current

    async def _ensure_installed_locked(self) -> InstalledTool | None:
        override = self._settings.executable
        if override is not None:
            if override.is_file():
                return InstalledTool.from_path(override)
            self._reporter.error(f"Configured csvlinter executable not found: {override}")
            return None

        path = self.installed_path
        if path.is_file():
            LOGGER.debug("csvlinter already exists at %s", path)
            return InstalledTool.from_path(path)

        self._reporter.info("Downloading csvlinter...")
        try:
            tool = await self._provision()
        except ProvisioningError as exc:
            LOGGER.error("csvlinter provisioning failed: %s", exc)
            self._reporter.error(f"Failed to download and set up csvlinter: {exc}")
            return None
        LOGGER.info("csvlinter downloaded and extracted to %s", tool.absolute_path)
        return tool

    async def _provision(self) -> InstalledTool:
        target = self._resolve_platform()
        session = self._session if self._session is not None else create_session()
        settings = self._settings
        locator = ReleaseLocator(
            release_url=settings.release_url,
            tool_name=settings.tool_name,
            user_agent=settings.user_agent,
            timeout=settings.request_timeout,
            session=session,
        )
        installer = ArchiveInstaller(
            tool_name=settings.tool_name,
            target=target,
            user_agent=settings.user_agent,
            timeout=settings.request_timeout,
            session=session,
        )
        asset = await locator.locate(target)
        return await installer.install(asset, settings.storage_dir)


__all__ = ["ToolProvisioner"]
