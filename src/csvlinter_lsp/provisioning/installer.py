# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Download, unpack and install the validator release archive."""

from __future__ import annotations

import asyncio
import logging
import os
import stat
import tarfile
from contextlib import closing
from pathlib import Path

from ..constants import DOWNLOAD_CHUNK_SIZE, MAX_DOWNLOAD_REDIRECTS
from ..errors import DownloadError, ExtractionError
from ..models import AssetDescriptor, InstalledTool, PlatformTarget
from .http import (
    DOWNLOAD_REDIRECT_STATUSES,
    OCTET_STREAM_MEDIA_TYPE,
    HttpResponse,
    HttpSession,
    RequestException,
    create_session,
    redirect_target,
)
from .layout import InstallLayout

LOGGER = logging.getLogger(__name__)


class ArchiveInstaller:
    """Install a release archive into a storage directory.

    Every call starts from scratch: leftovers of a previously interrupted
    install are removed before downloading, so retrying never needs manual
    cleanup.
    """

    def __init__(
        self,
        *,
        tool_name: str,
        target: PlatformTarget,
        user_agent: str,
        timeout: float,
        session: HttpSession | None = None,
    ) -> None:
        self._tool_name = tool_name
        self._target = target
        self._headers = {"User-Agent": user_agent, "Accept": OCTET_STREAM_MEDIA_TYPE}
        self._timeout = timeout
        self._session = session if session is not None else create_session()

    def layout_for(self, destination_dir: Path) -> InstallLayout:
        """Return the install layout used below ``destination_dir``."""

        return InstallLayout.for_directory(
            destination_dir,
            tool=self._tool_name,
            executable=self._target.executable_name(self._tool_name),
        )

    async def install(self, asset: AssetDescriptor, destination_dir: Path) -> InstalledTool:
        """Install ``asset`` below ``destination_dir`` and return the executable.

        Raises:
            DownloadError: If the archive cannot be downloaded.
            ExtractionError: If the archive cannot be unpacked or lacks the executable.
        """

        return await asyncio.to_thread(self.install_sync, asset, destination_dir)

    def install_sync(self, asset: AssetDescriptor, destination_dir: Path) -> InstalledTool:
        """Blocking variant of :meth:`install`."""

        layout = self.layout_for(destination_dir)
        try:
            layout.prepare()
        except OSError as exc:
            raise DownloadError(f"Cannot prepare {destination_dir}: {exc}") from exc
        LOGGER.info("Downloading %s", asset.download_url)
        self._download(asset.download_url, layout.archive_path)
        extract_archive(layout.archive_path, layout.staging_dir)
        staged = layout.staged_executable
        if not staged.is_file():
            raise ExtractionError(f"{asset.expected_file_name} does not contain {staged.name}")
        try:
            if not self._target.is_windows:
                make_executable(staged)
            # The canonical path only ever appears fully extracted and executable.
            os.replace(staged, layout.executable_path)
            layout.cleanup()
        except OSError as exc:
            raise ExtractionError(f"Cannot install {staged.name}: {exc}") from exc
        return InstalledTool.from_path(layout.executable_path)

    def _download(self, url: str, destination: Path) -> None:
        seen: set[str] = set()
        current = url
        for _ in range(MAX_DOWNLOAD_REDIRECTS + 1):
            if current in seen:
                raise DownloadError(f"Redirect loop while downloading {url}")
            seen.add(current)
            response = self._get(current)
            with closing(response):
                if response.status_code in DOWNLOAD_REDIRECT_STATUSES:
                    location = redirect_target(response, current)
                    if location is None:
                        raise DownloadError("Redirect with no location header")
                    current = location
                    continue
                if response.status_code != 200:
                    raise DownloadError(f"Download failed with status code {response.status_code}")
                _write_stream(response, destination)
                return
        raise DownloadError(f"Too many redirects while downloading {url}")

    def _get(self, url: str) -> HttpResponse:
        try:
            return self._session.get(
                url,
                headers=self._headers,
                timeout=self._timeout,
                allow_redirects=False,
                stream=True,
            )
        except RequestException as exc:
            raise DownloadError(f"Download failed: {exc}") from exc


def _write_stream(response: HttpResponse, destination: Path) -> None:
    """Stream the body of ``response`` into ``destination``, removing it on failure."""

    try:
        with destination.open("wb") as handle:
            for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                if chunk:
                    handle.write(chunk)
    except (RequestException, OSError) as exc:
        destination.unlink(missing_ok=True)
        raise DownloadError(f"Download interrupted: {exc}") from exc


def extract_archive(archive: Path, directory: Path) -> None:
    """Extract the gzipped tar ``archive`` into ``directory``.

    Raises:
        ExtractionError: If the archive is corrupt or contains unsafe members.
    """

    try:
        with tarfile.open(archive, "r:gz") as bundle:
            bundle.extractall(directory, filter="data")
    except (tarfile.TarError, OSError, EOFError) as exc:
        raise ExtractionError(f"Failed to extract {archive.name}: {exc}") from exc


def make_executable(path: Path) -> None:
    """Set executable permissions on ``path`` for user/group/other."""

    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


__all__ = ["ArchiveInstaller", "extract_archive", "make_executable"]
