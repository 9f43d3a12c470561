# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Locate the release asset matching the running platform."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from contextlib import closing

from ..errors import AssetNotFoundError, ReleaseFetchError
from ..models import AssetDescriptor, PlatformTarget
from .http import (
    GITHUB_JSON_MEDIA_TYPE,
    METADATA_REDIRECT_STATUSES,
    HttpResponse,
    HttpSession,
    RequestException,
    create_session,
    is_success,
    redirect_target,
)

LOGGER = logging.getLogger(__name__)


class ReleaseLocator:
    """Query release metadata and select the asset for a platform."""

    def __init__(
        self,
        *,
        release_url: str,
        tool_name: str,
        user_agent: str,
        timeout: float,
        session: HttpSession | None = None,
    ) -> None:
        self._release_url = release_url
        self._tool_name = tool_name
        self._headers = {"User-Agent": user_agent, "Accept": GITHUB_JSON_MEDIA_TYPE}
        self._timeout = timeout
        self._session = session if session is not None else create_session()

    async def locate(self, target: PlatformTarget) -> AssetDescriptor:
        """Return the asset descriptor for ``target``.

        Raises:
            ReleaseFetchError: If the metadata cannot be fetched or decoded.
            AssetNotFoundError: If no asset matches the expected file name.
        """

        return await asyncio.to_thread(self.locate_sync, target)

    def locate_sync(self, target: PlatformTarget) -> AssetDescriptor:
        """Blocking variant of :meth:`locate`."""

        asset_name = target.asset_name(self._tool_name)
        LOGGER.debug("Looking up %s in %s", asset_name, self._release_url)
        return select_asset(self._fetch_release_document(), asset_name)

    def _fetch_release_document(self) -> Mapping[str, object]:
        response = self._get(self._release_url)
        if response.status_code in METADATA_REDIRECT_STATUSES:
            # The endpoint redirects at most once to the concrete release document.
            with closing(response):
                location = redirect_target(response, self._release_url)
            if location is None:
                raise ReleaseFetchError("Redirect without location for release API")
            response = self._get(location)
        with closing(response):
            if not is_success(response.status_code):
                raise ReleaseFetchError(f"Failed to fetch releases: HTTP {response.status_code}")
            try:
                document = response.json()
            except ValueError as exc:
                raise ReleaseFetchError(f"Failed to parse release API response: {exc}") from exc
        if not isinstance(document, Mapping):
            raise ReleaseFetchError("Failed to parse release API response: expected a JSON object")
        return document

    def _get(self, url: str) -> HttpResponse:
        try:
            return self._session.get(url, headers=self._headers, timeout=self._timeout, allow_redirects=False)
        except RequestException as exc:
            raise ReleaseFetchError(f"Failed to fetch releases: {exc}") from exc


def select_asset(document: Mapping[str, object], asset_name: str) -> AssetDescriptor:
    """Return the entry of ``document['assets']`` named ``asset_name``.

    Args:
        document: Decoded release metadata.
        asset_name: Expected asset file name.

    Returns:
        AssetDescriptor: Selected asset and its download URL.

    Raises:
        ReleaseFetchError: If ``assets`` is missing or not a list.
        AssetNotFoundError: If no asset carries ``asset_name``.
    """

    assets = document.get("assets")
    if not isinstance(assets, list):
        raise ReleaseFetchError("Failed to parse release API response: missing 'assets' list")
    for asset in assets:
        if not isinstance(asset, Mapping) or asset.get("name") != asset_name:
            continue
        url = asset.get("browser_download_url")
        if not isinstance(url, str) or not url:
            raise ReleaseFetchError(f"Release asset {asset_name} has no download URL")
        return AssetDescriptor(expected_file_name=asset_name, download_url=url)
    raise AssetNotFoundError(asset_name)


__all__ = ["ReleaseLocator", "select_asset"]
