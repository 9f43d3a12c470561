# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""HTTP plumbing shared by release lookup and artifact download."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Final, Protocol
from urllib.parse import urljoin

import requests

METADATA_REDIRECT_STATUSES: Final[frozenset[int]] = frozenset({301, 302})
DOWNLOAD_REDIRECT_STATUSES: Final[frozenset[int]] = frozenset({301, 302, 303, 307, 308})

GITHUB_JSON_MEDIA_TYPE: Final[str] = "application/vnd.github+json"
OCTET_STREAM_MEDIA_TYPE: Final[str] = "application/octet-stream"


class HttpResponse(Protocol):
    """Minimal subset of ``requests.Response`` used by provisioning."""

    status_code: int
    headers: Mapping[str, str]

    def json(self) -> object:
        """Decode the body as JSON."""

    def iter_content(self, chunk_size: int = 1) -> Iterator[bytes]:
        """Yield response body chunks."""

    def close(self) -> None:
        """Release the underlying connection."""


class HttpSession(Protocol):
    """Callable surface of ``requests.Session`` used by provisioning."""

    def get(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
        allow_redirects: bool = True,
        stream: bool = False,
    ) -> HttpResponse:
        """Issue a GET request for ``url``."""


def create_session() -> HttpSession:
    """Return a new :class:`requests.Session`."""

    return requests.Session()


def redirect_target(response: HttpResponse, current_url: str) -> str | None:
    """Return the absolute ``Location`` of a redirect response, if any."""

    location = response.headers.get("Location") or response.headers.get("location")
    if not location:
        return None
    return urljoin(current_url, location)


def is_success(status_code: int) -> bool:
    """Return ``True`` for 2xx status codes."""

    return 200 <= status_code < 300


RequestException = requests.RequestException

__all__ = [
    "DOWNLOAD_REDIRECT_STATUSES",
    "GITHUB_JSON_MEDIA_TYPE",
    "HttpResponse",
    "HttpSession",
    "METADATA_REDIRECT_STATUSES",
    "OCTET_STREAM_MEDIA_TYPE",
    "RequestException",
    "create_session",
    "is_success",
    "redirect_target",
]
