# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for release metadata lookup."""

from __future__ import annotations

import asyncio

import pytest
import requests

from csvlinter_lsp.errors import AssetNotFoundError, ReleaseFetchError
from csvlinter_lsp.models import PlatformTarget
from csvlinter_lsp.provisioning.release import ReleaseLocator, select_asset

from .fakes import FakeResponse, FakeSession, release_document

RELEASE_URL = "https://api.example.test/repos/csvlinter/csvlinter/releases/latest"
LINUX = PlatformTarget(os_tag="linux", arch_tag="amd64")


def _locator(session: FakeSession) -> ReleaseLocator:
    return ReleaseLocator(
        release_url=RELEASE_URL,
        tool_name="csvlinter",
        user_agent="csvlinter-lsp-tests",
        timeout=5,
        session=session,
    )


def test_locate_returns_matching_asset() -> None:
    document = release_document(
        {
            "csvlinter-darwin-arm64.tar.gz": "https://dl.example.test/darwin",
            "csvlinter-linux-amd64.tar.gz": "https://dl.example.test/linux",
        }
    )
    session = FakeSession({RELEASE_URL: FakeResponse.json_body(document)})

    asset = asyncio.run(_locator(session).locate(LINUX))

    assert asset.expected_file_name == "csvlinter-linux-amd64.tar.gz"
    assert asset.download_url == "https://dl.example.test/linux"
    url, headers, allow_redirects = session.calls[0]
    assert url == RELEASE_URL
    assert headers["User-Agent"] == "csvlinter-lsp-tests"
    assert allow_redirects is False


def test_locate_follows_single_redirect() -> None:
    concrete = "https://api.example.test/repos/csvlinter/csvlinter/releases/42"
    document = release_document({"csvlinter-linux-amd64.tar.gz": "https://dl.example.test/linux"})
    session = FakeSession(
        {
            RELEASE_URL: FakeResponse.redirect(concrete, status_code=301),
            concrete: FakeResponse.json_body(document),
        }
    )

    asset = _locator(session).locate_sync(LINUX)

    assert asset.download_url == "https://dl.example.test/linux"
    assert session.urls == [RELEASE_URL, concrete]


def test_locate_rejects_redirect_without_location() -> None:
    session = FakeSession({RELEASE_URL: FakeResponse.redirect(None)})

    with pytest.raises(ReleaseFetchError, match="without location"):
        _locator(session).locate_sync(LINUX)


def test_locate_does_not_follow_second_redirect() -> None:
    first = "https://api.example.test/first"
    second = "https://api.example.test/second"
    session = FakeSession(
        {
            RELEASE_URL: FakeResponse.redirect(first),
            first: FakeResponse.redirect(second),
        }
    )

    with pytest.raises(ReleaseFetchError, match="HTTP 302"):
        _locator(session).locate_sync(LINUX)
    assert session.urls == [RELEASE_URL, first]


@pytest.mark.parametrize(
    "response",
    [
        FakeResponse(status_code=403, body=b'{"message": "rate limited"}'),
        FakeResponse(status_code=200, body=b"<html>not json</html>"),
        FakeResponse.json_body({"message": "no assets here"}),
        FakeResponse.json_body(["not", "an", "object"]),
    ],
)
def test_locate_reports_unusable_metadata(response: FakeResponse) -> None:
    session = FakeSession({RELEASE_URL: response})

    with pytest.raises(ReleaseFetchError):
        _locator(session).locate_sync(LINUX)


def test_locate_wraps_network_errors() -> None:
    session = FakeSession({RELEASE_URL: requests.ConnectionError("dns failure")})

    with pytest.raises(ReleaseFetchError, match="dns failure"):
        _locator(session).locate_sync(LINUX)


def test_select_asset_names_missing_file() -> None:
    document = release_document({"csvlinter-darwin-arm64.tar.gz": "https://dl.example.test/darwin"})

    with pytest.raises(AssetNotFoundError) as excinfo:
        select_asset(document, "csvlinter-linux-amd64.tar.gz")

    assert excinfo.value.asset_name == "csvlinter-linux-amd64.tar.gz"
    assert "csvlinter-linux-amd64.tar.gz" in str(excinfo.value)
