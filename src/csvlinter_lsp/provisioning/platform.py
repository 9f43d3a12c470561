# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Map the running platform onto csvlinter release asset names."""

from __future__ import annotations

import platform
import sys
from typing import Final

from ..errors import UnsupportedPlatformError
from ..models import WINDOWS_OS_TAG, PlatformTarget

_ARCHITECTURE_TAGS: Final[dict[str, str]] = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "x64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
}

_WINDOWS_PLATFORMS: Final[frozenset[str]] = frozenset({"win32", "cygwin", "windows"})


def normalize_os(system: str) -> str:
    """Return the operating system token used by release assets.

    Args:
        system: Raw platform identifier such as ``sys.platform``.

    Returns:
        str: ``windows``, ``darwin``, ``linux`` or the lower-cased input.
    """

    normalized = system.strip().lower()
    if normalized in _WINDOWS_PLATFORMS:
        return WINDOWS_OS_TAG
    if normalized.startswith("linux"):
        return "linux"
    return normalized


def normalize_architecture(machine: str) -> str:
    """Return the architecture token used by release assets.

    Args:
        machine: Raw architecture string reported by the platform.

    Returns:
        str: ``amd64`` or ``arm64``.

    Raises:
        UnsupportedPlatformError: If no release is published for ``machine``.
    """

    tag = _ARCHITECTURE_TAGS.get(machine.strip().lower())
    if tag is None:
        raise UnsupportedPlatformError(machine)
    return tag


def resolve(system: str | None = None, machine: str | None = None) -> PlatformTarget:
    """Return the :class:`PlatformTarget` for the running (or given) platform."""

    return PlatformTarget(
        os_tag=normalize_os(sys.platform if system is None else system),
        arch_tag=normalize_architecture(platform.machine() if machine is None else machine),
    )


__all__ = ["normalize_architecture", "normalize_os", "resolve"]
