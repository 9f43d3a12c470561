# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Provisioning of the csvlinter executable from its GitHub releases."""

from __future__ import annotations

from .installer import ArchiveInstaller
from .layout import InstallLayout, executable_name
from .platform import resolve
from .provisioner import ToolProvisioner
from .release import ReleaseLocator, select_asset

__all__ = [
    "ArchiveInstaller",
    "InstallLayout",
    "ReleaseLocator",
    "ToolProvisioner",
    "executable_name",
    "resolve",
    "select_asset",
]
