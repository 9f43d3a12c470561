# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration model and loaders for the csvlinter language server."""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from .constants import (
    DEFAULT_DEBOUNCE_MS,
    DEFAULT_REQUEST_TIMEOUT,
    ENV_PREFIX,
    LATEST_RELEASE_URL,
    LINTER_BINARY_NAME,
    SETTINGS_SECTION,
    STORAGE_DIR_NAME,
    USER_AGENT,
)
from .errors import ConfigError

_LIST_SEPARATOR: Final[str] = ","


def default_storage_dir(environ: Mapping[str, str] | None = None) -> Path:
    """Return the per-user directory that holds the installed validator.

    Args:
        environ: Environment mapping consulted for cache locations.

    Returns:
        Path: ``<user cache dir>/csvlinter-lsp``.
    """

    env = os.environ if environ is None else environ
    if sys.platform == "win32" and env.get("LOCALAPPDATA"):
        base = Path(env["LOCALAPPDATA"])
    elif env.get("XDG_CACHE_HOME"):
        base = Path(env["XDG_CACHE_HOME"])
    else:
        base = Path.home() / ".cache"
    return base / STORAGE_DIR_NAME


class LinterSettings(BaseModel):
    """Settings shared by the provisioner, the lint service and the server.

    Client ``initializationOptions`` use camelCase keys (``debounceMs``),
    environment variables use the ``CSVLINTER_LSP_`` prefix with the snake
    case field name (``CSVLINTER_LSP_DEBOUNCE_MS``).
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    storage_dir: Path = Field(default_factory=default_storage_dir)
    executable: Path | None = None
    tool_name: str = LINTER_BINARY_NAME
    release_url: str = LATEST_RELEASE_URL
    user_agent: str = USER_AGENT
    request_timeout: float = Field(default=DEFAULT_REQUEST_TIMEOUT, gt=0)
    validation_timeout: float | None = Field(default=None, gt=0)
    debounce_ms: int = Field(default=DEFAULT_DEBOUNCE_MS, ge=0)
    lint_on_change: bool = True
    language_ids: tuple[str, ...] = ("csv",)
    extensions: tuple[str, ...] = (".csv",)

    @field_validator("storage_dir", "executable", mode="after")
    @classmethod
    def _expand_user(cls, value: Path | None) -> Path | None:
        return value.expanduser() if value is not None else None

    @field_validator("extensions", mode="after")
    @classmethod
    def _normalise_extensions(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        normalised: list[str] = []
        for item in value:
            token = item.strip().lower()
            if not token:
                continue
            normalised.append(token if token.startswith(".") else f".{token}")
        return tuple(normalised)

    @property
    def debounce_seconds(self) -> float:
        """Return the debounce window in seconds."""
        return self.debounce_ms / 1000

    @classmethod
    def load(
        cls,
        options: Mapping[str, Any] | None = None,
        *,
        environ: Mapping[str, str] | None = None,
    ) -> LinterSettings:
        """Build settings from defaults, the environment and client options.

        Args:
            options: Client supplied options, either flat or nested under the
                ``csvlinter`` section.
            environ: Environment mapping; defaults to :data:`os.environ`.

        Returns:
            LinterSettings: Validated settings.

        Raises:
            ConfigError: If any value fails validation.
        """

        data: dict[str, Any] = {}
        data.update(_environment_overrides(os.environ if environ is None else environ))
        data.update(_normalise_option_keys(options))
        return _validate(cls, data)

    def merged(self, options: Mapping[str, Any] | None) -> LinterSettings:
        """Return a copy with ``options`` applied on top of the current values."""

        updates = _normalise_option_keys(options)
        if not updates:
            return self
        return _validate(type(self), {**self.model_dump(), **updates})


def _validate(model: type[LinterSettings], data: Mapping[str, Any]) -> LinterSettings:
    try:
        return model.model_validate(dict(data))
    except ValidationError as exc:
        raise ConfigError(f"invalid csvlinter settings: {exc}") from exc


def _field_names_by_key() -> dict[str, str]:
    mapping: dict[str, str] = {}
    for name, field in LinterSettings.model_fields.items():
        mapping[name] = name
        if field.alias:
            mapping[field.alias] = name
    return mapping


def _normalise_option_keys(options: Mapping[str, Any] | None) -> dict[str, Any]:
    """Flatten the ``csvlinter`` section and translate camelCase keys to field names."""

    if not options:
        return {}
    section = options.get(SETTINGS_SECTION)
    source: Mapping[str, Any] = section if isinstance(section, Mapping) else options
    names = _field_names_by_key()
    return {names[key]: value for key, value in source.items() if key in names and value is not None}


def _environment_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for name, field in LinterSettings.model_fields.items():
        raw = environ.get(f"{ENV_PREFIX}{name.upper()}")
        if raw is None or not raw.strip():
            continue
        if field.annotation == tuple[str, ...]:
            overrides[name] = tuple(part.strip() for part in raw.split(_LIST_SEPARATOR) if part.strip())
        else:
            overrides[name] = raw.strip()
    return overrides


__all__ = ["LinterSettings", "default_storage_dir"]
