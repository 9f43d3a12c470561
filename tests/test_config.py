# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from csvlinter_lsp import config
from csvlinter_lsp.config import LinterSettings, default_storage_dir
from csvlinter_lsp.errors import ConfigError


def test_defaults() -> None:
    settings = LinterSettings.load(environ={"XDG_CACHE_HOME": "/tmp/cache"})

    assert settings.tool_name == "csvlinter"
    assert settings.debounce_ms == 200
    assert settings.debounce_seconds == pytest.approx(0.2)
    assert settings.lint_on_change is True
    assert settings.extensions == (".csv",)
    assert settings.release_url.endswith("/repos/csvlinter/csvlinter/releases/latest")


def test_default_storage_dir_prefers_xdg_cache(monkeypatch) -> None:
    monkeypatch.setattr(config.sys, "platform", "linux")

    assert default_storage_dir({"XDG_CACHE_HOME": "/var/cache/me"}) == Path("/var/cache/me/csvlinter-lsp")


def test_default_storage_dir_on_windows(monkeypatch) -> None:
    monkeypatch.setattr(config.sys, "platform", "win32")

    assert default_storage_dir({"LOCALAPPDATA": "C:/Users/me/AppData/Local"}).name == "csvlinter-lsp"


def test_environment_overrides() -> None:
    environ = {
        "CSVLINTER_LSP_DEBOUNCE_MS": "750",
        "CSVLINTER_LSP_EXTENSIONS": "csv, TSV",
        "CSVLINTER_LSP_LINT_ON_CHANGE": "false",
        "CSVLINTER_LSP_STORAGE_DIR": "/opt/csvlinter",
    }

    settings = LinterSettings.load(environ=environ)

    assert settings.debounce_ms == 750
    assert settings.extensions == (".csv", ".tsv")
    assert settings.lint_on_change is False
    assert settings.storage_dir == Path("/opt/csvlinter")


def test_client_options_win_over_environment() -> None:
    options = {"csvlinter": {"debounceMs": 50, "validationTimeout": 3, "languageIds": ["csv", "tsv"]}}

    settings = LinterSettings.load(options, environ={"CSVLINTER_LSP_DEBOUNCE_MS": "750"})

    assert settings.debounce_ms == 50
    assert settings.validation_timeout == 3
    assert settings.language_ids == ("csv", "tsv")


def test_flat_options_and_unknown_keys() -> None:
    settings = LinterSettings.load({"lintOnChange": False, "somethingElse": 1, "debounce_ms": None}, environ={})

    assert settings.lint_on_change is False
    assert settings.debounce_ms == 200


@pytest.mark.parametrize("options", [{"debounceMs": -1}, {"requestTimeout": 0}, {"debounceMs": "soon"}])
def test_invalid_values_raise_config_error(options: dict[str, object]) -> None:
    with pytest.raises(ConfigError, match="invalid csvlinter settings"):
        LinterSettings.load(options, environ={})


def test_merged_keeps_unrelated_values(tmp_path: Path) -> None:
    base = LinterSettings(storage_dir=tmp_path, debounce_ms=20)

    merged = base.merged({"csvlinter": {"lintOnChange": False}})

    assert merged.storage_dir == tmp_path
    assert merged.debounce_ms == 20
    assert merged.lint_on_change is False
    assert base.merged({}) is base


def test_storage_dir_expands_user(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))

    assert LinterSettings(storage_dir=Path("~/tools")).storage_dir == tmp_path / "tools"
