# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for translating validator reports into diagnostics."""

from __future__ import annotations

import json

import pytest
from lsprotocol.types import DiagnosticSeverity

from csvlinter_lsp.errors import MalformedOutputError
from csvlinter_lsp.linting.translator import extract_json_object, find_error_list, parse_record, translate
from csvlinter_lsp.models import DiagnosticEntry


def test_top_level_errors_become_zero_based_diagnostics() -> None:
    report = json.dumps({"errors": [{"line_number": 3, "message": "bad"}]})

    diagnostics = translate(report)

    assert diagnostics == [DiagnosticEntry(line_index=2, message="bad")]
    assert diagnostics[0].to_lsp().severity == DiagnosticSeverity.Error


def test_nested_validation_errors_with_description() -> None:
    report = json.dumps({"validation": {"errors": [{"line": 1, "description": "d"}]}})

    assert translate(report) == [DiagnosticEntry(line_index=0, message="d")]


def test_results_errors_are_found_last() -> None:
    report = json.dumps({"results": {"errors": [{"line_number": 2, "message": "m"}]}})

    assert [entry.line_index for entry in translate(report)] == [1]


def test_first_matching_rule_wins() -> None:
    payload = {
        "errors": [{"line_number": 1, "message": "top"}],
        "validation": {"errors": [{"line_number": 9, "message": "nested"}]},
    }

    assert [entry.message for entry in translate(json.dumps(payload))] == ["top"]


def test_record_without_message_is_serialized() -> None:
    diagnostics = translate(json.dumps({"errors": [{"foo": 1}]}))

    assert diagnostics == [DiagnosticEntry(line_index=0, message='{"foo": 1}')]


def test_banner_text_around_report_is_ignored() -> None:
    raw = 'csvlinter v1.0\n{"errors": [{"line_number": 4, "message": "x", "type": "schema"}]}\nbye'

    (entry,) = translate(raw)

    assert entry.line_index == 3
    assert entry.code == "schema"


def test_empty_error_list_means_clean_document() -> None:
    assert translate('{"errors": []}') == []
    assert translate('{"valid": true}') == []


@pytest.mark.parametrize("raw", ["not json", "", "}{", '{"errors": [}'])
def test_unusable_output_is_malformed(raw: str) -> None:
    with pytest.raises(MalformedOutputError):
        translate(raw)


def test_oversized_integer_is_malformed() -> None:
    raw = '{"errors": [{"line_number": 1' + "0" * 5000 + ', "message": "m"}]}'

    with pytest.raises(MalformedOutputError):
        translate(raw)


def test_deeply_nested_report_is_malformed() -> None:
    depth = 1_000_000
    raw = '{"errors": ' + "[" * depth + "]" * depth + "}"

    with pytest.raises(MalformedOutputError):
        translate(raw)


def test_top_level_array_is_malformed() -> None:
    with pytest.raises(MalformedOutputError):
        extract_json_object('[{"line_number": 1}]')


def test_non_list_error_value_is_malformed() -> None:
    with pytest.raises(MalformedOutputError, match="errors"):
        find_error_list({"errors": "many"})


@pytest.mark.parametrize(
    ("record", "line_index"),
    [
        ({"line_number": 0, "message": "m"}, 0),
        ({"line_number": -4, "message": "m"}, 0),
        ({"line_number": "7", "message": "m"}, 6),
        ({"line_number": 5.0, "message": "m"}, 4),
        ({"line_number": True, "message": "m"}, 0),
        ({"line_number": None, "line": 2, "message": "m"}, 1),
        ({"message": "m"}, 0),
    ],
)
def test_line_numbers_are_clamped_and_coerced(record: dict[str, object], line_index: int) -> None:
    assert DiagnosticEntry.from_record(parse_record(record)).line_index == line_index


def test_non_object_record_is_serialized() -> None:
    record = parse_record("row 3 is broken")

    assert record.line_number is None
    assert record.message == '"row 3 is broken"'


def test_kind_falls_back_to_kind_key() -> None:
    assert parse_record({"message": "m", "kind": "header"}).kind == "header"
