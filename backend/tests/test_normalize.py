"""Tests for lenient coercion and summary normalization."""

import math

import pytest

from usage_audit.services.audit.normalize import (
    normalize_summary,
    parse_limit,
    to_number_or_zero,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        (5, 5),
        ("5", 5),
        (" 12 ", 12),
        ("5.0", 5),
        (2.5, 2.5),
        ("2.5", 2.5),
        ("", 0),
        ("abc", 0),
        (None, 0),
        (True, 0),
        ([], 0),
        ({"a": 1}, 0),
        (math.nan, 0),
        (math.inf, 0),
        ("Infinity", 0),
        (-3, 0),
        ("-7", 0),
        ("1_000", 0),
        ("inf", 0),
        ("nan", 0),
        ("\u0665", 0),
        ("1 000", 0),
        ("0x10", 16),
        ("0b11", 3),
        ("0o7", 7),
        ("-0x10", 0),
        ("1e3", 1000),
        (".5", 0.5),
        ("+4", 4),
    ],
)
def test_to_number_or_zero(value, expected):
    assert to_number_or_zero(value) == expected


def test_to_number_or_zero_returns_int_for_integral_strings():
    result = to_number_or_zero("5")
    assert result == 5
    assert isinstance(result, int)


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, None),
        ("5", 5),
        (5, 5),
        ("1", 1),
        ("100", 100),
        ("5.0", 5),
        ("0", None),
        ("-1", None),
        ("101", None),
        ("2.5", None),
        ("ten", None),
        ("", None),
        (True, None),
        ("1_0", None),
        ("1e1", 10),
        ("0x0a", 10),
        (2.0, 2),
        (7.5, None),
        (math.inf, None),
    ],
)
def test_parse_limit(value, expected):
    assert parse_limit(value, maximum=100) == expected


def test_normalize_missing_summary_fills_zeros_and_empty_groupings(zero_summary):
    summary = normalize_summary(None)
    assert summary.model_dump(by_alias=True) == zero_summary


def test_normalize_partial_summary(zero_summary):
    summary = normalize_summary({"totalSessions": 3, "byModel": {"gpt-4": {"tokens": "12"}}})
    data = summary.model_dump(by_alias=True)

    assert data["totalSessions"] == 3
    assert data["totalTokens"] == 0
    assert data["byTool"] == {}
    assert data["byUser"] == {}
    assert data["byModel"] == {"gpt-4": {"sessions": 0, "tokens": 12}}


def test_normalize_string_counts():
    summary = normalize_summary(
        {
            "totalSessions": "5",
            "totalTokens": "100",
            "totalFiles": "not-a-number",
            "byTool": {"Cursor": {"sessions": "5", "tokens": "100", "files": "3"}},
        }
    )

    assert summary.total_sessions == 5
    assert isinstance(summary.total_sessions, int)
    assert summary.total_tokens == 100
    assert summary.total_files == 0
    assert summary.by_tool["Cursor"].files == 3


def test_normalize_tolerates_malformed_groupings():
    summary = normalize_summary(
        {"byTool": ["Cursor"], "byModel": "x", "byUser": {"dev": None, "ops": 7}}
    )

    assert summary.by_tool == {}
    assert summary.by_model == {}
    assert summary.by_user["dev"].sessions == 0
    assert summary.by_user["ops"].tokens == 0
