"""Tests for the usage-audit-track command."""

import pytest
from click.testing import CliRunner

from usage_audit.cli import main, parse_token_count
from usage_audit.services.audit import InMemoryUsageStore, UsageTracker


@pytest.fixture
def store(monkeypatch, tmp_path):
    store = InMemoryUsageStore()
    tracker = UsageTracker(store, default_user_id="dev", root=tmp_path)
    monkeypatch.setattr("usage_audit.cli.get_usage_tracker", lambda: tracker)
    return store


@pytest.mark.parametrize(
    "value, expected",
    [
        ("1500", 1500),
        ("1500abc", 1500),
        (" 42", 42),
        ("12.9", 12),
        ("abc", 0),
        ("", 0),
        (None, 0),
        ("-5", 0),
    ],
)
def test_parse_token_count(value, expected):
    assert parse_token_count(value) == expected


def test_track_with_flags(store):
    result = CliRunner().invoke(
        main,
        [
            "--model", "claude-3-opus",
            "--tool", "Cursor",
            "--input-tokens", "1500",
            "--output-tokens", "800",
            "--commit", "abcd",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "AI usage tracked:" in result.output
    assert "Tool: Cursor" in result.output
    assert "Tokens: 2300 (input: 1500, output: 800)" in result.output
    assert "Commit: abcd" in result.output

    session = store.data["sessions"][0]
    assert session["model"] == "claude-3-opus"
    assert session["userId"] == "dev"
    assert store.data["summary"]["byTool"]["Cursor"]["tokens"] == 2300


def test_track_with_unparseable_tokens(store):
    result = CliRunner().invoke(
        main, ["--tool", "Cursor", "--input-tokens", "lots", "--output-tokens", "7x"]
    )

    assert result.exit_code == 0, result.output
    assert store.data["sessions"][0]["tokens"] == {"input": 0, "output": 7, "total": 7}


def test_track_with_files(store, tmp_path):
    (tmp_path / "app.py").write_text("a\nb\n", encoding="utf-8")

    result = CliRunner().invoke(main, ["--tool", "Cursor", "--file", "app.py", "--file", "gone.py"])

    assert result.exit_code == 0, result.output
    assert "Files: 2" in result.output
    assert [f["lines"] for f in store.data["sessions"][0]["files"]] == [3, 0]


def test_help_does_not_track(store):
    result = CliRunner().invoke(main, ["--help"])

    assert result.exit_code == 0
    assert "--input-tokens" in result.output
    assert store.saves == 0
