"""Shared fixtures for usage audit tests."""

import copy
import json

import pytest
from fastapi.testclient import TestClient

from usage_audit.main import app
from usage_audit.services.audit import (
    AuditService,
    JsonFileUsageStore,
    UsageTracker,
    get_audit_service,
    get_usage_tracker,
)

SAMPLE_USAGE = {
    "sessions": [
        {
            "id": "session-1",
            "timestamp": "2025-01-01T00:00:00.000Z",
            "tool": "Cursor",
            "model": "claude-3-opus",
            "tokens": {"input": 10, "output": 5, "total": 15},
            "files": [
                {
                    "path": "src/test.ts",
                    "lines": 10,
                    "size": 100,
                    "modified": "2025-01-01T00:00:00.000Z",
                },
            ],
            "commit": "abcd",
            "branch": "main",
            "userId": "developer",
            "prompt": None,
        },
        {
            "id": "session-2",
            "timestamp": "2025-01-02T00:00:00.000Z",
            "tool": "Cursor",
            "model": "claude-3-opus",
            "tokens": {"input": 20, "output": 10, "total": 30},
            "files": [
                {
                    "path": "src/other.ts",
                    "lines": 20,
                    "size": 200,
                    "modified": "2025-01-02T00:00:00.000Z",
                },
            ],
            "commit": "efgh",
            "branch": "main",
            "userId": "developer",
            "prompt": "Prompt",
        },
    ],
    "summary": {
        "totalSessions": 2,
        "totalTokens": 45,
        "totalInputTokens": 30,
        "totalOutputTokens": 15,
        "totalFiles": 2,
        "byTool": {"Cursor": {"sessions": 2, "tokens": 45, "files": 2}},
        "byModel": {"claude-3-opus": {"sessions": 2, "tokens": 45}},
        "byUser": {"developer": {"sessions": 2, "tokens": 45}},
    },
}

ZERO_SUMMARY = {
    "totalSessions": 0,
    "totalTokens": 0,
    "totalInputTokens": 0,
    "totalOutputTokens": 0,
    "totalFiles": 0,
    "byTool": {},
    "byModel": {},
    "byUser": {},
}


@pytest.fixture
def sample_usage():
    """Two Cursor sessions with a matching stored summary."""
    return copy.deepcopy(SAMPLE_USAGE)


@pytest.fixture
def zero_summary():
    """Normalized summary of an empty store."""
    return copy.deepcopy(ZERO_SUMMARY)


@pytest.fixture
def usage_file(tmp_path):
    """Path of a usage store inside a temp directory (not created yet)."""
    return tmp_path / ".ai-usage" / "usage.json"


@pytest.fixture
def write_usage(usage_file):
    """Write raw text or a JSON-serializable value to the usage file."""

    def _write(content):
        usage_file.parent.mkdir(parents=True, exist_ok=True)
        text = content if isinstance(content, str) else json.dumps(content)
        usage_file.write_text(text, encoding="utf-8")
        return usage_file

    return _write


@pytest.fixture
def client(usage_file, tmp_path, monkeypatch):
    """TestClient whose audit service and tracker use the temp usage file."""
    for marker in (
        "CURSOR_SESSION_ID",
        "CURSOR_VERSION",
        "CLAUDE_SESSION_ID",
        "ANTHROPIC_API_KEY",
        "GITHUB_COPILOT",
        "COPILOT_SESSION",
    ):
        monkeypatch.delenv(marker, raising=False)

    store = JsonFileUsageStore(usage_file)
    tracker = UsageTracker(store, default_user_id="tester", root=tmp_path)
    app.dependency_overrides[get_audit_service] = lambda: AuditService(store)
    app.dependency_overrides[get_usage_tracker] = lambda: tracker
    yield TestClient(app)
    app.dependency_overrides.clear()
