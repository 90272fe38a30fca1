"""AI usage audit models."""

from typing import Any

from pydantic import Field

from usage_audit.models.base import BaseSchema

# Counts are integral in practice, but a stored summary may carry fractions
Count = int | float


class FileInfo(BaseSchema):
    """A file touched during a tracked session."""

    path: str
    lines: int = 0
    size: int = 0
    modified: str | None = None


class TokenCounts(BaseSchema):
    """Token usage of one session."""

    input: int = 0
    output: int = 0
    total: int = 0


class AuditSession(BaseSchema):
    """One recorded AI-assisted change event."""

    id: str
    timestamp: str
    tool: str = "Unknown"
    model: str = "unknown"
    tokens: TokenCounts = Field(default_factory=TokenCounts)
    files: list[FileInfo] = Field(default_factory=list)
    commit: str | None = None
    branch: str | None = None
    user_id: str = "unknown"
    prompt: str | None = None


class ToolUsage(BaseSchema):
    """Per-tool counters."""

    sessions: Count = 0
    tokens: Count = 0
    files: Count = 0


class UsageCount(BaseSchema):
    """Per-model and per-user counters."""

    sessions: Count = 0
    tokens: Count = 0


class AuditSummary(BaseSchema):
    """Normalized summary: every key present, every count non-negative."""

    total_sessions: Count = 0
    total_tokens: Count = 0
    total_input_tokens: Count = 0
    total_output_tokens: Count = 0
    total_files: Count = 0
    by_tool: dict[str, ToolUsage] = Field(default_factory=dict)
    by_model: dict[str, UsageCount] = Field(default_factory=dict)
    by_user: dict[str, UsageCount] = Field(default_factory=dict)


class AuditReport(BaseSchema):
    """Sessions (verbatim from the store) plus the normalized summary."""

    sessions: list[Any] = Field(default_factory=list)
    summary: AuditSummary = Field(default_factory=AuditSummary)


class FileActivity(BaseSchema):
    """How often a path appeared across sessions."""

    path: str
    count: int
    total_tokens: Count


class AuditInsights(BaseSchema):
    """Dashboard figures derived from the retained sessions."""

    generated_at: str
    summary: AuditSummary
    average_tokens_per_session: float = 0.0
    average_files_per_session: float = 0.0
    sessions_by_date: dict[str, int] = Field(default_factory=dict)
    tokens_by_date: dict[str, Count] = Field(default_factory=dict)
    recent_sessions: list[Any] = Field(default_factory=list)
    top_files: list[FileActivity] = Field(default_factory=list)


class TrackUsageRequest(BaseSchema):
    """Request to record a tracked session."""

    model: str = "unknown"
    tool: str | None = None
    input_tokens: int = Field(default=0, ge=0)
    output_tokens: int = Field(default=0, ge=0)
    files: list[str] = Field(default_factory=list)
    prompt: str | None = None
    commit: str | None = None
    branch: str | None = None
    user_id: str | None = None
