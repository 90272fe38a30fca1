"""Summary aggregation over tracked sessions.

Works on the raw camelCase dicts the store holds. The writer keeps the
stored summary current with ``apply_session``; ``recompute_summary``
rebuilds it from scratch when the stored one can't be trusted.
"""

from datetime import datetime, timezone
from typing import Any, Iterable

from usage_audit.models.audit import AuditInsights, AuditSummary, FileActivity
from usage_audit.services.audit.normalize import SUMMARY_TOTAL_FIELDS, to_number_or_zero

GROUPING_FIELDS = ("byTool", "byModel", "byUser")


def empty_summary() -> dict[str, Any]:
    summary: dict[str, Any] = {key: 0 for key in SUMMARY_TOTAL_FIELDS}
    for key in GROUPING_FIELDS:
        summary[key] = {}
    return summary


def _field(raw: Any, key: str) -> Any:
    return raw.get(key) if isinstance(raw, dict) else None


def _bump(group: dict[str, Any], key: str, **increments: int | float) -> None:
    entry = group.get(key)
    if not isinstance(entry, dict):
        entry = {}
    for name, amount in increments.items():
        entry[name] = to_number_or_zero(entry.get(name)) + amount
    group[key] = entry


def session_token_total(session: Any) -> int | float:
    return to_number_or_zero(_field(_field(session, "tokens"), "total"))


def session_files(session: Any) -> list[Any]:
    files = _field(session, "files")
    return files if isinstance(files, list) else []


def apply_session(summary: dict[str, Any], session: dict[str, Any]) -> dict[str, Any]:
    """Merge one session into ``summary`` in place and return it.

    Missing counters and groupings are created, and existing counters are
    coerced first so a summary carrying strings keeps counting correctly.
    """
    for key in SUMMARY_TOTAL_FIELDS:
        summary[key] = to_number_or_zero(summary.get(key))
    for key in GROUPING_FIELDS:
        if not isinstance(summary.get(key), dict):
            summary[key] = {}

    tokens = _field(session, "tokens")
    total = session_token_total(session)
    file_count = len(session_files(session))

    summary["totalSessions"] += 1
    summary["totalTokens"] += total
    summary["totalInputTokens"] += to_number_or_zero(_field(tokens, "input"))
    summary["totalOutputTokens"] += to_number_or_zero(_field(tokens, "output"))
    summary["totalFiles"] += file_count

    tool = str(session.get("tool") or "Unknown")
    model = str(session.get("model") or "unknown")
    user_id = str(session.get("userId") or "unknown")

    _bump(summary["byTool"], tool, sessions=1, tokens=total, files=file_count)
    _bump(summary["byModel"], model, sessions=1, tokens=total)
    _bump(summary["byUser"], user_id, sessions=1, tokens=total)
    return summary


def recompute_summary(sessions: Iterable[Any]) -> dict[str, Any]:
    """Build a summary from scratch; non-dict session entries are skipped."""
    summary = empty_summary()
    for session in sessions:
        if isinstance(session, dict):
            apply_session(summary, session)
    return summary


def _session_date(session: Any) -> str | None:
    timestamp = _field(session, "timestamp")
    if not isinstance(timestamp, str) or not timestamp:
        return None
    return timestamp.split("T")[0]


def build_insights(
    sessions: list[Any],
    summary: AuditSummary,
    recent: int = 50,
    top_files: int = 20,
) -> AuditInsights:
    """Derive dashboard figures from the sessions and normalized summary.

    Averages follow the summary totals; per-date and per-file figures are
    computed from the sessions themselves.
    """
    sessions_by_date: dict[str, int] = {}
    tokens_by_date: dict[str, int | float] = {}
    file_activity: dict[str, dict[str, Any]] = {}

    for session in sessions:
        total = session_token_total(session)

        date = _session_date(session)
        if date is not None:
            sessions_by_date[date] = sessions_by_date.get(date, 0) + 1
            tokens_by_date[date] = tokens_by_date.get(date, 0) + total

        for file_info in session_files(session):
            path = _field(file_info, "path")
            if not isinstance(path, str):
                continue
            activity = file_activity.setdefault(path, {"count": 0, "total_tokens": 0})
            activity["count"] += 1
            activity["total_tokens"] += total

    # sorted() is stable, so equal counts keep first-seen order
    ranked = sorted(file_activity.items(), key=lambda item: item[1]["count"], reverse=True)

    session_count = summary.total_sessions
    return AuditInsights(
        generated_at=datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
        summary=summary,
        average_tokens_per_session=(
            summary.total_tokens / session_count if session_count > 0 else 0.0
        ),
        average_files_per_session=(
            summary.total_files / session_count if session_count > 0 else 0.0
        ),
        sessions_by_date=sessions_by_date,
        tokens_by_date=tokens_by_date,
        recent_sessions=list(reversed(sessions[-recent:])) if recent > 0 else [],
        top_files=[
            FileActivity(path=path, **stats) for path, stats in ranked[:top_files]
        ],
    )
