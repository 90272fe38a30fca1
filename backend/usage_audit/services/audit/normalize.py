"""Lenient coercion of stored counters and request parameters.

Stored summaries are advisory caches written by other tools, so any count
may be missing, a numeric-looking string, or garbage. Everything funnels
through ``to_number_or_zero`` so the fallback behavior lives in one place.
"""

import math
import re
from typing import Any

from usage_audit.models.audit import AuditSummary, ToolUsage, UsageCount

SUMMARY_TOTAL_FIELDS = (
    "totalSessions",
    "totalTokens",
    "totalInputTokens",
    "totalOutputTokens",
    "totalFiles",
)

# Plain decimal or exponent notation, plus unsigned 0x/0o/0b integer literals.
# Python-only spellings such as "1_000", "inf" or "nan" don't match.
_DECIMAL_RE = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?", re.ASCII)
_PREFIXED_INT_RE = re.compile(r"0([xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)")


def _parse_numeric_string(text: str) -> int | float | None:
    text = text.strip()
    if not text:
        return 0
    if _DECIMAL_RE.fullmatch(text):
        return float(text)
    if _PREFIXED_INT_RE.fullmatch(text):
        return int(text, 0)
    return None


def to_number_or_zero(value: Any) -> int | float:
    """Parse ``value`` as a non-negative number, falling back to 0.

    Integral results come back as ``int`` so ``"5"`` normalizes to ``5``.
    """
    if isinstance(value, bool):
        return 0

    if isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str):
        number = _parse_numeric_string(value)
        if number is None:
            return 0
    else:
        return 0

    if isinstance(number, float):
        if not math.isfinite(number):
            return 0
        if number.is_integer():
            number = int(number)

    return number if number > 0 else 0


def parse_limit(value: Any, maximum: int) -> int | None:
    """Parse a requested result count; ``None`` means no limit.

    Accepts whole numbers in ``1..maximum``. Anything else is treated as
    not provided rather than rejected.
    """
    number = to_number_or_zero(value)
    if isinstance(number, int) and 1 <= number <= maximum:
        return number
    return None


def _entry(raw: Any, key: str) -> Any:
    return raw.get(key) if isinstance(raw, dict) else None


def _normalize_tool_map(raw: Any) -> dict[str, ToolUsage]:
    if not isinstance(raw, dict):
        return {}
    return {
        str(name): ToolUsage(
            sessions=to_number_or_zero(_entry(value, "sessions")),
            tokens=to_number_or_zero(_entry(value, "tokens")),
            files=to_number_or_zero(_entry(value, "files")),
        )
        for name, value in raw.items()
    }


def _normalize_count_map(raw: Any) -> dict[str, UsageCount]:
    if not isinstance(raw, dict):
        return {}
    return {
        str(name): UsageCount(
            sessions=to_number_or_zero(_entry(value, "sessions")),
            tokens=to_number_or_zero(_entry(value, "tokens")),
        )
        for name, value in raw.items()
    }


def normalize_summary(raw: Any) -> AuditSummary:
    """Turn a possibly partial stored summary into an ``AuditSummary``."""
    return AuditSummary(
        total_sessions=to_number_or_zero(_entry(raw, "totalSessions")),
        total_tokens=to_number_or_zero(_entry(raw, "totalTokens")),
        total_input_tokens=to_number_or_zero(_entry(raw, "totalInputTokens")),
        total_output_tokens=to_number_or_zero(_entry(raw, "totalOutputTokens")),
        total_files=to_number_or_zero(_entry(raw, "totalFiles")),
        by_tool=_normalize_tool_map(_entry(raw, "byTool")),
        by_model=_normalize_count_map(_entry(raw, "byModel")),
        by_user=_normalize_count_map(_entry(raw, "byUser")),
    )
