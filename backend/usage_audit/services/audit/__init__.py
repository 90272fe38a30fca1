# AI usage audit: store, aggregation, queries and tracking

from .audit_service import AuditService, get_audit_service
from .store import (
    InMemoryUsageStore,
    JsonFileUsageStore,
    UsageDataCorruptionError,
    UsageStore,
)
from .tracker import UsageTracker, detect_tool, get_usage_tracker

__all__ = [
    "AuditService",
    "get_audit_service",
    "InMemoryUsageStore",
    "JsonFileUsageStore",
    "UsageDataCorruptionError",
    "UsageStore",
    "UsageTracker",
    "detect_tool",
    "get_usage_tracker",
]
