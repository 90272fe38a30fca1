"""Audit query service.

Reads the usage store on every call and turns it into a report. The stored
summary is trusted as-is and only normalized, unless the service is built
with ``recompute_summary=True``.
"""

import logging

from usage_audit.core.config import Settings, get_settings
from usage_audit.models.audit import AuditInsights, AuditReport, AuditSummary
from usage_audit.services.audit.aggregator import build_insights, recompute_summary
from usage_audit.services.audit.normalize import normalize_summary, to_number_or_zero
from usage_audit.services.audit.store import JsonFileUsageStore, RawUsageData, UsageStore

logger = logging.getLogger(__name__)


class AuditService:
    """Read-only queries over the usage store."""

    def __init__(
        self,
        store: UsageStore,
        recompute_summary: bool = False,
        recent_sessions: int = 50,
        top_files: int = 20,
    ) -> None:
        self.store = store
        self.recompute_summary = recompute_summary
        self.recent_sessions = recent_sessions
        self.top_files = top_files

    @classmethod
    def from_settings(cls, store: UsageStore, settings: Settings) -> "AuditService":
        return cls(
            store,
            recompute_summary=settings.audit_recompute_summary,
            recent_sessions=settings.insights_recent_sessions,
            top_files=settings.insights_top_files,
        )

    def _summary(self, data: RawUsageData) -> AuditSummary:
        if self.recompute_summary:
            return normalize_summary(recompute_summary(data["sessions"]))
        return normalize_summary(data["summary"])

    async def get_report(self, limit: int | float | None = None) -> AuditReport:
        """Return the most recent ``limit`` sessions and the summary.

        A missing or non-positive limit returns every retained session.
        Raises ``UsageDataCorruptionError`` if the store can't be parsed.
        """
        data = self.store.load()
        sessions = data["sessions"]
        count = int(to_number_or_zero(limit))
        if count >= 1:
            sessions = sessions[-count:]

        logger.debug(f"Audit report: {len(sessions)}/{len(data['sessions'])} sessions")
        return AuditReport(sessions=sessions, summary=self._summary(data))

    async def get_insights(self) -> AuditInsights:
        """Return averages, per-date totals, recent sessions and top files."""
        data = self.store.load()
        return build_insights(
            data["sessions"],
            self._summary(data),
            recent=self.recent_sessions,
            top_files=self.top_files,
        )


def get_audit_service() -> AuditService:
    """Build the service against the configured usage file."""
    settings = get_settings()
    return AuditService.from_settings(JsonFileUsageStore(settings.usage_file), settings)
