"""AI usage audit endpoints.

GET  /api/v1/audit           - Tracked sessions plus the normalized summary
GET  /api/v1/audit/insights  - Averages, per-date totals and top files
POST /api/v1/audit/sessions  - Record a tracked session
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from usage_audit.core.config import Settings, get_settings
from usage_audit.models.audit import (
    AuditInsights,
    AuditReport,
    AuditSession,
    TrackUsageRequest,
)
from usage_audit.services.audit import (
    AuditService,
    UsageDataCorruptionError,
    UsageTracker,
    get_audit_service,
    get_usage_tracker,
)
from usage_audit.services.audit.normalize import parse_limit

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/audit", tags=["audit"])


def _load_failed(e: UsageDataCorruptionError) -> HTTPException:
    logger.error(f"Audit data unavailable: {e}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Failed to load audit data",
    )


@router.get("", response_model=AuditReport)
async def get_audit(
    limit: str | None = Query(
        default=None,
        description="Return only the most recent N sessions (1-100). "
        "Invalid values are ignored.",
    ),
    service: AuditService = Depends(get_audit_service),
    settings: Settings = Depends(get_settings),
) -> AuditReport:
    """Get tracked AI sessions and the usage summary."""
    try:
        return await service.get_report(parse_limit(limit, settings.report_limit_max))
    except UsageDataCorruptionError as e:
        raise _load_failed(e) from e


@router.get("/insights", response_model=AuditInsights)
async def get_audit_insights(
    service: AuditService = Depends(get_audit_service),
) -> AuditInsights:
    """Get dashboard figures derived from the retained sessions."""
    try:
        return await service.get_insights()
    except UsageDataCorruptionError as e:
        raise _load_failed(e) from e


@router.post(
    "/sessions",
    response_model=AuditSession,
    status_code=status.HTTP_201_CREATED,
)
async def track_session(
    request: TrackUsageRequest,
    tracker: UsageTracker = Depends(get_usage_tracker),
) -> AuditSession:
    """Record one AI-assisted session and update the stored summary."""
    return tracker.track(**request.model_dump())
