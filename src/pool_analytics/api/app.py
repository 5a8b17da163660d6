"""FastAPI application serving pool analytics to chart and summary panels."""

from collections.abc import Generator
from datetime import datetime, timezone
from typing import Optional

import structlog
from fastapi import Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from pool_analytics import __version__
from pool_analytics.analytics.cache import SnapshotCache
from pool_analytics.config.loader import load_config
from pool_analytics.db.engine import get_session as _get_session, init_engine
from pool_analytics.errors import (
    AnalyticsError,
    DataIntegrityError,
    EventNotFoundError,
    UpstreamUnavailableError,
)
from pool_analytics.ledger.reader import SqlLedgerReader
from pool_analytics.models import AnalyticsResponse, BucketPolicy, DataPoint, InsightSummary
from pool_analytics.service import AnalyticsService

logger = structlog.get_logger()

app = FastAPI(
    title="Pool Analytics API",
    description="Share history, momentum and insights for betting events",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Load config once at startup
config = load_config()

# Previous realtime snapshot per event, for momentum
_snapshot_cache = SnapshotCache(ttl_seconds=config.realtime.snapshot_ttl_s)

_STATUS_BY_ERROR = {
    EventNotFoundError: 404,
    DataIntegrityError: 422,
    UpstreamUnavailableError: 503,
}


def get_db() -> Generator[Session, None, None]:
    """Dependency to get DB session."""
    gen = _get_session()
    session = next(gen)
    try:
        yield session
    finally:
        try:
            next(gen)
        except StopIteration:
            pass


def get_service(session: Session = Depends(get_db)) -> AnalyticsService:
    return AnalyticsService(SqlLedgerReader(session), config, _snapshot_cache)


@app.on_event("startup")
async def startup_event():
    """Initialize database engine on startup."""
    init_engine(config.database.url)
    logger.info("Database engine initialized")


@app.exception_handler(AnalyticsError)
async def analytics_error_handler(request: Request, exc: AnalyticsError):
    status = _STATUS_BY_ERROR.get(type(exc), 500)
    logger.warning(
        "analytics_request_failed",
        path=request.url.path,
        status=status,
        error_type=type(exc).__name__,
        error=str(exc),
    )
    return JSONResponse(
        status_code=status,
        content={"detail": str(exc), "error": type(exc).__name__, "retryable": exc.retryable},
    )


# ═══════════════════════════════════════════════════════════════
# Serialisation
# ═══════════════════════════════════════════════════════════════


def _iso(ts: Optional[datetime]) -> Optional[str]:
    return ts.isoformat() if ts else None


def _point_to_dict(p: DataPoint) -> dict:
    return {
        "timestamp": _iso(p.timestamp),
        "percentages": p.percentages,
        "totalPool": p.total_pool,
        "participantCount": p.participant_count,
        "bettingVelocity": p.betting_velocity,
        "momentum": p.momentum,
    }


def _insights_to_dict(i: InsightSummary) -> dict:
    return {
        "leadingOption": i.leading_option_label,
        "leadingOptionId": i.leading_option,
        "trend": i.trend,
        "volatility": i.volatility,
        "volatilityScore": i.volatility_score,
        "peakBettingHour": i.peak_betting_hour,
        "peakBettingTime": i.peak_betting_time,
        "averageVelocity": i.average_velocity,
        "trendingOption": i.trending_option_label,
        "trendingOptionId": i.trending_option,
        "lastMajorShift": _iso(i.last_major_shift),
    }


def _response_to_dict(r: AnalyticsResponse) -> dict:
    return {
        "eventId": r.event_id,
        "title": r.title,
        "policy": r.policy.value,
        "options": [{"id": o.id, "label": o.label, "color": o.color} for o in r.options],
        "currentPercentages": r.current_percentages,
        "totalPool": r.total_pool,
        "participantCount": r.participant_count,
        "historicalData": [_point_to_dict(p) for p in r.historical_data],
        "insights": _insights_to_dict(r.insights),
    }


# ═══════════════════════════════════════════════════════════════
# Routes
# ═══════════════════════════════════════════════════════════════


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}


@app.get("/api/events/{event_id}/analytics")
async def get_event_analytics(
    event_id: str,
    policy: Optional[BucketPolicy] = Query(default=None),
    service: AnalyticsService = Depends(get_service),
):
    """Full share history, options and insights for one event."""
    result = service.compute_analytics(event_id, policy=policy)
    return _response_to_dict(result)


@app.get("/api/events/{event_id}/realtime")
async def get_realtime_snapshot(
    event_id: str,
    service: AnalyticsService = Depends(get_service),
):
    """Current shares and trailing-hour betting velocity."""
    point = service.compute_realtime_snapshot(event_id)
    return _point_to_dict(point)


@app.get("/api/events/{event_id}/insights")
async def get_event_insights(
    event_id: str,
    policy: Optional[BucketPolicy] = Query(default=None),
    service: AnalyticsService = Depends(get_service),
):
    """Insight summary only; the series is computed and discarded."""
    return _insights_to_dict(service.get_insights(event_id, policy=policy))
