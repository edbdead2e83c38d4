"""SuitePulse — Unified Metrics Routes."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from suitepulse.analyzer.periods import parse_day, resolve_period
from suitepulse.api.dependencies import get_gateway, get_request_context
from suitepulse.core.context import RequestContext
from suitepulse.core.metric_registry import UNIFIED_METRICS, MetricType, metrics_by_type
from suitepulse.gateway.client import GatewayClient
from suitepulse.models.metrics_models import MetricsSnapshot
from suitepulse.reconciler.reconciler import get_unified_metrics
from suitepulse.services.levels import RankTier, load_rank_tiers

router = APIRouter(prefix="/metrics", tags=["Metrics"])

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


@router.get("/unified", response_model=MetricsSnapshot)
async def unified_metrics(
    start_date: Optional[str] = Query(None, pattern=DATE_PATTERN, description="YYYY-MM-DD"),
    end_date: Optional[str] = Query(None, pattern=DATE_PATTERN, description="YYYY-MM-DD"),
    ctx: RequestContext = Depends(get_request_context),
    gateway: GatewayClient = Depends(get_gateway),
):
    """Build a fresh unified metrics snapshot for the caller.

    Source failures never fail the request: affected slices fall back to
    zero values and are flagged in ``degraded``. With ``start_date`` and
    ``end_date`` the task figures cover only that window.
    """
    if (start_date is None) != (end_date is None):
        raise HTTPException(
            status_code=422, detail="start_date and end_date must be given together"
        )
    if start_date and (parse_day(start_date) is None or parse_day(end_date) is None):
        raise HTTPException(status_code=422, detail="Invalid calendar date")
    date_range = resolve_period(None, start_date, end_date) if start_date else None
    return await get_unified_metrics(ctx, gateway, date_range=date_range)


@router.get("/levels", response_model=List[RankTier])
async def rank_levels(gateway: GatewayClient = Depends(get_gateway)):
    """The rank ladder used for level placement."""
    return await load_rank_tiers(gateway)


@router.get("/registry")
async def metric_registry(metric_type: Optional[MetricType] = None):
    """Describe every unified metric and the source that feeds it."""
    definitions = (
        metrics_by_type(metric_type) if metric_type else list(UNIFIED_METRICS.values())
    )
    return {
        "metrics": [
            {
                "name": m.name,
                "source": m.source,
                "type": m.metric_type.value,
                "unit": m.unit,
                "composite": m.is_composite,
                "description": m.description,
            }
            for m in definitions
        ]
    }
