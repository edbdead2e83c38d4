"""SuitePulse — Revenue Routes."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from suitepulse.api.dependencies import get_gateway, get_request_context
from suitepulse.core.context import RequestContext
from suitepulse.core.logging import get_logger
from suitepulse.gateway.client import GatewayClient
from suitepulse.models.service_models import AddRevenueRequest
from suitepulse.services import revenue

logger = get_logger("api.revenue")

router = APIRouter(prefix="/revenue", tags=["Revenue"])


@router.get("")
async def get_revenue(
    period: Optional[str] = Query(None, pattern="^(monthly|quarterly|yearly)$"),
    limit: Optional[int] = Query(None, ge=1),
    ctx: RequestContext = Depends(get_request_context),
    gateway: GatewayClient = Depends(get_gateway),
):
    records = await revenue.list_revenue(gateway, ctx, period, limit)
    return {"records": records, "summary": revenue.summarize_revenue(records)}


@router.post("")
async def post_revenue(
    request: AddRevenueRequest,
    ctx: RequestContext = Depends(get_request_context),
    gateway: GatewayClient = Depends(get_gateway),
):
    logger.info(
        f"Recording {request.revenue_type} revenue for {ctx.user_id}",
        extra={"table": "user_revenue"},
    )
    return await revenue.add_revenue(
        gateway,
        ctx,
        request.amount,
        request.revenue_type,
        date.fromisoformat(request.transaction_date) if request.transaction_date else None,
        request.status,
    )


@router.get("/targets")
async def get_targets(
    ctx: RequestContext = Depends(get_request_context),
    gateway: GatewayClient = Depends(get_gateway),
):
    """Targets with progress percent and on-track classification."""
    targets = await revenue.list_targets(gateway, ctx)
    return {
        "targets": [
            {
                **t.model_dump(),
                "progress": revenue.calculate_progress(t.achievement_amount, t.target_amount),
                **revenue.target_status(t),
            }
            for t in targets
        ]
    }
