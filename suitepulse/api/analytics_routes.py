"""SuitePulse — Analytics Summary Routes.

Server-side summaries: validate the caller, read rows, compute derived
fields (sums, rates, daily buckets), return JSON.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from suitepulse.analyzer.finance_engine import compute_financial_summary
from suitepulse.analyzer.periods import resolve_period
from suitepulse.analyzer.revenue_engine import compute_revenue_analytics
from suitepulse.analyzer.task_engine import compute_task_analytics
from suitepulse.api.dependencies import get_gateway, get_request_context
from suitepulse.core.context import RequestContext
from suitepulse.core.logging import get_logger
from suitepulse.gateway.client import GatewayClient
from suitepulse.models.service_models import (
    ExpenseRecord,
    InvoiceRecord,
    RevenueRecord,
    TaskRecord,
)

logger = get_logger("api.analytics")

router = APIRouter(prefix="/analytics", tags=["Analytics"])

PERIOD_PATTERN = "^(week|month|quarter|year)$"


def _owner_filter(ctx: RequestContext) -> dict:
    return {} if ctx.is_admin else {"user_id": ctx.user_id}


@router.get("/tasks")
async def task_analytics(
    period: Optional[str] = Query("month", pattern=PERIOD_PATTERN),
    start_date: Optional[str] = Query(None, description="YYYY-MM-DD"),
    end_date: Optional[str] = Query(None, description="YYYY-MM-DD"),
    ctx: RequestContext = Depends(get_request_context),
    gateway: GatewayClient = Depends(get_gateway),
):
    """Task counts, completion rate and daily trend for the window."""
    start, end = resolve_period(period, start_date, end_date)
    filters = _owner_filter(ctx)
    filters["created_at"] = [("gte", start.isoformat()), ("lte", f"{end.isoformat()}T23:59:59")]
    rows = await gateway.query("tasks", filters, order="created_at.asc")
    tasks = [TaskRecord.model_validate(r) for r in rows]

    logger.info(
        f"Task analytics for {ctx.user_id}: {len(tasks)} tasks",
        extra={"endpoint": "/analytics/tasks"},
    )
    return {
        "status": "success",
        "date_range_start": start.isoformat(),
        "date_range_end": end.isoformat(),
        "tasks": compute_task_analytics(tasks, start, end),
    }


@router.get("/revenue")
async def revenue_analytics(
    period: Optional[str] = Query("month", pattern=PERIOD_PATTERN),
    start_date: Optional[str] = Query(None, description="YYYY-MM-DD"),
    end_date: Optional[str] = Query(None, description="YYYY-MM-DD"),
    ctx: RequestContext = Depends(get_request_context),
    gateway: GatewayClient = Depends(get_gateway),
):
    """Revenue totals by type and daily series for the window."""
    start, end = resolve_period(period, start_date, end_date)
    filters = _owner_filter(ctx)
    filters["transaction_date"] = [("gte", start.isoformat()), ("lte", end.isoformat())]
    rows = await gateway.query("user_revenue", filters, order="transaction_date.asc")
    records = [RevenueRecord.model_validate(r) for r in rows]

    return {
        "status": "success",
        "date_range_start": start.isoformat(),
        "date_range_end": end.isoformat(),
        "revenue": compute_revenue_analytics(records, start, end),
    }


@router.get("/finance")
async def financial_summary(
    period: Optional[str] = Query("month", pattern=PERIOD_PATTERN),
    start_date: Optional[str] = Query(None, description="YYYY-MM-DD"),
    end_date: Optional[str] = Query(None, description="YYYY-MM-DD"),
    ctx: RequestContext = Depends(get_request_context),
    gateway: GatewayClient = Depends(get_gateway),
):
    """Invoice and expense summary for the caller."""
    start, end = resolve_period(period, start_date, end_date)
    invoice_rows = await gateway.query(
        "invoices",
        {
            "user_id": ctx.user_id,
            "created_at": [("gte", start.isoformat()), ("lte", f"{end.isoformat()}T23:59:59")],
        },
    )
    expense_rows = await gateway.query(
        "expenses",
        {
            "user_id": ctx.user_id,
            "date": [("gte", start.isoformat()), ("lte", end.isoformat())],
        },
    )

    return {
        "status": "success",
        "date_range_start": start.isoformat(),
        "date_range_end": end.isoformat(),
        **compute_financial_summary(
            [InvoiceRecord.model_validate(r) for r in invoice_rows],
            [ExpenseRecord.model_validate(r) for r in expense_rows],
        ),
    }
