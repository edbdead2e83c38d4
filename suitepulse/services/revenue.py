"""SuitePulse — Revenue Service."""

from datetime import date
from typing import Dict, List, Optional

from suitepulse.core.context import RequestContext
from suitepulse.gateway.client import GatewayClient
from suitepulse.models.metrics_models import RevenueSummary
from suitepulse.models.service_models import RevenueRecord, RevenueTarget

REVENUE_TYPES = ["sales", "commission", "bonus", "project", "retainer", "other"]


def period_start(period: str, today: Optional[date] = None) -> Optional[date]:
    """First day of the current month / quarter / year."""
    today = today or date.today()
    if period == "monthly":
        return today.replace(day=1)
    if period == "quarterly":
        return today.replace(month=(today.month - 1) // 3 * 3 + 1, day=1)
    if period == "yearly":
        return today.replace(month=1, day=1)
    return None


async def list_revenue(
    gateway: GatewayClient,
    ctx: RequestContext,
    period: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[RevenueRecord]:
    """Read the caller's revenue rows, optionally limited to a period."""
    filters: Dict[str, object] = {"user_id": ctx.user_id}
    start = period_start(period) if period else None
    if start:
        filters["transaction_date"] = ("gte", start.isoformat())
    rows = await gateway.query(
        "user_revenue", filters, order="transaction_date.desc", limit=limit
    )
    return [RevenueRecord.model_validate(r) for r in rows]


def summarize_revenue(records: List[RevenueRecord]) -> RevenueSummary:
    """Total confirmed and pending revenue."""
    total = sum(r.revenue_amount for r in records if r.status != "pending")
    pending = sum(r.revenue_amount for r in records if r.status == "pending")
    return RevenueSummary(
        total_revenue=round(total, 2),
        pending_revenue=round(pending, 2),
        transaction_count=len(records),
    )


async def fetch_revenue_summary(
    gateway: GatewayClient, ctx: RequestContext
) -> RevenueSummary:
    return summarize_revenue(await list_revenue(gateway, ctx))


def calculate_progress(achievement: float = 0, target: float = 0) -> int:
    """Percent of target reached, capped at 100."""
    if not target:
        return 0
    return min(100, round(achievement / target * 100))


def target_status(target: RevenueTarget) -> Dict[str, str]:
    """Classify a revenue target by progress."""
    progress = calculate_progress(target.achievement_amount, target.target_amount)
    if progress >= 100:
        return {"status": "achieved", "description": "Target achieved"}
    if progress >= 75:
        return {"status": "on_track", "description": "On track"}
    if progress >= 40:
        return {"status": "at_risk", "description": "At risk"}
    return {"status": "behind", "description": "Behind target"}


async def add_revenue(
    gateway: GatewayClient,
    ctx: RequestContext,
    amount: float,
    revenue_type: str = "sales",
    transaction_date: Optional[date] = None,
    status: str = "confirmed",
) -> RevenueRecord:
    """Record a revenue entry for the caller."""
    if revenue_type not in REVENUE_TYPES:
        raise ValueError(f"revenue_type must be one of {REVENUE_TYPES}")
    rows = await gateway.insert(
        "user_revenue",
        {
            "user_id": ctx.user_id,
            "revenue_amount": amount,
            "revenue_type": revenue_type,
            "status": status,
            "transaction_date": (transaction_date or date.today()).isoformat(),
        },
    )
    return RevenueRecord.model_validate(rows[0])


async def list_targets(
    gateway: GatewayClient, ctx: RequestContext
) -> List[RevenueTarget]:
    rows = await gateway.query(
        "revenue_targets", {"user_id": ctx.user_id}, order="period_start.desc"
    )
    return [RevenueTarget.model_validate(r) for r in rows]
