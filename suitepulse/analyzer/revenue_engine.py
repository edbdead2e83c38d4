"""SuitePulse — Revenue Analytics Engine."""

from collections import defaultdict
from datetime import date
from typing import Any, Dict, List

from suitepulse.analyzer.periods import bucket_series, day_buckets, parse_day
from suitepulse.models.service_models import RevenueRecord
from suitepulse.services.revenue import REVENUE_TYPES


def compute_revenue_analytics(
    records: List[RevenueRecord], start: date, end: date
) -> Dict[str, Any]:
    """Totals by type, deal size and a daily revenue series."""
    confirmed = [r for r in records if r.status != "pending"]
    by_type: Dict[str, float] = defaultdict(float)
    for t in REVENUE_TYPES:
        by_type[t] = 0.0
    for r in confirmed:
        by_type[r.revenue_type if r.revenue_type in REVENUE_TYPES else "other"] += r.revenue_amount

    total = sum(r.revenue_amount for r in confirmed)
    pending = sum(r.revenue_amount for r in records if r.status == "pending")

    daily = day_buckets(start, end)
    for r in confirmed:
        day = parse_day(r.transaction_date or r.created_at)
        if day and day.isoformat() in daily:
            daily[day.isoformat()] += r.revenue_amount

    return {
        "total_revenue": round(total, 2),
        "pending_revenue": round(pending, 2),
        "by_type": {k: round(v, 2) for k, v in by_type.items()},
        "transaction_count": len(confirmed),
        "average_deal_size": round(total / len(confirmed), 2) if confirmed else 0.0,
        "series": [
            {"date": p["date"], "revenue": round(p["revenue"], 2)}
            for p in bucket_series(daily, "revenue")
        ],
    }
