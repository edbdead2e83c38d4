"""SuitePulse — Reporting Period Resolution."""

from datetime import date, datetime, timedelta, timezone
from typing import Dict, List, Optional


def _validate_date(d: Optional[str]) -> Optional[date]:
    """Return the date if valid YYYY-MM-DD, else None."""
    if not d:
        return None
    try:
        return datetime.strptime(d[:10], "%Y-%m-%d").date()
    except ValueError:
        return None


def resolve_period(
    period: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    today: Optional[date] = None,
) -> tuple[date, date]:
    """Resolve period parameters into an inclusive (start, end) date pair."""
    today = today or datetime.now(timezone.utc).date()

    start = _validate_date(start_date)
    end = _validate_date(end_date)
    if start and end:
        return (start, end) if start <= end else (end, start)

    lookback = {
        "week": timedelta(days=7),
        "month": timedelta(days=30),
        "quarter": timedelta(days=91),
        "year": timedelta(days=365),
    }
    # Default: last 30 days
    return today - lookback.get(period or "month", lookback["month"]), today


def parse_day(value: Optional[str]) -> Optional[date]:
    """Date part of an ISO timestamp, or None."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    except ValueError:
        return _validate_date(value)


def day_buckets(start: date, end: date) -> Dict[str, float]:
    """Zeroed YYYY-MM-DD buckets covering [start, end]."""
    days = (end - start).days
    return {(start + timedelta(days=i)).isoformat(): 0 for i in range(days + 1)}


def bucket_series(buckets: Dict[str, float], key: str) -> List[dict]:
    """Turn buckets into a sorted chart series."""
    return [{"date": d, key: v} for d, v in sorted(buckets.items())]
