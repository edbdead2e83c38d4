"""SuitePulse — Task Analytics Engine.

Counts by status, completion rate, average time-to-complete and a daily
created/completed trend over the reporting window.
"""

from datetime import date, datetime
from typing import Any, Dict, List

from suitepulse.analyzer.periods import day_buckets, parse_day
from suitepulse.models.service_models import TaskRecord


def _hours_to_complete(task: TaskRecord) -> float | None:
    if not task.created_at or not task.completed_at:
        return None
    try:
        created = datetime.fromisoformat(task.created_at.replace("Z", "+00:00"))
        completed = datetime.fromisoformat(task.completed_at.replace("Z", "+00:00"))
    except ValueError:
        return None
    if completed < created:
        return None
    return (completed - created).total_seconds() / 3600


def compute_task_analytics(
    tasks: List[TaskRecord], start: date, end: date
) -> Dict[str, Any]:
    """Aggregate task rows into the task analytics payload."""
    total = len(tasks)
    by_status: Dict[str, int] = {}
    for t in tasks:
        by_status[t.status] = by_status.get(t.status, 0) + 1
    completed = by_status.get("completed", 0)

    durations = [h for h in (_hours_to_complete(t) for t in tasks) if h is not None]
    avg_hours = round(sum(durations) / len(durations), 2) if durations else 0.0

    created_per_day = day_buckets(start, end)
    completed_per_day = day_buckets(start, end)
    for t in tasks:
        created_day = parse_day(t.created_at)
        if created_day and created_day.isoformat() in created_per_day:
            created_per_day[created_day.isoformat()] += 1
        done_day = parse_day(t.completed_at) if t.status == "completed" else None
        if done_day and done_day.isoformat() in completed_per_day:
            completed_per_day[done_day.isoformat()] += 1

    trend = [
        {"date": d, "created": created_per_day[d], "completed": completed_per_day[d]}
        for d in sorted(created_per_day)
    ]

    return {
        "total": total,
        "completed": completed,
        "in_progress": by_status.get("in_progress", 0),
        "todo": by_status.get("todo", 0),
        "by_status": by_status,
        "completion_rate": round(completed / total * 100, 2) if total else 0.0,
        "total_points": sum(t.points for t in tasks if t.status == "completed"),
        "average_completion_hours": avg_hours,
        "trend": trend,
    }
