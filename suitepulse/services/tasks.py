"""SuitePulse — Task Service."""

from collections import defaultdict
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from suitepulse.analyzer.periods import parse_day
from suitepulse.core.context import RequestContext
from suitepulse.gateway.client import GatewayClient
from suitepulse.models.metrics_models import TaskSummary, TeamActivity
from suitepulse.models.service_models import CreateTaskRequest, TaskQuery, TaskRecord

DateRange = Tuple[date, date]


async def list_tasks(gateway: GatewayClient, params: TaskQuery | None = None) -> Any:
    """Fetch tasks through the ``get-tasks`` function."""
    body = params.model_dump(exclude_none=True) if params else {}
    return await gateway.invoke("get-tasks", body)


async def create_task(gateway: GatewayClient, request: CreateTaskRequest) -> Any:
    return await gateway.invoke("create-task", request.model_dump(exclude_none=True))


async def update_task(
    gateway: GatewayClient, task_id: str, updates: Dict[str, Any]
) -> Any:
    return await gateway.invoke("update-task", {"task_id": task_id, "updates": updates})


async def complete_task(gateway: GatewayClient, task_id: str) -> Any:
    return await gateway.invoke("complete-task", {"task_id": task_id})


async def delete_task(gateway: GatewayClient, task_id: str) -> Any:
    return await gateway.invoke("delete-task", {"task_id": task_id})


def _rate(done: int, total: int) -> float:
    return round(done / total * 100, 2) if total > 0 else 0.0


def _completed_in(task: TaskRecord, date_range: Optional[DateRange]) -> bool:
    """Completed, and inside the window when one is given."""
    if task.status != "completed":
        return False
    if date_range is None:
        return True
    day = parse_day(task.completed_at)
    return day is not None and date_range[0] <= day <= date_range[1]


def summarize_tasks(
    tasks: List[TaskRecord],
    user_id: Optional[str] = None,
    date_range: Optional[DateRange] = None,
) -> TaskSummary:
    """Count the owner's tasks by status and group throughput per member.

    Status counts cover only ``user_id``'s rows when it is given; ``team``
    always covers every row. With a ``date_range``, a task counts as
    completed only if it was completed inside the window.
    """
    per_user: Dict[str, List[int]] = defaultdict(lambda: [0, 0])
    for t in tasks:
        per_user[t.user_id][0] += 1
        if _completed_in(t, date_range):
            per_user[t.user_id][1] += 1

    team = [
        TeamActivity(
            user_id=uid,
            total_tasks=total,
            completed_tasks=done,
            completion_rate=_rate(done, total),
        )
        for uid, (total, done) in sorted(
            per_user.items(), key=lambda kv: (-kv[1][1], kv[0])
        )
    ]

    own = tasks if user_id is None else [t for t in tasks if t.user_id == user_id]
    return TaskSummary(
        total=len(own),
        completed=sum(1 for t in own if _completed_in(t, date_range)),
        in_progress=sum(1 for t in own if t.status == "in_progress"),
        todo=sum(1 for t in own if t.status == "todo"),
        team=team,
    )


async def fetch_task_summary(
    gateway: GatewayClient,
    ctx: RequestContext,
    date_range: Optional[DateRange] = None,
) -> TaskSummary:
    """Summarize the caller's tasks; admins also get the whole team's activity."""
    filters: Dict[str, Any] = {} if ctx.is_admin else {"user_id": ctx.user_id}
    if date_range:
        start, end = date_range
        filters["created_at"] = [
            ("gte", start.isoformat()),
            ("lte", f"{end.isoformat()}T23:59:59"),
        ]
    rows = await gateway.query(
        "tasks",
        filters,
        select="id,user_id,title,status,priority,points,created_at,completed_at",
    )
    return summarize_tasks(
        [TaskRecord.model_validate(r) for r in rows], ctx.user_id, date_range
    )
