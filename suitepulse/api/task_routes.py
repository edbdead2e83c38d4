"""SuitePulse — Task & Focus Routes.

Pass-through handlers for the task and focus-timer functions. The caller's
bearer token travels with the gateway, so ownership is enforced upstream.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query

from suitepulse.api.dependencies import get_gateway
from suitepulse.core.logging import get_logger
from suitepulse.gateway.client import GatewayClient
from suitepulse.models.service_models import (
    CreateTaskRequest,
    EndSessionRequest,
    StartSessionRequest,
    TaskQuery,
)
from suitepulse.services import focus, tasks

logger = get_logger("api.tasks")

router = APIRouter(tags=["Tasks"])


@router.get("/tasks")
async def get_tasks(
    status: Optional[str] = None,
    priority: Optional[str] = None,
    limit: Optional[int] = Query(None, ge=1),
    offset: Optional[int] = Query(None, ge=0),
    gateway: GatewayClient = Depends(get_gateway),
):
    query = TaskQuery(status=status, priority=priority, limit=limit, offset=offset)
    return await tasks.list_tasks(gateway, query)


@router.post("/tasks")
async def post_task(
    request: CreateTaskRequest,
    gateway: GatewayClient = Depends(get_gateway),
):
    logger.info(f"Creating task '{request.title}'", extra={"function": "create-task"})
    return await tasks.create_task(gateway, request)


@router.patch("/tasks/{task_id}")
async def patch_task(
    task_id: str,
    updates: Dict[str, Any] = Body(...),
    gateway: GatewayClient = Depends(get_gateway),
):
    return await tasks.update_task(gateway, task_id, updates)


@router.post("/tasks/{task_id}/complete")
async def post_complete(task_id: str, gateway: GatewayClient = Depends(get_gateway)):
    return await tasks.complete_task(gateway, task_id)


@router.delete("/tasks/{task_id}")
async def remove_task(task_id: str, gateway: GatewayClient = Depends(get_gateway)):
    return await tasks.delete_task(gateway, task_id)


# ── Focus timer ──


@router.get("/focus/sessions")
async def focus_sessions(
    period: str = Query("7d", pattern="^(1d|7d|30d)$"),
    gateway: GatewayClient = Depends(get_gateway),
):
    return await focus.get_sessions(gateway, period)


@router.get("/focus/active")
async def focus_active(gateway: GatewayClient = Depends(get_gateway)):
    """The running session, or ``{"session": null}``."""
    return {"session": await focus.get_active_session(gateway)}


@router.post("/focus/start")
async def focus_start(
    request: StartSessionRequest,
    gateway: GatewayClient = Depends(get_gateway),
):
    return await focus.start_session(gateway, request)


@router.post("/focus/end")
async def focus_end(
    request: EndSessionRequest,
    gateway: GatewayClient = Depends(get_gateway),
):
    return await focus.end_session(gateway, request)
