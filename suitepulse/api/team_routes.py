"""SuitePulse — Team Routes.

Leaderboard, notifications and the admin user list.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from suitepulse.api.dependencies import get_gateway, get_request_context
from suitepulse.core.context import RequestContext
from suitepulse.gateway.client import GatewayClient
from suitepulse.services import gamification, notifications, users

router = APIRouter(tags=["Team"])


@router.get("/leaderboard")
async def leaderboard(gateway: GatewayClient = Depends(get_gateway)):
    return {"leaderboard": await gamification.get_leaderboard(gateway)}


@router.get("/gamification/points")
async def points_for_action(
    action: str,
    priority: Optional[str] = None,
    duration_seconds: Optional[int] = Query(None, ge=0),
):
    """Points an action would earn; unknown actions earn 0."""
    return {
        "action": action,
        "points": gamification.calculate_points(action, priority, duration_seconds),
    }


@router.get("/users")
async def get_users(
    ctx: RequestContext = Depends(get_request_context),
    gateway: GatewayClient = Depends(get_gateway),
):
    if not ctx.is_admin:
        raise HTTPException(status_code=403, detail="Admin role required")
    return {"users": await users.list_users(gateway)}


# ── Notifications ──


@router.get("/notifications")
async def get_notifications(
    unread_only: bool = False,
    limit: int = Query(50, ge=1, le=200),
    ctx: RequestContext = Depends(get_request_context),
    gateway: GatewayClient = Depends(get_gateway),
):
    return {
        "notifications": await notifications.list_notifications(
            gateway, ctx, unread_only, limit
        )
    }


@router.get("/notifications/unread-count")
async def get_unread_count(
    ctx: RequestContext = Depends(get_request_context),
    gateway: GatewayClient = Depends(get_gateway),
):
    return {"unread": await notifications.unread_count(gateway, ctx)}


@router.post("/notifications/{notification_id}/read")
async def read_notification(
    notification_id: str,
    ctx: RequestContext = Depends(get_request_context),
    gateway: GatewayClient = Depends(get_gateway),
):
    rows = await notifications.mark_read(gateway, ctx, notification_id)
    if not rows:
        raise HTTPException(status_code=404, detail="Notification not found")
    return rows[0]
