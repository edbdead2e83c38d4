"""SuitePulse — Notification Service."""

from datetime import datetime, timezone
from typing import List

from suitepulse.core.context import RequestContext
from suitepulse.gateway.client import GatewayClient
from suitepulse.models.service_models import NotificationRecord


async def list_notifications(
    gateway: GatewayClient,
    ctx: RequestContext,
    unread_only: bool = False,
    limit: int = 50,
) -> List[NotificationRecord]:
    filters: dict = {"user_id": ctx.user_id}
    if unread_only:
        filters["read_at"] = ("is", None)
    rows = await gateway.query(
        "notifications", filters, order="created_at.desc", limit=limit
    )
    return [NotificationRecord.model_validate(r) for r in rows]


async def mark_read(
    gateway: GatewayClient, ctx: RequestContext, notification_id: str
) -> List[NotificationRecord]:
    rows = await gateway.update(
        "notifications",
        {"read_at": datetime.now(timezone.utc).isoformat()},
        {"id": notification_id, "user_id": ctx.user_id},
    )
    return [NotificationRecord.model_validate(r) for r in rows]


async def unread_count(gateway: GatewayClient, ctx: RequestContext) -> int:
    rows = await gateway.query(
        "notifications",
        {"user_id": ctx.user_id, "read_at": ("is", None)},
        select="id",
    )
    return len(rows)
