"""SuitePulse — User Service."""

from typing import List, Optional

from suitepulse.core.context import RequestContext
from suitepulse.core.errors import BackendError
from suitepulse.core.logging import get_logger
from suitepulse.gateway.client import GatewayClient
from suitepulse.models.service_models import UserProfile

logger = get_logger("services.users")


async def get_profile(
    gateway: GatewayClient, ctx: RequestContext
) -> Optional[UserProfile]:
    """The caller's profile row, or None if it was never created."""
    rows = await gateway.query(
        "profiles",
        {"user_id": ctx.user_id},
        select="user_id,full_name,email,role,company,job_title",
        limit=1,
    )
    return UserProfile.model_validate(rows[0]) if rows else None


async def resolve_context(gateway: GatewayClient, ctx: RequestContext) -> RequestContext:
    """Bind the bearer token to its user id and role."""
    user = await gateway.get_user()
    bound = ctx.with_user(user["id"])
    try:
        profile = await get_profile(gateway, bound)
    except BackendError as e:
        logger.warning(f"Profile lookup failed, defaulting role: {e}")
        profile = None
    return bound if profile is None else ctx.with_user(user["id"], profile.role)


async def list_users(gateway: GatewayClient) -> List[UserProfile]:
    """All users visible to an admin, via ``user-management``."""
    result = await gateway.invoke("user-management", {"action": "list_users"})
    rows = (result or {}).get("data", [])
    return [UserProfile.model_validate(r) for r in rows]
