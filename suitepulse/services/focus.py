"""SuitePulse — Focus Timer Service.

Focus sessions live behind the ``tasks`` function, selected by ``action``.
"""

from datetime import date, datetime, timezone
from typing import Any, Dict, Optional

from suitepulse.config import settings
from suitepulse.core.context import RequestContext
from suitepulse.core.errors import ShapeError
from suitepulse.gateway.client import GatewayClient
from suitepulse.models.metrics_models import FocusSummary
from suitepulse.models.service_models import (
    EndSessionRequest,
    FocusSession,
    FocusSessionsResponse,
    StartSessionRequest,
)

PERIODS = ("1d", "7d", "30d")


async def _call(gateway: GatewayClient, action: str, session_data: Dict[str, Any]) -> Any:
    result = await gateway.invoke(
        "tasks", {"action": action, "session_data": session_data}
    )
    if not isinstance(result, dict) or "data" not in result:
        raise ShapeError(f"Focus action {action} returned no data envelope")
    return result["data"]


async def start_session(
    gateway: GatewayClient, request: StartSessionRequest
) -> FocusSession:
    data = await _call(gateway, "start_session", request.model_dump(exclude_none=True))
    return FocusSession.model_validate(data["session"])


async def end_session(gateway: GatewayClient, request: EndSessionRequest) -> FocusSession:
    data = await _call(gateway, "end_session", request.model_dump(exclude_none=True))
    return FocusSession.model_validate(data["session"])


async def get_active_session(gateway: GatewayClient) -> Optional[FocusSession]:
    data = await _call(gateway, "get_active_session", {})
    session = data.get("session")
    return FocusSession.model_validate(session) if session else None


async def get_sessions(
    gateway: GatewayClient, period: str = "7d"
) -> FocusSessionsResponse:
    if period not in PERIODS:
        raise ValueError(f"period must be one of {PERIODS}")
    data = await _call(gateway, "get_sessions", {"period": period})
    return FocusSessionsResponse.model_validate(data)


def _session_day(session: FocusSession) -> date:
    started = datetime.fromisoformat(session.start_time.replace("Z", "+00:00"))
    if started.tzinfo is None:
        started = started.replace(tzinfo=timezone.utc)
    return started.astimezone(timezone.utc).date()


def summarize_focus(
    response: FocusSessionsResponse, today: Optional[date] = None
) -> FocusSummary:
    """Total minutes from backend stats; today's minutes from session rows."""
    today = today or datetime.now(timezone.utc).date()
    today_minutes = sum(
        s.actual_duration or 0
        for s in response.sessions
        if _session_day(s) == today
    )
    return FocusSummary(
        total_minutes=response.stats.total_minutes,
        today_minutes=today_minutes,
        session_count=response.stats.total_sessions,
    )


async def fetch_focus_summary(
    gateway: GatewayClient, ctx: RequestContext, today: Optional[date] = None
) -> FocusSummary:
    response = await get_sessions(gateway, settings.focus_period)
    return summarize_focus(response, today)
