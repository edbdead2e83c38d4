"""SuitePulse — Gamification Service.

Points, streaks and leaderboard. Level placement is delegated to the rank
ladder in ``services.levels``.
"""

from typing import List, Optional

from suitepulse.core.context import RequestContext
from suitepulse.gateway.client import GatewayClient
from suitepulse.models.metrics_models import GamificationSummary
from suitepulse.models.service_models import LeaderboardEntry, UserStatsRecord
from suitepulse.services.levels import RankTier, level_info, load_rank_tiers

POINTS_MAP = {
    "task_completed": 10,
    "task_created": 5,
    "invoice_created": 15,
    "expense_logged": 3,
    "client_created": 8,
    "project_completed": 25,
    "daily_login": 2,
    "focus_session_completed": 12,
}


def calculate_points(
    action: str,
    priority: Optional[str] = None,
    duration_seconds: Optional[int] = None,
) -> int:
    """Points earned for an action, with priority and long-session bonuses."""
    points = POINTS_MAP.get(action, 0)

    if action == "task_completed":
        if priority == "urgent":
            points += 5
        elif priority == "high":
            points += 3

    if action == "focus_session_completed" and duration_seconds:
        hours = duration_seconds / 3600
        if hours >= 2:
            points += 5
        elif hours >= 1:
            points += 3

    return points


async def fetch_user_stats(
    gateway: GatewayClient, ctx: RequestContext
) -> UserStatsRecord:
    """Read the caller's stats row; a missing row counts as a fresh user."""
    rows = await gateway.query("user_stats", {"user_id": ctx.user_id}, limit=1)
    if not rows:
        return UserStatsRecord(user_id=ctx.user_id or "")
    return UserStatsRecord.model_validate(rows[0])


def summarize_gamification(
    stats: UserStatsRecord, tiers: Optional[List[RankTier]] = None
) -> GamificationSummary:
    info = level_info(stats.total_points, tiers)
    return GamificationSummary(
        total_points=stats.total_points,
        current_level=info.current_level,
        current_rank=info.current_rank,
        points_to_next_level=info.points_to_next_rank,
        progress_to_next_level=info.progress_percentage,
        current_streak=stats.current_streak,
        longest_streak=stats.longest_streak,
    )


async def fetch_gamification_summary(
    gateway: GatewayClient, ctx: RequestContext
) -> GamificationSummary:
    stats = await fetch_user_stats(gateway, ctx)
    tiers = await load_rank_tiers(gateway)
    return summarize_gamification(stats, tiers)


async def get_leaderboard(gateway: GatewayClient) -> List[LeaderboardEntry]:
    """Team leaderboard from the ``get-leaderboard`` function."""
    result = await gateway.invoke("get-leaderboard")
    rows = (result or {}).get("data", {}).get("leaderboard", [])
    return [LeaderboardEntry.model_validate(r) for r in rows]
