"""SuitePulse — Rank Tiers & Level Calculation.

Levels come from the ``rank_tiers`` table when it is readable and from the
built-in ladder otherwise.
"""

from typing import List, Optional

from pydantic import BaseModel, ValidationError

from suitepulse.core.errors import SuitePulseError
from suitepulse.core.logging import get_logger
from suitepulse.gateway.client import GatewayClient

logger = get_logger("services.levels")

LEVEL_NAMES = [
    "Recruit",
    "Scout",
    "Specialist",
    "Expert",
    "Veteran",
    "Elite",
    "Master",
    "Champion",
    "Hero",
    "Legend",
    "Mythic",
]

LEVEL_COLORS = [
    "#8B4513",
    "#696969",
    "#CD7F32",
    "#C0C0C0",
    "#FFD700",
    "#00FF00",
    "#0000FF",
    "#800080",
    "#FF69B4",
    "#FF4500",
    "#DC143C",
]

# Points required for tiers 1-3 of each level
LEVEL_THRESHOLDS = [
    (0, 50, 100),
    (200, 350, 500),
    (750, 1000, 1500),
    (2000, 2750, 3500),
    (4500, 6000, 8000),
    (10000, 13000, 16000),
    (20000, 25000, 30000),
    (37500, 45000, 55000),
    (65000, 80000, 100000),
    (125000, 155000, 200000),
    (250000, 325000, 500000),
]


class RankTier(BaseModel):
    """One step on the rank ladder."""

    level: int
    tier: int = 1
    name: str
    points_required: int
    color: str = "#FFD700"


class LevelInfo(BaseModel):
    """Where a points total sits on the ladder."""

    current_level: int
    current_tier: int
    current_rank: str
    current_points: int
    points_required: int
    next_rank: Optional[str] = None
    next_rank_points_required: Optional[int] = None
    points_to_next_rank: int = 0
    progress_percentage: int = 100
    rank_color: str = "#FFD700"
    is_max_level: bool = False


def format_level(level: int, tier: int) -> str:
    """Display name such as ``Scout Tier 2``."""
    name = LEVEL_NAMES[level] if 0 <= level < len(LEVEL_NAMES) else "Unknown"
    return f"{name} Tier {tier}"


def fallback_rank_tiers() -> List[RankTier]:
    """The built-in 33-step ladder."""
    return [
        RankTier(
            level=level,
            tier=tier,
            name=format_level(level, tier),
            points_required=points,
            color=LEVEL_COLORS[level],
        )
        for level, thresholds in enumerate(LEVEL_THRESHOLDS)
        for tier, points in enumerate(thresholds, 1)
    ]


DEFAULT_TIERS = fallback_rank_tiers()


async def load_rank_tiers(gateway: GatewayClient) -> List[RankTier]:
    """Fetch the rank ladder, falling back to the built-in one."""
    try:
        rows = await gateway.query("rank_tiers", order="points_required.asc")
        tiers = [RankTier.model_validate(r) for r in rows]
    except (SuitePulseError, ValidationError) as e:
        logger.warning(f"Failed to load rank tiers, using fallback: {e}")
        return DEFAULT_TIERS

    if not tiers:
        return DEFAULT_TIERS
    return sorted(tiers, key=lambda t: t.points_required)


def level_info(total_points: int, tiers: Optional[List[RankTier]] = None) -> LevelInfo:
    """Resolve a points total to its rank and progress toward the next one."""
    tiers = tiers or DEFAULT_TIERS

    index = 0
    for i in range(len(tiers) - 1, -1, -1):
        if total_points >= tiers[i].points_required:
            index = i
            break

    current = tiers[index]
    nxt = tiers[index + 1] if index < len(tiers) - 1 else None

    if nxt is None:
        return LevelInfo(
            current_level=current.level,
            current_tier=current.tier,
            current_rank=current.name,
            current_points=total_points,
            points_required=current.points_required,
            rank_color=current.color,
            is_max_level=True,
        )

    span = nxt.points_required - current.points_required
    into = total_points - current.points_required
    progress = min(100.0, max(0.0, into / span * 100)) if span > 0 else 100.0

    return LevelInfo(
        current_level=current.level,
        current_tier=current.tier,
        current_rank=current.name,
        current_points=total_points,
        points_required=current.points_required,
        next_rank=nxt.name,
        next_rank_points_required=nxt.points_required,
        points_to_next_rank=max(nxt.points_required - total_points, 0),
        progress_percentage=round(progress),
        rank_color=current.color,
    )
