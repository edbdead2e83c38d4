"""SuitePulse — Unified Metrics Models.

Source summaries are validated strictly: a payload that does not fit its
summary model degrades the whole source. ``UnifiedMetrics`` is the frozen
snapshot handed to consumers.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field


# ─────────────────────────────────────────────
# SOURCE SUMMARIES — One per upstream fetch
# ─────────────────────────────────────────────


class TeamActivity(BaseModel):
    """Per-member task throughput."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    total_tasks: int = 0
    completed_tasks: int = 0
    completion_rate: float = 0.0


class TaskSummary(BaseModel):
    """Task counts for the caller (and team, for admins)."""

    total: int = Field(ge=0)
    completed: int = Field(ge=0)
    in_progress: int = Field(default=0, ge=0)
    todo: int = Field(default=0, ge=0)
    team: List[TeamActivity] = []


class RevenueSummary(BaseModel):
    """Revenue totals over the caller's records."""

    total_revenue: float
    pending_revenue: float = 0.0
    transaction_count: int = 0


class GamificationSummary(BaseModel):
    """Points, level and streak for the caller."""

    total_points: int = Field(ge=0)
    current_level: int
    current_rank: str
    points_to_next_level: int = 0
    progress_to_next_level: int = 0
    current_streak: int = 0
    longest_streak: int = 0


class FocusSummary(BaseModel):
    """Focus-session minutes."""

    total_minutes: int = Field(ge=0)
    today_minutes: int = Field(ge=0)
    session_count: int = 0


# ─────────────────────────────────────────────
# SNAPSHOT — Reconciler output
# ─────────────────────────────────────────────


class UnifiedMetrics(BaseModel):
    """One immutable, fully populated metrics snapshot."""

    model_config = ConfigDict(frozen=True)

    # Tasks
    total_tasks: int = 0
    completed_tasks: int = 0
    in_progress_tasks: int = 0
    todo_tasks: int = 0
    completion_rate: float = 0.0
    team_activity: Tuple[TeamActivity, ...] = ()

    # Revenue
    total_revenue: float = 0.0
    pending_revenue: float = 0.0

    # Gamification
    total_points: int = 0
    current_level: int = 0
    current_rank: str = "Recruit Tier 1"
    points_to_next_level: int = 50
    progress_to_next_level: int = 0
    current_streak: int = 0
    longest_streak: int = 0

    # Focus
    total_focus_minutes: int = 0
    today_focus_minutes: int = 0
    focus_hours: float = 0.0


class MetricsSnapshot(BaseModel):
    """Snapshot envelope with per-source health."""

    metrics: UnifiedMetrics
    degraded: Dict[str, bool]
    errors: Dict[str, str] = {}
    error: Optional[str] = None
    generated_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    @property
    def is_degraded(self) -> bool:
        return any(self.degraded.values())
