"""SuitePulse — Unified Metric Registry.

Defines every UnifiedMetrics field, the source that feeds it, and the
summary attribute it is projected from. Sources are listed in priority
order: when two sources declare the same target field, the later one wins.
"""

from enum import Enum
from typing import Dict, List


class MetricType(str, Enum):
    """How a metric is categorised."""

    COUNT = "count"  # Task counts, points
    CURRENCY = "currency"  # Revenue figures
    DURATION = "duration"  # Focus minutes
    RATE = "rate"  # Percentages
    STATUS = "status"  # Level, rank, streak
    COLLECTION = "collection"  # Team activity rows


class MetricDefinition:
    """Describes a single unified metric."""

    def __init__(
        self,
        name: str,
        source: str,
        metric_type: MetricType,
        attribute: str = "",
        unit: str = "",
        description: str = "",
    ):
        self.name = name
        self.source = source
        self.metric_type = metric_type
        self.attribute = attribute
        self.unit = unit
        self.description = description

    @property
    def is_composite(self) -> bool:
        """Composite metrics are derived after projection, not copied."""
        return not self.attribute

    def __repr__(self) -> str:
        return f"<Metric {self.name} ({self.source}.{self.attribute or '*'})>"


SOURCE_ORDER: List[str] = ["tasks", "revenue", "gamification", "focus"]


# ─────────────────────────────────────────────
# UNIFIED METRICS — Canonical Registry
# ─────────────────────────────────────────────

UNIFIED_METRICS: Dict[str, MetricDefinition] = {
    # Tasks
    "total_tasks": MetricDefinition(
        "total_tasks", "tasks", MetricType.COUNT, "total", "count", "All visible tasks"
    ),
    "completed_tasks": MetricDefinition(
        "completed_tasks", "tasks", MetricType.COUNT, "completed", "count", "Tasks done"
    ),
    "in_progress_tasks": MetricDefinition(
        "in_progress_tasks", "tasks", MetricType.COUNT, "in_progress", "count"
    ),
    "todo_tasks": MetricDefinition("todo_tasks", "tasks", MetricType.COUNT, "todo", "count"),
    "team_activity": MetricDefinition(
        "team_activity", "tasks", MetricType.COLLECTION, "team", "", "Per-member throughput"
    ),
    "completion_rate": MetricDefinition(
        "completion_rate", "tasks", MetricType.RATE, "", "%", "Completed / total tasks"
    ),
    # Revenue
    "total_revenue": MetricDefinition(
        "total_revenue", "revenue", MetricType.CURRENCY, "total_revenue", "currency"
    ),
    "pending_revenue": MetricDefinition(
        "pending_revenue", "revenue", MetricType.CURRENCY, "pending_revenue", "currency"
    ),
    # Gamification
    "total_points": MetricDefinition(
        "total_points", "gamification", MetricType.COUNT, "total_points", "points"
    ),
    "current_level": MetricDefinition(
        "current_level", "gamification", MetricType.STATUS, "current_level"
    ),
    "current_rank": MetricDefinition(
        "current_rank", "gamification", MetricType.STATUS, "current_rank"
    ),
    "points_to_next_level": MetricDefinition(
        "points_to_next_level",
        "gamification",
        MetricType.COUNT,
        "points_to_next_level",
        "points",
    ),
    "progress_to_next_level": MetricDefinition(
        "progress_to_next_level",
        "gamification",
        MetricType.RATE,
        "progress_to_next_level",
        "%",
    ),
    "current_streak": MetricDefinition(
        "current_streak", "gamification", MetricType.STATUS, "current_streak", "days"
    ),
    "longest_streak": MetricDefinition(
        "longest_streak", "gamification", MetricType.STATUS, "longest_streak", "days"
    ),
    # Focus
    "total_focus_minutes": MetricDefinition(
        "total_focus_minutes", "focus", MetricType.DURATION, "total_minutes", "min"
    ),
    "today_focus_minutes": MetricDefinition(
        "today_focus_minutes", "focus", MetricType.DURATION, "today_minutes", "min"
    ),
    "focus_hours": MetricDefinition(
        "focus_hours", "focus", MetricType.DURATION, "", "h", "Total focus in hours"
    ),
}


# ─────────────────────────────────────────────
# HELPERS
# ─────────────────────────────────────────────


def get_metric(name: str) -> MetricDefinition | None:
    """Look up a metric by name."""
    return UNIFIED_METRICS.get(name)


def metrics_for_source(source: str) -> list[MetricDefinition]:
    """Return the directly projected metrics fed by ``source``."""
    return [
        m
        for m in UNIFIED_METRICS.values()
        if m.source == source and not m.is_composite
    ]


def metrics_by_type(metric_type: MetricType) -> list[MetricDefinition]:
    """Return all metrics of a given type."""
    return [m for m in UNIFIED_METRICS.values() if m.metric_type == metric_type]
