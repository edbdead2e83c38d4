"""
Tests for the unified metrics reconciler.

Sources are replaced with in-memory fetchers so each test controls exactly
which slices succeed, fail, stall or return garbage.
"""

import asyncio
import itertools
from datetime import date

import pytest

from suitepulse.core.context import RequestContext
from suitepulse.core.errors import AuthError, BackendError, TransportError
from suitepulse.models.metrics_models import (
    FocusSummary,
    GamificationSummary,
    RevenueSummary,
    TaskSummary,
    TeamActivity,
    UnifiedMetrics,
)
from suitepulse.reconciler.reconciler import get_unified_metrics
from suitepulse.reconciler.sources import FETCHERS, Source, default_sources

CTX = RequestContext(access_token="t", user_id="u1")
NAMES = ["tasks", "revenue", "gamification", "focus"]

GOOD = {
    "tasks": TaskSummary(
        total=10,
        completed=7,
        in_progress=2,
        todo=1,
        team=[TeamActivity(user_id="u1", total_tasks=10, completed_tasks=7, completion_rate=70.0)],
    ),
    "revenue": RevenueSummary(total_revenue=1250.5, pending_revenue=300.0, transaction_count=4),
    "gamification": GamificationSummary(
        total_points=420,
        current_level=1,
        current_rank="Scout Tier 3",
        points_to_next_level=330,
        progress_to_next_level=0,
        current_streak=3,
        longest_streak=9,
    ),
    "focus": FocusSummary(total_minutes=135, today_minutes=45, session_count=3),
}

# Fields each source owns on the snapshot
SLICES = {
    "tasks": ["total_tasks", "completed_tasks", "in_progress_tasks", "todo_tasks", "team_activity"],
    "revenue": ["total_revenue", "pending_revenue"],
    "gamification": [
        "total_points",
        "current_level",
        "current_rank",
        "points_to_next_level",
        "progress_to_next_level",
        "current_streak",
        "longest_streak",
    ],
    "focus": ["total_focus_minutes", "today_focus_minutes"],
}


def returning(value):
    async def fetch(gateway, ctx):
        return value

    return fetch


def raising(error):
    async def fetch(gateway, ctx):
        raise error

    return fetch


def stalling(seconds):
    async def fetch(gateway, ctx):
        await asyncio.sleep(seconds)
        return GOOD["focus"]

    return fetch


def build(fetchers, deadline=1.0):
    sources = [Source(name, fetchers[name]) for name in NAMES]
    return asyncio.run(
        get_unified_metrics(CTX, gateway=object(), sources=sources, deadline=deadline)
    )


def all_good():
    return {name: returning(GOOD[name]) for name in NAMES}


class TestTotality:
    """Every success/failure combination yields a fully populated snapshot."""

    @pytest.mark.parametrize(
        "outcome", list(itertools.product([True, False], repeat=4))
    )
    def test_every_combination(self, outcome):
        fetchers = {
            name: returning(GOOD[name]) if ok else raising(BackendError("down", status_code=503))
            for name, ok in zip(NAMES, outcome)
        }
        snapshot = build(fetchers)

        assert isinstance(snapshot.metrics, UnifiedMetrics)
        assert set(snapshot.degraded) == set(NAMES)
        zero = UnifiedMetrics()
        for name, ok in zip(NAMES, outcome):
            assert snapshot.degraded[name] is (not ok)
            for field in SLICES[name]:
                actual = getattr(snapshot.metrics, field)
                expected = getattr(zero, field) if not ok else actual
                assert actual == expected
        if all(outcome):
            assert snapshot.error is None
            assert snapshot.errors == {}
        else:
            assert snapshot.error.startswith(f"{outcome.count(False)} of 4 sources offline")


class TestDerivedFields:
    """Composite metrics computed from reconciled slices."""

    def test_zero_total_gives_zero_completion_rate(self):
        fetchers = all_good()
        fetchers["tasks"] = returning(TaskSummary(total=0, completed=0))
        snapshot = build(fetchers)
        assert snapshot.metrics.completion_rate == 0
        assert snapshot.degraded["tasks"] is False

    def test_completion_rate_and_focus_hours(self):
        snapshot = build(all_good())
        assert snapshot.metrics.completion_rate == 70.0
        assert snapshot.metrics.focus_hours == 2.2

    def test_zero_focus_is_not_degraded(self):
        fetchers = all_good()
        fetchers["focus"] = returning(FocusSummary(total_minutes=0, today_minutes=0))
        snapshot = build(fetchers)
        assert snapshot.metrics.focus_hours == 0
        assert snapshot.degraded["focus"] is False


class TestIsolation:
    """A failing source only touches its own slice."""

    def test_independence_of_slices(self):
        baseline = build(all_good()).metrics
        for failing in NAMES:
            fetchers = all_good()
            fetchers[failing] = raising(TransportError("reset"))
            metrics = build(fetchers).metrics
            for name in NAMES:
                if name == failing:
                    continue
                for field in SLICES[name]:
                    assert getattr(metrics, field) == getattr(baseline, field)

    def test_tasks_ok_revenue_backend_error(self):
        fetchers = all_good()
        fetchers["revenue"] = raising(BackendError("Internal error", status_code=500))
        snapshot = build(fetchers)

        assert snapshot.metrics.completed_tasks == 7
        assert snapshot.metrics.completion_rate == 70
        assert snapshot.metrics.total_revenue == 0
        assert snapshot.degraded["revenue"] is True
        assert snapshot.degraded["tasks"] is False
        assert snapshot.errors == {"revenue": "backend"}

    def test_all_sources_unauthorized(self):
        fetchers = {
            name: raising(AuthError("JWT expired", status_code=401)) for name in NAMES
        }
        snapshot = build(fetchers)

        assert snapshot.metrics == UnifiedMetrics()
        assert all(snapshot.degraded.values())
        assert set(snapshot.errors.values()) == {"auth"}
        assert snapshot.is_degraded

    def test_unexpected_exception_is_contained(self):
        fetchers = all_good()
        fetchers["gamification"] = raising(RuntimeError("bug"))
        snapshot = build(fetchers)
        assert snapshot.degraded["gamification"] is True
        assert snapshot.errors["gamification"] == "error"
        assert snapshot.metrics.current_rank == "Recruit Tier 1"


class TestIdempotence:
    """Identical upstream responses produce identical metrics."""

    def test_byte_identical_metrics(self):
        first = build(all_good()).metrics.model_dump_json()
        second = build(all_good()).metrics.model_dump_json()
        assert first == second


class TestDeadline:
    """Sources that miss the aggregate deadline are timed out."""

    def test_slow_source_times_out(self):
        fetchers = all_good()
        fetchers["focus"] = stalling(5)
        snapshot = build(fetchers, deadline=0.05)

        assert snapshot.degraded["focus"] is True
        assert snapshot.errors["focus"] == "timeout"
        assert snapshot.metrics.total_focus_minutes == 0
        assert snapshot.degraded["tasks"] is False
        assert snapshot.metrics.total_tasks == 10

    def test_fast_sources_are_not_cut_off(self):
        fetchers = all_good()
        fetchers["focus"] = stalling(0.01)
        snapshot = build(fetchers, deadline=1.0)
        assert snapshot.degraded["focus"] is False
        assert snapshot.metrics.today_focus_minutes == 45


class TestShape:
    """Malformed payloads degrade the whole source."""

    def test_validation_failure_degrades_source(self):
        async def fetch(gateway, ctx):
            return TaskSummary.model_validate({"total": "lots", "completed": 1})

        fetchers = all_good()
        fetchers["tasks"] = fetch
        snapshot = build(fetchers)

        assert snapshot.degraded["tasks"] is True
        assert snapshot.errors["tasks"] == "shape"
        assert snapshot.metrics.completed_tasks == 0
        assert snapshot.metrics.completion_rate == 0

    def test_wrong_summary_type_degrades_source(self):
        fetchers = all_good()
        fetchers["revenue"] = returning(GOOD["focus"])
        snapshot = build(fetchers)

        assert snapshot.degraded["revenue"] is True
        assert snapshot.errors["revenue"] == "shape"
        assert snapshot.metrics.total_revenue == 0


class TestImmutability:
    """Snapshots cannot be changed after assembly."""

    def test_team_activity_is_a_tuple(self):
        snapshot = build(all_good())
        assert isinstance(snapshot.metrics.team_activity, tuple)
        assert snapshot.metrics.team_activity[0].completed_tasks == 7
        with pytest.raises(AttributeError):
            snapshot.metrics.team_activity.append(GOOD["tasks"].team[0])
        assert snapshot.metrics.model_dump(mode="json")["team_activity"][0]["user_id"] == "u1"


class TestDefaultSources:
    """The built-in source list and its date-range binding."""

    def test_unbounded_sources_use_plain_fetchers(self):
        sources = default_sources()
        assert [s.name for s in sources] == NAMES
        assert sources[0].fetch is FETCHERS["tasks"]

    def test_date_range_is_bound_to_tasks_only(self):
        window = (date(2026, 8, 1), date(2026, 8, 31))
        sources = {s.name: s.fetch for s in default_sources(window)}
        assert sources["tasks"].keywords == {"date_range": window}
        assert sources["revenue"] is FETCHERS["revenue"]
