"""SuitePulse — Reconciler Sources.

A source is one independently fallible summary fetch. Each settles into a
``SourceResult``: ``Ok`` with its summary model or ``Err`` with a reason.
"""

from dataclasses import dataclass
from functools import partial
from typing import Awaitable, Callable, Generic, List, Optional, TypeVar, Union

from pydantic import BaseModel

from suitepulse.core.context import RequestContext
from suitepulse.core.metric_registry import SOURCE_ORDER
from suitepulse.gateway.client import GatewayClient
from suitepulse.services.focus import fetch_focus_summary
from suitepulse.services.gamification import fetch_gamification_summary
from suitepulse.services.revenue import fetch_revenue_summary
from suitepulse.services.tasks import DateRange, fetch_task_summary

T = TypeVar("T", bound=BaseModel)

Fetcher = Callable[[GatewayClient, RequestContext], Awaitable[BaseModel]]


@dataclass(frozen=True)
class Ok(Generic[T]):
    data: T


@dataclass(frozen=True)
class Err:
    reason: str
    kind: str = "error"


SourceResult = Union[Ok, Err]


@dataclass(frozen=True)
class Source:
    """A named upstream summary fetch."""

    name: str
    fetch: Fetcher


FETCHERS = {
    "tasks": fetch_task_summary,
    "revenue": fetch_revenue_summary,
    "gamification": fetch_gamification_summary,
    "focus": fetch_focus_summary,
}


def default_sources(date_range: Optional[DateRange] = None) -> List[Source]:
    """The standard sources in priority order; later ones win on overlapping
    fields. ``date_range`` narrows the task figures to a window."""
    fetchers = dict(FETCHERS)
    if date_range is not None:
        fetchers["tasks"] = partial(fetch_task_summary, date_range=date_range)
    return [Source(name, fetchers[name]) for name in SOURCE_ORDER]


DEFAULT_SOURCES: List[Source] = default_sources()
