"""SuitePulse — Unified Metrics Reconciler.

Runs the full fan-out:
  start all sources → wait under one deadline → project Ok slices →
  zero-fill Err slices → derive composites → snapshot

A failing source only degrades its own slice. Nothing raised by a source
escapes; the snapshot is always fully populated.
"""

import asyncio
import time
from typing import Any, Dict, List, Optional

from suitepulse.config import settings
from suitepulse.core.context import RequestContext
from suitepulse.core.errors import SourceTimeout, SuitePulseError
from suitepulse.core.logging import get_logger
from suitepulse.core.metric_registry import metrics_for_source
from suitepulse.gateway.client import GatewayClient
from suitepulse.models.metrics_models import MetricsSnapshot, UnifiedMetrics
from suitepulse.services.tasks import DateRange
from suitepulse.reconciler.sources import (
    Err,
    Ok,
    Source,
    SourceResult,
    default_sources,
)

logger = get_logger("reconciler")


async def _settle(source: Source, gateway: GatewayClient, ctx: RequestContext) -> SourceResult:
    """Run one source, turning its failure into ``Err``."""
    started = time.monotonic()
    try:
        data = await source.fetch(gateway, ctx)
    except SuitePulseError as e:
        return Err(str(e), e.kind)
    except ValueError as e:
        # pydantic.ValidationError is a ValueError
        return Err(f"Malformed {source.name} payload: {e}", "shape")
    except Exception as e:
        logger.exception(f"Source {source.name} failed unexpectedly: {e}")
        return Err(f"{type(e).__name__}: {e}", "error")
    logger.debug(
        f"Source {source.name} settled",
        extra={
            "source": source.name,
            "duration_ms": round((time.monotonic() - started) * 1000, 1),
        },
    )
    return Ok(data)


async def _gather(
    sources: List[Source],
    gateway: GatewayClient,
    ctx: RequestContext,
    deadline: float,
) -> Dict[str, SourceResult]:
    """Fan out to every source; anything unsettled at the deadline times out."""
    tasks = {
        s.name: asyncio.create_task(_settle(s, gateway, ctx), name=f"source:{s.name}")
        for s in sources
    }
    try:
        await asyncio.wait(tasks.values(), timeout=deadline)
    finally:
        pending = [t for t in tasks.values() if not t.done()]
        for t in pending:
            t.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    results: Dict[str, SourceResult] = {}
    for name, task in tasks.items():
        if task.cancelled():
            timeout = SourceTimeout(f"No response within {deadline}s")
            results[name] = Err(str(timeout), timeout.kind)
        else:
            results[name] = task.result()
    return results


def _project(source: str, data: Any) -> Dict[str, Any]:
    """Copy a summary's declared attributes onto unified field names."""
    return {m.name: getattr(data, m.attribute) for m in metrics_for_source(source)}


def _completion_rate(completed: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return round(completed / total * 100, 2)


def reconcile(
    sources: List[Source], results: Dict[str, SourceResult]
) -> MetricsSnapshot:
    """Assemble a snapshot from settled source results."""
    values: Dict[str, Any] = {}
    degraded: Dict[str, bool] = {}
    errors: Dict[str, str] = {}

    for source in sources:
        result = results[source.name]
        if isinstance(result, Ok):
            try:
                values.update(_project(source.name, result.data))
                degraded[source.name] = False
                continue
            except AttributeError as e:
                result = Err(f"Malformed {source.name} payload: {e}", "shape")

        degraded[source.name] = True
        errors[source.name] = result.kind
        logger.warning(
            f"Source {source.name} degraded ({result.kind}): {result.reason}",
            extra={"source": source.name},
        )

    values["completion_rate"] = _completion_rate(
        values.get("completed_tasks", 0), values.get("total_tasks", 0)
    )
    values["focus_hours"] = round(values.get("total_focus_minutes", 0) / 60, 1)

    offline = [name for name, flag in degraded.items() if flag]
    error = (
        f"{len(offline)} of {len(sources)} sources offline: {', '.join(offline)}"
        if offline
        else None
    )

    return MetricsSnapshot(
        metrics=UnifiedMetrics(**values),
        degraded=degraded,
        errors=errors,
        error=error,
    )


async def get_unified_metrics(
    ctx: RequestContext,
    gateway: Optional[GatewayClient] = None,
    sources: Optional[List[Source]] = None,
    deadline: Optional[float] = None,
    date_range: Optional[DateRange] = None,
) -> MetricsSnapshot:
    """Build one UnifiedMetrics snapshot for the caller. Never raises for
    source failures.

    ``date_range`` limits the task figures to tasks created in the window
    and completions inside it; it only applies to the default sources.
    """
    sources = sources if sources is not None else default_sources(date_range)
    deadline = deadline if deadline is not None else settings.metrics_deadline_seconds

    own_gateway = gateway is None
    gateway = gateway or GatewayClient(ctx)
    started = time.monotonic()
    try:
        results = await _gather(sources, gateway, ctx, deadline) if sources else {}
    finally:
        if own_gateway:
            await gateway.close()

    snapshot = reconcile(sources, results)
    logger.info(
        f"Unified metrics built for {ctx.user_id}: "
        f"{sum(not f for f in snapshot.degraded.values())}/{len(sources)} sources live",
        extra={"duration_ms": round((time.monotonic() - started) * 1000, 1)},
    )
    return snapshot
