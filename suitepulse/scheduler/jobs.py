"""SuitePulse — Scheduler Jobs.

APScheduler interval job that probes backend connectivity and records the
result for the health endpoint.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from suitepulse.config import settings
from suitepulse.gateway.client import GatewayClient
from suitepulse.core.logging import get_logger

logger = get_logger("scheduler")

scheduler = AsyncIOScheduler()


@dataclass
class ConnectionMonitor:
    """Last known backend connectivity."""

    connected: Optional[bool] = None
    checked_at: Optional[str] = None
    consecutive_failures: int = 0

    def record(self, ok: bool) -> None:
        if ok and self.connected is False:
            logger.info("Backend connection restored")
        elif not ok and self.connected is not False:
            logger.warning("Backend connection lost")
        self.connected = ok
        self.checked_at = datetime.now(timezone.utc).isoformat()
        self.consecutive_failures = 0 if ok else self.consecutive_failures + 1


monitor = ConnectionMonitor()


async def backend_health_job(gateway: Optional[GatewayClient] = None):
    """Probe the backend health function once."""
    client = gateway or GatewayClient()
    try:
        monitor.record(await client.health_check())
    finally:
        if gateway is None:
            await client.close()


def start_scheduler():
    """Configure and start the scheduler."""
    if not settings.scheduler_enabled:
        logger.info("Scheduler disabled via config")
        return

    scheduler.add_job(
        backend_health_job,
        "interval",
        seconds=settings.health_probe_seconds,
        id="backend_health",
        replace_existing=True,
        next_run_time=datetime.now(timezone.utc),
    )
    scheduler.start()
    logger.info(f"Scheduler started. Backend probe every {settings.health_probe_seconds}s")


def stop_scheduler():
    """Shutdown the scheduler gracefully."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
