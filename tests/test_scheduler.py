"""Tests for the backend connectivity probe."""

import asyncio

import httpx

from suitepulse.scheduler.jobs import ConnectionMonitor, backend_health_job, monitor, start_scheduler, scheduler


class TestConnectionMonitor:
    def test_failures_accumulate_and_reset(self):
        m = ConnectionMonitor()
        assert m.connected is None
        m.record(False)
        m.record(False)
        assert m.connected is False
        assert m.consecutive_failures == 2
        m.record(True)
        assert m.connected is True
        assert m.consecutive_failures == 0
        assert m.checked_at is not None


class TestHealthJob:
    def test_probe_updates_shared_monitor(self, backend, make_gateway):
        backend.add("GET", "/functions/v1/health-check", httpx.Response(200, json={"status": "healthy"}))
        asyncio.run(backend_health_job(make_gateway()))
        assert monitor.connected is True

        backend.add("GET", "/functions/v1/health-check", httpx.Response(503, json={}))
        asyncio.run(backend_health_job(make_gateway(max_retries=1)))
        assert monitor.connected is False

    def test_disabled_scheduler_does_not_start(self):
        start_scheduler()
        assert not scheduler.running
