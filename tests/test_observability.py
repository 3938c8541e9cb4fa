"""Tests for observability: metrics endpoint, health check, request logging middleware."""

from unittest.mock import AsyncMock, patch

import httpx

from status_monitor.api.app import create_app


class TestMetricsEndpoint:
    async def test_metrics_returns_prometheus_format(self, client):
        resp = await client.get("/metrics")
        assert resp.status_code == 200
        assert "text/plain" in resp.headers["content-type"]
        assert "sm_" in resp.text

    async def test_report_counter_incremented(self, client):
        from status_monitor.observability.metrics import REPORTS_RECEIVED_TOTAL

        before = REPORTS_RECEIVED_TOTAL._value.get()
        await client.post("/api/status", json={"device_id": "esp32-01"})
        assert REPORTS_RECEIVED_TOTAL._value.get() == before + 1

    async def test_transition_counter_incremented(self, client, clock):
        from status_monitor.observability.metrics import DEVICE_TRANSITIONS_TOTAL

        counter = DEVICE_TRANSITIONS_TOTAL.labels(to_status="offline", source="read")
        before = counter._value.get()
        await client.post("/api/status", json={"device_id": "esp32-01"})
        clock.advance(120)
        await client.get("/api/status")
        await client.get("/api/status")
        assert counter._value.get() == before + 1


class TestHealthCheck:
    async def test_health_ok(self, client):
        resp = await client.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ok"
        assert data["dependencies"]["database"]["status"] == "ok"
        assert data["dependencies"]["sweep"]["status"] == "disabled"

    async def test_health_degraded_when_db_down(self, client):
        with patch("status_monitor.api.routes.health._check_db", new_callable=AsyncMock) as mock_db:
            mock_db.return_value = {"status": "error", "error": "Connection refused"}

            resp = await client.get("/health")
            assert resp.status_code == 503
            assert resp.json()["status"] == "degraded"

    async def test_health_degraded_when_sweep_stopped(self, service, test_settings):
        test_settings.sweep_enabled = True
        app = create_app(service=service)
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
            resp = await c.get("/health")

        assert resp.status_code == 503
        assert resp.json()["dependencies"]["sweep"]["status"] == "error"

    async def test_health_ok_when_sweep_running(self, service, test_settings):
        test_settings.sweep_enabled = True
        app = create_app(service=service)
        app.state.sweep_scheduler.start()
        try:
            transport = httpx.ASGITransport(app=app)
            async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
                resp = await c.get("/health")
        finally:
            await app.state.sweep_scheduler.stop()

        assert resp.status_code == 200
        sweep = resp.json()["dependencies"]["sweep"]
        assert sweep["status"] == "ok"
        assert sweep["interval_seconds"] == 60


class TestLifespan:
    async def test_lifespan_creates_tables_and_runs_sweep(self, tmp_path):
        from status_monitor.config import Settings

        cfg = Settings(
            database_url=f"sqlite+aiosqlite:///{tmp_path / 'lifespan.db'}",
            sweep_enabled=True,
            sweep_interval_seconds=3600,
        )
        app = create_app(cfg)
        async with app.router.lifespan_context(app):
            assert app.state.sweep_scheduler.running
            await app.state.status_service.ping()
            assert await app.state.status_service.list_devices() == []
        assert not app.state.sweep_scheduler.running


class TestRequestLoggingMiddleware:
    async def test_request_id_header_present(self, client):
        resp = await client.get("/metrics")
        assert "x-request-id" in resp.headers
        assert len(resp.headers["x-request-id"]) == 8

    async def test_metrics_use_route_template(self, client):
        await client.get("/api/devices/some-device")

        from status_monitor.observability.metrics import HTTP_REQUESTS_TOTAL

        metric_value = HTTP_REQUESTS_TOTAL.labels(
            method="GET", path="/api/devices/{device_id}", status_code="404"
        )
        assert metric_value._value.get() >= 1
