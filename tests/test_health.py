# ============================================================================
# HEALTH CHECK TESTS
# ============================================================================
# EPOCH: 1 - RESOURCE GRAPH
# STATUS: Tests - Health endpoints and check plugins
# PURPOSE: Verify readiness gating on config and orchestrator reachability
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Tests

Run with:
    pytest tests/test_health.py -v
"""

import asyncio
import pytest

from fastapi import FastAPI
from fastapi.testclient import TestClient

import health.checks
from health import (
    HealthCheckExecutor,
    HealthCheckPlugin,
    HealthCheckRegistry,
    HealthCheckResult,
    HealthStatus,
    health_router,
)
from health.checks import set_resource_service
from orchestrators import UpstreamError
from services import ResourceGraphService


@pytest.fixture
def env(monkeypatch):
    monkeypatch.setenv("ORCHESTRATOR_KIND", "mesos")
    monkeypatch.setenv("CLUSTERS", "prod=mesos-prod:5050,staging=mesos-staging:5050")
    monkeypatch.delenv("DEFAULT_CLUSTER", raising=False)
    return monkeypatch


@pytest.fixture
def service(mesos_config, scenario_port):
    service = ResourceGraphService(mesos_config, port_factory=lambda: scenario_port)
    set_resource_service(service)
    yield service
    set_resource_service(None)


@pytest.fixture
def client():
    app = FastAPI()
    app.include_router(health_router)
    return TestClient(app)


# ============================================================================
# ENDPOINTS
# ============================================================================

class TestEndpoints:

    def test_livez(self, client):
        resp = client.get("/livez")
        assert resp.status_code == 200
        assert resp.json()["status"] == "alive"

    def test_readyz_ready(self, client, env, service):
        resp = client.get("/readyz")

        assert resp.status_code == 200
        assert resp.json()["status"] == "ready"

    def test_readyz_orchestrator_down(self, client, env, service, scenario_port):
        scenario_port.fail_on["list_nodes"] = UpstreamError("mesos unreachable")

        resp = client.get("/readyz")

        assert resp.status_code == 503
        body = resp.json()
        assert body["status"] == "not_ready"
        assert body["checks"]["orchestrator"]["message"] == "mesos unreachable"

    def test_readyz_bad_config_skips_orchestrator(self, client, env, service, scenario_port):
        env.delenv("CLUSTERS")

        resp = client.get("/readyz")

        assert resp.status_code == 503
        checks = resp.json()["checks"]
        assert "CLUSTERS" in checks["config"]["message"]
        assert checks["orchestrator"]["message"] == "Skipped: startup checks failed"
        assert scenario_port.calls["list_nodes"] == []

    def test_health_full(self, client, env, service):
        resp = client.get("/health")

        assert resp.status_code == 200
        body = resp.json()
        assert set(body["checks"]) >= {"process", "config", "orchestrator", "template_cache"}
        assert body["checks"]["orchestrator"]["details"]["nodes"] == 1
        assert body["summary"]["upstream"] == {"healthy": 1, "degraded": 0, "unhealthy": 0}

    def test_single_check(self, client, env, service):
        resp = client.get("/health/template_cache")
        assert resp.status_code == 200
        assert resp.json()["details"]["entries"] == 0

    def test_unknown_check_404(self, client):
        assert client.get("/health/nope").status_code == 404


# ============================================================================
# CHECKS
# ============================================================================

class TestOrchestratorCheck:

    def test_uninitialized(self):
        set_resource_service(None)
        result = asyncio.run(health.checks.OrchestratorCheck().check())
        assert result.status == HealthStatus.UNHEALTHY

    def test_empty_cluster_degraded(self, mesos_config, port):
        set_resource_service(ResourceGraphService(mesos_config, port_factory=lambda: port))
        try:
            result = asyncio.run(health.checks.OrchestratorCheck().check())
        finally:
            set_resource_service(None)

        assert result.status == HealthStatus.DEGRADED


class TestExecutor:

    def test_timeout_reported_unhealthy(self):
        class SlowCheck(HealthCheckPlugin):
            name = "slow"
            timeout_seconds = 0.01

            async def check(self) -> HealthCheckResult:
                await asyncio.sleep(1)
                return HealthCheckResult.healthy()

        registry = HealthCheckRegistry()
        registry.register(SlowCheck())

        result = asyncio.run(HealthCheckExecutor(registry=registry).execute_all())

        assert result.status == HealthStatus.UNHEALTHY
        assert "Timeout" in result.checks["slow"].message

    def test_exception_reported_unhealthy(self):
        class BrokenCheck(HealthCheckPlugin):
            name = "broken"

            async def check(self) -> HealthCheckResult:
                raise RuntimeError("boom")

        registry = HealthCheckRegistry()
        registry.register(BrokenCheck())

        result = asyncio.run(HealthCheckExecutor(registry=registry).execute_all())

        assert result.checks["broken"].details == {"exception_type": "RuntimeError"}
