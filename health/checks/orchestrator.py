# ============================================================================
# ORCHESTRATOR HEALTH CHECKS
# ============================================================================
# EPOCH: 1 - RESOURCE GRAPH
# STATUS: Infrastructure - Upstream and service state checks
# PURPOSE: Orchestrator reachability and template cache state
# CREATED: 19 OCT 2026
# ============================================================================
"""
Orchestrator Health Checks

- OrchestratorCheck (upstream, 20): list the default cluster's nodes
- TemplateCacheCheck (application, 40): cache size and hit rate
"""

import asyncio
import logging

from health.core import (
    HealthCheckPlugin,
    HealthCheckResult,
)
from health.registry import register_check
from orchestrators import ResourceGraphError

logger = logging.getLogger(__name__)


# Global reference to the resource service (set by main app)
_resource_service = None


def set_resource_service(service):
    """Set resource service reference for health checks."""
    global _resource_service
    _resource_service = service


@register_check(category="upstream")
class OrchestratorCheck(HealthCheckPlugin):
    """
    Orchestrator reachability.

    Lists the nodes of the default cluster. For Mesos that includes the
    leader redirect, so a stale leader pointer fails here too.
    """

    name = "orchestrator"
    timeout_seconds = 15.0
    required_for_ready = True

    async def check(self) -> HealthCheckResult:
        if _resource_service is None:
            return HealthCheckResult.unhealthy(
                message="Resource service not initialized",
            )

        cluster = _resource_service.config.default_cluster
        loop = asyncio.get_running_loop()
        try:
            node_count = await loop.run_in_executor(
                None, _resource_service.check_reachable, cluster
            )
        except ResourceGraphError as e:
            return HealthCheckResult.unhealthy(
                message=str(e),
                cluster=cluster,
                orchestrator=_resource_service.config.orchestrator.value,
            )

        if node_count == 0:
            return HealthCheckResult.degraded(
                message=f"Cluster {cluster} reports no nodes",
                cluster=cluster,
                nodes=0,
            )

        return HealthCheckResult.healthy(
            message="Orchestrator reachable",
            cluster=cluster,
            nodes=node_count,
            orchestrator=_resource_service.config.orchestrator.value,
        )


@register_check(category="application")
class TemplateCacheCheck(HealthCheckPlugin):
    """Reports template cache statistics. Never blocks readiness."""

    name = "template_cache"
    timeout_seconds = 1.0
    required_for_ready = False

    async def check(self) -> HealthCheckResult:
        if _resource_service is None:
            return HealthCheckResult.degraded(
                message="Resource service not initialized",
            )

        stats = _resource_service.cache.stats
        lookups = stats["hits"] + stats["misses"]
        hit_rate = round(stats["hits"] / lookups, 3) if lookups else None

        return HealthCheckResult.healthy(
            message=f"{stats['entries']} templates cached",
            hit_rate=hit_rate,
            **stats,
        )


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "OrchestratorCheck",
    "TemplateCacheCheck",
    "set_resource_service",
]
