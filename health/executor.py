# ============================================================================
# HEALTH CHECK EXECUTOR
# ============================================================================
# EPOCH: 1 - RESOURCE GRAPH
# STATUS: Infrastructure - Health check execution
# PURPOSE: Execute health checks with timeouts and aggregation
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Executor

Checks run one category at a time, in priority order. Checks inside a
category run concurrently, each under its own timeout. When a startup
check is unhealthy the later categories are reported as skipped.
"""

import asyncio
import logging
import time
from typing import Dict, List, Optional

from health.core import (
    HealthStatus,
    HealthCheckCategory,
    HealthCheckResult,
    HealthCheckPlugin,
    AggregatedHealthResult,
)
from health.registry import HealthCheckRegistry, get_registry

logger = logging.getLogger(__name__)


class HealthCheckExecutor:
    """Runs registered checks grouped by category."""

    def __init__(
        self,
        registry: Optional[HealthCheckRegistry] = None,
        overall_timeout: float = 30.0,
    ):
        self.registry = registry or get_registry()
        self.overall_timeout = overall_timeout

    async def execute_all(self) -> AggregatedHealthResult:
        """Execute every registered check."""
        return await self._execute(self.registry.get_checks_by_priority())

    async def execute_required(self) -> AggregatedHealthResult:
        """Execute only the checks that gate /readyz."""
        return await self._execute(self.registry.get_required_checks())

    async def execute_single(self, name: str) -> Optional[HealthCheckResult]:
        """Execute a single check by name."""
        check = self.registry.get(name)
        if check is None:
            return None
        return await self._execute_check(check)

    async def _execute(
        self,
        checks: List[HealthCheckPlugin],
    ) -> AggregatedHealthResult:
        start_time = time.monotonic()
        results: Dict[str, HealthCheckResult] = {}
        startup_failed = False

        for category, group in self._group_by_category(checks):
            elapsed = time.monotonic() - start_time
            if elapsed >= self.overall_timeout:
                logger.warning(
                    f"Health check overall timeout ({self.overall_timeout}s) exceeded"
                )
                for check in group:
                    results[check.name] = HealthCheckResult.unhealthy(
                        "Skipped: overall timeout exceeded"
                    )
                continue

            if startup_failed:
                for check in group:
                    results[check.name] = HealthCheckResult.unhealthy(
                        "Skipped: startup checks failed"
                    )
                continue

            group_results = await asyncio.gather(
                *(self._execute_check(check) for check in group)
            )
            for check, result in zip(group, group_results):
                results[check.name] = result

            if category == HealthCheckCategory.STARTUP:
                startup_failed = any(
                    r.status == HealthStatus.UNHEALTHY for r in group_results
                )

        return AggregatedHealthResult(
            status=HealthStatus.aggregate([r.status for r in results.values()]),
            checks=results,
            total_duration_ms=(time.monotonic() - start_time) * 1000,
        )

    async def _execute_check(self, check: HealthCheckPlugin) -> HealthCheckResult:
        """Execute a single check with timeout."""
        start_time = time.monotonic()

        try:
            result = await asyncio.wait_for(
                check.check(),
                timeout=check.timeout_seconds,
            )
            logger.debug(f"Health check {check.name}: {result.status.value}")

        except asyncio.TimeoutError:
            logger.warning(
                f"Health check {check.name} timed out after {check.timeout_seconds}s"
            )
            result = HealthCheckResult.unhealthy(
                f"Timeout after {check.timeout_seconds}s"
            )

        except Exception as e:
            logger.error(f"Health check {check.name} failed: {e}")
            result = HealthCheckResult.from_exception(e)

        result.duration_ms = (time.monotonic() - start_time) * 1000
        return result

    @staticmethod
    def _group_by_category(checks: List[HealthCheckPlugin]):
        """(category, checks) pairs in ascending priority order."""
        groups: Dict[HealthCheckCategory, List[HealthCheckPlugin]] = {}
        for check in sorted(checks, key=lambda c: c.priority):
            groups.setdefault(check.category, []).append(check)
        return sorted(
            groups.items(),
            key=lambda item: min(c.priority for c in item[1]),
        )


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "HealthCheckExecutor",
]
