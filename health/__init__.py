# ============================================================================
# HEALTH CHECK MODULE
# ============================================================================
# EPOCH: 1 - RESOURCE GRAPH
# STATUS: Infrastructure - Health check plugin system
# PURPOSE: Liveness, readiness and health endpoints
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Module

- /livez: Process alive (no upstream calls)
- /readyz: Configuration valid and orchestrator reachable
- /health: Every registered check

Usage:
    from health import health_router
    import health.checks  # registers the checks

    app.include_router(health_router)
"""

from health.core import (
    HealthStatus,
    HealthCheckResult,
    HealthCheckPlugin,
    HealthCheckCategory,
)
from health.registry import (
    HealthCheckRegistry,
    register_check,
    get_registry,
)
from health.executor import HealthCheckExecutor
from health.router import health_router

__all__ = [
    # Core types
    "HealthStatus",
    "HealthCheckResult",
    "HealthCheckPlugin",
    "HealthCheckCategory",
    # Registry
    "HealthCheckRegistry",
    "register_check",
    "get_registry",
    # Executor
    "HealthCheckExecutor",
    # Router
    "health_router",
]
