# ============================================================================
# STARTUP HEALTH CHECKS
# ============================================================================
# EPOCH: 1 - RESOURCE GRAPH
# STATUS: Infrastructure - Startup health checks
# PURPOSE: Basic process and configuration checks
# CREATED: 19 OCT 2026
# ============================================================================
"""
Startup Health Checks

Basic checks that run first (priority 10):
- ProcessCheck: Always healthy if process is running
- ConfigCheck: Environment parses into a valid AppConfig
"""

import os
import sys
import platform
import logging

from core.config import AppConfig, ConfigurationError
from health.core import (
    HealthCheckPlugin,
    HealthCheckResult,
)
from health.registry import register_check

logger = logging.getLogger(__name__)


@register_check(category="startup")
class ProcessCheck(HealthCheckPlugin):
    """Always healthy if the check runs."""

    name = "process"
    timeout_seconds = 1.0
    required_for_ready = False

    async def check(self) -> HealthCheckResult:
        return HealthCheckResult.healthy(
            message="Process running",
            python_version=sys.version,
            platform=platform.platform(),
            pid=os.getpid(),
        )


@register_check(category="startup")
class ConfigCheck(HealthCheckPlugin):
    """
    Configuration health check.

    Re-reads the environment through AppConfig.from_env, so a malformed
    CLUSTERS value or a missing AWS key for ECS shows up here with the
    same message that would abort startup.
    """

    name = "config"
    timeout_seconds = 1.0

    async def check(self) -> HealthCheckResult:
        try:
            config = AppConfig.from_env()
        except ConfigurationError as e:
            return HealthCheckResult.unhealthy(
                message=str(e),
                orchestrator=os.environ.get("ORCHESTRATOR_KIND"),
            )

        return HealthCheckResult.healthy(
            message="Configuration valid",
            orchestrator=config.orchestrator.value,
            clusters=config.cluster_names,
            default_cluster=config.default_cluster,
        )


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ProcessCheck",
    "ConfigCheck",
]
