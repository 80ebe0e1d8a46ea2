# ============================================================================
# HEALTH CHECK PLUGINS
# ============================================================================
# EPOCH: 1 - RESOURCE GRAPH
# STATUS: Infrastructure - Health check implementations
# PURPOSE: Concrete checks for the resource graph service
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Plugins

Startup Checks (priority 10):
- process: Basic process health (always healthy if running)
- config: Environment parses into a valid configuration

Upstream Checks (priority 20):
- orchestrator: Default cluster's nodes can be listed

Application Checks (priority 40):
- template_cache: Cache size and hit rate

Import this module to register all checks:
    import health.checks
"""

from health.checks.startup import ProcessCheck, ConfigCheck
from health.checks.orchestrator import (
    OrchestratorCheck,
    TemplateCacheCheck,
    set_resource_service,
)

__all__ = [
    # Startup
    "ProcessCheck",
    "ConfigCheck",
    # Upstream
    "OrchestratorCheck",
    # Application
    "TemplateCacheCheck",
    "set_resource_service",
]
