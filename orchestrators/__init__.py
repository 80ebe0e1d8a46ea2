# ============================================================================
# ORCHESTRATORS MODULE
# ============================================================================
# EPOCH: 1 - RESOURCE GRAPH
# STATUS: Orchestrators - Query port and adapters
# PURPOSE: Read-only access to orchestrator live state
# CREATED: 19 OCT 2026
# ============================================================================
"""
Orchestrators Module

- base: OrchestratorQueryPort ABC and the error taxonomy
- ecs: container orchestration adapter (boto3)
- mesos: cluster manager adapter (httpx, leader redirect)

Usage:
    from orchestrators import EcsQueryPort

    port = EcsQueryPort(access_key_id=..., secret_access_key=...)
    nodes = port.list_nodes("prod-cluster")
"""

from orchestrators.base import (
    ResourceGraphError,
    UpstreamError,
    ConsistencyError,
    chunked,
    OrchestratorQueryPort,
)
from orchestrators.ecs import EcsQueryPort
from orchestrators.mesos import MesosQueryPort

__all__ = [
    "ResourceGraphError",
    "UpstreamError",
    "ConsistencyError",
    "chunked",
    "OrchestratorQueryPort",
    "EcsQueryPort",
    "MesosQueryPort",
]
