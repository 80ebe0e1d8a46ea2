# ============================================================================
# RESOURCE GRAPH SERVICE
# ============================================================================
# EPOCH: 1 - RESOURCE GRAPH
# STATUS: Core - Request-level orchestration of graph computations
# PURPOSE: Resolve cluster names, wire ports + engine, run one computation
# CREATED: 19 OCT 2026
# ============================================================================
"""
Resource Graph Service

Owns the process-wide pieces (configuration, template cache, the shared
ECS client) and builds a fresh engine for every request:

- ECS: one EcsQueryPort shared by all requests (boto3 clients are
  thread-safe and hold no per-computation state)
- Mesos: a new MesosQueryPort per request (it holds the snapshot)

A failed computation raises to the caller and is counted; the service
keeps serving other requests.
"""

import asyncio
import logging
import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from core.config import AppConfig, OrchestratorKind
from core.contracts import ResourceNode
from core.logging import log_context
from graph import ResourceGraphEngine, TemplateCache, policy_for, to_wire
from orchestrators import (
    EcsQueryPort,
    MesosQueryPort,
    OrchestratorQueryPort,
    ResourceGraphError,
)

logger = logging.getLogger(__name__)


class UnknownClusterError(LookupError):
    """Raised when a cluster name is not in the configured mapping."""

    def __init__(self, cluster_name: str):
        self.cluster_name = cluster_name
        super().__init__(f"Unknown cluster: {cluster_name}")


PortFactory = Callable[[], OrchestratorQueryPort]


class ResourceGraphService:
    """Service for computing cluster resource graphs."""

    def __init__(
        self,
        config: AppConfig,
        cache: Optional[TemplateCache] = None,
        port_factory: Optional[PortFactory] = None,
    ):
        """
        Initialize resource graph service.

        Args:
            config: Application configuration
            cache: Template cache (a new one if omitted)
            port_factory: Override for query port creation (tests)
        """
        self.config = config
        self.cache = cache if cache is not None else TemplateCache()
        self.policy = policy_for(config.orchestrator)
        self._port_factory = port_factory

        self._shared_port: Optional[OrchestratorQueryPort] = None
        self._port_lock = threading.Lock()

        self._stats_lock = threading.Lock()
        self._stats: Dict[str, Any] = {
            "graphs_built": 0,
            "failures": 0,
            "last_built_at": None,
            "last_error": None,
        }

    # =========================================================================
    # PORTS
    # =========================================================================

    def _port_for_request(self) -> OrchestratorQueryPort:
        if self._port_factory is not None:
            return self._port_factory()

        if self.config.orchestrator == OrchestratorKind.MESOS:
            return MesosQueryPort(defaults=self.config.defaults.mesos)

        with self._port_lock:
            if self._shared_port is None:
                self._shared_port = EcsQueryPort(
                    access_key_id=self.config.aws_access_key_id,
                    secret_access_key=self.config.aws_secret_access_key,
                    defaults=self.config.defaults.ecs,
                )
                logger.info(f"ECS query port created (region={self.config.defaults.ecs.region})")
            return self._shared_port

    # =========================================================================
    # GRAPH
    # =========================================================================

    def resolve(self, cluster_name: str) -> str:
        """
        Map a public cluster name to its orchestrator identifier.

        Raises:
            UnknownClusterError: If the name is not configured
        """
        identifier = self.config.resolve_cluster(cluster_name)
        if identifier is None:
            raise UnknownClusterError(cluster_name)
        return identifier

    def build_graph(self, cluster_name: str) -> ResourceNode:
        """
        Compute the resource tree for a named cluster (blocking).

        Raises:
            UnknownClusterError: If the name is not configured
            ResourceGraphError: If the computation fails
        """
        identifier = self.resolve(cluster_name)
        request_id = uuid.uuid4().hex[:12]

        with log_context(cluster=cluster_name, request_id=request_id):
            port = self._port_for_request()
            engine = ResourceGraphEngine(
                port,
                self.cache,
                self.policy,
                self.config.defaults.engine,
            )
            try:
                root = engine.build(identifier)
            except ResourceGraphError as e:
                logger.error(f"Resource graph for {cluster_name} failed: {e}")
                self._record(error=f"{type(e).__name__}: {e}")
                raise

            self._record()
            return root

    async def build_graph_async(self, cluster_name: str) -> ResourceNode:
        """Run build_graph in the default executor."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.build_graph, cluster_name)

    async def build_payload(self, cluster_name: str) -> Dict[str, Any]:
        """Serialized tree for the front end."""
        root = await self.build_graph_async(cluster_name)
        return to_wire(root)

    def check_reachable(self, cluster_name: Optional[str] = None) -> int:
        """
        List the nodes of a cluster without building a tree (blocking).

        Used by the orchestrator health check. Defaults to the default cluster.

        Returns:
            Number of node references the orchestrator reported
        """
        name = cluster_name or self.config.default_cluster
        identifier = self.resolve(name)
        with log_context(cluster=name, operation="check_reachable"):
            port = self._port_for_request()
            return len(port.list_nodes(identifier))

    # =========================================================================
    # STATS / LIFECYCLE
    # =========================================================================

    def _record(self, error: Optional[str] = None) -> None:
        with self._stats_lock:
            if error is None:
                self._stats["graphs_built"] += 1
                self._stats["last_built_at"] = datetime.now(timezone.utc).isoformat()
            else:
                self._stats["failures"] += 1
                self._stats["last_error"] = error

    @property
    def stats(self) -> Dict[str, Any]:
        with self._stats_lock:
            stats = dict(self._stats)
        stats["template_cache"] = self.cache.stats
        stats["orchestrator"] = self.config.orchestrator.value
        stats["policy"] = self.policy.name
        return stats

    def close(self) -> None:
        """Release the shared query port, if one was created."""
        with self._port_lock:
            if self._shared_port is not None:
                self._shared_port.close()
                self._shared_port = None


__all__ = [
    "ResourceGraphService",
    "UnknownClusterError",
    "PortFactory",
]
