# ============================================================================
# RESOURCE GRAPH ENGINE
# ============================================================================
# EPOCH: 1 - RESOURCE GRAPH
# STATUS: Graph - Core aggregation engine
# PURPOSE: Build the cluster -> node -> task resource tree with closed totals
# CREATED: 19 OCT 2026
# ============================================================================
"""
Resource Graph Engine

Builds one ResourceNode tree per call, against any OrchestratorQueryPort.

Pipeline (linear, fail-fast):
1. Discover nodes: list_nodes, then describe_nodes in batches. A batch
   that returns a different number of details than refs sent raises
   ConsistencyError.
2. Per node:
   a. usable = registered, used = registered - remaining (not clamped;
      a negative value means the upstream reported remaining > registered)
   b. list_tasks, describe_tasks in batches of at most 100
   c. resolve each task's template through the TemplateCache and emit
      a leaf with the template's figures
   d. append an "Unused" leaf carrying `remaining`
3. Fold node figures into the "Total" root.

The "Unused" leaf is derived from the node's own remaining counters, not
from task sums: the orchestrator's live capacity report is
authoritative and tasks are informational children. With stale
templates, task leaves plus "Unused" need not equal the node's used
figure; that gap is passed through, not normalized.

Any failure (UpstreamError, ConsistencyError, loader errors) aborts the
whole computation; no partial tree is returned.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Dict, List, Optional

from core.config.defaults import EngineDefaults
from core.contracts import (
    ROOT_NODE_NAME,
    UNUSED_NODE_NAME,
    ResourceKind,
    NodeRef,
    NodeDetail,
    TaskDetail,
    ResourceNode,
)
from core.logging import (
    LogContext,
    get_current_context,
    log_checkpoint,
    log_context,
    use_context,
)
from graph.cache import TemplateCache
from graph.policy import ResourceMappingPolicy
from orchestrators.base import (
    ConsistencyError,
    OrchestratorQueryPort,
    chunked,
)

logger = logging.getLogger(__name__)


class ResourceGraphEngine:
    """
    Resource graph aggregation over one query port.

    Args:
        port: Orchestrator query port
        cache: Shared template cache (process-wide, injected). Used only
            when the port's templates are immutable; otherwise each build
            resolves templates through its own cache
        policy: Memory field mapping for this orchestrator
        defaults: Batch limits and per-node concurrency

    With defaults.max_workers > 1 the per-node step runs on a thread
    pool; children still appear in node discovery order, and workers log
    under the caller's context.
    """

    def __init__(
        self,
        port: OrchestratorQueryPort,
        cache: TemplateCache,
        policy: ResourceMappingPolicy,
        defaults: Optional[EngineDefaults] = None,
    ):
        self._port = port
        self._cache = cache
        self._policy = policy
        self._defaults = defaults or EngineDefaults()

    @property
    def policy(self) -> ResourceMappingPolicy:
        return self._policy

    # =========================================================================
    # ENTRY POINT
    # =========================================================================

    def build(self, cluster: str) -> ResourceNode:
        """
        Compute the resource tree for `cluster`.

        Args:
            cluster: Orchestrator identifier (already resolved from its name)

        Returns:
            Root ResourceNode named "Total"

        Raises:
            UpstreamError: Query port failure
            ConsistencyError: Upstream data failed a defensive check
        """
        with log_context(cluster=cluster, operation="build_graph"):
            start_time = time.monotonic()

            cache = self._cache if self._port.templates_immutable else TemplateCache()

            details = self._discover_nodes(cluster)
            nodes = self._process_nodes(cluster, cache, details)
            root = self._fold(nodes)

            log_checkpoint("resource_graph_built", {
                "port": self._port.name,
                "policy": self._policy.name,
                "nodes": len(nodes),
                "tasks": sum(len(node.children) - 1 for node in nodes),
                "duration_ms": round((time.monotonic() - start_time) * 1000, 2),
                "template_cache": cache.stats,
            })
            return root

    # =========================================================================
    # STEP 1: DISCOVER NODES
    # =========================================================================

    def _discover_nodes(self, cluster: str) -> List[NodeDetail]:
        refs = self._port.list_nodes(cluster)
        logger.debug(f"Listed {len(refs)} nodes")

        details: List[NodeDetail] = []
        for batch in chunked(refs, self._defaults.node_describe_batch_limit):
            described = self._port.describe_nodes(cluster, batch)
            if len(described) != len(batch):
                raise ConsistencyError(
                    f"described {len(batch)} node refs but got "
                    f"{len(described)} node details back",
                    operation="describe_nodes",
                    entity_id=cluster,
                )
            details.extend(described)
        return details

    # =========================================================================
    # STEP 2: PER NODE
    # =========================================================================

    def _process_nodes(
        self,
        cluster: str,
        cache: TemplateCache,
        details: List[NodeDetail],
    ) -> List[ResourceNode]:
        workers = min(self._defaults.max_workers, len(details))
        if workers <= 1:
            return [self._process_node(cluster, cache, detail) for detail in details]

        parent = get_current_context()

        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="resource-graph")
        try:
            # map() yields in submission order and re-raises the first failure
            return list(executor.map(
                partial(self._process_node_in, parent, cluster, cache), details
            ))
        finally:
            executor.shutdown(wait=True, cancel_futures=True)

    def _process_node_in(
        self,
        parent: LogContext,
        cluster: str,
        cache: TemplateCache,
        detail: NodeDetail,
    ) -> ResourceNode:
        with use_context(parent):
            return self._process_node(cluster, cache, detail)

    def _process_node(
        self,
        cluster: str,
        cache: TemplateCache,
        detail: NodeDetail,
    ) -> ResourceNode:
        with log_context(cluster=cluster, node_id=detail.node_id):
            usable_cpu = detail.registered_of(ResourceKind.CPU)
            usable_mem = detail.registered_of(ResourceKind.MEMORY)
            remaining_cpu = detail.remaining_of(ResourceKind.CPU)
            remaining_mem = detail.remaining_of(ResourceKind.MEMORY)

            if remaining_cpu > usable_cpu or remaining_mem > usable_mem:
                logger.warning(
                    f"Node {detail.name} reports remaining > registered "
                    f"(cpu {remaining_cpu}/{usable_cpu}, memory {remaining_mem}/{usable_mem})"
                )

            children: List[ResourceNode] = []
            max_memory = 0.0
            for task in self._describe_tasks(cluster, NodeRef(node_id=detail.node_id)):
                template = cache.get(task.template_id, self._port.describe_template)
                children.append(ResourceNode(
                    name=template.name,
                    cpu=template.cpu,
                    **self._policy.task_fields(template),
                ))
                max_memory += template.memory_hard

            children.append(ResourceNode(
                name=UNUSED_NODE_NAME,
                cpu=remaining_cpu,
                **self._policy.memory_fields(remaining_mem),
            ))

            return ResourceNode(
                name=detail.name,
                children=children,
                cpu=usable_cpu - remaining_cpu,
                cpu_total=usable_cpu,
                memory_total=usable_mem,
                **self._policy.memory_fields(usable_mem - remaining_mem),
                **self._policy.max_memory_fields(max_memory),
            )

    def _describe_tasks(self, cluster: str, node: NodeRef) -> List[TaskDetail]:
        """
        Describe every task on `node`, batched to the upstream limit.

        Returns details in listing order.

        Raises:
            ConsistencyError: If a batch omits any requested task
        """
        refs = self._port.list_tasks(cluster, node)

        described: Dict[str, TaskDetail] = {}
        for batch in chunked(refs, self._defaults.task_describe_batch_limit):
            for task in self._port.describe_tasks(cluster, batch):
                described[task.task_id] = task

            missing = [ref.task_id for ref in batch if ref.task_id not in described]
            if missing:
                raise ConsistencyError(
                    f"described {len(batch)} task refs but {len(missing)} were "
                    f"not returned (first: {missing[0]})",
                    operation="describe_tasks",
                    entity_id=node.node_id,
                )

        logger.debug(f"Described {len(refs)} tasks")
        return [described[ref.task_id] for ref in refs]

    # =========================================================================
    # STEP 3: FOLD
    # =========================================================================

    def _fold(self, nodes: List[ResourceNode]) -> ResourceNode:
        memory_field = self._policy.memory_field
        return ResourceNode(
            name=ROOT_NODE_NAME,
            children=nodes,
            cpu=sum(node.cpu for node in nodes),
            cpu_total=sum(node.cpu_total for node in nodes),
            memory_total=sum(node.memory_total for node in nodes),
            **self._policy.memory_fields(sum(getattr(node, memory_field) for node in nodes)),
            **self._policy.max_memory_fields(sum(node.max_memory for node in nodes)),
        )


__all__ = [
    "ResourceGraphEngine",
]
