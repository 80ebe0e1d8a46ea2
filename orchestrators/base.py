# ============================================================================
# ORCHESTRATOR QUERY PORT
# ============================================================================
# EPOCH: 1 - RESOURCE GRAPH
# STATUS: Orchestrators - Abstract query interface
# PURPOSE: The read-only capability the graph engine is written against
# CREATED: 19 OCT 2026
# ============================================================================
"""
Orchestrator Query Port

Abstract base class for orchestrator adapters plus the error taxonomy
shared by adapters and the engine.

Every operation raises UpstreamError on transport, auth or decoding
failure. Nothing here retries; retry policy belongs to the transport
an adapter wraps (e.g. botocore's retry config).

Adapters:
- orchestrators.ecs.EcsQueryPort (container orchestration, boto3)
- orchestrators.mesos.MesosQueryPort (cluster manager state snapshot, httpx)
"""

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator, List, Optional, Sequence, TypeVar

from core.contracts import (
    NodeRef,
    NodeDetail,
    TaskRef,
    TaskDetail,
    TaskTemplate,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


# ============================================================================
# ERRORS
# ============================================================================

class ResourceGraphError(Exception):
    """Base exception for a failed graph computation."""

    def __init__(self, message: str, operation: str = None, entity_id: str = None):
        self.operation = operation
        self.entity_id = entity_id
        super().__init__(message)


class UpstreamError(ResourceGraphError):
    """Failure reaching, authenticating to, or decoding the orchestrator."""
    pass


class ConsistencyError(ResourceGraphError):
    """An internal defensive check on upstream data failed."""
    pass


# ============================================================================
# HELPERS
# ============================================================================

def chunked(items: Sequence[T], size: int) -> Iterator[List[T]]:
    """
    Yield consecutive slices of at most `size` items.

    Raises:
        ValueError: If size is not positive
    """
    if size <= 0:
        raise ValueError(f"chunk size must be positive (got {size})")
    for start in range(0, len(items), size):
        yield list(items[start:start + size])


# ============================================================================
# PORT
# ============================================================================

class OrchestratorQueryPort(ABC):
    """
    Read-only view of one orchestrator.

    `cluster` is the orchestrator identifier (ECS cluster name/ARN,
    Mesos master host:port), already resolved from the public name.

    List operations follow pagination to completion before returning.
    Describe operations accept at most `describe_batch_limit` refs per
    call; callers are responsible for chunking.
    """

    name: str = "abstract"
    describe_batch_limit: int = 100

    # False when template ids name live, mutable state rather than an
    # immutable definition; the engine then skips the shared cache
    templates_immutable: bool = True

    @abstractmethod
    def list_nodes(self, cluster: str) -> List[NodeRef]:
        """Every node registered with the cluster."""

    @abstractmethod
    def describe_nodes(self, cluster: str, refs: Sequence[NodeRef]) -> List[NodeDetail]:
        """Registered and remaining capacity for each ref."""

    @abstractmethod
    def list_tasks(self, cluster: str, node: NodeRef) -> List[TaskRef]:
        """Every task currently placed on `node`."""

    @abstractmethod
    def describe_tasks(self, cluster: str, refs: Sequence[TaskRef]) -> List[TaskDetail]:
        """Template linkage for each ref; result order is not guaranteed."""

    @abstractmethod
    def describe_template(self, template_id: str) -> TaskTemplate:
        """Fetch an immutable task template. Idempotent."""

    def close(self) -> None:
        """Release transport resources (no-op by default)."""

    @contextmanager
    def _upstream_context(self, operation: str, entity_id: Optional[str] = None):
        """
        Wrap an upstream call so any failure surfaces as UpstreamError.

        Errors already in the ResourceGraphError taxonomy pass through.

        Example:
            with self._upstream_context("describe_tasks", cluster):
                resp = self._client.describe_tasks(...)
        """
        try:
            yield
        except ResourceGraphError:
            raise
        except Exception as e:
            error_msg = f"{self.name} {operation} failed"
            if entity_id:
                error_msg += f" for {entity_id}"
            error_msg += f": {e}"
            logger.error(error_msg)
            raise UpstreamError(error_msg, operation=operation, entity_id=entity_id) from e

    def _check_batch(self, operation: str, refs: Sequence) -> None:
        if len(refs) > self.describe_batch_limit:
            raise ValueError(
                f"{operation} accepts at most {self.describe_batch_limit} refs "
                f"per call (got {len(refs)})"
            )


__all__ = [
    "ResourceGraphError",
    "UpstreamError",
    "ConsistencyError",
    "chunked",
    "OrchestratorQueryPort",
]
