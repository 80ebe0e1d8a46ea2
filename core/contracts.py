# ============================================================================
# CLAUDE CONTEXT - BASE CONTRACTS & ENUMS
# ============================================================================
# EPOCH: 1 - RESOURCE GRAPH
# STATUS: Foundation - Core enums and data contracts
# PURPOSE: Define the query-port payloads and the resource tree
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: ResourceKind, NodeRef, NodeDetail, TaskRef, TaskDetail,
#          TaskTemplate, ResourceNode, UNUSED_NODE_NAME, ROOT_NODE_NAME
# DEPENDENCIES: enum, pydantic
# ============================================================================
"""
Base contracts for the resource graph.

These define the data that crosses the orchestrator query port:
- References (NodeRef, TaskRef) returned by list operations
- Details (NodeDetail, TaskDetail) returned by describe operations
- Templates (TaskTemplate) holding static requests/limits

And the single output entity, ResourceNode, consumed by the front end.
"""

from enum import Enum
from typing import Dict, List, Optional
from pydantic import BaseModel, Field


ROOT_NODE_NAME = "Total"
UNUSED_NODE_NAME = "Unused"


# ============================================================================
# ENUMS
# ============================================================================

class ResourceKind(str, Enum):
    """
    Resource kinds the graph accounts for.

    Orchestrators report more kinds (ports, disk, gpus); those are
    ignored when summing registered/remaining capacity.
    """
    CPU = "CPU"
    MEMORY = "MEMORY"

    @classmethod
    def parse(cls, name: str) -> Optional["ResourceKind"]:
        """Return the kind for an upstream resource name, or None if untracked."""
        try:
            return cls(name.upper())
        except ValueError:
            return None


# ============================================================================
# QUERY PORT CONTRACTS
# ============================================================================

class NodeRef(BaseModel):
    """Opaque reference to a node (container instance ARN, slave id)."""
    node_id: str = Field(..., description="Orchestrator identifier for the node")

    model_config = {"frozen": True}


class NodeDetail(BaseModel):
    """
    Described node.

    registered/remaining are keyed by ResourceKind. A missing kind
    counts as zero.
    """
    node_id: str
    name: str = Field(..., description="Display name (host id / hostname)")
    registered: Dict[ResourceKind, float] = Field(default_factory=dict)
    remaining: Dict[ResourceKind, float] = Field(default_factory=dict)

    model_config = {"frozen": True}

    def registered_of(self, kind: ResourceKind) -> float:
        return float(self.registered.get(kind, 0.0))

    def remaining_of(self, kind: ResourceKind) -> float:
        return float(self.remaining.get(kind, 0.0))


class TaskRef(BaseModel):
    """Opaque reference to a task (task ARN, task id)."""
    task_id: str

    model_config = {"frozen": True}


class TaskDetail(BaseModel):
    """Described task - links a running task to its template."""
    task_id: str
    template_id: str = Field(..., description="Task definition ARN / template key")

    model_config = {"frozen": True}


class TaskTemplate(BaseModel):
    """
    Immutable resource request/limit definition.

    memory_soft is the reservation used for scheduling, memory_hard the
    enforced limit. Orchestrators with a single figure set both.
    """
    template_id: str
    name: str
    cpu: float = Field(default=0.0)
    memory_soft: float = Field(default=0.0)
    memory_hard: float = Field(default=0.0)

    model_config = {"frozen": True}


# ============================================================================
# OUTPUT TREE
# ============================================================================

class ResourceNode(BaseModel):
    """
    One node of the resource tree.

    Levels:
        Total (cluster) -> node -> task leaves + "Unused" leaf

    Absent figures are 0.0. Which memory field is populated depends on
    the resource mapping policy of the orchestrator (memory vs
    soft_memory/max_memory). cpu_total/memory_total are only set on the
    cluster and node levels.
    """
    name: str
    children: List["ResourceNode"] = Field(default_factory=list)

    cpu: float = 0.0
    memory: float = 0.0
    soft_memory: float = 0.0
    max_memory: float = 0.0

    cpu_total: float = 0.0
    memory_total: float = 0.0

    model_config = {"frozen": False}

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def child(self, name: str) -> Optional["ResourceNode"]:
        """First child with the given name (sibling names may collide)."""
        for node in self.children:
            if node.name == name:
                return node
        return None


ResourceNode.model_rebuild()


__all__ = [
    "ROOT_NODE_NAME",
    "UNUSED_NODE_NAME",
    "ResourceKind",
    "NodeRef",
    "NodeDetail",
    "TaskRef",
    "TaskDetail",
    "TaskTemplate",
    "ResourceNode",
]
