# ============================================================================
# RESOURCE MAPPING POLICY
# ============================================================================
# EPOCH: 1 - RESOURCE GRAPH
# STATUS: Graph - Orchestrator-specific field mapping
# PURPOSE: Decide which memory fields a tree node carries
# CREATED: 19 OCT 2026
# ============================================================================
"""
Resource Mapping Policy

The engine is identical for every orchestrator; only the memory fields
differ:

    SINGLE_MEMORY     memory = hard limit                 (Mesos)
    SOFT_HARD_MEMORY  soft_memory = reservation,
                      max_memory = hard limit              (ECS)

With SOFT_HARD_MEMORY every node also carries max_memory, the sum of
its tasks' hard limits, and the root carries the cluster-wide sum.
"""

from dataclasses import dataclass
from typing import Dict

from core.contracts import TaskTemplate
from core.config.defaults import OrchestratorKind


@dataclass(frozen=True)
class ResourceMappingPolicy:
    """Which fields a ResourceNode's memory figures are written to."""
    name: str
    memory_field: str
    tracks_max_memory: bool

    def memory_fields(self, value: float) -> Dict[str, float]:
        """Keyword arguments placing an aggregate memory figure."""
        return {self.memory_field: value}

    def task_fields(self, template: TaskTemplate) -> Dict[str, float]:
        """Keyword arguments for a task leaf built from `template`."""
        if self.tracks_max_memory:
            return {
                self.memory_field: template.memory_soft,
                "max_memory": template.memory_hard,
            }
        return {self.memory_field: template.memory_hard}

    def max_memory_fields(self, value: float) -> Dict[str, float]:
        """max_memory for node/root levels, empty when not tracked."""
        if self.tracks_max_memory:
            return {"max_memory": value}
        return {}


SINGLE_MEMORY = ResourceMappingPolicy(
    name="single_memory",
    memory_field="memory",
    tracks_max_memory=False,
)

SOFT_HARD_MEMORY = ResourceMappingPolicy(
    name="soft_hard_memory",
    memory_field="soft_memory",
    tracks_max_memory=True,
)


def policy_for(kind: OrchestratorKind) -> ResourceMappingPolicy:
    """Mapping policy used with each orchestrator back end."""
    return {
        OrchestratorKind.ECS: SOFT_HARD_MEMORY,
        OrchestratorKind.MESOS: SINGLE_MEMORY,
    }[kind]


__all__ = [
    "ResourceMappingPolicy",
    "SINGLE_MEMORY",
    "SOFT_HARD_MEMORY",
    "policy_for",
]
