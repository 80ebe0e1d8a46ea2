# ============================================================================
# MESOS STATE SNAPSHOT MODELS
# ============================================================================
# EPOCH: 1 - RESOURCE GRAPH
# STATUS: Orchestrators - Cluster manager snapshot decoding
# PURPOSE: Pydantic models for the subset of /state.json the graph reads
# CREATED: 19 OCT 2026
# ============================================================================
"""
Mesos State Snapshot Models

Only the fields the resource graph needs are declared; everything else
in /state.json is ignored during validation.
"""

from typing import Dict, List
from pydantic import BaseModel, Field


TASK_RUNNING = "TASK_RUNNING"


class MesosResources(BaseModel):
    cpus: float = 0.0
    mem: float = 0.0
    disk: float = 0.0

    model_config = {"extra": "ignore"}


class MesosSlave(BaseModel):
    id: str
    hostname: str
    active: bool = True
    resources: MesosResources = Field(default_factory=MesosResources)

    model_config = {"extra": "ignore"}


class MesosTask(BaseModel):
    id: str
    name: str = ""
    slave_id: str = ""
    framework_id: str = ""
    state: str = ""
    resources: MesosResources = Field(default_factory=MesosResources)

    model_config = {"extra": "ignore"}

    @property
    def is_running(self) -> bool:
        return self.state == TASK_RUNNING


class MesosFramework(BaseModel):
    id: str = ""
    name: str = ""
    active: bool = True
    tasks: List[MesosTask] = Field(default_factory=list)
    resources: MesosResources = Field(default_factory=MesosResources)

    model_config = {"extra": "ignore"}


class MesosState(BaseModel):
    """Decoded /state.json of a Mesos master."""
    leader: str = ""
    hostname: str = ""
    slaves: List[MesosSlave] = Field(default_factory=list)
    frameworks: List[MesosFramework] = Field(default_factory=list)

    model_config = {"extra": "ignore"}

    def running_tasks(self) -> List[MesosTask]:
        """TASK_RUNNING tasks across every framework, in snapshot order."""
        return [
            task
            for framework in self.frameworks
            for task in framework.tasks
            if task.is_running
        ]

    def running_tasks_by_slave(self) -> Dict[str, List[MesosTask]]:
        by_slave: Dict[str, List[MesosTask]] = {}
        for task in self.running_tasks():
            by_slave.setdefault(task.slave_id, []).append(task)
        return by_slave


__all__ = [
    "TASK_RUNNING",
    "MesosResources",
    "MesosSlave",
    "MesosTask",
    "MesosFramework",
    "MesosState",
]
