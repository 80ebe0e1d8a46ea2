# ============================================================================
# SHARED TEST FIXTURES
# ============================================================================
# EPOCH: 1 - RESOURCE GRAPH
# STATUS: Tests - In-memory orchestrator and common fixtures
# PURPOSE: Synthetic cluster states for engine, service and route tests
# CREATED: 19 OCT 2026
# ============================================================================
"""
Shared Fixtures

FakeQueryPort is an in-memory OrchestratorQueryPort. Tests build a
cluster state with add_node / add_task and inspect the recorded calls.
"""

import threading
from collections import defaultdict
from typing import Dict, List, Optional, Sequence

import pytest

from core.contracts import (
    NodeDetail,
    NodeRef,
    ResourceKind,
    TaskDetail,
    TaskRef,
    TaskTemplate,
)
from core.config import AppConfig, OrchestratorKind
from orchestrators.base import OrchestratorQueryPort, UpstreamError


class FakeQueryPort(OrchestratorQueryPort):
    """In-memory query port with call recording."""

    name = "fake"

    def __init__(self):
        self.nodes: Dict[str, NodeDetail] = {}
        self.tasks: Dict[str, List[TaskDetail]] = defaultdict(list)
        self.templates: Dict[str, TaskTemplate] = {}
        self.calls: Dict[str, List] = defaultdict(list)
        self.fail_on: Dict[str, Exception] = {}
        self.drop_nodes = 0
        self.drop_task_ids: set = set()
        self._lock = threading.Lock()

    # ---- builders ---------------------------------------------------------

    def add_node(
        self,
        node_id: str,
        cpu: float,
        mem: float,
        remaining_cpu: float,
        remaining_mem: float,
        name: Optional[str] = None,
    ) -> NodeRef:
        self.nodes[node_id] = NodeDetail(
            node_id=node_id,
            name=name or node_id,
            registered={ResourceKind.CPU: cpu, ResourceKind.MEMORY: mem},
            remaining={ResourceKind.CPU: remaining_cpu, ResourceKind.MEMORY: remaining_mem},
        )
        return NodeRef(node_id=node_id)

    def add_template(
        self,
        template_id: str,
        cpu: float,
        mem: float,
        soft: Optional[float] = None,
        name: Optional[str] = None,
    ) -> TaskTemplate:
        template = TaskTemplate(
            template_id=template_id,
            name=name or template_id,
            cpu=cpu,
            memory_soft=mem if soft is None else soft,
            memory_hard=mem,
        )
        self.templates[template_id] = template
        return template

    def add_task(self, node_id: str, task_id: str, template_id: str) -> None:
        self.tasks[node_id].append(TaskDetail(task_id=task_id, template_id=template_id))

    # ---- port operations --------------------------------------------------

    def _record(self, operation: str, arg) -> None:
        with self._lock:
            self.calls[operation].append(arg)
        if operation in self.fail_on:
            raise self.fail_on[operation]

    def list_nodes(self, cluster: str) -> List[NodeRef]:
        self._record("list_nodes", cluster)
        return [NodeRef(node_id=node_id) for node_id in self.nodes]

    def describe_nodes(self, cluster: str, refs: Sequence[NodeRef]) -> List[NodeDetail]:
        self._check_batch("describe_nodes", refs)
        self._record("describe_nodes", [ref.node_id for ref in refs])
        details = [self.nodes[ref.node_id] for ref in refs]
        if self.drop_nodes:
            details = details[:-self.drop_nodes]
        return details

    def list_tasks(self, cluster: str, node: NodeRef) -> List[TaskRef]:
        self._record("list_tasks", node.node_id)
        return [TaskRef(task_id=task.task_id) for task in self.tasks[node.node_id]]

    def describe_tasks(self, cluster: str, refs: Sequence[TaskRef]) -> List[TaskDetail]:
        self._check_batch("describe_tasks", refs)
        wanted = {ref.task_id for ref in refs}
        self._record("describe_tasks", sorted(wanted))
        found = [
            task
            for tasks in self.tasks.values()
            for task in tasks
            if task.task_id in wanted and task.task_id not in self.drop_task_ids
        ]
        # Upstream order is not guaranteed
        return list(reversed(found))

    def describe_template(self, template_id: str) -> TaskTemplate:
        self._record("describe_template", template_id)
        if template_id not in self.templates:
            raise UpstreamError(f"unknown template {template_id}", operation="describe_template")
        return self.templates[template_id]


@pytest.fixture
def port():
    """Empty in-memory query port."""
    return FakeQueryPort()


@pytest.fixture
def port_factory():
    """Callable producing fresh empty query ports."""
    return FakeQueryPort


@pytest.fixture
def scenario_port():
    """
    One node, registered {cpu 4, mem 8192}, remaining {cpu 1, mem 2048},
    running two tasks with templates {1, 2048} and {2, 4096}.
    """
    fake = FakeQueryPort()
    fake.add_node("node-1", cpu=4, mem=8192, remaining_cpu=1, remaining_mem=2048)
    fake.add_template("web:1", cpu=1, mem=2048, name="web")
    fake.add_template("worker:3", cpu=2, mem=4096, name="worker")
    fake.add_task("node-1", "task-a", "web:1")
    fake.add_task("node-1", "task-b", "worker:3")
    return fake


@pytest.fixture
def mesos_config():
    return AppConfig(
        orchestrator=OrchestratorKind.MESOS,
        clusters={"prod": "mesos-prod:5050", "staging": "mesos-staging:5050"},
        default_cluster="prod",
    )


@pytest.fixture
def ecs_config():
    return AppConfig(
        orchestrator=OrchestratorKind.ECS,
        clusters={"prod": "prod-cluster"},
        default_cluster="prod",
        aws_access_key_id="AKIAEXAMPLE",
        aws_secret_access_key="secret",
    )
