# ============================================================================
# MESOS QUERY PORT
# ============================================================================
# EPOCH: 1 - RESOURCE GRAPH
# STATUS: Orchestrators - Cluster manager adapter
# PURPOSE: Implement the query port against a Mesos master state snapshot
# CREATED: 19 OCT 2026
# ============================================================================
"""
Mesos Query Port

Mesos exposes the whole cluster as one /state.json document, so the
port operations are answered from a snapshot:

    list_nodes         -> fetch a fresh leader snapshot, return its slaves
    describe_nodes     -> slave resources; remaining = registered minus
                          the resources of TASK_RUNNING tasks on the slave
    list_tasks         -> TASK_RUNNING tasks placed on the slave
    describe_tasks     -> task -> template linkage ("<cluster>/<task id>")
    describe_template  -> the task's own resources from the held snapshot

Leader redirect (two explicit steps):
    1. GET http://<cluster>/state.json and read "leader" ("master@host:port")
    2. Strip the "master@" prefix and GET http://<host:port>/state.json

Only the second snapshot is trusted. The adapter holds snapshot state,
so use one instance per graph computation.

Mesos tasks have no immutable template: a task id can be reused by
another cluster, or relaunched with new resources. Template ids are
scoped by cluster and the port sets templates_immutable = False, so the
engine resolves them through a per-computation cache.
"""

import logging
from typing import Dict, List, Optional, Sequence

import httpx
from pydantic import ValidationError

from core.config.defaults import MesosDefaults
from core.contracts import (
    ResourceKind,
    NodeRef,
    NodeDetail,
    TaskRef,
    TaskDetail,
    TaskTemplate,
)
from orchestrators.base import OrchestratorQueryPort, UpstreamError
from orchestrators.mesos_state import MesosState, MesosTask

logger = logging.getLogger(__name__)


def template_key(cluster: str, task_id: str) -> str:
    """Template id of a Mesos task: "<cluster>/<task id>"."""
    return f"{cluster}/{task_id}"


class MesosQueryPort(OrchestratorQueryPort):
    """Sync httpx client over a Mesos master's state endpoint."""

    name = "mesos"
    describe_batch_limit = 100
    templates_immutable = False

    def __init__(
        self,
        defaults: Optional[MesosDefaults] = None,
        timeout: Optional[httpx.Timeout] = None,
    ):
        self._defaults = defaults or MesosDefaults()
        self._timeout = timeout or httpx.Timeout(self._defaults.timeout_seconds)
        self._snapshots: Dict[str, MesosState] = {}
        # cluster -> task id -> running task
        self._tasks: Dict[str, Dict[str, MesosTask]] = {}

    # ------------------------------------------------------------------
    # SNAPSHOT PROTOCOL
    # ------------------------------------------------------------------

    def fetch_state(self, cluster: str) -> MesosState:
        """
        Fetch the leading master's snapshot.

        Raises:
            UpstreamError: If either request fails, either body does not
                decode, or the leader pointer lacks the expected prefix
        """
        pointer = self._get_state(cluster)
        leader = self.leader_host(pointer.leader)
        logger.debug(f"Mesos leader for {cluster} is {leader}")
        return self._get_state(leader)

    def leader_host(self, leader: str) -> str:
        """Strip the leader prefix ("master@") to get host:port."""
        prefix = self._defaults.leader_prefix
        if not leader.startswith(prefix) or len(leader) == len(prefix):
            raise UpstreamError(
                f"mesos leader '{leader}' does not start with '{prefix}<host>'",
                operation="resolve_leader",
                entity_id=leader,
            )
        return leader[len(prefix):]

    def _get_state(self, host: str) -> MesosState:
        url = f"http://{host}{self._defaults.state_path}"

        with self._upstream_context("get_state", url):
            with httpx.Client(timeout=self._timeout) as client:
                resp = client.get(url)

            if not 200 <= resp.status_code < 300:
                raise UpstreamError(
                    f"mesos get_state for {url} returned HTTP {resp.status_code}",
                    operation="get_state",
                    entity_id=url,
                )

            try:
                return MesosState.model_validate(resp.json())
            except (ValueError, ValidationError) as e:
                raise UpstreamError(
                    f"mesos get_state for {url} returned an undecodable body: {e}",
                    operation="get_state",
                    entity_id=url,
                ) from e

    def snapshot(self, cluster: str) -> MesosState:
        """Snapshot held for `cluster`, fetching one if none is held."""
        state = self._snapshots.get(cluster)
        if state is None:
            state = self._load(cluster)
        return state

    def _load(self, cluster: str) -> MesosState:
        state = self.fetch_state(cluster)
        self._snapshots[cluster] = state
        self._tasks[cluster] = {task.id: task for task in state.running_tasks()}
        logger.info(
            f"Loaded mesos snapshot for {cluster}: "
            f"{len(state.slaves)} slaves, {len(state.running_tasks())} running tasks"
        )
        return state

    # ------------------------------------------------------------------
    # NODES
    # ------------------------------------------------------------------

    def list_nodes(self, cluster: str) -> List[NodeRef]:
        state = self._load(cluster)
        return [NodeRef(node_id=slave.id) for slave in state.slaves]

    def describe_nodes(self, cluster: str, refs: Sequence[NodeRef]) -> List[NodeDetail]:
        self._check_batch("describe_nodes", refs)
        state = self.snapshot(cluster)
        slaves = {slave.id: slave for slave in state.slaves}
        tasks_by_slave = state.running_tasks_by_slave()

        details = []
        for ref in refs:
            slave = slaves.get(ref.node_id)
            if slave is None:
                logger.warning(f"Slave {ref.node_id} not present in snapshot for {cluster}")
                continue

            tasks = tasks_by_slave.get(slave.id, [])
            allocated_cpu = sum(task.resources.cpus for task in tasks)
            allocated_mem = sum(task.resources.mem for task in tasks)

            details.append(NodeDetail(
                node_id=slave.id,
                name=slave.hostname,
                registered={
                    ResourceKind.CPU: slave.resources.cpus,
                    ResourceKind.MEMORY: slave.resources.mem,
                },
                remaining={
                    ResourceKind.CPU: slave.resources.cpus - allocated_cpu,
                    ResourceKind.MEMORY: slave.resources.mem - allocated_mem,
                },
            ))
        return details

    # ------------------------------------------------------------------
    # TASKS
    # ------------------------------------------------------------------

    def list_tasks(self, cluster: str, node: NodeRef) -> List[TaskRef]:
        tasks = self.snapshot(cluster).running_tasks_by_slave().get(node.node_id, [])
        return [TaskRef(task_id=task.id) for task in tasks]

    def describe_tasks(self, cluster: str, refs: Sequence[TaskRef]) -> List[TaskDetail]:
        self._check_batch("describe_tasks", refs)
        self.snapshot(cluster)
        running = self._tasks.get(cluster, {})

        details = []
        for ref in refs:
            task = running.get(ref.task_id)
            if task is None:
                continue
            details.append(TaskDetail(
                task_id=task.id,
                template_id=template_key(cluster, task.id),
            ))
        return details

    # ------------------------------------------------------------------
    # TEMPLATES
    # ------------------------------------------------------------------

    def describe_template(self, template_id: str) -> TaskTemplate:
        cluster, _, task_id = template_id.partition("/")
        task = self._tasks.get(cluster, {}).get(task_id)
        if task is None:
            raise UpstreamError(
                f"mesos task {template_id} is not in any loaded snapshot",
                operation="describe_template",
                entity_id=template_id,
            )
        return TaskTemplate(
            template_id=template_id,
            name=task.name or task.id,
            cpu=task.resources.cpus,
            memory_soft=task.resources.mem,
            memory_hard=task.resources.mem,
        )


__all__ = [
    "MesosQueryPort",
    "template_key",
]
