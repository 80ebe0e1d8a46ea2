# ============================================================================
# ECS QUERY PORT
# ============================================================================
# EPOCH: 1 - RESOURCE GRAPH
# STATUS: Orchestrators - Container orchestration adapter
# PURPOSE: Implement the query port against the AWS ECS API via boto3
# CREATED: 19 OCT 2026
# ============================================================================
"""
ECS Query Port

Maps the query port onto ECS:

    list_nodes         -> ListContainerInstances (paginated)
    describe_nodes     -> DescribeContainerInstances (<= 100 per call)
    list_tasks         -> ListTasks(containerInstance=...) (paginated)
    describe_tasks     -> DescribeTasks (<= 100 per call)
    describe_template  -> DescribeTaskDefinition

Only the CPU and MEMORY entries of registered/remaining resources are
read; PORTS, PORTS_UDP and custom attributes are ignored.

Retries live in the botocore client config, beneath this port.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

import boto3
from botocore.config import Config

from core.config.defaults import EcsDefaults
from core.contracts import (
    ResourceKind,
    NodeRef,
    NodeDetail,
    TaskRef,
    TaskDetail,
    TaskTemplate,
)
from orchestrators.base import OrchestratorQueryPort, UpstreamError

logger = logging.getLogger(__name__)


def _resource_value(resource: Dict[str, Any]) -> float:
    """Numeric value of an ECS Resource entry (INTEGER unless typed DOUBLE/LONG)."""
    kind = resource.get("type", "INTEGER")
    if kind == "DOUBLE":
        return float(resource.get("doubleValue", 0.0))
    if kind == "LONG":
        return float(resource.get("longValue", 0))
    return float(resource.get("integerValue", 0))


def sum_resources(resources: List[Dict[str, Any]]) -> Dict[ResourceKind, float]:
    """Sum ECS Resource entries by kind, skipping untracked kinds."""
    totals: Dict[ResourceKind, float] = {}
    for resource in resources:
        kind = ResourceKind.parse(resource.get("name", ""))
        if kind is None:
            continue
        totals[kind] = totals.get(kind, 0.0) + _resource_value(resource)
    return totals


class EcsQueryPort(OrchestratorQueryPort):
    """
    Query port over one AWS account/region.

    A boto3 client may be injected (tests, custom sessions); otherwise
    one is created from static credentials.
    """

    name = "ecs"
    describe_batch_limit = 100

    def __init__(
        self,
        client: Any = None,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        defaults: Optional[EcsDefaults] = None,
    ):
        self._defaults = defaults or EcsDefaults()
        self._client = client or self._create_client(access_key_id, secret_access_key)

    def _create_client(self, access_key_id: Optional[str], secret_access_key: Optional[str]):
        config = Config(
            retries={"max_attempts": self._defaults.max_retries, "mode": "standard"},
        )
        logger.debug(
            f"Creating ECS client (region={self._defaults.region}, "
            f"max_attempts={self._defaults.max_retries})"
        )
        return boto3.client(
            "ecs",
            region_name=self._defaults.region,
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
            config=config,
        )

    # ------------------------------------------------------------------
    # NODES
    # ------------------------------------------------------------------

    def list_nodes(self, cluster: str) -> List[NodeRef]:
        arns: List[str] = []
        with self._upstream_context("list_container_instances", cluster):
            paginator = self._client.get_paginator("list_container_instances")
            for page in paginator.paginate(cluster=cluster):
                arns.extend(page.get("containerInstanceArns", []))

        return [NodeRef(node_id=arn) for arn in arns]

    def describe_nodes(self, cluster: str, refs: Sequence[NodeRef]) -> List[NodeDetail]:
        self._check_batch("describe_container_instances", refs)
        if not refs:
            return []

        with self._upstream_context("describe_container_instances", cluster):
            resp = self._client.describe_container_instances(
                cluster=cluster,
                containerInstances=[ref.node_id for ref in refs],
            )
            self._raise_on_failures("describe_container_instances", cluster, resp)
            return [
                self._parse_container_instance(ci)
                for ci in resp.get("containerInstances", [])
            ]

    @staticmethod
    def _parse_container_instance(ci: Dict[str, Any]) -> NodeDetail:
        arn = ci["containerInstanceArn"]
        return NodeDetail(
            node_id=arn,
            name=ci.get("ec2InstanceId") or arn,
            registered=sum_resources(ci.get("registeredResources", [])),
            remaining=sum_resources(ci.get("remainingResources", [])),
        )

    # ------------------------------------------------------------------
    # TASKS
    # ------------------------------------------------------------------

    def list_tasks(self, cluster: str, node: NodeRef) -> List[TaskRef]:
        arns: List[str] = []
        with self._upstream_context("list_tasks", node.node_id):
            paginator = self._client.get_paginator("list_tasks")
            for page in paginator.paginate(cluster=cluster, containerInstance=node.node_id):
                arns.extend(page.get("taskArns", []))

        return [TaskRef(task_id=arn) for arn in arns]

    def describe_tasks(self, cluster: str, refs: Sequence[TaskRef]) -> List[TaskDetail]:
        self._check_batch("describe_tasks", refs)
        if not refs:
            return []

        with self._upstream_context("describe_tasks", cluster):
            resp = self._client.describe_tasks(
                cluster=cluster,
                tasks=[ref.task_id for ref in refs],
            )
            self._raise_on_failures("describe_tasks", cluster, resp)
            return [
                TaskDetail(
                    task_id=task["taskArn"],
                    template_id=task["taskDefinitionArn"],
                )
                for task in resp.get("tasks", [])
            ]

    # ------------------------------------------------------------------
    # TEMPLATES
    # ------------------------------------------------------------------

    def describe_template(self, template_id: str) -> TaskTemplate:
        with self._upstream_context("describe_task_definition", template_id):
            resp = self._client.describe_task_definition(taskDefinition=template_id)
            return self._parse_task_definition(template_id, resp["taskDefinition"])

    @staticmethod
    def _parse_task_definition(template_id: str, td: Dict[str, Any]) -> TaskTemplate:
        """
        Fold container definitions into one template.

        Soft memory is memoryReservation, or the hard limit for containers
        without a reservation (ECS schedules on whichever is set).

        Task-level "cpu" and "memory" (strings, required by Fargate) are
        used when the containers declare none.
        """
        containers = td.get("containerDefinitions", [])
        if containers:
            name = containers[0].get("name") or td.get("family", template_id)
        else:
            name = td.get("family", template_id)

        cpu = 0.0
        soft = 0.0
        hard = 0.0
        for container in containers:
            cpu += float(container.get("cpu", 0))
            limit = float(container.get("memory", 0))
            hard += limit
            soft += float(container.get("memoryReservation", limit))

        if not cpu and td.get("cpu"):
            cpu = float(td["cpu"])
        if not hard and td.get("memory"):
            hard = float(td["memory"])
        if not soft:
            soft = hard

        return TaskTemplate(
            template_id=template_id,
            name=name,
            cpu=cpu,
            memory_soft=soft,
            memory_hard=hard,
        )

    def _raise_on_failures(self, operation: str, cluster: str, resp: Dict[str, Any]) -> None:
        failures = resp.get("failures") or []
        if not failures:
            return
        reasons = ", ".join(
            f"{f.get('arn', '?')}: {f.get('reason', 'unknown')}" for f in failures
        )
        logger.error(f"ECS {operation} reported {len(failures)} failure(s): {reasons}")
        raise UpstreamError(
            f"ecs {operation} reported failures: {reasons}",
            operation=operation,
            entity_id=cluster,
        )

    def close(self) -> None:
        close = getattr(self._client, "close", None)
        if callable(close):
            close()


__all__ = [
    "EcsQueryPort",
    "sum_resources",
]
