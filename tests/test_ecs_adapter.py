# ============================================================================
# ECS QUERY PORT TESTS
# ============================================================================
# EPOCH: 1 - RESOURCE GRAPH
# STATUS: Tests - ECS adapter
# PURPOSE: Verify ECS response parsing, pagination and error wrapping
# CREATED: 19 OCT 2026
# ============================================================================
"""
ECS Query Port Tests

Uses a MagicMock boto3 client - no AWS traffic.

Run with:
    pytest tests/test_ecs_adapter.py -v
"""

import pytest
from unittest.mock import patch, MagicMock

from botocore.exceptions import ClientError

from core.config import EcsDefaults
from core.contracts import NodeRef, ResourceKind, TaskRef
from orchestrators.base import UpstreamError
from orchestrators.ecs import EcsQueryPort, sum_resources


CI_ARN = "arn:aws:ecs:us-west-1:123:container-instance/prod/abc"
TASK_ARN = "arn:aws:ecs:us-west-1:123:task/prod/t1"
TD_ARN = "arn:aws:ecs:us-west-1:123:task-definition/web:7"


def _paginator(pages):
    paginator = MagicMock()
    paginator.paginate.return_value = iter(pages)
    return paginator


def _container_instance(arn=CI_ARN, ec2_id="i-0abc"):
    return {
        "containerInstanceArn": arn,
        "ec2InstanceId": ec2_id,
        "registeredResources": [
            {"name": "CPU", "type": "INTEGER", "integerValue": 2048},
            {"name": "MEMORY", "type": "INTEGER", "integerValue": 7985},
            {"name": "PORTS", "type": "STRINGSET", "stringSetValue": ["22", "2376"]},
        ],
        "remainingResources": [
            {"name": "CPU", "type": "INTEGER", "integerValue": 512},
            {"name": "MEMORY", "type": "INTEGER", "integerValue": 1841},
            {"name": "PORTS", "type": "STRINGSET", "stringSetValue": ["22"]},
        ],
    }


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def ecs(client):
    return EcsQueryPort(client=client)


# ============================================================================
# RESOURCE SUMMING
# ============================================================================

class TestSumResources:

    def test_ignores_ports(self):
        totals = sum_resources(_container_instance()["registeredResources"])
        assert totals == {ResourceKind.CPU: 2048.0, ResourceKind.MEMORY: 7985.0}

    def test_double_and_long_values(self):
        totals = sum_resources([
            {"name": "CPU", "type": "DOUBLE", "doubleValue": 0.5},
            {"name": "MEMORY", "type": "LONG", "longValue": 4096},
        ])
        assert totals == {ResourceKind.CPU: 0.5, ResourceKind.MEMORY: 4096.0}

    def test_repeated_kinds_are_summed(self):
        totals = sum_resources([
            {"name": "CPU", "integerValue": 256},
            {"name": "CPU", "integerValue": 256},
        ])
        assert totals[ResourceKind.CPU] == 512.0

    def test_empty(self):
        assert sum_resources([]) == {}


# ============================================================================
# NODES
# ============================================================================

class TestNodes:

    def test_list_nodes_follows_pagination(self, ecs, client):
        client.get_paginator.return_value = _paginator([
            {"containerInstanceArns": ["ci-1", "ci-2"]},
            {"containerInstanceArns": ["ci-3"]},
        ])

        refs = ecs.list_nodes("prod")

        assert [r.node_id for r in refs] == ["ci-1", "ci-2", "ci-3"]
        client.get_paginator.assert_called_once_with("list_container_instances")
        client.get_paginator.return_value.paginate.assert_called_once_with(cluster="prod")

    def test_describe_nodes(self, ecs, client):
        client.describe_container_instances.return_value = {
            "containerInstances": [_container_instance()],
            "failures": [],
        }

        details = ecs.describe_nodes("prod", [NodeRef(node_id=CI_ARN)])

        client.describe_container_instances.assert_called_once_with(
            cluster="prod", containerInstances=[CI_ARN],
        )
        assert len(details) == 1
        node = details[0]
        assert node.node_id == CI_ARN
        assert node.name == "i-0abc"
        assert node.registered_of(ResourceKind.CPU) == 2048
        assert node.remaining_of(ResourceKind.MEMORY) == 1841

    def test_node_name_falls_back_to_arn(self, ecs, client):
        client.describe_container_instances.return_value = {
            "containerInstances": [_container_instance(ec2_id=None)],
        }

        node = ecs.describe_nodes("prod", [NodeRef(node_id=CI_ARN)])[0]
        assert node.name == CI_ARN

    def test_describe_nodes_failures_raise(self, ecs, client):
        client.describe_container_instances.return_value = {
            "containerInstances": [],
            "failures": [{"arn": CI_ARN, "reason": "MISSING"}],
        }

        with pytest.raises(UpstreamError, match="MISSING") as exc_info:
            ecs.describe_nodes("prod", [NodeRef(node_id=CI_ARN)])

        assert exc_info.value.operation == "describe_container_instances"

    def test_describe_nodes_empty_skips_call(self, ecs, client):
        assert ecs.describe_nodes("prod", []) == []
        client.describe_container_instances.assert_not_called()

    def test_batch_over_limit_rejected(self, ecs, client):
        refs = [NodeRef(node_id=f"ci-{i}") for i in range(101)]

        with pytest.raises(ValueError, match="at most 100"):
            ecs.describe_nodes("prod", refs)

        client.describe_container_instances.assert_not_called()


# ============================================================================
# TASKS
# ============================================================================

class TestTasks:

    def test_list_tasks_by_container_instance(self, ecs, client):
        client.get_paginator.return_value = _paginator([
            {"taskArns": [TASK_ARN]},
            {"taskArns": []},
        ])

        refs = ecs.list_tasks("prod", NodeRef(node_id=CI_ARN))

        assert refs == [TaskRef(task_id=TASK_ARN)]
        client.get_paginator.assert_called_once_with("list_tasks")
        client.get_paginator.return_value.paginate.assert_called_once_with(
            cluster="prod", containerInstance=CI_ARN,
        )

    def test_describe_tasks(self, ecs, client):
        client.describe_tasks.return_value = {
            "tasks": [{
                "taskArn": TASK_ARN,
                "taskDefinitionArn": TD_ARN,
                "group": "service:web",
            }],
            "failures": [],
        }

        details = ecs.describe_tasks("prod", [TaskRef(task_id=TASK_ARN)])

        assert details[0].task_id == TASK_ARN
        assert details[0].template_id == TD_ARN
        client.describe_tasks.assert_called_once_with(cluster="prod", tasks=[TASK_ARN])

    def test_describe_tasks_failures_raise(self, ecs, client):
        client.describe_tasks.return_value = {
            "tasks": [],
            "failures": [{"arn": TASK_ARN, "reason": "MISSING"}],
        }

        with pytest.raises(UpstreamError, match=TASK_ARN):
            ecs.describe_tasks("prod", [TaskRef(task_id=TASK_ARN)])


# ============================================================================
# TEMPLATES
# ============================================================================

class TestTemplates:

    def test_single_container(self, ecs, client):
        client.describe_task_definition.return_value = {
            "taskDefinition": {
                "family": "web",
                "containerDefinitions": [{
                    "name": "web-app",
                    "cpu": 256,
                    "memory": 1024,
                    "memoryReservation": 512,
                }],
            },
        }

        template = ecs.describe_template(TD_ARN)

        client.describe_task_definition.assert_called_once_with(taskDefinition=TD_ARN)
        assert template.template_id == TD_ARN
        assert template.name == "web-app"
        assert template.cpu == 256
        assert template.memory_soft == 512
        assert template.memory_hard == 1024

    def test_containers_are_summed(self, ecs, client):
        client.describe_task_definition.return_value = {
            "taskDefinition": {
                "family": "web",
                "containerDefinitions": [
                    {"name": "app", "cpu": 256, "memory": 1024, "memoryReservation": 512},
                    {"name": "sidecar", "cpu": 128, "memory": 256},
                ],
            },
        }

        template = ecs.describe_template(TD_ARN)

        assert template.name == "app"
        assert template.cpu == 384
        assert template.memory_hard == 1280
        # sidecar has no reservation: its hard limit counts as soft
        assert template.memory_soft == 768

    def test_no_containers_uses_family(self, ecs, client):
        client.describe_task_definition.return_value = {
            "taskDefinition": {"family": "empty", "containerDefinitions": []},
        }

        template = ecs.describe_template(TD_ARN)

        assert template.name == "empty"
        assert template.cpu == 0
        assert template.memory_hard == 0

    def test_fargate_task_level_figures(self, ecs, client):
        client.describe_task_definition.return_value = {
            "taskDefinition": {
                "family": "web",
                "cpu": "512",
                "memory": "1024",
                "containerDefinitions": [{"name": "web"}],
            },
        }

        template = ecs.describe_template(TD_ARN)

        assert template.name == "web"
        assert template.cpu == 512
        assert template.memory_hard == 1024
        assert template.memory_soft == 1024

    def test_container_figures_win_over_task_level(self, ecs, client):
        client.describe_task_definition.return_value = {
            "taskDefinition": {
                "family": "web",
                "cpu": "1024",
                "memory": "4096",
                "containerDefinitions": [
                    {"name": "web", "cpu": 256, "memory": 1024, "memoryReservation": 512},
                ],
            },
        }

        template = ecs.describe_template(TD_ARN)

        assert template.cpu == 256
        assert template.memory_hard == 1024
        assert template.memory_soft == 512


# ============================================================================
# ERRORS / CLIENT
# ============================================================================

class TestErrors:

    def test_client_error_wrapped(self, ecs, client):
        client.describe_task_definition.side_effect = ClientError(
            {"Error": {"Code": "AccessDeniedException", "Message": "denied"}},
            "DescribeTaskDefinition",
        )

        with pytest.raises(UpstreamError) as exc_info:
            ecs.describe_template(TD_ARN)

        assert exc_info.value.entity_id == TD_ARN
        assert isinstance(exc_info.value.__cause__, ClientError)
        assert "AccessDeniedException" in str(exc_info.value)

    def test_pagination_error_wrapped(self, ecs, client):
        client.get_paginator.return_value.paginate.side_effect = ClientError(
            {"Error": {"Code": "ClusterNotFoundException", "Message": "nope"}},
            "ListContainerInstances",
        )

        with pytest.raises(UpstreamError, match="ClusterNotFoundException"):
            ecs.list_nodes("missing")


class TestClientCreation:

    @patch("orchestrators.ecs.boto3.client")
    def test_creates_client_with_retry_config(self, mock_client):
        EcsQueryPort(
            access_key_id="AKIA",
            secret_access_key="secret",
            defaults=EcsDefaults(region="eu-west-1", max_retries=4),
        )

        mock_client.assert_called_once()
        args, kwargs = mock_client.call_args
        assert args == ("ecs",)
        assert kwargs["region_name"] == "eu-west-1"
        assert kwargs["aws_access_key_id"] == "AKIA"
        assert kwargs["aws_secret_access_key"] == "secret"
        assert kwargs["config"].retries == {"max_attempts": 4, "mode": "standard"}

    def test_close_closes_client(self, ecs, client):
        ecs.close()
        client.close.assert_called_once()
