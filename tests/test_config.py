# ============================================================================
# CONFIGURATION TESTS
# ============================================================================
# EPOCH: 1 - RESOURCE GRAPH
# STATUS: Tests - Environment configuration
# PURPOSE: Verify env parsing, required variables and defaults
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Tests

Run with:
    pytest tests/test_config.py -v
"""

import pytest

from core.config import (
    AppConfig,
    ConfigurationError,
    Defaults,
    OrchestratorKind,
    get_config,
    parse_clusters,
    reset_config,
)


@pytest.fixture
def clean_env(monkeypatch):
    for var in [
        "ORCHESTRATOR_KIND", "CLUSTERS", "DEFAULT_CLUSTER",
        "AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY", "AWS_REGION",
        "ECS_MAX_RETRIES", "MESOS_TIMEOUT_SECONDS", "GRAPH_MAX_WORKERS",
    ]:
        monkeypatch.delenv(var, raising=False)
    reset_config()
    yield monkeypatch
    reset_config()


# ============================================================================
# CLUSTERS
# ============================================================================

class TestParseClusters:

    def test_ordered_pairs(self):
        clusters = parse_clusters("prod=prod-cluster, staging = arn:aws:ecs:us-west-1:1:cluster/st")
        assert list(clusters) == ["prod", "staging"]
        assert clusters["staging"] == "arn:aws:ecs:us-west-1:1:cluster/st"

    def test_identifier_may_contain_equals(self):
        assert parse_clusters("a=b=c") == {"a": "b=c"}

    def test_trailing_comma_ignored(self):
        assert parse_clusters("prod=p,") == {"prod": "p"}

    @pytest.mark.parametrize("raw", ["prod", "=p", "prod=", ",", ""])
    def test_malformed(self, raw):
        with pytest.raises(ConfigurationError):
            parse_clusters(raw)

    def test_duplicate_name(self):
        with pytest.raises(ConfigurationError, match="Duplicate"):
            parse_clusters("prod=a,prod=b")


# ============================================================================
# FROM ENV
# ============================================================================

class TestFromEnv:

    def test_mesos(self, clean_env):
        clean_env.setenv("ORCHESTRATOR_KIND", "mesos")
        clean_env.setenv("CLUSTERS", "prod=mesos-prod:5050,dev=mesos-dev:5050")

        config = AppConfig.from_env()

        assert config.orchestrator == OrchestratorKind.MESOS
        assert config.cluster_names == ["prod", "dev"]
        assert config.default_cluster == "prod"
        assert config.aws_access_key_id is None
        assert config.resolve_cluster("dev") == "mesos-dev:5050"
        assert config.resolve_cluster("nope") is None

    def test_ecs_requires_credentials(self, clean_env):
        clean_env.setenv("ORCHESTRATOR_KIND", "ECS")
        clean_env.setenv("CLUSTERS", "prod=prod-cluster")

        with pytest.raises(ConfigurationError, match="AWS_ACCESS_KEY_ID"):
            AppConfig.from_env()

        clean_env.setenv("AWS_ACCESS_KEY_ID", "AKIA")
        with pytest.raises(ConfigurationError, match="AWS_SECRET_ACCESS_KEY"):
            AppConfig.from_env()

        clean_env.setenv("AWS_SECRET_ACCESS_KEY", "secret")
        config = AppConfig.from_env()
        assert config.orchestrator == OrchestratorKind.ECS
        assert config.aws_access_key_id == "AKIA"

    def test_missing_kind(self, clean_env):
        clean_env.setenv("CLUSTERS", "prod=p")
        with pytest.raises(ConfigurationError, match="Must specify env variable ORCHESTRATOR_KIND"):
            AppConfig.from_env()

    def test_unknown_kind(self, clean_env):
        clean_env.setenv("ORCHESTRATOR_KIND", "nomad")
        clean_env.setenv("CLUSTERS", "prod=p")
        with pytest.raises(ConfigurationError, match="nomad"):
            AppConfig.from_env()

    def test_missing_clusters(self, clean_env):
        clean_env.setenv("ORCHESTRATOR_KIND", "mesos")
        with pytest.raises(ConfigurationError, match="CLUSTERS"):
            AppConfig.from_env()

    def test_default_cluster_must_be_listed(self, clean_env):
        clean_env.setenv("ORCHESTRATOR_KIND", "mesos")
        clean_env.setenv("CLUSTERS", "prod=p")
        clean_env.setenv("DEFAULT_CLUSTER", "staging")
        with pytest.raises(ConfigurationError, match="staging"):
            AppConfig.from_env()

    def test_explicit_default_cluster(self, clean_env):
        clean_env.setenv("ORCHESTRATOR_KIND", "mesos")
        clean_env.setenv("CLUSTERS", "prod=p,staging=s")
        clean_env.setenv("DEFAULT_CLUSTER", "staging")
        assert AppConfig.from_env().default_cluster == "staging"

    def test_tuning_overrides(self, clean_env):
        clean_env.setenv("ORCHESTRATOR_KIND", "mesos")
        clean_env.setenv("CLUSTERS", "prod=p")
        clean_env.setenv("GRAPH_MAX_WORKERS", "8")
        clean_env.setenv("MESOS_TIMEOUT_SECONDS", "5")
        clean_env.setenv("AWS_REGION", "eu-west-1")
        clean_env.setenv("ECS_MAX_RETRIES", "3")

        defaults = AppConfig.from_env().defaults

        assert defaults.engine.max_workers == 8
        assert defaults.engine.task_describe_batch_limit == 100
        assert defaults.mesos.timeout_seconds == 5.0
        assert defaults.ecs.region == "eu-west-1"
        assert defaults.ecs.max_retries == 3

    def test_max_workers_floor(self, clean_env):
        clean_env.setenv("GRAPH_MAX_WORKERS", "0")
        assert Defaults.from_env().engine.max_workers == 1

    def test_builtin_defaults(self, clean_env):
        defaults = Defaults.from_env()
        assert defaults.engine.max_workers == 1
        assert defaults.ecs.region == "us-west-1"
        assert defaults.ecs.max_retries == 10
        assert defaults.mesos.leader_prefix == "master@"


class TestSingleton:

    def test_get_config_caches(self, clean_env):
        clean_env.setenv("ORCHESTRATOR_KIND", "mesos")
        clean_env.setenv("CLUSTERS", "prod=p")

        first = get_config()
        clean_env.setenv("CLUSTERS", "other=o")
        assert get_config() is first

        reset_config()
        assert get_config().cluster_names == ["other"]
