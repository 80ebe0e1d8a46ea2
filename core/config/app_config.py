# ============================================================================
# APPLICATION CONFIGURATION
# ============================================================================
# EPOCH: 1 - RESOURCE GRAPH
# STATUS: Core - Configuration management
# PURPOSE: Environment-based configuration for the resource graph service
# CREATED: 19 OCT 2026
# ============================================================================
"""
Application Configuration

Loads cluster identity, credentials and the cluster name -> identifier
mapping from environment variables. Everything here is read once at
startup; missing required values raise ConfigurationError, which
aborts startup rather than failing individual requests.

CLUSTERS format:
    CLUSTERS="prod=prod-cluster,staging=arn:aws:ecs:us-west-1:123:cluster/staging"
    CLUSTERS="prod=mesos-master.internal:5050"
"""

import os
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from core.config.defaults import (
    Defaults,
    OrchestratorKind,
)

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when required configuration is missing or malformed."""
    pass


def parse_clusters(raw: str) -> Dict[str, str]:
    """
    Parse "name=identifier,name=identifier" into an ordered dict.

    Raises:
        ConfigurationError: On an empty value, a pair without "=",
            an empty name/identifier, or a duplicated name
    """
    clusters: Dict[str, str] = {}
    for pair in raw.split(","):
        pair = pair.strip()
        if not pair:
            continue
        name, sep, identifier = pair.partition("=")
        name, identifier = name.strip(), identifier.strip()
        if not sep or not name or not identifier:
            raise ConfigurationError(f"Malformed CLUSTERS entry: '{pair}'")
        if name in clusters:
            raise ConfigurationError(f"Duplicate cluster name in CLUSTERS: '{name}'")
        clusters[name] = identifier

    if not clusters:
        raise ConfigurationError("CLUSTERS must name at least one cluster")
    return clusters


@dataclass
class AppConfig:
    """Configuration for the resource graph service."""

    orchestrator: OrchestratorKind
    clusters: Dict[str, str]
    default_cluster: str

    # ECS static credentials
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None

    defaults: Defaults = field(default_factory=Defaults)

    # App info
    service_name: str = "resource-graph"

    @classmethod
    def from_env(cls) -> "AppConfig":
        """
        Load configuration from environment variables.

        Raises:
            ConfigurationError: If a required variable is absent
        """
        kind_raw = _require("ORCHESTRATOR_KIND").lower()
        try:
            orchestrator = OrchestratorKind(kind_raw)
        except ValueError:
            choices = ", ".join(k.value for k in OrchestratorKind)
            raise ConfigurationError(
                f"ORCHESTRATOR_KIND must be one of: {choices} (got '{kind_raw}')"
            )

        clusters = parse_clusters(_require("CLUSTERS"))

        default_cluster = os.environ.get("DEFAULT_CLUSTER") or next(iter(clusters))
        if default_cluster not in clusters:
            raise ConfigurationError(
                f"DEFAULT_CLUSTER '{default_cluster}' is not listed in CLUSTERS"
            )

        access_key = os.environ.get("AWS_ACCESS_KEY_ID")
        secret_key = os.environ.get("AWS_SECRET_ACCESS_KEY")
        if orchestrator == OrchestratorKind.ECS:
            access_key = _require("AWS_ACCESS_KEY_ID")
            secret_key = _require("AWS_SECRET_ACCESS_KEY")

        return cls(
            orchestrator=orchestrator,
            clusters=clusters,
            default_cluster=default_cluster,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            defaults=Defaults.from_env(),
            service_name=os.environ.get("SERVICE_NAME", "resource-graph"),
        )

    @property
    def cluster_names(self) -> List[str]:
        return list(self.clusters)

    def resolve_cluster(self, name: str) -> Optional[str]:
        """Map a cluster name to its orchestrator identifier (None if unknown)."""
        return self.clusters.get(name)


def _require(var: str) -> str:
    value = os.environ.get(var, "").strip()
    if not value:
        raise ConfigurationError(f"Must specify env variable {var}")
    return value


# Global config singleton
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get the global configuration singleton."""
    global _config
    if _config is None:
        _config = AppConfig.from_env()
        logger.info(
            f"Configuration loaded: orchestrator={_config.orchestrator.value}, "
            f"clusters={_config.cluster_names}, default={_config.default_cluster}"
        )
    return _config


def reset_config() -> None:
    """Reset configuration (for testing)."""
    global _config
    _config = None


__all__ = [
    "AppConfig",
    "ConfigurationError",
    "parse_clusters",
    "get_config",
    "reset_config",
]
