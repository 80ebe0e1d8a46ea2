# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# EPOCH: 1 - RESOURCE GRAPH
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for upstream limits, adapters, concurrency
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Defaults

Provides defaults for the graph engine and the orchestrator adapters.
These can be overridden via environment variables.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Type-safe access
"""

import os
from dataclasses import dataclass, field
from typing import Optional
from enum import Enum


class OrchestratorKind(str, Enum):
    """Supported orchestrator back ends."""
    ECS = "ecs"
    MESOS = "mesos"


@dataclass(frozen=True)
class EngineDefaults:
    """
    Defaults for the resource graph engine.

    The batch limits are upstream constraints: DescribeContainerInstances
    and DescribeTasks reject more than 100 references per call.
    """
    node_describe_batch_limit: int = 100
    task_describe_batch_limit: int = 100

    # Per-node concurrency (1 = sequential, discovery order)
    max_workers: int = 1

    @classmethod
    def from_env(cls) -> "EngineDefaults":
        """Create from environment variables."""
        return cls(
            max_workers=max(1, int(os.getenv("GRAPH_MAX_WORKERS", 1))),
        )


@dataclass(frozen=True)
class EcsDefaults:
    """Defaults for the ECS adapter."""
    region: str = "us-west-1"
    max_retries: int = 10

    @classmethod
    def from_env(cls) -> "EcsDefaults":
        """Create from environment variables."""
        return cls(
            region=os.getenv("AWS_REGION", "us-west-1"),
            max_retries=int(os.getenv("ECS_MAX_RETRIES", 10)),
        )


@dataclass(frozen=True)
class MesosDefaults:
    """Defaults for the Mesos adapter."""
    timeout_seconds: float = 30.0
    state_path: str = "/state.json"
    leader_prefix: str = "master@"

    @classmethod
    def from_env(cls) -> "MesosDefaults":
        """Create from environment variables."""
        return cls(
            timeout_seconds=float(os.getenv("MESOS_TIMEOUT_SECONDS", 30.0)),
        )


# ============================================================================
# GLOBAL DEFAULTS INSTANCE
# ============================================================================

@dataclass
class Defaults:
    """Container for all default configurations."""
    engine: EngineDefaults = field(default_factory=EngineDefaults)
    ecs: EcsDefaults = field(default_factory=EcsDefaults)
    mesos: MesosDefaults = field(default_factory=MesosDefaults)

    @classmethod
    def from_env(cls) -> "Defaults":
        """Create all defaults from environment variables."""
        return cls(
            engine=EngineDefaults.from_env(),
            ecs=EcsDefaults.from_env(),
            mesos=MesosDefaults.from_env(),
        )


_defaults: Optional[Defaults] = None


def get_defaults() -> Defaults:
    """Get global defaults instance."""
    global _defaults
    if _defaults is None:
        _defaults = Defaults.from_env()
    return _defaults


def reset_defaults() -> None:
    """Reset defaults (for testing)."""
    global _defaults
    _defaults = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "OrchestratorKind",
    "EngineDefaults",
    "EcsDefaults",
    "MesosDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
