# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# EPOCH: 1 - RESOURCE GRAPH
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Module

Provides centralized configuration and defaults for the resource graph.
"""

from core.config.defaults import (
    OrchestratorKind,
    EngineDefaults,
    EcsDefaults,
    MesosDefaults,
    Defaults,
    get_defaults,
    reset_defaults,
)
from core.config.app_config import (
    AppConfig,
    ConfigurationError,
    parse_clusters,
    get_config,
    reset_config,
)

__all__ = [
    "OrchestratorKind",
    "EngineDefaults",
    "EcsDefaults",
    "MesosDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
    "AppConfig",
    "ConfigurationError",
    "parse_clusters",
    "get_config",
    "reset_config",
]
