# ============================================================================
# GRAPH MODULE
# ============================================================================
# EPOCH: 1 - RESOURCE GRAPH
# STATUS: Graph - Aggregation engine components
# PURPOSE: Template cache, mapping policy, engine, serialization
# CREATED: 19 OCT 2026
# ============================================================================
"""
Graph Module

- cache: process-wide TemplateCache (single-flight per key)
- policy: ResourceMappingPolicy (single vs soft/hard memory)
- engine: ResourceGraphEngine
- serialization: to_wire() for the front end

Usage:
    from graph import ResourceGraphEngine, TemplateCache, SOFT_HARD_MEMORY, to_wire

    engine = ResourceGraphEngine(port, TemplateCache(), SOFT_HARD_MEMORY)
    payload = to_wire(engine.build("prod-cluster"))
"""

from graph.cache import TemplateCache, TemplateLoader
from graph.policy import (
    ResourceMappingPolicy,
    SINGLE_MEMORY,
    SOFT_HARD_MEMORY,
    policy_for,
)
from graph.engine import ResourceGraphEngine
from graph.serialization import to_wire

__all__ = [
    "TemplateCache",
    "TemplateLoader",
    "ResourceMappingPolicy",
    "SINGLE_MEMORY",
    "SOFT_HARD_MEMORY",
    "policy_for",
    "ResourceGraphEngine",
    "to_wire",
]
