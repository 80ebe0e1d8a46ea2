# ============================================================================
# SERVICES MODULE
# ============================================================================
# EPOCH: 1 - RESOURCE GRAPH
# STATUS: Core - Request-level service layer
# PURPOSE: Resource graph computations per named cluster
# CREATED: 19 OCT 2026
# ============================================================================
"""
Services Module

Coordinates configuration, query ports and the graph engine.

Usage:
    from services import ResourceGraphService

    service = ResourceGraphService(get_config())
    root = service.build_graph("prod")
"""

from .resource_service import ResourceGraphService, UnknownClusterError

__all__ = [
    "ResourceGraphService",
    "UnknownClusterError",
]
