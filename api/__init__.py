# ============================================================================
# API MODULE
# ============================================================================
# EPOCH: 1 - RESOURCE GRAPH
# STATUS: Core - FastAPI routes
# PURPOSE: HTTP API for resource trees
# CREATED: 19 OCT 2026
# ============================================================================
"""
API Module

FastAPI routes for the resource graph service.
"""

from .routes import router, set_services
from .schemas import (
    ClusterListResponse,
    ServiceStatusResponse,
    ErrorResponse,
)

__all__ = [
    "router",
    "set_services",
    "ClusterListResponse",
    "ServiceStatusResponse",
    "ErrorResponse",
]
