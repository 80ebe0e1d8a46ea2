# ============================================================================
# API ROUTES
# ============================================================================
# EPOCH: 1 - RESOURCE GRAPH
# STATUS: Core - FastAPI route definitions
# PURPOSE: Serve resource trees to the visualization front end
# CREATED: 19 OCT 2026
# ============================================================================
"""
API Routes

Read-only, idempotent endpoints:

    GET /resources.json          - tree for the default cluster
    GET /resources/{cluster}     - tree for a named cluster
    GET /api/v1/clusters         - configured cluster names
    GET /api/v1/status           - computation counters, cache stats

A failed computation is a per-request 502; the process keeps serving.
"""

import logging

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse

from orchestrators import ResourceGraphError
from services import ResourceGraphService, UnknownClusterError
from .schemas import (
    ClusterListResponse,
    ServiceStatusResponse,
    ErrorResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================
# Set by the main app at startup

_resource_service: ResourceGraphService = None


def set_services(resource_service: ResourceGraphService):
    """Set service instances for dependency injection."""
    global _resource_service
    _resource_service = resource_service


def get_resource_service() -> ResourceGraphService:
    if _resource_service is None:
        raise HTTPException(500, "Services not initialized")
    return _resource_service


# ============================================================================
# RESOURCE GRAPH
# ============================================================================

async def _graph_response(cluster: str):
    service = get_resource_service()
    try:
        return await service.build_payload(cluster)
    except UnknownClusterError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ResourceGraphError as e:
        return JSONResponse(
            status_code=502,
            content=ErrorResponse(
                error=type(e).__name__,
                detail=str(e),
                cluster=cluster,
            ).to_content(),
        )


@router.get("/resources.json", tags=["Resources"])
async def get_default_resources():
    """Resource tree for the default cluster."""
    service = get_resource_service()
    return await _graph_response(service.config.default_cluster)


@router.get("/resources/{cluster}", tags=["Resources"])
async def get_cluster_resources(cluster: str):
    """
    Resource tree for a named cluster.

    Returns:
        200: Tree in the front end's wire shape
        404: Cluster name not configured
        502: Orchestrator failure or inconsistent upstream data
    """
    return await _graph_response(cluster)


# ============================================================================
# METADATA
# ============================================================================

@router.get("/api/v1/clusters", response_model=ClusterListResponse, tags=["Clusters"])
async def list_clusters():
    """Configured cluster names."""
    service = get_resource_service()
    return ClusterListResponse(
        clusters=service.config.cluster_names,
        default_cluster=service.config.default_cluster,
        orchestrator=service.config.orchestrator.value,
        policy=service.policy.name,
    )


@router.get("/api/v1/status", response_model=ServiceStatusResponse, tags=["Clusters"])
async def get_status():
    """Computation counters and template cache statistics."""
    service = get_resource_service()
    return ServiceStatusResponse(**service.stats)
