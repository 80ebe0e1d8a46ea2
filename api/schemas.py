# ============================================================================
# API SCHEMAS
# ============================================================================
# EPOCH: 1 - RESOURCE GRAPH
# STATUS: Core - Response schemas
# PURPOSE: Pydantic models for API responses
# CREATED: 19 OCT 2026
# ============================================================================
"""
API Schemas

Response models for the API. The resource tree itself is returned in
the front end's wire shape (graph.serialization.to_wire), not as a
pydantic model, so zero-valued fields stay omitted.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class ClusterListResponse(BaseModel):
    """Configured clusters."""
    clusters: List[str]
    default_cluster: str
    orchestrator: str = Field(..., description="ecs or mesos")
    policy: str = Field(..., description="Memory field mapping in use")


class ServiceStatusResponse(BaseModel):
    """Counters for graph computations since startup."""
    orchestrator: str
    policy: str
    graphs_built: int
    failures: int
    last_built_at: Optional[str] = None
    last_error: Optional[str] = None
    template_cache: Dict[str, int] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Error response."""
    error: str
    detail: Optional[str] = None
    cluster: Optional[str] = None

    def to_content(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)
