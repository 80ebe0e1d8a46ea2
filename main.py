# ============================================================================
# RESOURCE GRAPH - MAIN APPLICATION
# ============================================================================
# EPOCH: 1 - RESOURCE GRAPH
# STATUS: Core - FastAPI application entry point
# PURPOSE: Serve cluster resource trees over HTTP
# CREATED: 19 OCT 2026
# ============================================================================
"""
Resource Graph Main Application

FastAPI application that:
1. Loads configuration once at startup (bad config aborts startup)
2. Builds a resource tree per request from the configured orchestrator
3. Exposes liveness, readiness and health endpoints

Usage:
    uvicorn main:app --host 0.0.0.0 --port 8888
"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from __version__ import __version__, BUILD_DATE, EPOCH

from core.config import get_config
from services import ResourceGraphService
from api.routes import router, set_services

# Health check system
from health import health_router, get_registry
from health.checks.orchestrator import set_resource_service

# Configure logging using our structured logging system
from core.logging import ComponentType, configure_logging, get_logger

configure_logging(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    json_output=os.environ.get("LOG_FORMAT", "").lower() == "json",
)
logger = get_logger(__name__, ComponentType.API)

# Global instances
_resource_service: ResourceGraphService = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Loads configuration and creates the resource service on startup,
    releases the orchestrator client on shutdown.
    """
    global _resource_service

    logger.info(f"Starting Resource Graph v{__version__} (Epoch {EPOCH}, Build {BUILD_DATE})")

    # ConfigurationError propagates and aborts startup
    config = get_config()

    _resource_service = ResourceGraphService(config)
    set_services(resource_service=_resource_service)
    logger.info(
        f"Resource service initialized "
        f"(orchestrator={config.orchestrator.value}, policy={_resource_service.policy.name})"
    )

    # Initialize health checks
    set_resource_service(_resource_service)
    import health.checks  # Register all health check plugins
    logger.info(f"Health checks initialized ({len(get_registry())} checks registered)")

    yield

    logger.info("Shutting down Resource Graph...")
    _resource_service.close()
    logger.info("Resource Graph stopped")


# Create FastAPI app
app = FastAPI(
    title="Resource Graph",
    description=f"Epoch {EPOCH} cluster resource aggregation service",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware (the visualization page may be served from elsewhere)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)

# Include health check routes (no prefix - /livez, /readyz, /health)
app.include_router(health_router)

# Include resource routes (/resources.json, /resources/{cluster}, /api/v1/...)
app.include_router(router)


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": "Resource Graph",
        "version": __version__,
        "epoch": EPOCH,
        "build_date": BUILD_DATE,
        "status": "running",
        "docs": "/docs",
        "resources": "/resources.json",
    }


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "8888"))

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=os.environ.get("RELOAD", "false").lower() == "true",
    )
