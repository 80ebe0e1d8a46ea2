# ============================================================================
# VERSION - RESOURCE GRAPH
# ============================================================================
# EPOCH: 1 - RESOURCE GRAPH
# ============================================================================
"""
Version information for the Resource Graph service.

This is the single source of truth for the application version.
Updated manually for each release.
"""
# Version format: major.minor.patch.build
__version__ = "0.3.0.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))

# Build metadata
BUILD_DATE = "2026-10-19"

EPOCH = 1
CODENAME = "Resource Graph"
