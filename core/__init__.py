# ============================================================================
# CLAUDE CONTEXT - CORE MODULE
# ============================================================================
# EPOCH: 1 - RESOURCE GRAPH
# STATUS: Core module initialization
# PURPOSE: Export core contracts
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================

from core.contracts import (
    ROOT_NODE_NAME,
    UNUSED_NODE_NAME,
    ResourceKind,
    NodeRef,
    NodeDetail,
    TaskRef,
    TaskDetail,
    TaskTemplate,
    ResourceNode,
)

__all__ = [
    "ROOT_NODE_NAME",
    "UNUSED_NODE_NAME",
    "ResourceKind",
    "NodeRef",
    "NodeDetail",
    "TaskRef",
    "TaskDetail",
    "TaskTemplate",
    "ResourceNode",
]
