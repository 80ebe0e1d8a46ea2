# ============================================================================
# GRAPH SERIALIZATION
# ============================================================================
# EPOCH: 1 - RESOURCE GRAPH
# STATUS: Graph - Wire format for the visualization front end
# PURPOSE: Convert a ResourceNode tree to the front end's JSON shape
# CREATED: 19 OCT 2026
# ============================================================================
"""
Graph Serialization

Wire shape (fields present only when non-zero / non-empty):

    { "name": string,
      "children": [ResourceNode, ...]?,
      "cpu": number?, "memory" | "soft_memory": number?,
      "max_memory": number?,
      "cpu_total": number?, "memory_total": number? }

Negative figures are non-zero and therefore always emitted.
"""

from typing import Any, Dict

from core.contracts import ResourceNode

# Emission order of the numeric fields
WIRE_FIELDS = (
    "cpu",
    "memory",
    "soft_memory",
    "max_memory",
    "cpu_total",
    "memory_total",
)


def to_wire(node: ResourceNode) -> Dict[str, Any]:
    """Serialize `node` and its subtree."""
    result: Dict[str, Any] = {"name": node.name}

    if node.children:
        result["children"] = [to_wire(child) for child in node.children]

    for field_name in WIRE_FIELDS:
        value = getattr(node, field_name)
        if value:
            result[field_name] = _number(value)

    return result


def _number(value: float) -> Any:
    """Integral floats go out as ints (8192, not 8192.0)."""
    if float(value).is_integer():
        return int(value)
    return value


__all__ = [
    "WIRE_FIELDS",
    "to_wire",
]
