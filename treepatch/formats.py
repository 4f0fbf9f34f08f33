"""
treepatch.formats — Convert trees and patch scripts to and from plain data.

Supported conversions:
    • Node      ↔ {"tag": ..., "attributes": {...}, "children": [...]}
    • Patch     ↔ {"op": "set_attribute", "path": [...], ...}
    • either    ↔ JSON text
"""

import json
from typing import Any, Iterable

from .core import Node
from .patch import (
    AppendNode,
    Patch,
    RemoveAttribute,
    RemoveNode,
    ReplaceNode,
    SetAttribute,
)


# ═══════════════════════════════════════════════════════════════════
#  NODES ↔ PYTHON OBJECTS
# ═══════════════════════════════════════════════════════════════════

def node_to_python(node: Node) -> dict[str, Any]:
    """
    Convert a Node into nested dicts and lists.

    Attribute values become their raw payloads (str, float, bool), so
    the variant is recovered from the Python type on the way back.
    """
    return {
        "tag": node.tag,
        "attributes": {k: v.value for k, v in node.attributes.items()},
        "children": [node_to_python(c) for c in node.children],
    }


def node_from_python(obj: Any) -> Node:
    """
    Inverse of node_to_python.

    "attributes" and "children" may be omitted.  Malformed input raises
    ValueError (wrong shape) or TypeError (wrong value types).
    """
    if not isinstance(obj, dict):
        raise ValueError(f"Expected a node object, got {type(obj).__name__}")
    if "tag" not in obj:
        raise ValueError("Node object has no 'tag'")
    attributes = obj.get("attributes", {})
    if not isinstance(attributes, dict):
        raise ValueError("Node 'attributes' must be an object")
    children = obj.get("children", [])
    if not isinstance(children, list):
        raise ValueError("Node 'children' must be a list")
    return Node(obj["tag"], attributes, [node_from_python(c) for c in children])


# ═══════════════════════════════════════════════════════════════════
#  PATCHES ↔ PYTHON OBJECTS
# ═══════════════════════════════════════════════════════════════════

_OP_NAMES = {
    RemoveNode: "remove_node",
    AppendNode: "append_node",
    ReplaceNode: "replace_node",
    RemoveAttribute: "remove_attribute",
    SetAttribute: "set_attribute",
}


def patch_to_python(p: Patch) -> dict[str, Any]:
    op = _OP_NAMES.get(type(p))
    if op is None:
        raise TypeError(f"Not a patch: {p!r}")
    out: dict[str, Any] = {"op": op, "path": list(p.path)}
    if isinstance(p, (AppendNode, ReplaceNode)):
        out["node"] = node_to_python(p.node)
    elif isinstance(p, RemoveAttribute):
        out["key"] = p.key
    elif isinstance(p, SetAttribute):
        out["key"] = p.key
        out["value"] = p.value.value
    return out


def patch_from_python(obj: Any) -> Patch:
    """Inverse of patch_to_python.  Unknown ops raise ValueError."""
    if not isinstance(obj, dict):
        raise ValueError(f"Expected a patch object, got {type(obj).__name__}")
    op = obj.get("op")
    path = obj.get("path")
    if not isinstance(path, list):
        raise ValueError(f"Patch {op!r} needs a 'path' list")
    try:
        if op == "remove_node":
            return RemoveNode(path)
        if op == "append_node":
            return AppendNode(path, node_from_python(obj["node"]))
        if op == "replace_node":
            return ReplaceNode(path, node_from_python(obj["node"]))
        if op == "remove_attribute":
            return RemoveAttribute(path, obj["key"])
        if op == "set_attribute":
            return SetAttribute(path, obj["key"], obj["value"])
    except KeyError as exc:
        raise ValueError(f"Patch {op!r} is missing {exc.args[0]!r}") from None
    raise ValueError(f"Unknown patch op: {op!r}")


# ═══════════════════════════════════════════════════════════════════
#  JSON STRINGS
# ═══════════════════════════════════════════════════════════════════

def to_json(node: Node, **kwargs) -> str:
    """Convert a Node to a JSON string."""
    return json.dumps(node_to_python(node), **kwargs)


def from_json(text: str) -> Node:
    """Parse a JSON string into a Node."""
    return node_from_python(json.loads(text))


def patches_to_json(patches: Iterable[Patch], **kwargs) -> str:
    return json.dumps([patch_to_python(p) for p in patches], **kwargs)


def patches_from_json(text: str) -> list[Patch]:
    data = json.loads(text)
    if not isinstance(data, list):
        raise ValueError("A patch script must be a JSON array")
    return [patch_from_python(item) for item in data]
