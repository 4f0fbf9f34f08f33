"""
treepatch
=========

Diff and patch for element trees.

    old = Node("ul", {}, [Node("li", {"id": "a"}), Node("li", {"id": "b"})])
    new = Node("ul", {"class": "menu"}, [Node("li", {"id": "a"})])

    diff(old, new)
        → [SetAttribute((root), 'class', String('menu')), RemoveNode(1)]

    apply(diff(old, new), old).tree == new   → True

A tree is a Node: a tag, string-keyed attributes (String, Number or
Bool), and ordered children.  diff() compares two trees position by
position and returns a list of patches; apply() replays such a list
against a tree and returns an ApplyResult holding either the updated
tree or the first error.  Both are pure: inputs are never modified.
"""

from treepatch.core import (
    # Types
    Node,
    Attribute,
    String,
    Number,
    Bool,
    attribute,
    # Paths
    Path,
    ROOT,
    as_path,
    child_path,
    parent_path,
    format_path,
)
from treepatch.patch import (
    Patch,
    RemoveNode,
    AppendNode,
    ReplaceNode,
    RemoveAttribute,
    SetAttribute,
    ApplyResult,
    apply,
)
from treepatch.diff import diff
from treepatch.errors import (
    PatchError, RootRemoval, MissingParent, MissingChild, MissingNode,
)
from treepatch.formats import (
    node_to_python, node_from_python, patch_to_python, patch_from_python,
    to_json, from_json, patches_to_json, patches_from_json,
)

__version__ = "0.1.0"
__all__ = [
    "Node", "Attribute", "String", "Number", "Bool", "attribute",
    "Path", "ROOT", "as_path", "child_path", "parent_path", "format_path",
    "Patch", "RemoveNode", "AppendNode", "ReplaceNode",
    "RemoveAttribute", "SetAttribute",
    "ApplyResult", "apply", "diff",
    "PatchError", "RootRemoval", "MissingParent", "MissingChild", "MissingNode",
    "node_to_python", "node_from_python", "patch_to_python", "patch_from_python",
    "to_json", "from_json", "patches_to_json", "patches_from_json",
]
