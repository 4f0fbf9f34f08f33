"""
treepatch.patch — Edit operations and the apply engine
=======================================================

A patch script is an ordered list of five kinds of edit:

    RemoveNode(path)                  delete the child at path
    AppendNode(path, node)            add node as the last child of path
                                      (or at path, when path is the free
                                      slot just past its parent's children)
    ReplaceNode(path, node)           swap the node at path (root allowed)
    RemoveAttribute(path, key)        drop an attribute if present
    SetAttribute(path, key, value)    insert or overwrite an attribute

Every path in a script is read against the ORIGINAL shape of the tree
the script is applied to.  apply() keeps that promise while it mutates
its working copy: removing a child leaves a tombstone in its slot, so
later siblings keep their positions until the whole script has run.
Removals under one parent can therefore arrive in any order:

    apply([RemoveNode((1,)), RemoveNode((2,))], Node("ul", {}, [a, b, c]))
        → Node("ul", {}, [a])

Failures are returned, not raised: apply() yields an ApplyResult that
holds either the new tree or the first PatchError met.  Nothing is ever
half-applied; on failure the working copy is thrown away.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from .core import Attribute, Node, Path, as_path, attribute, format_path
from .errors import MissingChild, MissingNode, MissingParent, PatchError, RootRemoval

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  PATCH VARIANTS
# ═══════════════════════════════════════════════════════════════════

class Patch:
    """Base class for edit operations.  Not instantiated directly."""
    __slots__ = ()

    path: Path

    def _normalize_path(self):
        object.__setattr__(self, 'path', as_path(self.path))


@dataclass(frozen=True, slots=True)
class RemoveNode(Patch):
    path: Path

    def __post_init__(self):
        self._normalize_path()

    def __repr__(self) -> str:
        return f"RemoveNode({format_path(self.path)})"


@dataclass(frozen=True, slots=True)
class AppendNode(Patch):
    path: Path
    node: Node

    def __post_init__(self):
        self._normalize_path()
        if not isinstance(self.node, Node):
            raise TypeError(f"AppendNode needs a Node, got {type(self.node).__name__}")

    def __repr__(self) -> str:
        return f"AppendNode({format_path(self.path)}, {self.node!r})"


@dataclass(frozen=True, slots=True)
class ReplaceNode(Patch):
    path: Path
    node: Node

    def __post_init__(self):
        self._normalize_path()
        if not isinstance(self.node, Node):
            raise TypeError(f"ReplaceNode needs a Node, got {type(self.node).__name__}")

    def __repr__(self) -> str:
        return f"ReplaceNode({format_path(self.path)}, {self.node!r})"


@dataclass(frozen=True, slots=True)
class RemoveAttribute(Patch):
    path: Path
    key: str

    def __post_init__(self):
        self._normalize_path()

    def __repr__(self) -> str:
        return f"RemoveAttribute({format_path(self.path)}, {self.key!r})"


@dataclass(frozen=True, slots=True)
class SetAttribute(Patch):
    path: Path
    key: str
    value: Attribute

    def __post_init__(self):
        self._normalize_path()
        object.__setattr__(self, 'value', attribute(self.value))

    def __repr__(self) -> str:
        return f"SetAttribute({format_path(self.path)}, {self.key!r}, {self.value!r})"


# ═══════════════════════════════════════════════════════════════════
#  WORKING COPY
# ═══════════════════════════════════════════════════════════════════

class _Slot:
    """Mutable stand-in for a Node while a script is being replayed."""
    __slots__ = ('tag', 'attributes', 'children', 'removed')

    def __init__(self, node: Node):
        self.tag = node.tag
        self.attributes = dict(node.attributes)
        self.children = [_Slot(child) for child in node.children]
        self.removed = False

    def freeze(self) -> Node:
        return Node(self.tag, self.attributes,
                    [c.freeze() for c in self.children if not c.removed])


def _resolve(root: _Slot, path: Path) -> Optional[_Slot]:
    slot = root
    for index in path:
        if index >= len(slot.children) or slot.children[index].removed:
            return None
        slot = slot.children[index]
    return slot


def _live_child(parent: _Slot, index: int) -> bool:
    return index < len(parent.children) and not parent.children[index].removed


# ═══════════════════════════════════════════════════════════════════
#  APPLY
# ═══════════════════════════════════════════════════════════════════

@dataclass
class ApplyResult:
    """Outcome of apply(): the new tree, or the first error met."""
    tree: Optional[Node] = None
    error: Optional[PatchError] = None
    failed_index: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Node:
        """Return the tree, raising the stored PatchError on failure."""
        if self.error is not None:
            raise self.error
        return self.tree

    def __repr__(self) -> str:
        if self.error is not None:
            return f"ApplyResult(FAILED at patch {self.failed_index}: {self.error})"
        return f"ApplyResult({self.tree!r})"


def apply(patches: Iterable[Patch], src: Node) -> ApplyResult:
    """
    Replay `patches` against `src` and return the updated tree.

    Neither `src` nor the nodes carried by the patches are modified or
    shared with the result.  The first patch that cannot be applied
    stops the replay; the result then carries the error and the index
    of the offending patch, and no tree.
    """
    patches = list(patches)
    logger.debug("applying %d patches", len(patches))

    root = _Slot(src)
    for i, p in enumerate(patches):
        try:
            root = _apply_one(p, root)
        except PatchError as exc:
            logger.debug("patch %d (%r) failed: %s", i, p, exc)
            return ApplyResult(error=exc, failed_index=i)

    return ApplyResult(tree=root.freeze())


def _apply_one(p: Patch, root: _Slot) -> _Slot:
    """Apply one patch to the working copy and return the (possibly new) root."""
    if isinstance(p, RemoveNode):
        if not p.path:
            raise RootRemoval(p.path)
        parent = _resolve(root, p.path[:-1])
        if parent is None:
            raise MissingParent(p.path)
        index = p.path[-1]
        if not _live_child(parent, index):
            raise MissingChild(p.path)
        parent.children[index].removed = True
        return root

    if isinstance(p, AppendNode):
        target = _resolve(root, p.path)
        if target is None and p.path:
            # diff() names the slot the new child will occupy, one past
            # the parent's last child.
            parent = _resolve(root, p.path[:-1])
            if parent is not None and p.path[-1] == len(parent.children):
                target = parent
        if target is None:
            raise MissingNode(p.path)
        target.children.append(_Slot(p.node))
        return root

    if isinstance(p, ReplaceNode):
        if not p.path:
            return _Slot(p.node)
        parent = _resolve(root, p.path[:-1])
        if parent is None:
            raise MissingParent(p.path)
        index = p.path[-1]
        if not _live_child(parent, index):
            raise MissingChild(p.path)
        parent.children[index] = _Slot(p.node)
        return root

    if isinstance(p, RemoveAttribute):
        target = _resolve(root, p.path)
        if target is None:
            raise MissingNode(p.path)
        target.attributes.pop(p.key, None)
        return root

    if isinstance(p, SetAttribute):
        target = _resolve(root, p.path)
        if target is None:
            raise MissingNode(p.path)
        target.attributes[p.key] = p.value
        return root

    raise TypeError(f"Not a patch: {p!r}")
