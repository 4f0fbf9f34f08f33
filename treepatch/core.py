"""
treepatch.core — Element Trees and Paths
========================================

DATA MODEL
══════════


§1  NODES
─────────

A Node is a labeled, attributed, ordered tree:

    Node(tag, attributes, children)

        tag          a string label ("div", "button", "text", ...)
        attributes   an UNORDERED mapping of string keys to Attributes
        children     an ORDERED tuple of Nodes

Nodes are VALUES.  Every node exclusively owns its children: there is
no sharing, no parent pointer, and no cycle.  Two nodes are equal when
their tags, their attribute mappings, and their children (position by
position) are equal.  Attribute insertion order never matters.

The constructor copies the attribute mapping and freezes the children
into a tuple, so a Node never observes later mutation of the
containers it was built from.


§2  ATTRIBUTES
──────────────

An Attribute is a closed variant over three literal kinds:

    String("primary")      Number(12.0)      Bool(True)

Equality is STRUCTURAL and includes the variant:

    Number(1.0) != Bool(True)       (even though 1.0 == True in Python)
    Number(1)   == Number(1.0)      (Number always stores a float)

Plain Python values are coerced where a tree is built, so

    Node("input", {"type": "text", "size": 20, "disabled": False})

holds String("text"), Number(20.0) and Bool(False).


§3  PATHS
─────────

A Path is a tuple of child indices read from the root downward:

    ()          the root
    (0,)        the root's first child
    (0, 2)      the third child of the root's first child

A Path is a POSITIONAL COORDINATE, not a handle: it is meaningful only
against the exact tree shape it was computed from.  Once children are
inserted or removed, an old Path may name a different node or none.
"""

from dataclasses import dataclass
from typing import Any, Iterator, Optional, Sequence


# ═══════════════════════════════════════════════════════════════════
#  ATTRIBUTES
# ═══════════════════════════════════════════════════════════════════

class Attribute:
    """Base class for attribute values.  Not instantiated directly."""
    __slots__ = ()


@dataclass(frozen=True, slots=True)
class String(Attribute):
    """A string-valued attribute, e.g. String("submit")."""
    value: str

    def __post_init__(self):
        if not isinstance(self.value, str):
            raise TypeError(f"String attribute needs a str, got {type(self.value).__name__}")

    def __repr__(self) -> str:
        return f"String({self.value!r})"


@dataclass(frozen=True, slots=True)
class Number(Attribute):
    """A numeric attribute.  The payload is always stored as a float."""
    value: float

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise TypeError(f"Number attribute needs an int or float, got {type(self.value).__name__}")
        object.__setattr__(self, 'value', float(self.value))

    def __repr__(self) -> str:
        return f"Number({self.value!r})"


@dataclass(frozen=True, slots=True)
class Bool(Attribute):
    """A boolean attribute, e.g. Bool(True)."""
    value: bool

    def __post_init__(self):
        if type(self.value) is not bool:
            raise TypeError(f"Bool attribute needs a bool, got {type(self.value).__name__}")

    def __repr__(self) -> str:
        return f"Bool({self.value!r})"


def attribute(value: Any) -> Attribute:
    """
    Coerce a Python primitive into an Attribute.

    Mapping:
        Attribute  → unchanged
        bool       → Bool
        int/float  → Number
        str        → String

    Anything else raises TypeError.
    """
    if isinstance(value, Attribute):
        return value
    # bool is a subclass of int, so it has to be checked first.
    if isinstance(value, bool):
        return Bool(value)
    if isinstance(value, (int, float)):
        return Number(value)
    if isinstance(value, str):
        return String(value)
    raise TypeError(f"Cannot use {type(value).__name__} as an attribute value")


# ═══════════════════════════════════════════════════════════════════
#  PATHS
# ═══════════════════════════════════════════════════════════════════

Path = tuple[int, ...]

ROOT: Path = ()


def as_path(seq: Sequence[int]) -> Path:
    """Normalize a sequence of child indices into a Path tuple."""
    if isinstance(seq, (str, bytes)):
        raise TypeError(f"Path must be a sequence of ints, got {type(seq).__name__}")
    path = tuple(seq)
    for index in path:
        if type(index) is not int:
            raise TypeError(f"Path elements must be ints, got {index!r}")
        if index < 0:
            raise ValueError(f"Path elements must be non-negative, got {index}")
    return path


def child_path(path: Path, index: int) -> Path:
    return path + (index,)


def parent_path(path: Path) -> Path:
    """The path of the node holding `path`.  The root has no parent."""
    if not path:
        raise ValueError("The root path has no parent")
    return path[:-1]


def format_path(path: Path) -> str:
    return "/".join(str(i) for i in path) or "(root)"


# ═══════════════════════════════════════════════════════════════════
#  NODES
# ═══════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class Node:
    """
    An element in a tree: a tag, keyed attributes, and ordered children.

    Examples:
        Node("br")
        Node("a", {"href": "/home"}, [Node("text", {"value": "Home"})])
    """
    tag: str
    attributes: dict[str, Attribute]
    children: tuple["Node", ...]

    def __init__(self, tag: str, attributes: Optional[dict[str, Any]] = None,
                 children: Sequence["Node"] = ()):
        if not isinstance(tag, str):
            raise TypeError(f"Node tag must be a str, got {type(tag).__name__}")
        attrs: dict[str, Attribute] = {}
        for key, value in (attributes or {}).items():
            if not isinstance(key, str):
                raise TypeError(f"Attribute keys must be str, got {key!r}")
            attrs[key] = attribute(value)
        kids = tuple(children)
        for child in kids:
            if not isinstance(child, Node):
                raise TypeError(f"Node children must be Nodes, got {type(child).__name__}")
        object.__setattr__(self, 'tag', tag)
        object.__setattr__(self, 'attributes', attrs)
        object.__setattr__(self, 'children', kids)

    def __hash__(self):
        return hash((self.tag, frozenset(self.attributes.items()), self.children))

    def copy(self) -> "Node":
        """Deep copy with fresh attribute dicts at every level."""
        return Node(self.tag, self.attributes, [c.copy() for c in self.children])

    def at(self, path: Sequence[int]) -> Optional["Node"]:
        """Return the node addressed by `path`, or None if it does not resolve."""
        node = self
        for index in as_path(path):
            if index >= len(node.children):
                return None
            node = node.children[index]
        return node

    def walk(self, path: Path = ROOT) -> Iterator[tuple[Path, "Node"]]:
        """Yield (path, node) for this node and every descendant, pre-order."""
        yield path, self
        for i, child in enumerate(self.children):
            yield from child.walk(child_path(path, i))

    def size(self) -> int:
        """Number of nodes in this subtree."""
        return 1 + sum(child.size() for child in self.children)

    def __repr__(self) -> str:
        parts = [repr(self.tag)]
        if self.attributes:
            parts.append(repr(self.attributes))
        if self.children:
            if len(self.children) <= 3:
                parts.append(repr(list(self.children)))
            else:
                parts.append(f"[...] len={len(self.children)}")
        return f"Node({', '.join(parts)})"
