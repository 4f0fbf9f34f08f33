"""
treepatch.diff — Positional tree diff.

Children are compared strictly by index: child i of the source against
child i of the target.  There is no key matching and no edit-distance
alignment, so moving an element shows up as a series of replacements.
"""

import logging
from typing import Sequence

from .core import Node, Path, as_path, child_path
from .patch import (
    AppendNode,
    Patch,
    RemoveAttribute,
    RemoveNode,
    ReplaceNode,
    SetAttribute,
)

logger = logging.getLogger(__name__)


def diff(src: Node, tar: Node, path: Sequence[int] = ()) -> list[Patch]:
    """
    Compute the patch script that turns `src` into `tar`.

    Every emitted path is prefixed with `path`, so a subtree can be
    diffed in place inside a larger tree.  Paths refer to the shape of
    `src` as it is now.

    Patches are emitted per node in this order:
        • ReplaceNode, alone, if the tags differ (nothing below it)
        • RemoveAttribute for keys only in src
        • SetAttribute for keys added or changed in tar
        • AppendNode for each extra trailing child of tar
        • then, child by child: recurse, or RemoveNode where tar
          has no child at that index
    """
    patches: list[Patch] = []
    _diff_node(src, tar, as_path(path), patches)
    logger.debug("diff produced %d patches", len(patches))
    return patches


def _diff_node(src: Node, tar: Node, path: Path, out: list[Patch]) -> None:
    if src is tar:
        return

    # A different tag replaces the whole subtree.
    if src.tag != tar.tag:
        out.append(ReplaceNode(path, tar.copy()))
        return

    _diff_attributes(src, tar, path, out)
    _diff_children(src, tar, path, out)


def _diff_attributes(src: Node, tar: Node, path: Path, out: list[Patch]) -> None:
    for key in src.attributes:
        if key not in tar.attributes:
            out.append(RemoveAttribute(path, key))

    for key, value in tar.attributes.items():
        if src.attributes.get(key) != value:
            out.append(SetAttribute(path, key, value))


def _diff_children(src: Node, tar: Node, path: Path, out: list[Patch]) -> None:
    n_src = len(src.children)
    n_tar = len(tar.children)

    for i in range(n_src, n_tar):
        out.append(AppendNode(child_path(path, i), tar.children[i].copy()))

    for i, src_child in enumerate(src.children):
        if i < n_tar:
            _diff_node(src_child, tar.children[i], child_path(path, i), out)
        else:
            out.append(RemoveNode(child_path(path, i)))
