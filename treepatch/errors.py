"""Failures raised while replaying a patch script against a tree."""

from typing import Optional

from .core import Path, format_path


class PatchError(Exception):
    """Base class: a patch could not be applied at `path`."""

    reason = "patch could not be applied"

    def __init__(self, path: Path, message: Optional[str] = None):
        self.path = path
        super().__init__(message or f"{self.reason} at {format_path(path)}")


class RootRemoval(PatchError):
    """RemoveNode was given the empty path."""
    reason = "cannot remove the root node"


class MissingParent(PatchError):
    """The parent of the addressed node does not exist."""
    reason = "parent node does not exist"


class MissingChild(PatchError):
    """The parent exists but has no live child at the final index."""
    reason = "child does not exist"


class MissingNode(PatchError):
    """The addressed node does not exist."""
    reason = "node does not exist"
