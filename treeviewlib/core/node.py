"""Node records and read-only node snapshots for TreeViewLib.

TreeNode is the NodeStore's internal, mutable record. It is intentionally
kept simple - a data container. The store owns the records and is the only
component that changes them.

TreeNodeInfo is what callers get back: an immutable snapshot built from the
store at call time.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Hashable, List, Optional, TypeVar

Id = TypeVar('Id', bound=Hashable)


class ExpansionResult(Enum):
    """Outcome of an expand or collapse request."""
    CHANGED = "changed"                # Visible sequence was updated
    UNCHANGED = "unchanged"            # Already in the requested state
    NOT_EXPANDABLE = "not_expandable"  # Node has no children


class TreeNode(Generic[Id]):
    """Structural record for one node of the tree.

    Holds the parent id (None for roots), the ordered child ids, the
    expanded flag and the level. The level is always the parent's level
    plus one; the store recomputes it when a subtree moves.
    """

    __slots__ = ('node_id', 'parent_id', 'children', 'expanded', 'level')

    def __init__(self, node_id: Id, parent_id: Optional[Id] = None, level: int = 0):
        self.node_id = node_id
        self.parent_id = parent_id
        self.children: List[Id] = []
        self.expanded = False
        self.level = level

    def is_root(self) -> bool:
        return self.parent_id is None

    def is_leaf(self) -> bool:
        return not self.children

    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}(id={self.node_id!r}, level={self.level}, "
                f"children={len(self.children)}, expanded={self.expanded})")


@dataclass(frozen=True)
class TreeNodeInfo(Generic[Id]):
    """Read-only snapshot of a node, as seen by the presentation layer.

    Attributes:
        id: The caller-supplied node identifier
        level: Depth of the node (roots are level 0)
        with_children: True if the node currently has at least one child
        expanded: True if the node's children are visible
        visible: True if every ancestor of the node is expanded
        parent_id: Identifier of the parent, None for roots
    """
    id: Id
    level: int
    with_children: bool
    expanded: bool
    visible: bool = True
    parent_id: Optional[Id] = None

    def is_with_children(self) -> bool:
        return self.with_children

    def is_expanded(self) -> bool:
        return self.expanded

    def is_visible(self) -> bool:
        return self.visible
