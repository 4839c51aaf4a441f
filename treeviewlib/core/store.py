"""Node store for TreeViewLib.

The NodeStore owns the structure of the tree: parent/child edges, sibling
order, per-node expanded flags and levels. It answers "get node by id" in
O(1) and "get children of id" in O(children).

The store knows nothing about the visible sequence or observers; the
TreeStateManager coordinates it with the VisibilityProjector.
"""

from typing import Dict, Generic, Iterator, List, Optional

from loguru import logger

from .node import ExpansionResult, Id, TreeNode, TreeNodeInfo
from ..exceptions import (
    CyclicInsertionError,
    DuplicateIdError,
    TreeConfigurationError,
    UnknownIdError,
    UnknownParentError,
)


class NodeStore(Generic[Id]):
    """Storage and structural bookkeeping for tree nodes.

    Roots are kept in their own ordered list; every other node lives in its
    parent's child list. Ids must be hashable and must not be None, since
    None marks the absent parent of a root.
    """

    def __init__(self, max_levels: Optional[int] = None):
        """Initialize an empty store.

        Args:
            max_levels: Maximum number of levels (None = unlimited)
        """
        self.max_levels = max_levels
        self._nodes: Dict[Id, TreeNode[Id]] = {}
        self._roots: List[Id] = []

    # Lookup

    def node(self, node_id: Id) -> TreeNode[Id]:
        """Get the internal record for a node.

        Raises:
            UnknownIdError: If the node is not in the store
        """
        try:
            return self._nodes[node_id]
        except (KeyError, TypeError):
            raise UnknownIdError(node_id) from None

    def contains(self, node_id: Id) -> bool:
        try:
            return node_id in self._nodes
        except TypeError:
            return False

    def get_info(self, node_id: Id, visible: Optional[bool] = None) -> TreeNodeInfo[Id]:
        """Build a snapshot of a node from the current state.

        Args:
            node_id: Node to describe
            visible: Known visibility of the node; computed from the
                ancestors' flags when omitted

        Returns:
            TreeNodeInfo reflecting the store at call time

        Raises:
            UnknownIdError: If the node is not in the store
        """
        record = self.node(node_id)
        if visible is None:
            visible = self.is_visible(node_id)
        return TreeNodeInfo(
            id=node_id,
            level=record.level,
            with_children=bool(record.children),
            expanded=record.expanded,
            visible=visible,
            parent_id=record.parent_id,
        )

    def roots(self) -> List[Id]:
        return list(self._roots)

    def children(self, node_id: Optional[Id]) -> List[Id]:
        """Get the ordered children of a node, or the roots for None."""
        if node_id is None:
            return list(self._roots)
        return list(self.node(node_id).children)

    def parent(self, node_id: Id) -> Optional[Id]:
        return self.node(node_id).parent_id

    def level(self, node_id: Id) -> int:
        return self.node(node_id).level

    def siblings(self, node_id: Id) -> List[Id]:
        """Get the ordered sibling list a node belongs to (node included)."""
        return list(self._sibling_list(self.node(node_id)))

    def next_sibling(self, node_id: Id) -> Optional[Id]:
        siblings = self._sibling_list(self.node(node_id))
        position = siblings.index(node_id)
        return siblings[position + 1] if position + 1 < len(siblings) else None

    def previous_sibling(self, node_id: Id) -> Optional[Id]:
        siblings = self._sibling_list(self.node(node_id))
        position = siblings.index(node_id)
        return siblings[position - 1] if position > 0 else None

    def is_ancestor(self, ancestor_id: Id, node_id: Id) -> bool:
        """Check whether ancestor_id is a proper ancestor of node_id."""
        current = self.node(node_id).parent_id
        while current is not None:
            if current == ancestor_id:
                return True
            current = self._nodes[current].parent_id
        return False

    def is_visible(self, node_id: Id) -> bool:
        """A node is visible iff every one of its ancestors is expanded."""
        current = self.node(node_id).parent_id
        while current is not None:
            record = self._nodes[current]
            if not record.expanded:
                return False
            current = record.parent_id
        return True

    def iter_subtree(self, node_id: Id) -> Iterator[Id]:
        """Iterate a node and all its descendants in pre-order."""
        stack = [node_id]
        self.node(node_id)
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed(self._nodes[current].children))

    def iter_revealed(self, node_id: Id, direct_only: bool = True) -> Iterator[Id]:
        """Iterate the descendants that become visible when node_id expands.

        Args:
            node_id: Node being expanded
            direct_only: Yield only the direct children; otherwise also
                descend into children whose own expanded flag is set

        Yields:
            Descendant ids in pre-order
        """
        children = self.node(node_id).children
        if direct_only:
            yield from children
            return
        stack = list(reversed(children))
        while stack:
            current = stack.pop()
            yield current
            record = self._nodes[current]
            if record.expanded:
                stack.extend(reversed(record.children))

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return self.contains(node_id)

    def __iter__(self) -> Iterator[Id]:
        """Iterate every node id in pre-order, roots in order."""
        for root_id in list(self._roots):
            yield from self.iter_subtree(root_id)

    # Mutation

    def insert(self,
               parent_id: Optional[Id],
               node_id: Id,
               after: Optional[Id] = None,
               before: Optional[Id] = None) -> TreeNode[Id]:
        """Add a new leaf node.

        Args:
            parent_id: Parent of the new node, None for a new root
            node_id: Identifier of the new node
            after: Sibling the new node is placed right after
            before: Sibling the new node is placed right before
                (default: the new node becomes the last child)

        Returns:
            The new node record

        Raises:
            CyclicInsertionError: If parent_id is node_id itself
            DuplicateIdError: If node_id is already in the store
            UnknownParentError: If parent_id is given but absent
            UnknownIdError: If the named sibling is absent
            TreeConfigurationError: If the sibling belongs to another parent,
                the id is None, or max_levels would be exceeded
        """
        if node_id is None:
            raise TreeConfigurationError("Node id must not be None")
        if parent_id is not None and parent_id == node_id:
            raise CyclicInsertionError(node_id, parent_id)
        if self.contains(node_id):
            raise DuplicateIdError(node_id)
        if parent_id is not None and not self.contains(parent_id):
            raise UnknownParentError(node_id, parent_id)

        level = 0 if parent_id is None else self._nodes[parent_id].level + 1
        self._check_level(node_id, level)

        siblings = self._roots if parent_id is None else self._nodes[parent_id].children
        position = self._insertion_index(siblings, parent_id, after, before)

        record = TreeNode(node_id, parent_id, level)
        self._nodes[node_id] = record
        siblings.insert(position, node_id)

        logger.debug("NODE_STORE: insert node_id={} parent_id={} level={}",
                     node_id, parent_id, level)
        return record

    def remove(self, node_id: Id) -> List[Id]:
        """Delete a node and its entire subtree.

        Returns:
            Removed ids in pre-order, node_id first

        Raises:
            UnknownIdError: If the node is not in the store
        """
        record = self.node(node_id)
        removed = list(self.iter_subtree(node_id))

        self._unlink(record)
        for removed_id in removed:
            del self._nodes[removed_id]

        logger.debug("NODE_STORE: remove node_id={} subtree_size={}", node_id, len(removed))
        return removed

    def move(self,
             node_id: Id,
             new_parent_id: Optional[Id],
             after: Optional[Id] = None,
             before: Optional[Id] = None) -> None:
        """Re-link a node, with its subtree, under a new parent.

        Levels of the moved subtree are recomputed from the new parent.

        Raises:
            UnknownIdError: If the node or a named sibling is absent
            UnknownParentError: If new_parent_id is given but absent
            CyclicInsertionError: If new_parent_id is node_id or a descendant
            TreeConfigurationError: If a sibling is invalid or max_levels
                would be exceeded
        """
        record = self.node(node_id)
        if new_parent_id is not None:
            if new_parent_id == node_id:
                raise CyclicInsertionError(node_id, new_parent_id)
            if not self.contains(new_parent_id):
                raise UnknownParentError(node_id, new_parent_id)
            if self.is_ancestor(node_id, new_parent_id):
                raise CyclicInsertionError(node_id, new_parent_id)
        if node_id in (after, before):
            raise TreeConfigurationError(
                f"Node {node_id!r} cannot be placed relative to itself", node_id)

        new_level = 0 if new_parent_id is None else self._nodes[new_parent_id].level + 1
        delta = new_level - record.level
        subtree = list(self.iter_subtree(node_id))
        deepest = max(self._nodes[member].level for member in subtree) + delta
        self._check_level(node_id, deepest)

        new_siblings = self._roots if new_parent_id is None else self._nodes[new_parent_id].children
        # Validate the position before touching any edge
        self._insertion_index(
            [sibling for sibling in new_siblings if sibling != node_id],
            new_parent_id, after, before)

        self._unlink(record, collapse_parent=record.parent_id != new_parent_id)
        position = self._insertion_index(new_siblings, new_parent_id, after, before)
        new_siblings.insert(position, node_id)
        record.parent_id = new_parent_id
        for member in subtree:
            self._nodes[member].level += delta

        logger.debug("NODE_STORE: move node_id={} new_parent_id={} level_delta={}",
                     node_id, new_parent_id, delta)

    def set_expanded(self, node_id: Id, expanded: bool) -> ExpansionResult:
        """Set the expanded flag of a node.

        Returns:
            CHANGED, UNCHANGED, or NOT_EXPANDABLE for a node without children

        Raises:
            UnknownIdError: If the node is not in the store
        """
        record = self.node(node_id)
        if not record.children:
            return ExpansionResult.NOT_EXPANDABLE
        if record.expanded == expanded:
            return ExpansionResult.UNCHANGED
        record.expanded = expanded
        return ExpansionResult.CHANGED

    def clear(self) -> None:
        self._nodes.clear()
        self._roots.clear()

    # Internals

    def _sibling_list(self, record: TreeNode[Id]) -> List[Id]:
        if record.is_root():
            return self._roots
        return self._nodes[record.parent_id].children

    def _unlink(self, record: TreeNode[Id], collapse_parent: bool = True) -> None:
        """Detach a node from its sibling list, collapsing a parent left childless."""
        self._sibling_list(record).remove(record.node_id)
        if collapse_parent and record.parent_id is not None:
            parent = self._nodes[record.parent_id]
            if not parent.children:
                parent.expanded = False

    def _insertion_index(self,
                         siblings: List[Id],
                         parent_id: Optional[Id],
                         after: Optional[Id],
                         before: Optional[Id]) -> int:
        if after is not None and before is not None:
            raise TreeConfigurationError("Specify at most one of 'after' and 'before'")
        anchor = after if after is not None else before
        if anchor is None:
            return len(siblings)
        if not self.contains(anchor):
            raise UnknownIdError(anchor)
        try:
            position = siblings.index(anchor)
        except ValueError:
            raise TreeConfigurationError(
                f"Node {anchor!r} is not a child of {parent_id!r}", anchor) from None
        return position + 1 if after is not None else position

    def _check_level(self, node_id: Id, level: int) -> None:
        if self.max_levels is not None and level >= self.max_levels:
            raise TreeConfigurationError(
                f"Node {node_id!r} would be at level {level}, "
                f"but the tree allows only {self.max_levels} levels", node_id)
