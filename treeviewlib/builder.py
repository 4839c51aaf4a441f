"""Tree construction helpers for TreeViewLib.

TreeBuilder fills a TreeStateManager either from explicit parent/child
relations or from a flat, depth-first listing of (id, level) pairs - the
shape an outline, an indented file or a table of contents naturally has.
"""

from typing import Generic, Iterable, List, Optional, Tuple

from loguru import logger

from .core.node import Id
from .exceptions import TreeConfigurationError
from .manager import TreeStateManager


class TreeBuilder(Generic[Id]):
    """Builds a tree in a TreeStateManager.

    Example:
        >>> manager = TreeStateManager()
        >>> builder = TreeBuilder(manager)
        >>> for node_id, level in [("A", 0), ("B", 1), ("D", 2), ("C", 1)]:
        ...     builder.sequentially_add_next_node(node_id, level)
        >>> manager.get_children("A")
        ['B', 'C']
    """

    def __init__(self, manager: TreeStateManager[Id]):
        """Initialize builder for a manager.

        Args:
            manager: TreeStateManager to add nodes to
        """
        self.manager = manager
        # Ancestors of the next sequential node: _path[level] is the last node at that level
        self._path: List[Id] = []

    def sequentially_add_next_node(self, node_id: Id, level: int) -> None:
        """Add the next node of a depth-first listing.

        Args:
            node_id: Identifier of the node
            level: Its level; 0 starts a new root, and a level can be at
                most one deeper than the previous node's

        Raises:
            TreeConfigurationError: If the level skips a level or is negative
        """
        if level < 0:
            raise TreeConfigurationError(f"Level of {node_id!r} must not be negative: {level}", node_id)
        if level > len(self._path):
            raise TreeConfigurationError(
                f"Node {node_id!r} at level {level} has no parent: the previous "
                f"node is at level {len(self._path) - 1}", node_id)

        parent_id = self._path[level - 1] if level > 0 else None
        self.manager.insert(parent_id, node_id)
        del self._path[level:]
        self._path.append(node_id)

    def add_all(self, nodes: Iterable[Tuple[Id, int]]) -> int:
        """Add a whole depth-first listing of (id, level) pairs.

        Returns:
            Number of nodes added
        """
        count = 0
        for node_id, level in nodes:
            self.sequentially_add_next_node(node_id, level)
            count += 1
        logger.debug("TREE_BUILDER: add_all count={}", count)
        return count

    def add_relation(self, parent_id: Id, child_id: Id) -> None:
        """Add child_id under parent_id, adding parent_id as a root if unknown."""
        if parent_id not in self.manager:
            self.manager.insert(None, parent_id)
        self.manager.insert(parent_id, child_id)

    def add_node(self, parent_id: Optional[Id], node_id: Id) -> None:
        """Add node_id as the last child of parent_id (a root for None)."""
        self.manager.insert(parent_id, node_id)

    def clear(self) -> None:
        """Remove every node from the manager and restart the listing."""
        self.manager.clear()
        self._path.clear()
