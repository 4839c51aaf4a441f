"""TreeStateManager - the public facade of TreeViewLib.

The manager composes the NodeStore, the VisibilityProjector and the
ObserverRegistry. It is the only component allowed to mutate them, which
keeps the three consistent: every mutation updates the store, then the
visible sequence, and only then notifies observers. An observer querying
the manager from inside its callback therefore always sees the
post-mutation state.

Example:
    >>> manager = TreeStateManager()
    >>> root = manager.insert(None, "A")
    >>> child = manager.insert("A", "B")
    >>> manager.expand_direct_children("A")
    <ExpansionResult.CHANGED: 'changed'>
    >>> list(manager.get_visible_list())
    ['A', 'B']
"""

import functools
from typing import Callable, Generic, Iterator, List, Optional

from loguru import logger

from .config import ExpandPolicy, TreeStateConfig
from .core.node import ExpansionResult, Id, TreeNodeInfo
from .core.observer import (
    ChangeEvent,
    ChangeKind,
    DataSetObserver,
    ObserverRegistry,
    Subscription,
)
from .core.projector import VisibilityProjector, VisibleSequence
from .core.store import NodeStore
from .exceptions import NotExpandableError, TreeConfigurationError, TreeStateError


def _operation(name: str):
    """Attach the operation name and node id to log records of a mutation."""
    def decorate(method):
        @functools.wraps(method)
        def wrapper(self, node_id, *args, **kwargs):
            with logger.contextualize(operation=name, node_id=node_id):
                return method(self, node_id, *args, **kwargs)
        return wrapper
    return decorate


class TreeStateManager(Generic[Id]):
    """Mutable tree projected onto a flat list of visible rows.

    Node ids are caller-supplied, hashable and stable: the manager never
    reassigns them, so the presentation layer can use them as row tags and
    stable item ids.

    All operations are synchronous and expected to run on one thread.
    """

    def __init__(self, config: Optional[TreeStateConfig] = None):
        """Create an empty tree.

        Args:
            config: Behavior configuration (defaults to TreeStateConfig())

        Raises:
            TreeConfigurationError: If the configuration is invalid
        """
        self.config = config or TreeStateConfig()
        config_errors = self.config.validate()
        if config_errors:
            raise TreeConfigurationError(
                f"Invalid configuration: {'; '.join(config_errors)}"
            )

        self._store: NodeStore[Id] = NodeStore(max_levels=self.config.max_levels)
        self._projector: VisibilityProjector[Id] = VisibilityProjector(self._store)
        self._observers = ObserverRegistry()

    # Read API

    def get_visible_count(self) -> int:
        return len(self._projector)

    def get_visible_list(self) -> VisibleSequence[Id]:
        """Get the visible sequence as a read-only, index-addressable view."""
        return self._projector.view()

    def get_node_info(self, node_id: Id) -> TreeNodeInfo[Id]:
        """Get a snapshot of a node built from the current state.

        Raises:
            UnknownIdError: If the node is not in the tree
        """
        return self._store.get_info(node_id, visible=node_id in self._projector)

    def get_roots(self) -> List[Id]:
        return self._store.roots()

    def get_children(self, node_id: Optional[Id] = None) -> List[Id]:
        """Get the ordered children of a node (the roots for None)."""
        return self._store.children(node_id)

    def get_parent(self, node_id: Id) -> Optional[Id]:
        return self._store.parent(node_id)

    def get_level(self, node_id: Id) -> int:
        return self._store.level(node_id)

    def get_next_sibling(self, node_id: Id) -> Optional[Id]:
        return self._store.next_sibling(node_id)

    def get_previous_sibling(self, node_id: Id) -> Optional[Id]:
        return self._store.previous_sibling(node_id)

    def is_visible(self, node_id: Id) -> bool:
        """Check whether a node is part of the visible sequence.

        Raises:
            UnknownIdError: If the node is not in the tree
        """
        self._store.node(node_id)
        return node_id in self._projector

    def index_of(self, node_id: Id) -> Optional[int]:
        """Get the row position of a node, or None if it is hidden.

        Raises:
            UnknownIdError: If the node is not in the tree
        """
        if not self.is_visible(node_id):
            return None
        return self._projector.index_of(node_id)

    def id_at(self, position: int) -> Id:
        """Get the id shown at a row position.

        Raises:
            IndexError: If position is outside the visible sequence
        """
        return self._projector.id_at(position)

    def get_hierarchy_description(self) -> str:
        """Describe the whole tree as indented text, one node per line.

        Expanded nodes are marked [-], collapsed nodes with children [+],
        and nodes outside the visible sequence (hidden).
        """
        lines = []
        for node_id in self._store:
            record = self._store.node(node_id)
            line = "  " * record.level + str(node_id)
            if record.children:
                line += " [-]" if record.expanded else " [+]"
            if node_id not in self._projector:
                line += " (hidden)"
            lines.append(line)
        return "\n".join(lines)

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._store

    def __iter__(self) -> Iterator[Id]:
        """Iterate every node id in pre-order, hidden nodes included."""
        return iter(self._store)

    # Structural mutations

    def insert(self,
               parent_id: Optional[Id],
               node_id: Id,
               after: Optional[Id] = None,
               before: Optional[Id] = None) -> TreeNodeInfo[Id]:
        """Add a new leaf node.

        The node becomes visible if its parent is visible and expanded (roots
        are always visible). With visible_by_default, a parent gaining its
        first child is expanded as well.

        Args:
            parent_id: Parent of the new node, None for a new root
            node_id: Identifier of the new node
            after: Sibling to place the node right after
            before: Sibling to place the node right before
                (default: append as the last child)

        Returns:
            Snapshot of the inserted node

        Raises:
            DuplicateIdError, UnknownParentError, CyclicInsertionError,
            UnknownIdError, TreeConfigurationError
        """
        with logger.contextualize(operation="insert", node_id=node_id):
            self._store.insert(parent_id, node_id, after=after, before=before)

            first_child = (parent_id is not None
                           and len(self._store.node(parent_id).children) == 1)
            if first_child:
                self._apply_visible_by_default(parent_id)

            if parent_id is None or self._shows_children(parent_id):
                position = self._projector.insertion_point(node_id)
                self._projector.insert_run(position, [node_id])
                # A parent row showing its first child also gains an indicator
                changed = self._projector.index_of(parent_id) if first_child else -1
                self._notify(ChangeKind.STRUCTURE, node_id, position, inserted=1,
                             changed_position=changed)
            elif first_child and parent_id in self._projector:
                # Parent row now shows an expand indicator
                self._notify(ChangeKind.INVALIDATED, parent_id,
                             self._projector.index_of(parent_id))

            return self.get_node_info(node_id)

    @_operation("remove")
    def remove(self, node_id: Id) -> List[Id]:
        """Delete a node and its entire subtree.

        Returns:
            Removed ids in pre-order, node_id first

        Raises:
            UnknownIdError: If the node is not in the tree
        """
        parent_id = self._store.parent(node_id)
        position, removed_rows = self._projector.remove_subtree(node_id)
        removed = self._store.remove(node_id)

        parent_emptied = (parent_id is not None and parent_id in self._projector
                          and not self._store.node(parent_id).children)
        if removed_rows:
            changed = self._projector.index_of(parent_id) if parent_emptied else -1
            self._notify(ChangeKind.STRUCTURE, node_id, position,
                         removed=len(removed_rows), changed_position=changed)
        elif parent_emptied:
            self._notify(ChangeKind.INVALIDATED, parent_id,
                         self._projector.index_of(parent_id))
        return removed

    @_operation("move")
    def move(self,
             node_id: Id,
             new_parent_id: Optional[Id],
             after: Optional[Id] = None,
             before: Optional[Id] = None) -> None:
        """Re-link a node, with its subtree, under a new parent.

        A subtree that stays visible keeps its expanded view. A subtree that
        becomes visible is shown collapsed under ExpandPolicy.DIRECT and with
        its previous expansion under ExpandPolicy.RESTORE.

        Raises:
            UnknownIdError, UnknownParentError, CyclicInsertionError,
            TreeConfigurationError
        """
        record = self._store.node(node_id)
        old_parent_id = record.parent_id
        old_position, old_rows = self._projector.remove_subtree(node_id)
        try:
            self._store.move(node_id, new_parent_id, after=after, before=before)
        except TreeStateError:
            if old_rows:
                self._projector.insert_run(old_position, old_rows)
            raise

        if new_parent_id is not None and len(self._store.node(new_parent_id).children) == 1:
            self._apply_visible_by_default(new_parent_id)

        new_rows: List[Id] = []
        if new_parent_id is None or self._shows_children(new_parent_id):
            if old_rows:
                new_rows = old_rows
            else:
                new_rows = [node_id]
                if self.config.expand_policy is ExpandPolicy.DIRECT:
                    self._store.set_expanded(node_id, False)
                elif record.expanded:
                    new_rows.extend(self._store.iter_revealed(node_id, direct_only=False))
            self._projector.insert_run(self._projector.insertion_point(node_id), new_rows)
        elif self.config.expand_policy is ExpandPolicy.DIRECT:
            self._collapse_all(old_rows)

        if old_rows or new_rows:
            # Not a single splice; observers re-read the whole sequence
            self._notify(ChangeKind.STRUCTURE, node_id, -1,
                         inserted=len(new_rows), removed=len(old_rows))
        elif any(parent is not None and parent in self._projector
                 for parent in (old_parent_id, new_parent_id)):
            self._notify(ChangeKind.INVALIDATED, node_id, -1)

    @_operation("expand")
    def expand_direct_children(self, node_id: Id) -> ExpansionResult:
        """Expand a node, revealing its children right after it.

        Under ExpandPolicy.DIRECT only the direct children are revealed, all
        collapsed. Under ExpandPolicy.RESTORE descendants that were expanded
        when the node was collapsed are revealed again as well.

        Returns:
            CHANGED, UNCHANGED if already expanded, or NOT_EXPANDABLE for a
            node without children

        Raises:
            UnknownIdError: If the node is not in the tree
            NotExpandableError: For a childless node when strict_expansion is set
        """
        record = self._store.node(node_id)
        if not record.children:
            return self._not_expandable(node_id)
        if record.expanded:
            return self._unchanged(node_id)

        direct = self.config.expand_policy is ExpandPolicy.DIRECT
        if direct:
            self._collapse_all(record.children)
        self._store.set_expanded(node_id, True)

        if node_id in self._projector:
            position, count = self._projector.expand(node_id, direct_only=direct)
            self._notify(ChangeKind.STRUCTURE, node_id, position, inserted=count,
                         changed_position=position - 1)
        return ExpansionResult.CHANGED

    @_operation("expand_all")
    def expand_everything_below(self, node_id: Id) -> ExpansionResult:
        """Expand a node and every descendant that has children.

        Returns:
            CHANGED, UNCHANGED if the whole subtree was already expanded, or
            NOT_EXPANDABLE for a node without children

        Raises:
            UnknownIdError: If the node is not in the tree
            NotExpandableError: For a childless node when strict_expansion is set
        """
        if not self._store.node(node_id).children:
            return self._not_expandable(node_id)

        changed = False
        for member in self._store.iter_subtree(node_id):
            if self._store.set_expanded(member, True) is ExpansionResult.CHANGED:
                changed = True
        if not changed:
            return self._unchanged(node_id)

        if node_id in self._projector:
            position, count = self._projector.expand(node_id, direct_only=False)
            self._notify(ChangeKind.STRUCTURE, node_id, position, inserted=count,
                         changed_position=position - 1)
        return ExpansionResult.CHANGED

    @_operation("collapse")
    def collapse_children(self, node_id: Id) -> ExpansionResult:
        """Collapse a node, hiding all of its descendants.

        The hidden rows are one contiguous block right after the node and
        are removed with a single range delete. Collapsing a collapsed node
        is a no-op.

        Returns:
            CHANGED, UNCHANGED if already collapsed, or NOT_EXPANDABLE for a
            node without children

        Raises:
            UnknownIdError: If the node is not in the tree
            NotExpandableError: For a childless node when strict_expansion is set
        """
        record = self._store.node(node_id)
        if not record.children:
            return self._not_expandable(node_id)
        if not record.expanded:
            return self._unchanged(node_id)

        self._store.set_expanded(node_id, False)
        if node_id in self._projector:
            position, removed = self._projector.collapse(node_id)
            if self.config.expand_policy is ExpandPolicy.DIRECT:
                self._collapse_all(removed)
            self._notify(ChangeKind.STRUCTURE, node_id, position, removed=len(removed),
                         changed_position=position - 1)
        return ExpansionResult.CHANGED

    def clear(self) -> None:
        """Remove every node. Observers stay registered."""
        removed = len(self._projector)
        self._projector.clear()
        self._store.clear()
        logger.debug("TREE_STATE: clear removed_rows={}", removed)
        self._notify(ChangeKind.STRUCTURE, None, 0, removed=removed)

    def refresh(self) -> None:
        """Tell observers to re-read row contents.

        For callers that changed the data behind the rows without going
        through the structural API. Ids and positions are unchanged.
        """
        self._notify(ChangeKind.INVALIDATED, None, -1)

    # Observers

    def register_data_set_observer(self, observer: DataSetObserver) -> None:
        self._observers.register(observer)

    def unregister_data_set_observer(self, observer: DataSetObserver) -> None:
        """Stop notifying an observer. Unknown observers are ignored."""
        self._observers.unregister(observer)

    def subscribe(self, callback: Callable[[ChangeEvent], None]) -> Subscription:
        """Call callback with every ChangeEvent until unsubscribed."""
        return self._observers.subscribe(callback)

    def unsubscribe(self, subscription: Optional[Subscription]) -> bool:
        return self._observers.unsubscribe(subscription)

    # Internals

    def _shows_children(self, node_id: Id) -> bool:
        return node_id in self._projector and self._store.node(node_id).expanded

    def _apply_visible_by_default(self, parent_id: Id) -> None:
        """Expand a parent that just gained its first child, if configured.

        Under DIRECT a hidden parent stays collapsed, since DIRECT reveals
        nodes collapsed anyway.
        """
        if not self.config.visible_by_default:
            return
        if (self.config.expand_policy is ExpandPolicy.RESTORE
                or parent_id in self._projector):
            self._store.set_expanded(parent_id, True)

    def _collapse_all(self, node_ids: List[Id]) -> None:
        for node_id in node_ids:
            self._store.set_expanded(node_id, False)

    def _not_expandable(self, node_id: Id) -> ExpansionResult:
        logger.debug("TREE_STATE: node {!r} has no children, so there should be no "
                     "expand/collapse events", node_id)
        if self.config.strict_expansion:
            raise NotExpandableError(node_id)
        self._notify_noop(node_id)
        return ExpansionResult.NOT_EXPANDABLE

    def _unchanged(self, node_id: Id) -> ExpansionResult:
        self._notify_noop(node_id)
        return ExpansionResult.UNCHANGED

    def _notify_noop(self, node_id: Id) -> None:
        if self.config.notify_on_noop:
            position = self._projector.index_of(node_id) if node_id in self._projector else -1
            self._notify(ChangeKind.STRUCTURE, node_id, position)

    def _notify(self,
                kind: ChangeKind,
                node_id: Optional[Id],
                position: int,
                inserted: int = 0,
                removed: int = 0,
                changed_position: int = -1) -> None:
        self._observers.notify(ChangeEvent(
            kind=kind,
            node_id=node_id,
            position=position,
            inserted=inserted,
            removed=removed,
            changed_position=changed_position,
        ))
