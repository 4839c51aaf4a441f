"""Visibility projection for TreeViewLib.

The VisibilityProjector maintains the visible sequence: the pre-order
traversal of the tree restricted to nodes whose ancestors are all expanded.
It is updated incrementally instead of being recomputed on every query.

The pre-order invariant is what keeps updates cheap. All visible
descendants of a visible node form one contiguous run right after it, and
that run ends at the first entry whose level is not deeper than the node's.
Expanding splices a run in, collapsing deletes one, and both cost
O(run length) Python work plus one list splice.

id -> index lookups go through a position map. A mutation at index i only
shifts entries at i and later, so the map stays valid below the lowest
mutated index and the suffix is re-indexed on the next lookup.
"""

from collections.abc import Sequence
from typing import Dict, Generic, Iterable, Iterator, List, Set, Tuple

from .node import Id
from .store import NodeStore


class VisibleSequence(Sequence, Generic[Id]):
    """Read-only, live view of the visible sequence.

    Index-addressable like a list. It reflects every later mutation of the
    tree; take list(view) for a snapshot.
    """

    __slots__ = ('_projector',)

    def __init__(self, projector: 'VisibilityProjector[Id]'):
        self._projector = projector

    def __getitem__(self, index):
        # Slices come back as plain list copies
        return self._projector._sequence[index]

    def __len__(self) -> int:
        return len(self._projector)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._projector

    def __iter__(self) -> Iterator[Id]:
        return iter(self._projector._sequence)

    def index(self, node_id, start: int = 0, stop=None) -> int:
        position = self._projector.index_of(node_id)
        if position < start or (stop is not None and position >= stop):
            raise ValueError(f"{node_id!r} is not in the given range")
        return position

    def count(self, node_id) -> int:
        return 1 if node_id in self._projector else 0

    def __eq__(self, other: object) -> bool:
        if isinstance(other, VisibleSequence):
            return self._projector._sequence == other._projector._sequence
        if isinstance(other, (list, tuple)):
            return self._projector._sequence == list(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._projector._sequence!r})"


class VisibilityProjector(Generic[Id]):
    """Incrementally maintained visible sequence over a NodeStore.

    The projector reads structure (levels, children, flags) from the store
    but never changes it.
    """

    def __init__(self, store: NodeStore[Id]):
        """Initialize an empty projection.

        Args:
            store: NodeStore the projection is derived from
        """
        self._store = store
        self._sequence: List[Id] = []
        self._members: Set[Id] = set()
        self._positions: Dict[Id, int] = {}
        self._indexed_upto = 0  # _positions is exact for indexes below this
        self._view = VisibleSequence(self)

    # Queries

    def __len__(self) -> int:
        return len(self._sequence)

    def __contains__(self, node_id: object) -> bool:
        try:
            return node_id in self._members
        except TypeError:
            return False

    def __iter__(self) -> Iterator[Id]:
        return iter(self._sequence)

    def view(self) -> VisibleSequence[Id]:
        return self._view

    def id_at(self, index: int) -> Id:
        """Get the id displayed at a position.

        Raises:
            IndexError: If index is outside the visible sequence
        """
        if index < 0 or index >= len(self._sequence):
            raise IndexError(f"Position {index} is outside the visible sequence "
                             f"of {len(self._sequence)} rows")
        return self._sequence[index]

    def index_of(self, node_id: Id) -> int:
        """Get the position of a visible node.

        Raises:
            ValueError: If the node is not visible
        """
        if node_id not in self:
            raise ValueError(f"{node_id!r} is not visible")
        position = self._positions.get(node_id)
        if position is not None and position < self._indexed_upto:
            return position
        self._reindex()
        return self._positions[node_id]

    def run_end(self, index: int) -> int:
        """Find where the visible descendants of the node at index end.

        Args:
            index: Position of a visible node

        Returns:
            Exclusive end of the contiguous descendant run; equals index + 1
            when no descendant is visible
        """
        level = self._store.level(self._sequence[index])
        end = index + 1
        size = len(self._sequence)
        while end < size and self._store.level(self._sequence[end]) > level:
            end += 1
        return end

    def insertion_point(self, node_id: Id) -> int:
        """Position a newly visible node (already linked in the store) belongs at.

        The node goes after the visible run of its previous sibling, or
        right after its parent when it is the first child.
        """
        previous = self._store.previous_sibling(node_id)
        if previous is not None:
            return self.run_end(self.index_of(previous))
        parent_id = self._store.parent(node_id)
        if parent_id is None:
            return 0
        return self.index_of(parent_id) + 1

    # Mutation

    def insert_run(self, index: int, node_ids: Iterable[Id]) -> int:
        """Splice ids into the sequence at index.

        Returns:
            Number of ids inserted
        """
        run = list(node_ids)
        if not run:
            return 0
        self._sequence[index:index] = run
        self._members.update(run)
        self._invalidate_from(index)
        return len(run)

    def remove_run(self, start: int, stop: int) -> List[Id]:
        """Delete the entries in [start, stop) with a single range delete.

        Returns:
            The removed ids in sequence order
        """
        removed = self._sequence[start:stop]
        if not removed:
            return removed
        del self._sequence[start:stop]
        for node_id in removed:
            self._members.discard(node_id)
            self._positions.pop(node_id, None)
        self._invalidate_from(start)
        return removed

    def expand(self, node_id: Id, direct_only: bool = True) -> Tuple[int, int]:
        """Reveal the descendants of a visible node.

        The store's flags must already describe the expanded state.

        Args:
            node_id: Visible node being expanded
            direct_only: Reveal only the direct children; otherwise follow
                the expanded flags of deeper descendants

        Returns:
            (position of the first revealed row, number of rows revealed)
        """
        position = self.index_of(node_id) + 1
        # Anything already shown below the node is replaced, keeping the run exact
        self.remove_run(position, self.run_end(position - 1))
        count = self.insert_run(position, self._store.iter_revealed(node_id, direct_only))
        return position, count

    def collapse(self, node_id: Id) -> Tuple[int, List[Id]]:
        """Hide every visible descendant of a visible node.

        Returns:
            (position right after the node, removed ids in sequence order)
        """
        index = self.index_of(node_id)
        removed = self.remove_run(index + 1, self.run_end(index))
        return index + 1, removed

    def remove_subtree(self, node_id: Id) -> Tuple[int, List[Id]]:
        """Drop a visible node together with its visible descendants.

        Returns:
            (former position of the node, removed ids); (-1, []) when the
            node was not visible
        """
        if node_id not in self:
            return -1, []
        index = self.index_of(node_id)
        return index, self.remove_run(index, self.run_end(index))

    def clear(self) -> None:
        self._sequence.clear()
        self._members.clear()
        self._positions.clear()
        self._indexed_upto = 0

    # Internals

    def _invalidate_from(self, index: int) -> None:
        if index < self._indexed_upto:
            self._indexed_upto = index

    def _reindex(self) -> None:
        positions = self._positions
        sequence = self._sequence
        for index in range(self._indexed_upto, len(sequence)):
            positions[sequence[index]] = index
        self._indexed_upto = len(sequence)
