"""Test fixtures for TreeViewLib consumers.

These fixtures provide controlled access to manager state for testing
purposes without exposing implementation details as part of the public API.
"""

from typing import Any, Dict, List, Optional

from ..core.observer import ChangeEvent, ChangeKind, DataSetObserver
from ..manager import TreeStateManager


class RecordingObserver(DataSetObserver):
    """Observer that records every event it receives.

    When given a manager, it also snapshots the visible sequence at the
    moment of each callback, which lets tests verify that observers only
    ever see fully updated state.

    Example:
        observer = RecordingObserver(manager)
        manager.register_data_set_observer(observer)
        manager.expand_direct_children("A")
        assert observer.changed_count == 1
        assert observer.snapshots[-1] == list(manager.get_visible_list())
    """

    def __init__(self, manager: Optional[TreeStateManager] = None):
        self.manager = manager
        self.events: List[ChangeEvent] = []
        self.snapshots: List[List[Any]] = []

    def on_changed(self, event: ChangeEvent) -> None:
        self._record(event)

    def on_invalidated(self, event: ChangeEvent) -> None:
        self._record(event)

    @property
    def changed_count(self) -> int:
        return sum(1 for event in self.events if event.kind is ChangeKind.STRUCTURE)

    @property
    def invalidated_count(self) -> int:
        return sum(1 for event in self.events if event.kind is ChangeKind.INVALIDATED)

    @property
    def last_event(self) -> Optional[ChangeEvent]:
        return self.events[-1] if self.events else None

    def reset(self) -> None:
        self.events.clear()
        self.snapshots.clear()

    def _record(self, event: ChangeEvent) -> None:
        self.events.append(event)
        if self.manager is not None:
            self.snapshots.append(list(self.manager.get_visible_list()))


class TreeStateTestHelper:
    """Public test fixture for verifying TreeStateManager consistency.

    Recomputes the visible sequence from scratch with a plain pre-order walk
    and compares it with the incrementally maintained one.

    Example:
        helper = TreeStateTestHelper(manager)
        manager.collapse_children("B")
        helper.assert_consistent()
    """

    def __init__(self, manager: TreeStateManager):
        """Initialize with the manager under test.

        Args:
            manager: TreeStateManager to inspect
        """
        self._manager = manager

    def expected_visible_list(self) -> List[Any]:
        """Compute the visible sequence the slow way.

        Returns:
            Pre-order ids, descending only into expanded nodes
        """
        manager = self._manager
        result = []
        stack = list(reversed(manager.get_roots()))
        while stack:
            node_id = stack.pop()
            result.append(node_id)
            if manager.get_node_info(node_id).expanded:
                stack.extend(reversed(manager.get_children(node_id)))
        return result

    def check_invariants(self) -> List[str]:
        """Check the manager against the structural invariants.

        Returns:
            List of problems found (empty if consistent)
        """
        manager = self._manager
        problems = []

        visible = list(manager.get_visible_list())
        expected = self.expected_visible_list()
        if visible != expected:
            problems.append(f"visible sequence {visible!r} differs from pre-order projection {expected!r}")

        if manager.get_visible_count() != len(visible):
            problems.append(f"visible count {manager.get_visible_count()} != list length {len(visible)}")

        if len(set(visible)) != len(visible):
            problems.append("visible sequence contains duplicates")

        for position, node_id in enumerate(visible):
            if manager.index_of(node_id) != position:
                problems.append(f"index_of({node_id!r}) is {manager.index_of(node_id)}, expected {position}")

        for node_id in manager:
            info = manager.get_node_info(node_id)
            parent_id = manager.get_parent(node_id)
            expected_level = 0 if parent_id is None else manager.get_level(parent_id) + 1
            if info.level != expected_level:
                problems.append(f"{node_id!r} is at level {info.level}, expected {expected_level}")
            if info.expanded and not info.with_children:
                problems.append(f"leaf {node_id!r} is marked expanded")
            if info.visible != (node_id in expected):
                problems.append(f"{node_id!r} reports visible={info.visible}")

        return problems

    def assert_consistent(self) -> None:
        """Raise AssertionError listing every invariant violation."""
        problems = self.check_invariants()
        if problems:
            raise AssertionError("Tree state is inconsistent:\n  " + "\n  ".join(problems))

    def get_summary(self) -> Dict[str, Any]:
        """Returns high-level tree state for testing.

        Returns:
            Dictionary containing:
            - total_nodes: Number of nodes in the tree
            - visible_rows: Length of the visible sequence
            - expanded_nodes: Nodes whose expanded flag is set
            - max_level: Deepest level in the tree (-1 when empty)
        """
        infos = [self._manager.get_node_info(node_id) for node_id in self._manager]
        return {
            'total_nodes': len(infos),
            'visible_rows': self._manager.get_visible_count(),
            'expanded_nodes': sum(1 for info in infos if info.expanded),
            'max_level': max((info.level for info in infos), default=-1),
        }
