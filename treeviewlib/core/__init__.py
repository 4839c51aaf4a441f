"""Core components of TreeViewLib.

This package contains the building blocks the TreeStateManager composes:
the node store, the visibility projector and the observer registry.
"""

from .node import TreeNode, TreeNodeInfo, ExpansionResult
from .store import NodeStore
from .projector import VisibilityProjector, VisibleSequence
from .observer import (
    ChangeEvent,
    ChangeKind,
    DataSetObserver,
    ObserverRegistry,
    Subscription,
)

__all__ = [
    "TreeNode",
    "TreeNodeInfo",
    "ExpansionResult",
    "NodeStore",
    "VisibilityProjector",
    "VisibleSequence",
    "ChangeEvent",
    "ChangeKind",
    "DataSetObserver",
    "ObserverRegistry",
    "Subscription",
]
