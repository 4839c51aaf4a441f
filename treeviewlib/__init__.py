"""TreeViewLib - Tree State Management for Flat List Views.

TreeViewLib presents a mutable, arbitrarily deep tree as a flat, scrollable
list whose subtrees can be expanded and collapsed. The TreeStateManager
keeps the tree, the sequence of visible rows and the observers in sync;
the TreeListAdapter answers the questions a list widget asks.

Quick start:
━━━━━━━━━━━━━━━━━━━━━━━━━━
    from treeviewlib import TreeStateManager, TreeBuilder

    manager = TreeStateManager()
    TreeBuilder(manager).add_all([("A", 0), ("B", 1), ("D", 2), ("C", 1)])
    manager.expand_direct_children("A")
    list(manager.get_visible_list())    # ['A', 'B', 'C']
━━━━━━━━━━━━━━━━━━━━━━━━━━

Logging goes through loguru and is disabled until
treeviewlib.logging_config.configure_logging() is called.
"""

__version__ = "0.3.0"

from loguru import logger

from .config import ExpandPolicy, TreeStateConfig
from .exceptions import (
    TreeStateError,
    UnknownIdError,
    DuplicateIdError,
    UnknownParentError,
    CyclicInsertionError,
    NotExpandableError,
    TreeConfigurationError,
)
from .core import (
    TreeNodeInfo,
    ExpansionResult,
    NodeStore,
    VisibilityProjector,
    VisibleSequence,
    ChangeEvent,
    ChangeKind,
    DataSetObserver,
    ObserverRegistry,
    Subscription,
)
from .manager import TreeStateManager
from .builder import TreeBuilder
from .adapter import TreeListAdapter, TreeRow, Indicator, ContextAction

logger.disable(__name__)

__all__ = [
    "__version__",
    # Config
    "ExpandPolicy",
    "TreeStateConfig",
    # Errors
    "TreeStateError",
    "UnknownIdError",
    "DuplicateIdError",
    "UnknownParentError",
    "CyclicInsertionError",
    "NotExpandableError",
    "TreeConfigurationError",
    # Core
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
    # Facade and presentation
    "TreeStateManager",
    "TreeBuilder",
    "TreeListAdapter",
    "TreeRow",
    "Indicator",
    "ContextAction",
]
