"""List adapter binding a TreeStateManager to a flat list widget.

TreeListAdapter is the presentation-side counterpart of the manager: it
answers the questions a list widget asks (how many rows, which id is at a
position, what view type a row has, how far to indent it) and turns row
gestures into expand/collapse calls. It draws nothing; a toolkit-specific
subclass overrides row_content() and renders TreeRow objects.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, List, Optional

from loguru import logger

from .core.node import Id, TreeNodeInfo
from .core.observer import DataSetObserver
from .manager import TreeStateManager


class Indicator(Enum):
    """Expand/collapse indicator shown next to a row."""
    NONE = "none"            # Leaf, or adapter not collapsible
    EXPANDED = "expanded"
    COLLAPSED = "collapsed"


class ContextAction(Enum):
    """Actions offered by the long-press menu of a row."""
    EXPAND = "expand"
    COLLAPSE = "collapse"


@dataclass(frozen=True)
class TreeRow(Generic[Id]):
    """Everything needed to render one row.

    Attributes:
        position: Row index in the visible sequence
        info: Snapshot of the node shown in the row
        indentation: Indent in layout units
        indicator: Expand/collapse indicator to draw
        clickable: Whether the indicator reacts to clicks
        content: Toolkit-specific content from row_content()
    """
    position: int
    info: TreeNodeInfo[Id]
    indentation: int
    indicator: Indicator
    clickable: bool
    content: Any = None

    @property
    def id(self) -> Id:
        return self.info.id


class TreeListAdapter(Generic[Id]):
    """Feeds a list widget from a TreeStateManager.

    Ids double as row tags and stable item ids, so views can be recycled
    safely across expand/collapse.
    """

    def __init__(self,
                 manager: TreeStateManager[Id],
                 number_of_levels: Optional[int] = None,
                 indent_width: int = 0,
                 indicator_width: int = 0,
                 collapsible: bool = True,
                 handle_long_press: bool = False):
        """Initialize adapter.

        Args:
            manager: Tree state to present
            number_of_levels: Number of row view types (defaults to the
                manager's max_levels, or 1)
            indent_width: Indent per level
            indicator_width: Width of the widest expand/collapse indicator;
                the indent never gets narrower than this
            collapsible: Whether rows can be expanded and collapsed
            handle_long_press: Whether rows offer a long-press menu
        """
        self.manager = manager
        if number_of_levels is None:
            number_of_levels = manager.config.max_levels or 1
        self.number_of_levels = number_of_levels
        self.indicator_width = indicator_width
        self.indent_width = max(indent_width, indicator_width)
        self.collapsible = collapsible
        self.handle_long_press = handle_long_press

    # Observer delegation

    def register_data_set_observer(self, observer: DataSetObserver) -> None:
        self.manager.register_data_set_observer(observer)

    def unregister_data_set_observer(self, observer: DataSetObserver) -> None:
        self.manager.unregister_data_set_observer(observer)

    def refresh(self) -> None:
        self.manager.refresh()

    # List widget contract

    def get_count(self) -> int:
        return self.manager.get_visible_count()

    def get_tree_id(self, position: int) -> Id:
        return self.manager.id_at(position)

    def get_item(self, position: int) -> Id:
        return self.get_tree_id(position)

    def get_item_id(self, position: int) -> int:
        """Stable numeric item id of a row, derived from the node id."""
        return hash(self.get_tree_id(position))

    def get_tree_node_info(self, position: int) -> TreeNodeInfo[Id]:
        return self.manager.get_node_info(self.get_tree_id(position))

    def has_stable_ids(self) -> bool:
        return True

    def get_item_view_type(self, position: int) -> int:
        """Rows at the same level share a view type."""
        return self.get_tree_node_info(position).level

    def get_view_type_count(self) -> int:
        return self.number_of_levels

    def is_empty(self) -> bool:
        return self.get_count() == 0

    def are_all_items_enabled(self) -> bool:
        return True

    def is_enabled(self, position: int) -> bool:
        return True

    # Row model

    def set_indent_width(self, indent_width: int) -> None:
        self.indent_width = max(indent_width, self.indicator_width)

    def set_indicator_width(self, indicator_width: int) -> None:
        self.indicator_width = indicator_width
        self.indent_width = max(self.indent_width, indicator_width)

    def calculate_indentation(self, info: TreeNodeInfo[Id]) -> int:
        return self.indent_width * (info.level + (1 if self.collapsible else 0))

    def get_indicator(self, info: TreeNodeInfo[Id]) -> Indicator:
        if not info.with_children or not self.collapsible:
            return Indicator.NONE
        return Indicator.EXPANDED if info.expanded else Indicator.COLLAPSED

    def row_content(self, info: TreeNodeInfo[Id]) -> Any:
        """Content shown inside a row. Override in toolkit-specific adapters."""
        return str(info.id)

    def get_row(self, position: int) -> TreeRow[Id]:
        """Build the full description of the row at a position."""
        info = self.get_tree_node_info(position)
        return TreeRow(
            position=position,
            info=info,
            indentation=self.calculate_indentation(info),
            indicator=self.get_indicator(info),
            clickable=info.with_children and self.collapsible,
            content=self.row_content(info),
        )

    def get_rows(self) -> List[TreeRow[Id]]:
        return [self.get_row(position) for position in range(self.get_count())]

    # Gestures

    def expand_collapse(self, node_id: Id) -> None:
        """Toggle a node between expanded and collapsed."""
        info = self.manager.get_node_info(node_id)
        if not info.with_children:
            logger.debug("TREE_ADAPTER: node {!r} has no children, so there should be no "
                         "expand/collapse events", node_id)
            return
        if info.expanded:
            self.manager.collapse_children(node_id)
        else:
            self.manager.expand_direct_children(node_id)

    def on_indicator_click(self, node_id: Id) -> None:
        """Handle a click on a row's indicator; ignored when not collapsible."""
        if self.collapsible:
            self.expand_collapse(node_id)

    def context_actions(self, node_id: Id) -> List[ContextAction]:
        """Long-press menu entries for a row: the one applicable toggle, if any."""
        info = self.manager.get_node_info(node_id)
        if not (info.with_children and self.collapsible and self.handle_long_press):
            return []
        return [ContextAction.COLLAPSE if info.expanded else ContextAction.EXPAND]

    def on_context_action(self, node_id: Id, action: ContextAction) -> None:
        """Apply a long-press menu action to a row."""
        if action is ContextAction.EXPAND:
            self.manager.expand_direct_children(node_id)
        elif action is ContextAction.COLLAPSE:
            self.manager.collapse_children(node_id)
        else:
            raise ValueError(f"Unknown context action: {action!r}")
