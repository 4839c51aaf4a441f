#!/usr/bin/env python3
"""Demo script for TreeViewLib.

This script loads a directory tree into a TreeStateManager and renders it
as a flat text list, toggling a few nodes the way a user clicking row
indicators would.

Usage:
    python examples/outline_view_demo.py [directory]
"""

import sys
from pathlib import Path

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from treeviewlib import (
    ChangeEvent,
    DataSetObserver,
    Indicator,
    TreeListAdapter,
    TreeStateConfig,
    TreeStateManager,
)
from treeviewlib.logging_config import configure_logging

MARKERS = {
    Indicator.EXPANDED: "[-]",
    Indicator.COLLAPSED: "[+]",
    Indicator.NONE: "   ",
}


class TextListAdapter(TreeListAdapter):
    """Shows rows as indented file names."""

    def row_content(self, info):
        return info.id.name or str(info.id)


class PrintingObserver(DataSetObserver):
    """Prints every change the list widget would be told about."""

    def on_changed(self, event: ChangeEvent):
        print(f"  -> changed at {event.position}: +{event.inserted} -{event.removed}")

    def on_invalidated(self, event: ChangeEvent):
        print("  -> rows must be redrawn")


def load_directory(manager: TreeStateManager, root: Path, max_depth: int = 3):
    """Insert root and its subdirectories/files up to max_depth."""
    manager.insert(None, root)
    pending = [(root, 0)]
    while pending:
        directory, depth = pending.pop()
        if depth + 1 >= max_depth:
            continue
        try:
            entries = sorted(directory.iterdir(), key=lambda p: (not p.is_dir(), p.name.lower()))
        except PermissionError:
            continue
        for entry in entries:
            if entry.name.startswith("."):
                continue
            manager.insert(directory, entry)
            if entry.is_dir():
                pending.append((entry, depth + 1))


def render(adapter: TreeListAdapter):
    for row in adapter.get_rows():
        print(f"{row.position:3d} {' ' * row.indentation}{MARKERS[row.indicator]} {row.content}")


def main():
    root = Path(sys.argv[1] if len(sys.argv) > 1 else ".").resolve()
    if "--debug" in sys.argv:
        configure_logging("DEBUG")

    manager = TreeStateManager(TreeStateConfig(max_levels=3))
    load_directory(manager, root)

    adapter = TextListAdapter(manager, indent_width=2)
    adapter.set_indicator_width(len(MARKERS[Indicator.EXPANDED]))
    adapter.register_data_set_observer(PrintingObserver())

    print(f"\n=== {root} ({len(manager)} nodes) ===")
    render(adapter)

    print("\n=== Click the root indicator ===")
    adapter.on_indicator_click(root)
    render(adapter)

    directories = [node_id for node_id in manager.get_children(root)
                   if manager.get_node_info(node_id).with_children]
    if directories:
        print(f"\n=== Expand {directories[0].name} ===")
        adapter.on_indicator_click(directories[0])
        render(adapter)

    print("\n=== Collapse the root again ===")
    adapter.on_indicator_click(root)
    render(adapter)


if __name__ == "__main__":
    main()
