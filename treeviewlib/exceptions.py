"""Exception hierarchy for TreeViewLib.

Structural violations (unknown ids, duplicate ids, unknown parents, cycles,
misconfigured trees) are programming errors and are always raised.

NotExpandableError is the one recoverable condition: by default the manager
reports it as ExpansionResult.NOT_EXPANDABLE and only raises it when
TreeStateConfig.strict_expansion is set.
"""

from typing import Any, Dict, Optional


class TreeStateError(Exception):
    """Base class for every error raised by TreeViewLib."""

    def __init__(self, message: str, node_id: Any = None):
        self.node_id = node_id
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Describe the error as a plain dictionary.

        Returns:
            Dictionary with the error type, message and offending node id
        """
        return {
            'error_type': type(self).__name__,
            'message': str(self),
            'node_id': self.node_id,
        }


class UnknownIdError(TreeStateError, LookupError):
    """An operation referenced a node id that is not in the tree."""

    def __init__(self, node_id: Any):
        super().__init__(f"Node {node_id!r} is not in the tree", node_id)


class DuplicateIdError(TreeStateError):
    """An insertion used an id that is already in the tree."""

    def __init__(self, node_id: Any):
        super().__init__(f"Node {node_id!r} is already in the tree", node_id)


class UnknownParentError(TreeStateError, LookupError):
    """An insertion named a parent that is not in the tree."""

    def __init__(self, node_id: Any, parent_id: Any):
        self.parent_id = parent_id
        super().__init__(
            f"Cannot add {node_id!r}: parent {parent_id!r} is not in the tree",
            node_id,
        )


class CyclicInsertionError(TreeStateError):
    """An insertion or move would place a node under itself."""

    def __init__(self, node_id: Any, parent_id: Any):
        self.parent_id = parent_id
        super().__init__(
            f"Cannot place {node_id!r} under {parent_id!r}: "
            f"{parent_id!r} is {node_id!r} or one of its descendants",
            node_id,
        )


class NotExpandableError(TreeStateError):
    """Expand or collapse was requested on a node without children."""

    def __init__(self, node_id: Any):
        super().__init__(
            f"Node {node_id!r} has no children and cannot be expanded or collapsed",
            node_id,
        )


class TreeConfigurationError(TreeStateError):
    """The tree shape or the manager configuration is invalid.

    Raised for invalid TreeStateConfig values, siblings that do not belong
    to the given parent, level limits, and level jumps in TreeBuilder.
    """

    def __init__(self, message: str, node_id: Optional[Any] = None):
        super().__init__(message, node_id)
