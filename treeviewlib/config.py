"""Configuration system for TreeViewLib.

This module defines how users specify the behavior of a TreeStateManager:
how expansion treats previously expanded descendants, whether new subtrees
start expanded, how strictly invalid expand requests are handled, and how
deep the tree may grow.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class ExpandPolicy(Enum):
    """What expanding a node reveals.

    DIRECT always reveals the direct children only, all of them collapsed;
    collapsing a node therefore also collapses every descendant it hides.
    RESTORE keeps the expanded flags of hidden descendants, so expanding a
    node brings back the view as it was before it was collapsed.
    """
    DIRECT = "direct"      # Reveal direct children, collapsed
    RESTORE = "restore"    # Re-reveal previously expanded descendants


@dataclass
class TreeStateConfig:
    """Complete configuration for a TreeStateManager.

    The manager validates this configuration on construction and raises
    TreeConfigurationError when validate() reports problems.
    """

    # Expansion semantics
    expand_policy: ExpandPolicy = ExpandPolicy.DIRECT

    # A node that gains its first child starts expanded
    visible_by_default: bool = False

    # Error handling: raise NotExpandableError instead of returning a signal
    strict_expansion: bool = False

    # Shape limits (None = unlimited). Level of the deepest node is max_levels - 1
    max_levels: Optional[int] = None

    # Notify observers even when a mutation changed nothing
    notify_on_noop: bool = False

    # Convenience constructors for common configurations

    @classmethod
    def restoring(cls) -> 'TreeStateConfig':
        """Create config that restores previously expanded descendants.

        Returns:
            TreeStateConfig using ExpandPolicy.RESTORE
        """
        return cls(expand_policy=ExpandPolicy.RESTORE)

    @classmethod
    def expanded_by_default(cls, max_levels: Optional[int] = None) -> 'TreeStateConfig':
        """Create config where freshly built trees are fully visible.

        Args:
            max_levels: Optional limit on tree depth

        Returns:
            TreeStateConfig with visible_by_default enabled
        """
        return cls(visible_by_default=True, max_levels=max_levels)

    @classmethod
    def strict(cls) -> 'TreeStateConfig':
        """Create config that raises on every invalid expand request.

        Returns:
            TreeStateConfig with strict_expansion enabled
        """
        return cls(strict_expansion=True)

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if not isinstance(self.expand_policy, ExpandPolicy):
            errors.append(f"expand_policy must be an ExpandPolicy, got {self.expand_policy!r}")

        if self.max_levels is not None:
            if isinstance(self.max_levels, bool) or not isinstance(self.max_levels, int):
                errors.append("max_levels must be an integer")
            elif self.max_levels <= 0:
                errors.append("max_levels must be positive")

        return errors
