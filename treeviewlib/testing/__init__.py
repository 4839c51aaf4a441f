"""Public testing utilities for TreeViewLib consumers.

This module provides stable testing interfaces that allow consumers
to verify tree state behavior without depending on internal implementation
details.
"""

from .fixtures import RecordingObserver, TreeStateTestHelper

__all__ = ['RecordingObserver', 'TreeStateTestHelper']
