"""Unit tests for TreeStateConfig validation and the exception hierarchy."""

import unittest

from treeviewlib import (
    CyclicInsertionError,
    DuplicateIdError,
    ExpandPolicy,
    NotExpandableError,
    TreeConfigurationError,
    TreeStateConfig,
    TreeStateError,
    UnknownIdError,
    UnknownParentError,
)


class TestTreeStateConfig(unittest.TestCase):
    """Test configuration defaults, presets and validation."""

    def test_defaults(self):
        config = TreeStateConfig()
        self.assertEqual(config.expand_policy, ExpandPolicy.DIRECT)
        self.assertFalse(config.visible_by_default)
        self.assertFalse(config.strict_expansion)
        self.assertIsNone(config.max_levels)
        self.assertFalse(config.notify_on_noop)
        self.assertEqual(config.validate(), [])

    def test_presets(self):
        self.assertEqual(TreeStateConfig.restoring().expand_policy, ExpandPolicy.RESTORE)
        self.assertTrue(TreeStateConfig.strict().strict_expansion)
        expanded = TreeStateConfig.expanded_by_default(max_levels=4)
        self.assertTrue(expanded.visible_by_default)
        self.assertEqual(expanded.max_levels, 4)
        for preset in (TreeStateConfig.restoring(), TreeStateConfig.strict(), expanded):
            self.assertEqual(preset.validate(), [])

    def test_invalid_values(self):
        errors = TreeStateConfig(expand_policy="direct", max_levels=-1).validate()
        self.assertEqual(len(errors), 2)
        self.assertTrue(any("expand_policy" in error for error in errors))
        self.assertTrue(any("positive" in error for error in errors))

    def test_max_levels_type(self):
        self.assertEqual(TreeStateConfig(max_levels=True).validate(),
                         ["max_levels must be an integer"])
        self.assertEqual(TreeStateConfig(max_levels=2.5).validate(),
                         ["max_levels must be an integer"])


class TestExceptions(unittest.TestCase):
    """Test error attributes and hierarchy."""

    def test_hierarchy(self):
        for error_type in (UnknownIdError, DuplicateIdError, UnknownParentError,
                           CyclicInsertionError, NotExpandableError, TreeConfigurationError):
            self.assertTrue(issubclass(error_type, TreeStateError))
        self.assertTrue(issubclass(UnknownIdError, LookupError))
        self.assertTrue(issubclass(UnknownParentError, LookupError))

    def test_attributes(self):
        error = UnknownParentError("child", "parent")
        self.assertEqual(error.node_id, "child")
        self.assertEqual(error.parent_id, "parent")
        self.assertIn("'parent'", str(error))

        error = CyclicInsertionError("A", "D")
        self.assertEqual((error.node_id, error.parent_id), ("A", "D"))

    def test_to_dict(self):
        self.assertEqual(DuplicateIdError(7).to_dict(), {
            'error_type': 'DuplicateIdError',
            'message': 'Node 7 is already in the tree',
            'node_id': 7,
        })

    def test_configuration_error_without_node(self):
        error = TreeConfigurationError("bad")
        self.assertIsNone(error.node_id)
        self.assertEqual(str(error), "bad")


if __name__ == "__main__":
    unittest.main()
