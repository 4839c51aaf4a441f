"""
Tests for loguru-based logging configuration.

Records are captured with a list sink; configure_logging() only lets
treeviewlib records through.
"""

import json
import logging

import pytest
from loguru import logger

from treeviewlib import TreeStateManager
from treeviewlib.logging_config import configure_logging, disable_logging


@pytest.fixture
def messages():
    captured = []
    configure_logging("DEBUG", captured.append)
    yield captured
    disable_logging()


class TestConfigureLogging:
    """Test enabling and disabling library logging."""

    def test_silent_by_default(self):
        captured = []
        handler_id = logger.add(captured.append, level="DEBUG")
        try:
            manager = TreeStateManager()
            manager.insert(None, "A")
        finally:
            logger.remove(handler_id)
        assert captured == []

    def test_mutations_are_logged(self, messages):
        manager = TreeStateManager()
        manager.insert(None, "A")
        manager.expand_direct_children("A")
        text = "".join(messages)
        assert "NODE_STORE: insert node_id=A parent_id=None level=0" in text
        assert "OBSERVERS: notify kind=structure" in text
        assert "has no children" in text

    def test_level_filter(self):
        captured = []
        configure_logging("INFO", captured.append)
        try:
            TreeStateManager().insert(None, "A")
        finally:
            disable_logging()
        assert captured == []

    def test_reconfigure_replaces_sink(self):
        first, second = [], []
        configure_logging("DEBUG", first.append)
        configure_logging("DEBUG", second.append)
        try:
            TreeStateManager().insert(None, "A")
        finally:
            disable_logging()
        assert first == []
        assert second

    def test_disable_is_safe_twice(self):
        disable_logging()
        disable_logging()

    def test_other_modules_filtered_out(self, messages):
        logger.bind(source="app").debug("unrelated")
        assert not any("unrelated" in message for message in messages)


class TestSerializedLogging:
    """Test JSON-line output with context at top level."""

    def test_context_promoted(self):
        captured = []
        configure_logging("DEBUG", captured.append, serialize=True)
        try:
            manager = TreeStateManager()
            manager.insert(None, "A")
            manager.insert("A", "B")
            manager.remove("B")
        finally:
            disable_logging()

        records = [json.loads(message) for message in captured]
        removal = [r for r in records if r["message"].startswith("NODE_STORE: remove")]
        assert len(removal) == 1
        assert removal[0]["operation"] == "remove"
        assert removal[0]["node_id"] == "B"
        assert removal[0]["level"] == "DEBUG"
        assert removal[0]["module"] == "treeviewlib.core.store"

        insertion = [r for r in records if r["message"].startswith("NODE_STORE: insert")]
        assert [r["operation"] for r in insertion] == ["insert", "insert"]


class TestInterceptStdlib:
    """Test routing stdlib logging into loguru."""

    def test_stdlib_records_reach_sink(self):
        captured = []
        saved_handlers = logging.root.handlers[:]
        saved_level = logging.root.level
        handler_id = logger.add(captured.append, level="DEBUG")
        configure_logging("DEBUG", [].append, intercept_stdlib=True)
        try:
            logging.getLogger("someapp").warning("from stdlib")
        finally:
            disable_logging()
            logger.remove(handler_id)
            logging.root.handlers = saved_handlers
            logging.root.setLevel(saved_level)
        assert any("from stdlib" in message for message in captured)
