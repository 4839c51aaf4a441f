"""Loguru-based logging configuration for TreeViewLib.

The library logs through loguru under the "treeviewlib" name, disabled by
default so that importing it stays silent. configure_logging() enables it
and installs a sink. With serialize=True every record is written as one
JSON line, with the operation/node_id context of tree mutations promoted
to the top level for easy grep/filter.
"""

import json
import logging
import sys
from typing import Any, Optional

from loguru import logger

_PACKAGE = "treeviewlib"

# Context keys we promote to top-level JSON for traceability
_CONTEXT_KEYS = ("operation", "node_id")

_handler_id: Optional[int] = None


def _json_line_format(record) -> str:
    """loguru format function writing one JSON object per tree log record.

    The mutation context bound by TreeStateManager (operation, node_id)
    sits next to the message instead of inside "extra". loguru formats the
    returned template, so the rendered JSON travels in the record's extra.
    """
    line = {
        "time": str(record["time"]),
        "level": record["level"].name,
        "message": record["message"],
        "module": record["name"],
        "function": record["function"],
        "line": record["line"],
    }
    extra = record["extra"]
    line.update({key: extra[key] for key in _CONTEXT_KEYS if extra.get(key) is not None})
    extra["_tree_json"] = json.dumps(line, default=str)
    return "{extra[_tree_json]}\n"


class InterceptHandler(logging.Handler):
    """stdlib logging handler forwarding records to loguru.

    Installed on the root logger by configure_logging(intercept_stdlib=True)
    so an application's stdlib records end up in the same sinks as the
    tree's own messages.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def configure_logging(level: str = "DEBUG",
                      sink: Any = None,
                      *,
                      serialize: bool = False,
                      intercept_stdlib: bool = False) -> int:
    """Enable TreeViewLib logging and send it to a sink.

    Reconfiguring replaces the sink installed by the previous call; sinks
    added elsewhere are left alone.

    Args:
        level: Minimum level to emit
        sink: Anything loguru accepts as a sink (default: sys.stderr)
        serialize: Write JSON lines with context at top level
        intercept_stdlib: Also route the stdlib root logger into loguru

    Returns:
        The loguru handler id of the installed sink
    """
    global _handler_id
    if _handler_id is not None:
        disable_logging()

    options = {
        "level": level,
        "filter": _PACKAGE,
    }
    if serialize:
        options["format"] = _json_line_format
    _handler_id = logger.add(sink if sink is not None else sys.stderr, **options)
    logger.enable(_PACKAGE)

    if intercept_stdlib:
        logging.root.handlers = [InterceptHandler()]
        logging.root.setLevel(logging.DEBUG)

    return _handler_id


def disable_logging() -> None:
    """Silence TreeViewLib and remove the sink installed by configure_logging()."""
    global _handler_id
    logger.disable(_PACKAGE)
    if _handler_id is not None:
        try:
            logger.remove(_handler_id)
        except ValueError:
            pass
        _handler_id = None
