"""Tests for the logging bootstrap."""
from __future__ import annotations

import logging

from app.core.logging import HANDLER_NAME, configure_logging


def test_handler_is_installed_once() -> None:
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    try:
        configure_logging("debug")
        configure_logging("info")
        named = [h for h in root.handlers if h.get_name() == HANDLER_NAME]
        assert len(named) == 1
        assert root.level == logging.INFO
    finally:
        for handler in list(root.handlers):
            if handler not in before:
                root.removeHandler(handler)
        root.setLevel(level)
