# tests/core/test_logging.py
from __future__ import annotations

import logging

import pytest
from pythonjsonlogger import jsonlogger

from drupal.jsonapi.core.logging import configure_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers, root.level = handlers, level


def test_json_formatter_by_default():
    configure_logging("DEBUG")

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, jsonlogger.JsonFormatter)
    assert logging.getLogger("httpx").level == logging.WARNING


def test_plain_formatter_and_unknown_level():
    configure_logging("chatty", json_format=False)

    root = logging.getLogger()
    assert root.level == logging.INFO
    assert not isinstance(root.handlers[0].formatter, jsonlogger.JsonFormatter)
