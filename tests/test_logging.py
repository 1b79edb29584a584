import logging
import os
import sys

sys.path.insert(0, os.path.abspath("src"))

from grocery_scan.logging import coerce_level, get_logger, set_level


def test_loggers_are_namespaced_and_configured_once():
    first = get_logger("test-namespace")
    second = get_logger("test-namespace")
    assert first is second
    assert first.name == "grocery_scan.test-namespace"
    assert len(first.handlers) >= 1
    assert first.propagate is False


def test_level_names_are_coerced():
    assert coerce_level("warn") == logging.WARNING
    assert coerce_level(" debug ") == logging.DEBUG
    assert coerce_level("nonsense") == logging.INFO
    assert coerce_level(None) == logging.INFO
    assert coerce_level(logging.ERROR) == logging.ERROR


def test_set_level_retunes_loggers_and_handlers():
    log = get_logger("test-levels")
    other = get_logger("test-other")
    try:
        assert set_level("DEBUG", "test-levels") == logging.DEBUG
        assert log.level == logging.DEBUG
        assert all(h.level == logging.DEBUG for h in log.handlers)
        set_level("ERROR")
        assert other.level == logging.ERROR
    finally:
        set_level("INFO")
