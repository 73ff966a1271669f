"""Tests for logging setup."""

from __future__ import annotations

import logging

import pytest

from aptostock.shared.logging.logger import get_logger, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def _own_handlers():
    return [h for h in logging.getLogger().handlers if getattr(h, "_aptostock", False)]


def test_setup_is_idempotent():
    setup_logging(logging.INFO)
    setup_logging("debug")

    assert len(_own_handlers()) == 1
    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING


def test_unknown_level_name_raises():
    with pytest.raises(ValueError):
        setup_logging("loud")


def test_loggers_are_namespaced():
    assert get_logger("price_oracle").name == "aptostock.price_oracle"
