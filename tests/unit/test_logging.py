"""Tests for the package logging setup."""

import logging

import pytest

from docforge.utils.logging import PACKAGE_LOGGER, configure_logging, get_logger, resolve_level


@pytest.fixture
def restore_package_level():
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    level = package_logger.level
    yield package_logger
    package_logger.setLevel(level)


def test_module_loggers_live_under_package_logger():
    assert get_logger("docforge.services.orchestrator").name == "docforge.services.orchestrator"
    assert get_logger("__main__").name == "docforge.__main__"


def test_configure_sets_level_once_for_every_module(restore_package_level):
    configure_logging("warning")
    configure_logging("WARNING")

    assert restore_package_level.level == logging.WARNING
    assert len(restore_package_level.handlers) == 1
    assert get_logger("docforge.core.gateway").getEffectiveLevel() == logging.WARNING


@pytest.mark.parametrize("name, expected", [("debug", logging.DEBUG), (None, logging.INFO), ("loud", logging.INFO)])
def test_resolve_level(name, expected):
    assert resolve_level(name) == expected
