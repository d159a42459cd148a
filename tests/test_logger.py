import logging

import pytest

from teleguard.utils import logger as logger_module
from teleguard.utils.logger import PACKAGE_LOGGER, get_logger, set_level


@pytest.fixture(autouse=True)
def default_level(monkeypatch):
    monkeypatch.setattr(logger_module, "_LEVEL", None)


def test_get_logger_is_cached_per_name():
    first = get_logger("TestLoggerA")
    assert get_logger("TestLoggerA") is first
    assert get_logger("TestLoggerB") is not first


def test_get_logger_installs_one_handler(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    logger = get_logger("TestLoggerLevel")
    get_logger("TestLoggerLevel")

    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert "%(levelname)s" in logger.handlers[0].formatter._fmt


def test_set_level_reaches_every_logger(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "info")
    earlier = get_logger("TestLoggerEarlier")
    assert earlier.level == logging.INFO

    set_level("warning")
    later = get_logger("TestLoggerLater")

    assert earlier.level == logging.WARNING
    assert later.level == logging.WARNING
    assert logging.getLogger(PACKAGE_LOGGER).level == logging.WARNING
    # module loggers inherit from the package logger
    assert logging.getLogger("teleguard.report.pdf_exporter").getEffectiveLevel() == logging.WARNING
