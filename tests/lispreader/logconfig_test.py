import io
import logging

import pytest

from lispreader import logconfig
from lispreader.lang import reader as reader


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    monkeypatch.delenv(logconfig.LEVEL_ENV_VAR, raising=False)
    monkeypatch.delenv(logconfig.DEV_LOGGER_ENV_VAR, raising=False)


@pytest.fixture
def root_logger():
    logger = logging.getLogger(logconfig.LOGGER_NAME)
    handlers = list(logger.handlers)
    level = logger.level
    logconfig._handler = None
    try:
        yield logger
    finally:
        logger.handlers = handlers
        logger.setLevel(level)
        logconfig._handler = None


def test_default_level():
    assert logconfig.get_level() == "WARNING"


def test_level_from_env(monkeypatch):
    monkeypatch.setenv(logconfig.LEVEL_ENV_VAR, "debug")
    assert logconfig.get_level() == "DEBUG"


def test_trace_level_is_named():
    assert logging.getLevelName(logconfig.TRACE) == "TRACE"
    assert logconfig.TRACE < logging.DEBUG


def test_default_handler_discards_records():
    assert not logconfig.use_dev_logger()
    handler = logconfig.get_handler()
    assert isinstance(handler, logging.NullHandler)
    assert handler.level == logging.WARNING


def test_dev_handler_writes_records(monkeypatch):
    monkeypatch.setenv(logconfig.DEV_LOGGER_ENV_VAR, "TRUE")
    assert logconfig.use_dev_logger()
    handler = logconfig.get_handler(level="DEBUG")
    assert isinstance(handler, logging.StreamHandler)
    assert handler.level == logging.DEBUG


def test_configure_root_logger(root_logger):
    handlers = list(root_logger.handlers)
    assert logconfig.configure_root_logger(level="INFO") is root_logger
    assert root_logger.level == logging.INFO
    assert len(root_logger.handlers) == len(handlers) + 1


def test_reconfigure_replaces_handler(root_logger):
    handlers = list(root_logger.handlers)
    logconfig.configure_root_logger(level="INFO")
    logconfig.configure_root_logger(level="DEBUG")
    assert len(root_logger.handlers) == len(handlers) + 1
    assert root_logger.handlers[-1].level == logging.DEBUG


def test_reader_logs_through_root_logger(root_logger):
    logconfig.configure_root_logger(level="TRACE")
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    handler.setLevel(logconfig.TRACE)
    root_logger.addHandler(handler)

    assert [1] == list(reader.read_str("1"))

    output = stream.getvalue()
    assert "Reading forms from <stream>" in output
    assert "Token '1' matched" in output
