import logging

import pytest
from pythonjsonlogger import jsonlogger

from lasso_browser.logging_config import (
    LOG_FORMAT_ENV,
    LOG_LEVEL_ENV,
    configure_logging,
    resolve_log_format,
    resolve_log_level,
)


@pytest.fixture(autouse=True)
def _restore_root_logger(monkeypatch):
    monkeypatch.delenv(LOG_FORMAT_ENV, raising=False)
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    werkzeug_level = logging.getLogger("werkzeug").level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger("werkzeug").setLevel(werkzeug_level)


def test_log_format_from_argument_env_or_default(monkeypatch):
    assert resolve_log_format() == "json"
    assert resolve_log_format("PLAIN") == "plain"
    assert resolve_log_format("yaml") == "json"

    monkeypatch.setenv(LOG_FORMAT_ENV, "plain")
    assert resolve_log_format() == "plain"


def test_log_level_from_argument_env_or_default(monkeypatch):
    assert resolve_log_level() == logging.INFO
    assert resolve_log_level("debug") == logging.DEBUG
    assert resolve_log_level(logging.ERROR) == logging.ERROR
    assert resolve_log_level("chatty") == logging.INFO

    monkeypatch.setenv(LOG_LEVEL_ENV, "warning")
    assert resolve_log_level() == logging.WARNING


def test_configure_logging_installs_single_json_handler():
    configure_logging()
    configure_logging()

    root = logging.getLogger()
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, jsonlogger.JsonFormatter)
    assert root.level == logging.INFO


def test_configure_logging_plain_text():
    configure_logging(level="debug", force_format="plain")

    root = logging.getLogger()
    formatter = root.handlers[0].formatter
    assert not isinstance(formatter, jsonlogger.JsonFormatter)
    assert root.level == logging.DEBUG

    record = logging.LogRecord("lasso_browser.test", logging.INFO, __file__, 1, "hello", None, None)
    assert formatter.format(record).endswith("lasso_browser.test | hello")


def test_dev_server_access_lines_are_quieted():
    configure_logging(level="debug")
    assert logging.getLogger("werkzeug").level == logging.WARNING

    configure_logging(level="error")
    assert logging.getLogger("werkzeug").level == logging.ERROR
