import logging

from pythonjsonlogger import jsonlogger

from xls_browser.logging_config import configure_logging


def test_json_format_by_default(monkeypatch):
    monkeypatch.delenv("XLS_BROWSER_LOG_FORMAT", raising=False)
    monkeypatch.delenv("XLS_BROWSER_LOG_LEVEL", raising=False)

    configure_logging()

    root = logging.getLogger()
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, jsonlogger.JsonFormatter)
    assert root.level == logging.INFO


def test_plain_format_and_env_level(monkeypatch):
    monkeypatch.setenv("XLS_BROWSER_LOG_LEVEL", "debug")

    configure_logging(force_format="plain")

    root = logging.getLogger()
    assert not isinstance(root.handlers[0].formatter, jsonlogger.JsonFormatter)
    assert root.level == logging.DEBUG
