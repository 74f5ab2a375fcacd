import logging

import pytest

from talaiot.core.logging_setup import parse_log_level, setup_logging


@pytest.mark.parametrize(
    "value,expected",
    [("debug", logging.DEBUG), (" WARN ", logging.WARNING), ("20", 20), ("", None), (None, None), ("loud", None)],
)
def test_parse_log_level(value, expected) -> None:
    assert parse_log_level(value) == expected


def test_setup_logging_uses_environment_level(monkeypatch) -> None:
    root = logging.getLogger()
    saved_level, saved_handlers = root.level, root.handlers[:]
    monkeypatch.setenv("TALAIOT_LOG_LEVEL", "ERROR")
    try:
        setup_logging()
        assert root.level == logging.ERROR
        assert len(root.handlers) == 1
        assert root.handlers[0].formatter._fmt == "[%(levelname)s] %(message)s"
    finally:
        for handler in root.handlers[:]:
            root.removeHandler(handler)
        for handler in saved_handlers:
            root.addHandler(handler)
        root.setLevel(saved_level)
