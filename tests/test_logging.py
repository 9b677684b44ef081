"""
Tests for logging setup.
"""

import logging
from pathlib import Path

import pytest

from hostpoll.logging import (
    ColoredFormatter,
    LogConfig,
    PlainFormatter,
    get_log_level,
    get_logger,
    setup_logging,
)


pytestmark = pytest.mark.usefixtures("reset_logging")


def test_get_logger_prefixes_component() -> None:
    assert get_logger("collectors.zpool").name == "hostpoll.collectors.zpool"
    assert get_logger("hostpoll.app").name == "hostpoll.app"
    assert get_logger("hostpoll").name == "hostpoll"


def test_get_log_level() -> None:
    assert get_log_level("DEBUG") == logging.DEBUG
    assert get_log_level("warn") == logging.WARNING
    assert get_log_level("nonsense") == logging.INFO


def test_setup_logging_writes_file(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "hostpoll.log"
    setup_logging(LogConfig(console_level="error", file_enabled=True, file_path=str(log_file)))

    get_logger("app").info("collector started")
    for handler in logging.getLogger("hostpoll").handlers:
        handler.flush()

    assert "collector started" in log_file.read_text()


def test_setup_logging_replaces_handlers() -> None:
    setup_logging(LogConfig())
    setup_logging(LogConfig())

    assert len(logging.getLogger("hostpoll").handlers) == 1


def test_formatters_restore_record() -> None:
    record = logging.LogRecord("hostpoll.server", logging.WARNING, __file__, 1, "msg", None, None)

    colored = ColoredFormatter("%(levelname)s %(name)s %(message)s", use_colors=True).format(record)
    plain = PlainFormatter("%(levelname)s|%(message)s").format(record)

    assert "\033[" in colored
    assert plain == "WARNING |msg"
    assert record.levelname == "WARNING"
    assert record.name == "hostpoll.server"
