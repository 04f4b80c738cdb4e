import io
import logging
from collections.abc import Generator

import pytest
from rich.console import Console

from bddbrowser.logging import (
    RESPONSE_LOGGER_NAME,
    ResponseConsoleHandler,
    StreamFormatter,
    StreamRoutingFilter,
    configure_logging,
    configure_response_logging,
    status_style,
)


@pytest.fixture(autouse=True)
def restore_loggers() -> Generator[None, None, None]:
    """Undo handler, level and propagation changes made by configure_logging."""
    saved = {}
    for name in ("bddbrowser", RESPONSE_LOGGER_NAME):
        log = logging.getLogger(name)
        saved[name] = (list(log.handlers), log.level, log.propagate)

    yield

    for name, (handlers, level, propagate) in saved.items():
        log = logging.getLogger(name)
        log.handlers = handlers
        log.setLevel(level)
        log.propagate = propagate


def make_record(level: int, **extra) -> logging.LogRecord:
    record = logging.LogRecord("bddbrowser.test", level, __file__, 1, "message", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStreamFormatter:
    def test_prefixes_explicit_stream(self) -> None:
        formatter = StreamFormatter("%(message)s")

        assert formatter.format(make_record(logging.INFO, stream="stderr")) == (
            "[stderr] message"
        )
        assert formatter.format(make_record(logging.INFO)) == "message"


class TestStreamRoutingFilter:
    @pytest.mark.parametrize(
        ("level", "stream"),
        [
            (logging.DEBUG, "stdout"),
            (logging.INFO, "stdout"),
            (logging.WARNING, "stderr"),
            (logging.ERROR, "stderr"),
        ],
    )
    def test_routes_by_level(self, level: int, stream: str) -> None:
        record = make_record(level)

        assert StreamRoutingFilter(stream).filter(record)
        other = "stderr" if stream == "stdout" else "stdout"
        assert not StreamRoutingFilter(other).filter(record)

    def test_explicit_stream_wins(self) -> None:
        record = make_record(logging.ERROR, stream="stdout")

        assert StreamRoutingFilter("stdout").filter(record)
        assert not StreamRoutingFilter("stderr").filter(record)


class TestResponseLogging:
    @pytest.mark.parametrize(
        ("status", "style"),
        [(200, "cyan"), (204, "cyan"), (301, "yellow"), (404, "red"), (500, "red"), (None, "red")],
    )
    def test_status_style(self, status, style: str) -> None:
        assert status_style(status) == style

    def test_handler_prints_url(self) -> None:
        buffer = io.StringIO()
        handler = ResponseConsoleHandler(Console(file=buffer, width=200))

        handler.emit(make_record(logging.INFO, status=200))

        assert buffer.getvalue().strip() == "message"

    def test_enable_and_disable(self) -> None:
        enabled = configure_response_logging(True)
        assert any(isinstance(h, ResponseConsoleHandler) for h in enabled.handlers)

        configure_response_logging(True)
        assert sum(isinstance(h, ResponseConsoleHandler) for h in enabled.handlers) == 1

        disabled = configure_response_logging(False)
        assert not any(isinstance(h, ResponseConsoleHandler) for h in disabled.handlers)


class TestConfigureLogging:
    def test_installs_stream_handlers_once(self) -> None:
        configure_logging()
        configure_logging()

        handlers = [
            h
            for h in logging.getLogger("bddbrowser").handlers
            if isinstance(h.formatter, StreamFormatter)
        ]
        assert len(handlers) == 2

    def test_debug_sets_level_and_response_logging(self) -> None:
        configure_logging(debug=True)

        assert logging.getLogger("bddbrowser").level == logging.DEBUG
        response_logger = logging.getLogger(RESPONSE_LOGGER_NAME)
        assert any(isinstance(h, ResponseConsoleHandler) for h in response_logger.handlers)
