"""
Tests for logging configuration.
"""
import logging

import pytest

from resto_ordering.logging_config import (
    NO_REQUEST_ID,
    RequestIDFilter,
    get_request_id,
    reset_request_id,
    set_request_id,
    setup_logging,
)


@pytest.fixture(autouse=True)
def restore_levels():
    names = ["resto_ordering", "sqlalchemy.engine", "uvicorn.access"]
    saved = {name: logging.getLogger(name).level for name in names}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)


class TestLoggingConfiguration:
    """Test logging setup and configuration."""

    def test_setup_logging_default_level(self, monkeypatch):
        """Test that setup_logging defaults to INFO level."""
        monkeypatch.delenv("LOG_LEVEL", raising=False)

        setup_logging()

        assert logging.getLogger("resto_ordering").level == logging.INFO

    def test_setup_logging_respects_env_var(self, monkeypatch):
        """Test that LOG_LEVEL env var is respected."""
        monkeypatch.setenv("LOG_LEVEL", "warning")

        setup_logging()

        assert logging.getLogger("resto_ordering").level == logging.WARNING

    def test_setup_logging_explicit_level(self):
        setup_logging(level="ERROR")

        assert logging.getLogger("resto_ordering").level == logging.ERROR

    def test_setup_logging_invalid_level_defaults_to_info(self):
        """Test that invalid level falls back to INFO."""
        setup_logging(level="INVALID_LEVEL")

        assert logging.getLogger("resto_ordering").level == logging.INFO

    def test_third_party_noise_reduced(self):
        setup_logging(level="INFO")

        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
        assert logging.getLogger("uvicorn.access").level == logging.WARNING

    def test_root_handlers_carry_request_id_filter(self):
        setup_logging(level="INFO")

        handlers = logging.getLogger().handlers
        assert handlers
        for handler in handlers:
            assert sum(isinstance(f, RequestIDFilter) for f in handler.filters) == 1

    def test_setup_logging_twice_adds_one_filter(self):
        setup_logging(level="INFO")
        setup_logging(level="INFO")

        for handler in logging.getLogger().handlers:
            assert sum(isinstance(f, RequestIDFilter) for f in handler.filters) == 1


class TestParseSkipsAreLogged:
    """Skipped schedule input leaves a trace at WARNING level."""

    def test_unknown_day_logged(self, caplog):
        from resto_ordering.services.hours_importer import parse_line

        with caplog.at_level(logging.WARNING, logger="resto_ordering"):
            parse_line("Someday: 10:00 - 12:00")

        assert any(r.levelno == logging.WARNING for r in caplog.records)
        assert "Someday" in caplog.text


def _record(msg="hello"):
    return logging.LogRecord("resto_ordering.test", logging.INFO, __file__, 1, msg, None, None)


class ListHandler(logging.Handler):
    def __init__(self):
        super().__init__(level=logging.DEBUG)
        self.records = []
        self.addFilter(RequestIDFilter())

    def emit(self, record):
        self.records.append(record)


class TestRequestIDFilter:
    """Records are stamped with the request they were logged under."""

    def test_outside_request_uses_placeholder(self):
        record = _record()

        assert RequestIDFilter().filter(record) is True
        assert record.request_id == NO_REQUEST_ID

    def test_bound_request_id_is_stamped(self):
        token = set_request_id("req-42")
        try:
            record = _record()
            RequestIDFilter().filter(record)
        finally:
            reset_request_id(token)

        assert record.request_id == "req-42"
        assert get_request_id() is None

    def test_format_includes_request_id(self):
        formatter = logging.Formatter("[%(request_id)s] %(message)s")
        token = set_request_id("req-7")
        try:
            record = _record("slots built")
            RequestIDFilter().filter(record)
        finally:
            reset_request_id(token)

        assert formatter.format(record) == "[req-7] slots built"


class TestRequestIDInLogs:
    """The middleware binds the incoming X-Request-ID to log records."""

    @pytest.fixture
    def captured(self):
        handler = ListHandler()
        logger = logging.getLogger("resto_ordering.middleware")
        saved = logger.level
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)
        yield handler
        logger.removeHandler(handler)
        logger.setLevel(saved)

    def test_incoming_header_is_logged(self, client, captured):
        resp = client.get("/health", headers={"X-Request-ID": "storefront-1"})

        assert resp.status_code == 200
        assert [r.request_id for r in captured.records] == ["storefront-1"]

    def test_generated_id_matches_response_header(self, client, captured):
        resp = client.get("/health")

        assert captured.records[-1].request_id == resp.headers["X-Request-ID"]

    def test_context_cleared_after_request(self, client, captured):
        client.get("/health", headers={"X-Request-ID": "storefront-2"})

        assert get_request_id() is None
