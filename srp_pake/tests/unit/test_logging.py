"""Unit tests for the logging helpers and what sessions log."""

import logging

import pytest

from srp_pake.core.exceptions import InvalidPublicValue
from srp_pake.protocol import ClientSession
from srp_pake.utils.logging import get_logger, get_session_logger, set_log_level


class TestGetLogger:
    """Tests for logger naming and configuration."""

    def test_namespace(self):
        assert get_logger("kdf").name == "srp_pake.kdf"
        assert get_logger("srp_pake.groups.catalog").name == "srp_pake.groups.catalog"

    def test_cached(self):
        assert get_logger("results") is get_logger("results")

    def test_single_handler(self):
        """Test repeated calls do not stack handlers."""
        logger = get_logger("handlers")
        get_logger("handlers")
        assert len(logger.handlers) == 1
        assert logger.propagate is False

    def test_session_logger(self):
        assert get_session_logger("client").name == "srp_pake.session.client"

    def test_set_log_level(self):
        logger = get_logger("levels")
        set_log_level("debug")
        assert logger.level == logging.DEBUG
        set_log_level("not-a-level")
        assert logger.level == logging.INFO
        set_log_level("WARNING")

    def test_level_applies_to_later_loggers(self):
        """Test loggers created after set_log_level start at that level."""
        set_log_level("ERROR")
        try:
            assert get_logger("created-after-level").level == logging.ERROR
        finally:
            set_log_level("WARNING")
        assert get_logger("created-after-level").level == logging.WARNING


class TestSessionLogging:
    """Sessions log transitions without secrets."""

    @pytest.fixture
    def captured(self):
        records = []

        class ListHandler(logging.Handler):
            def emit(self, record):
                records.append(record.getMessage())

        handler = ListHandler()
        logger = get_session_logger("client")
        logger.addHandler(handler)
        previous = logger.level
        logger.setLevel(logging.DEBUG)
        yield records
        logger.setLevel(previous)
        logger.removeHandler(handler)

    def test_transition_and_failure_logged(self, captured, fast_group):
        """Test transitions are logged and the password never appears."""
        client, _ = ClientSession.start("alice", "hunter2-secret", fast_group)
        with pytest.raises(InvalidPublicValue):
            client.process_challenge(b"salt-salt", 0)

        text = "\n".join(captured)
        assert "awaiting_challenge" in text
        assert "InvalidPublicValue" in text
        assert "hunter2-secret" not in text
