"""
Tests for structured logging configuration
"""

import json
import logging

from bank_ledger.logging_config import JSONFormatter, setup_logging, log_action


class TestJSONFormatter:
    """Test JSON log formatting"""

    def test_structured_fields(self):
        """Test action, resource and extra appear and None fields are dropped"""
        record = logging.LogRecord(
            "bank_ledger.storage", logging.WARNING, __file__, 1, "bad version", (), None
        )
        record.action = "load_snapshot"
        record.resource = "accounts.json.2"

        entry = json.loads(JSONFormatter().format(record))

        assert entry["level"] == "WARNING"
        assert entry["message"] == "bad version"
        assert entry["action"] == "load_snapshot"
        assert entry["resource"] == "accounts.json.2"
        assert "extra" not in entry


class TestLogAction:
    """Test log_action helper"""

    def test_attaches_fields(self, caplog):
        """Test structured fields are attached to the record"""
        logger = logging.getLogger("bank_ledger.tests")

        with caplog.at_level(logging.INFO, logger="bank_ledger.tests"):
            log_action(logger, "info", "Account created", action="create_account",
                       resource="3", extra={"overdraft_limit": "0"})

        record = caplog.records[-1]
        assert record.action == "create_account"
        assert record.resource == "3"
        assert record.extra == {"overdraft_limit": "0"}

    def test_respects_level(self, caplog):
        """Test disabled levels are not emitted"""
        logger = logging.getLogger("bank_ledger.tests.quiet")

        with caplog.at_level(logging.WARNING, logger="bank_ledger.tests.quiet"):
            log_action(logger, "info", "hidden")

        assert caplog.records == []


class TestSetupLogging:
    """Test logger setup"""

    def test_single_handler(self):
        """Test repeated setup does not stack handlers"""
        name = "bank_ledger_setup_test"
        setup_logging("DEBUG", logger_name=name)
        logger = setup_logging("INFO", logger_name=name, fmt="text")

        assert len(logger.handlers) == 1
        assert logger.level == logging.INFO
        assert not logger.propagate
        assert not isinstance(logger.handlers[0].formatter, JSONFormatter)
