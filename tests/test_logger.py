"""Tests for the shared loguru logger."""

import pytest

from storefront.lib.best_effort import best_effort
from storefront.lib.logger import log_critical_infrastructure, logger


@pytest.fixture
def records():
    captured = []
    sink_id = logger.add(lambda message: captured.append(message.record), level="DEBUG")
    yield captured
    logger.remove(sink_id)


class TestLogger:
    def test_context_defaults_to_dash(self, records):
        logger.info("plain message")
        assert records[-1]["extra"]["context"] == "-"

    def test_critical_infrastructure_prefix(self, records):
        log_critical_infrastructure("SMTP credentials are not configured", "ConfigurationError")
        record = records[-1]
        assert record["level"].name == "CRITICAL"
        assert record["message"] == (
            "[CRITICAL-ConfigurationError] SMTP credentials are not configured"
        )

    def test_best_effort_binds_its_label(self, records):
        @best_effort("order confirmation email")
        def send():
            raise ConnectionError("broker down")

        send()
        record = records[-1]
        assert record["level"].name == "WARNING"
        assert record["extra"]["context"] == "order confirmation email"
        assert "broker down" in record["message"]
