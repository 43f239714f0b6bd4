"""
Tests for the logging configuration.
"""
import io
import json

import pytest

from webhook_handler.config import get_config
from webhook_handler.logging import configure_logging, get_logger


@pytest.fixture
def restore_logging():
    yield
    config = get_config()
    configure_logging(config.webhook_log_level, json=config.webhook_log_json)


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_text_format_has_service_and_module(self, restore_logging):
        stream = io.StringIO()
        configure_logging("INFO", sink=stream)

        get_logger("webhook_handler.routers.webhook").info("delivery received")

        line = stream.getvalue()
        assert "webhook-handler" in line
        assert "webhook_handler.routers.webhook" in line
        assert "delivery received" in line
        assert "<green>" not in line

    def test_level_filters(self, restore_logging):
        stream = io.StringIO()
        configure_logging("warning", sink=stream)

        log = get_logger("tests")
        log.info("hidden")
        log.warning("shown")

        assert "hidden" not in stream.getvalue()
        assert "shown" in stream.getvalue()

    def test_json_lines(self, restore_logging):
        stream = io.StringIO()
        configure_logging("DEBUG", json=True, sink=stream)

        get_logger("webhook_handler.services.actions").error("launch failed")

        record = json.loads(stream.getvalue().splitlines()[0])["record"]
        assert record["message"] == "launch failed"
        assert record["level"]["name"] == "ERROR"
        assert record["extra"]["name"] == "webhook_handler.services.actions"

    def test_unbound_logger_uses_default_name(self, restore_logging):
        from loguru import logger

        stream = io.StringIO()
        configure_logging("INFO", sink=stream)
        logger.info("plain")

        assert "webhook_handler" in stream.getvalue()
