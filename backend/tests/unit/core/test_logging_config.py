"""
Unit Tests for the structured logger helpers
"""
import logging

import pytest

from app.core.logging_config import logger


class TestLogRequest:

    @pytest.mark.parametrize("status_code,level", [
        (200, logging.INFO),
        (404, logging.WARNING),
        (503, logging.ERROR),
    ])
    def test_level_follows_status(self, caplog, status_code, level):
        with caplog.at_level(logging.INFO, logger="campussoft"):
            logger.log_request("GET", "/api/v1/requests", status_code, 12.5)

        record = caplog.records[-1]
        assert record.levelno == level
        assert record.event_type == "http_request"
        assert record.http_status == status_code


class TestLogErrorWithContext:

    def test_records_error_type_and_context(self, caplog):
        with caplog.at_level(logging.ERROR, logger="campussoft"):
            try:
                raise RuntimeError("database unreachable")
            except RuntimeError as exc:
                logger.log_error_with_context(exc, context="POST /api/v1/requests")

        record = caplog.records[-1]
        assert record.error_type == "RuntimeError"
        assert record.error_context == "POST /api/v1/requests"
        assert record.exc_info is not None
