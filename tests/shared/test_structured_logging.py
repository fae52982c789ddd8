"""Tests for the structured logging helpers."""

import json
import logging

from aniposter.shared.errors import ErrorContext, ImageNotFoundError
from aniposter.shared.logging import (
    StructuredFormatter,
    log_api_call,
    log_operation_error,
    setup_structured_logger,
)


class TestStructuredFormatter:
    def test_extras_are_serialized(self) -> None:
        record = logging.LogRecord("aniposter.test", logging.WARNING, __file__, 1, "hello %s", ("world",), None)
        record.operation = "resolve_image"
        record.context = {"title": "Naruto"}

        entry = json.loads(StructuredFormatter().format(record))

        assert entry["message"] == "hello world"
        assert entry["operation"] == "resolve_image"
        assert entry["context"] == {"title": "Naruto"}


class TestHelpers:
    def test_log_operation_error_level_and_extras(self, caplog) -> None:
        logger = logging.getLogger("aniposter.test.errors")

        log_operation_error(
            logger,
            ImageNotFoundError("Naruto", attempts=12),
            additional_context=ErrorContext(additional_data={"batch_index": 0}),
            level=logging.WARNING,
        )

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert record.error_code == "IMAGE_NOT_FOUND"
        assert record.operation == "resolve_image"

    def test_log_api_call_warns_on_error_status(self, caplog) -> None:
        logger = logging.getLogger("aniposter.test.api")

        log_api_call(logger, "https://api.jikan.moe/v4/anime", status_code=429)

        assert caplog.records[-1].levelno == logging.WARNING
        assert "failed with status 429" in caplog.text

    def test_setup_does_not_stack_handlers(self, temp_dir) -> None:
        log_file = temp_dir / "aniposter.log"

        setup_structured_logger("aniposter.test.setup", "DEBUG", str(log_file), use_rich_console=False)
        logger = setup_structured_logger("aniposter.test.setup", "DEBUG", str(log_file), use_rich_console=False)
        logger.info("written")
        for handler in logger.handlers:
            handler.flush()

        assert len(logger.handlers) == 2
        assert json.loads(log_file.read_text(encoding="utf-8").splitlines()[-1])["message"] == "written"
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()
