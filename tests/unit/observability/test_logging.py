"""Unit tests for logging module.

Tests cover:
- Context variable management
- JSON formatting with bound context
- Standard library interception
- File logging setup
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import orjson
import pytest
from loguru import logger

from scanscore.observability.logging import (
    _format_json,
    bind_context,
    clear_context,
    get_context,
    get_logger,
    setup_logging,
)


if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


pytestmark = pytest.mark.unit


@pytest.fixture
def json_lines() -> Iterator[list[str]]:
    """Capture records rendered by the JSON formatter."""
    lines: list[str] = []
    sink_id = logger.add(lambda message: lines.append(str(message)), format=_format_json)
    yield lines
    logger.remove(sink_id)
    clear_context()


class TestContextManagement:
    """Tests for logging context management."""

    def test_bind_context_merges(self) -> None:
        """Should merge values into the context."""
        clear_context()
        bind_context(request_id="req-1")
        bind_context(method="POST")

        assert get_context() == {"request_id": "req-1", "method": "POST"}

    def test_clear_context(self) -> None:
        """Should reset the context."""
        bind_context(request_id="req-1")
        clear_context()

        assert get_context() == {}

    def test_get_context_returns_copy(self) -> None:
        """Should not expose the stored dict."""
        clear_context()
        get_context()["request_id"] = "mutated"

        assert get_context() == {}


class TestJsonFormat:
    """Tests for the JSON formatter."""

    def test_renders_structured_record(self, json_lines: list[str]) -> None:
        """Should include message, level, logger name and extra fields."""
        get_logger("scanscore.test").info("Products compared", winner="product2")

        record = orjson.loads(json_lines[-1])
        assert record["message"] == "Products compared"
        assert record["level"] == "INFO"
        assert record["winner"] == "product2"
        assert record["name"] == "scanscore.test"

    def test_includes_request_context(self, json_lines: list[str]) -> None:
        """Should merge the request-scoped context into every record."""
        bind_context(request_id="req-42")

        get_logger("scanscore.test").warning("Comparison oracle timed out")

        assert orjson.loads(json_lines[-1])["request_id"] == "req-42"

    def test_braces_in_message(self, json_lines: list[str]) -> None:
        """Should survive messages containing format braces."""
        get_logger("scanscore.test").info("Unusable output {not json}")

        assert orjson.loads(json_lines[-1])["message"] == "Unusable output {not json}"

    def test_exception_summary(self, json_lines: list[str]) -> None:
        """Should summarize attached exceptions."""
        try:
            msg = "kaboom"
            raise RuntimeError(msg)
        except RuntimeError:
            get_logger("scanscore.test").exception("Comparison failed")

        record = orjson.loads(json_lines[-1])
        assert record["exception"] == {"type": "RuntimeError", "value": "kaboom"}


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_intercepts_standard_logging(self, tmp_path: Path) -> None:
        """Should route stdlib records to the log file."""
        log_file = tmp_path / "logs" / "scanscore.log"
        setup_logging("INFO", "json", log_file=log_file)

        logging.getLogger("scanscore.stdlib").warning("From stdlib")
        logger.complete()

        assert log_file.exists()
        assert "From stdlib" in log_file.read_text()
        setup_logging("WARNING", "text")

    def test_quiets_noisy_loggers(self) -> None:
        """Should raise chatty third-party loggers to WARNING."""
        setup_logging("DEBUG", "text")

        assert logging.getLogger("httpx").level == logging.WARNING
        setup_logging("WARNING", "text")
