"""Tests for logging configuration."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest
from loguru import logger

from lottery_factor.logging import (
    bind_phase,
    bind_repo,
    get_logger,
    reset_logging,
    setup_logging,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Generator
    from pathlib import Path


@pytest.fixture(autouse=True)
def _reset_logging_state() -> Generator[None, None, None]:
    """Reset loguru state before and after each test."""
    reset_logging()
    yield
    reset_logging()


def add_capture_sink() -> Callable[[], str]:
    """Attach a sink recording every message with its extra context.

    Must be called after setup_logging(), which removes existing sinks.
    """
    messages: list[str] = []
    logger.add(lambda msg: messages.append(str(msg)), format="{extra} | {message}")
    return lambda: "".join(messages)


class TestSetupLogging:
    """Tests for setup_logging levels and sinks."""

    def test_verbose_enables_debug(self) -> None:
        setup_logging(level="WARNING", verbose=True)
        assert logging.getLogger("sqlalchemy.engine").level == logging.INFO

    def test_quiet_raises_level(self) -> None:
        """quiet keeps chatty libraries at WARNING."""
        setup_logging(level="DEBUG", quiet=True)
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_verbose_takes_precedence(self) -> None:
        setup_logging(level="INFO", verbose=True, quiet=True)
        assert logging.getLogger("httpx").level == logging.DEBUG

    def test_quiet_hides_info_on_console(self, capsys) -> None:
        setup_logging(level="INFO", quiet=True)

        get_logger("lottery_factor.test").info("progress")
        get_logger("lottery_factor.test").warning("trouble")

        err = capsys.readouterr().err
        assert "progress" not in err
        assert "trouble" in err

    def test_with_file(self, tmp_path: Path) -> None:
        """A log file receives records with their context."""
        log_file = tmp_path / "sync.log"
        setup_logging(level="INFO", log_file=log_file)

        bind_repo("rails", "rails").debug("written to file")
        logger.complete()

        contents = log_file.read_text()
        assert "written to file" in contents
        assert "rails/rails" in contents


class TestConsoleFormat:
    """Console lines show module and sync scope."""

    def test_phase_scope(self, capsys) -> None:
        setup_logging(level="INFO")

        bind_phase("rails", "rails", "commits").info("Fetching commits")

        err = capsys.readouterr().err
        assert "[rails/rails commits]" in err
        assert "Fetching commits" in err

    def test_repo_scope(self, capsys) -> None:
        setup_logging(level="INFO")

        bind_repo("rails", "rails").info("Sync complete")

        assert "[rails/rails]" in capsys.readouterr().err

    def test_unbound_stdlib_record(self, capsys) -> None:
        """Records without a bound name still render."""
        setup_logging(level="INFO")

        logging.getLogger("stdlib_console").warning("from stdlib")

        assert "from stdlib" in capsys.readouterr().err


class TestInterceptHandler:
    """Tests for stdlib logging interception."""

    def test_intercept_stdlib_logging(self) -> None:
        """stdlib records are routed to loguru sinks added after setup."""
        setup_logging(level="DEBUG")
        captured = add_capture_sink()

        logging.getLogger("test_stdlib_intercept").warning("Hello from stdlib")

        assert "Hello from stdlib" in captured()

    def test_quieted_library_below_threshold(self) -> None:
        setup_logging(level="INFO")
        captured = add_capture_sink()

        logging.getLogger("httpx").info("HTTP Request: POST /graphql")

        assert "HTTP Request" not in captured()


class TestContextBinding:
    """Tests for context binding helpers."""

    def test_get_logger_binds_name(self) -> None:
        captured = add_capture_sink()
        get_logger("my_test_module").info("Test message")
        assert "my_test_module" in captured()

    def test_bind_phase(self) -> None:
        captured = add_capture_sink()
        bind_phase("rails", "rails", "commits").info("Test phase message")
        output = captured()
        assert "'repo': 'rails/rails'" in output
        assert "'phase': 'commits'" in output


class TestResetLogging:
    """Tests for reset_logging function."""

    def test_reset_removes_sinks(self) -> None:
        setup_logging(level="INFO")
        captured = add_capture_sink()

        reset_logging()
        logger.info("after reset")

        assert captured() == ""
