"""Tests for package logger configuration."""

import logging

import pytest

from illustration_ai.utils.logging import configure_logging, get_logger


@pytest.fixture(autouse=True)
def restore_level():
    yield
    configure_logging("INFO")


class TestConfigureLogging:

    def test_applies_to_existing_loggers(self) -> None:
        logger = get_logger("illustration_ai.tests.existing")

        configure_logging("debug")

        assert logger.level == logging.DEBUG
        assert all(handler.level == logging.DEBUG for handler in logger.handlers)

    def test_applies_to_loggers_created_later(self) -> None:
        configure_logging("WARNING")

        logger = get_logger("illustration_ai.tests.created_later")

        assert logger.level == logging.WARNING

    def test_explicit_level_overrides_configured_default(self) -> None:
        configure_logging("WARNING")

        logger = get_logger("illustration_ai.tests.explicit", level="ERROR")

        assert logger.level == logging.ERROR

    def test_other_packages_are_left_alone(self) -> None:
        other = logging.getLogger("some_other_library")
        other.setLevel(logging.CRITICAL)

        configure_logging("DEBUG")

        assert other.level == logging.CRITICAL

    def test_single_handler_per_logger(self) -> None:
        get_logger("illustration_ai.tests.handlers")
        logger = get_logger("illustration_ai.tests.handlers")

        assert len(logger.handlers) == 1
