"""Tests for logging setup."""

import logging
from pathlib import Path

from skyflight.core import logging_system
from skyflight.core.logging_system import get_logger, initialize_logging, is_initialized


class TestLoggingSystem:
    """Test logger retrieval and initialization."""

    def test_get_logger(self) -> None:
        """Test loggers are named after the module."""
        logger = get_logger("skyflight.test")
        assert isinstance(logger, logging.Logger)
        assert logger.name == "skyflight.test"

    def test_initialize_from_yaml(self, tmp_path: Path) -> None:
        """Test a dictConfig file is applied."""
        path = tmp_path / "logging.yaml"
        path.write_text(
            "version: 1\n"
            "disable_existing_loggers: false\n"
            "loggers:\n"
            "  skyflight.test_yaml:\n"
            "    level: ERROR\n"
        )

        initialize_logging(path)

        assert is_initialized()
        assert logging.getLogger("skyflight.test_yaml").level == logging.ERROR

    def test_missing_file_falls_back(self, tmp_path: Path) -> None:
        """Test a missing file still initializes logging."""
        logging_system._initialized = False
        initialize_logging(tmp_path / "missing.yaml")
        assert is_initialized()

    def test_invalid_file_falls_back(self, tmp_path: Path) -> None:
        """Test a broken file is reported, not raised."""
        path = tmp_path / "broken.yaml"
        path.write_text("version: 1\nhandlers:\n  bad:\n    class: no.such.Handler\n")

        logging_system._initialized = False
        initialize_logging(path)

        assert is_initialized()
