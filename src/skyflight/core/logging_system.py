"""Logging setup for SkyFlight.

Every module obtains its logger with ``get_logger(__name__)``. The application
entry point calls ``initialize_logging`` once, optionally with a YAML file in
``logging.config.dictConfig`` format.

Typical usage:
    from skyflight.core.logging_system import get_logger, initialize_logging

    initialize_logging("config/logging.yaml")
    logger = get_logger(__name__)
"""

import logging
import logging.config
from pathlib import Path

import yaml

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_initialized = False


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a module.

    Args:
        name: Logger name, normally ``__name__``.

    Returns:
        Standard library logger.
    """
    return logging.getLogger(name)


def initialize_logging(config_path: str | Path | None = None, level: str = "INFO") -> None:
    """Configure logging for the whole application.

    Args:
        config_path: YAML file with a ``dictConfig`` mapping. When missing or
            unreadable, a console handler at ``level`` is installed instead.
        level: Fallback log level name.
    """
    global _initialized

    if config_path is not None and Path(config_path).exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                config = yaml.safe_load(f) or {}
            config.setdefault("version", 1)
            logging.config.dictConfig(config)
            _initialized = True
            logging.getLogger(__name__).debug("Logging configured from %s", config_path)
            return
        except (OSError, yaml.YAMLError, ValueError) as e:
            logging.basicConfig(level=level, format=DEFAULT_FORMAT)
            logging.getLogger(__name__).warning(
                "Failed to load logging config %s: %s", config_path, e
            )
            _initialized = True
            return

    logging.basicConfig(level=level, format=DEFAULT_FORMAT)
    _initialized = True


def is_initialized() -> bool:
    """Check whether ``initialize_logging`` has run."""
    return _initialized
