"""
Logging utilities for the volleyball lineup system.
Provides configured logging and timing of lineup operations.
"""

import json
import logging
import logging.config
import os
import sys
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Optional

from .labels import placed_count
from .types import Rotation, Team

ROOT_LOGGER = 'volley_lineup'
DEFAULT_FORMAT = '%(asctime)s | %(levelname)8s | %(name)s | %(message)s'

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL
}


def setup_logging(config_path: Optional[str] = None, log_dir: str = "logs") -> logging.Logger:
    """
    Setup logging from a dictConfig file.

    Args:
        config_path: Path to logging configuration file
        log_dir: Directory for log files

    Returns:
        Configured logger instance
    """
    if config_path is None:
        config_path = Path(__file__).parent.parent / "configs" / "logging_config.json"

    if Path(config_path).exists():
        with open(config_path, 'r') as f:
            config = json.load(f)

        # File handlers write into log_dir
        handlers = config.get('handlers', {})
        if any('filename' in h for h in handlers.values()):
            Path(log_dir).mkdir(parents=True, exist_ok=True)
        for handler_config in handlers.values():
            if 'filename' in handler_config:
                filename = handler_config['filename']
                if not os.path.isabs(filename):
                    handler_config['filename'] = os.path.join(log_dir, os.path.basename(filename))

        logging.config.dictConfig(config)
    else:
        logging.basicConfig(
            level=logging.INFO,
            format=DEFAULT_FORMAT,
            datefmt='%H:%M:%S'
        )

    return logging.getLogger(ROOT_LOGGER)


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a specific module."""
    return logging.getLogger(f'{ROOT_LOGGER}.{name}')


@contextmanager
def log_operation(operation: str, team: Optional[Team] = None, rotation: Optional[Rotation] = None,
                  logger: Optional[logging.Logger] = None):
    """
    Time a lineup operation and log it against the team and rotation it touches.

    On success the rotation's on-court count is reported; failures are
    logged with a traceback and re-raised.
    """
    if logger is None:
        logger = logging.getLogger(ROOT_LOGGER)

    names = [repr(t.name) for t in (team, rotation) if t is not None]
    target = f" on {' / '.join(names)}" if names else ""

    start_time = datetime.now()
    logger.debug(f"Starting {operation}{target}")

    try:
        yield logger
    except Exception as e:
        duration = (datetime.now() - start_time).total_seconds()
        logger.error(f"Failed {operation}{target} ({duration:.3f}s) | {type(e).__name__}: {e}", exc_info=True)
        raise

    duration = (datetime.now() - start_time).total_seconds()
    summary = f" | {placed_count(rotation)}/6 on court" if rotation is not None else ""
    logger.info(f"Completed {operation}{target} ({duration:.3f}s){summary}")


def quick_setup_logging(log_level: str = "INFO") -> logging.Logger:
    """Quick setup for console-only logging."""
    logging.basicConfig(
        level=LOG_LEVELS.get(log_level.upper(), logging.INFO),
        format=DEFAULT_FORMAT,
        datefmt='%H:%M:%S',
        handlers=[logging.StreamHandler(sys.stderr)]
    )

    return logging.getLogger(ROOT_LOGGER)
