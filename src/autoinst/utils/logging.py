"""Logging utilities."""

import logging
import sys
from pathlib import Path
from typing import Optional, Union


def setup_logging(level: str = "INFO", log_file: Optional[Union[str, Path]] = None):
    """Setup logging configuration.

    Log records go to stderr, stdout is reserved for command output.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers = [logging.StreamHandler(sys.stderr)]
    file_error = None
    if log_file:
        try:
            handlers.append(logging.FileHandler(log_file))
        except OSError as e:
            file_error = e

    # Configure root logger
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        handlers=handlers,
        force=True,
    )

    if file_error is not None:
        logging.getLogger(__name__).warning(f"Cannot write log file {log_file}: {file_error}")

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
