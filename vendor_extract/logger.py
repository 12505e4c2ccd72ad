#!/usr/bin/env python3
"""
Logger setup for vendor HTML extraction
"""

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

from .config import LOGGING


def setup_logger(log_level: Optional[str] = None, log_dir: Optional[Path] = None,
                 stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Setup logging configuration

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR), defaults to config LOGGING['level']
        log_dir: Directory for log files (no file handler when not given)
        stream: Console stream (defaults to stdout)

    Returns:
        Configured logger instance
    """
    log_level = log_level or LOGGING['level']
    handlers = [logging.StreamHandler(stream or sys.stdout)]

    if log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_dir / 'vendor_extract.log'))

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=LOGGING['format'],
        handlers=handlers
    )

    return logging.getLogger('vendor_extract')
