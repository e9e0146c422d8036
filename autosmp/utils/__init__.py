"""Utility functions and helpers.

This module provides common utilities used throughout the system:
- Logging configuration
- Parsing of textual setting values

Usage:
    from autosmp.utils import setup_logging, parse_unsigned, parse_bool

    setup_logging(debug_mode=True, log_level="DEBUG")
    delay = parse_unsigned("100")
"""

from autosmp.utils.logging_config import setup_logging
from autosmp.utils.validation import (
    ValidationError,
    parse_unsigned,
    parse_bool,
)

__all__ = [
    # Logging
    "setup_logging",

    # Validation
    "ValidationError",
    "parse_unsigned",
    "parse_bool",
]
