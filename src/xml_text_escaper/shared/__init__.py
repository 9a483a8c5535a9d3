"""Shared utilities for XML text escaping.

This module provides configuration objects, result types, and logging helpers used
across the character layer, the API, and the command-line tool.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    EscaperConfig,
)
from .logging import (
    CorrelationLogger,
    configure_logging,
    get_logger,
)
from .result import (
    EscapeResult,
    EscapeStatistics,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "EscaperConfig",
    "CorrelationLogger",
    "configure_logging",
    "get_logger",
    "EscapeResult",
    "EscapeStatistics",
]
