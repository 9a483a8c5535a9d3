"""Configuration for XML text escaping.

This module provides an immutable configuration object shared by the API helpers
and the command-line tool, with presets and JSON serialization.
"""

import json
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .logging import VALID_LEVELS

DEFAULT_CHUNK_SIZE = 8192
DEFAULT_ENCODING = "utf-8"
DEFAULT_LOGGING_LEVEL = "WARNING"


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class EscaperConfig:
    """Configuration for escaping operations.

    Thread-safe due to frozen dataclass implementation.

    Attributes:
        filter_illegal: Drop illegal characters silently (True) or raise (False)
        chunk_size: Code units read from a stream per chunk
        encoding: Text encoding used when reading and writing files
        correlation_id: Optional correlation ID attached to log records
        logging_level: Level applied by the command-line tool when neither
            --verbose nor --quiet is given
    """

    filter_illegal: bool = True
    chunk_size: int = DEFAULT_CHUNK_SIZE
    encoding: str = DEFAULT_ENCODING
    correlation_id: Optional[str] = None
    logging_level: str = DEFAULT_LOGGING_LEVEL

    def __post_init__(self) -> None:
        """Validate escaper configuration."""
        if not isinstance(self.filter_illegal, bool):
            raise ConfigValidationError(
                "filter_illegal must be a boolean", field_name="filter_illegal"
            )
        if not isinstance(self.chunk_size, int) or self.chunk_size <= 0:
            raise ConfigValidationError(
                "chunk_size must be > 0",
                field_name="chunk_size",
                suggestions=[f"Use the default of {DEFAULT_CHUNK_SIZE}"],
            )
        if not self.encoding:
            raise ConfigValidationError(
                "encoding cannot be empty",
                field_name="encoding",
                suggestions=[f"Use '{DEFAULT_ENCODING}'"],
            )
        if self.logging_level not in VALID_LEVELS:
            raise ConfigValidationError(
                f"logging_level must be one of {list(VALID_LEVELS)}",
                field_name="logging_level",
            )

    @classmethod
    def lenient(cls) -> "EscaperConfig":
        """Create configuration that silently drops illegal characters."""
        return cls(filter_illegal=True)

    @classmethod
    def strict(cls) -> "EscaperConfig":
        """Create configuration that fails on the first illegal character."""
        return cls(filter_illegal=False)

    def override(self, **kwargs: Any) -> "EscaperConfig":
        """Create a new configuration with specific overrides.

        Example:
            >>> config = EscaperConfig().override(chunk_size=1024)
            >>> config.chunk_size
            1024
        """
        known = {f.name for f in fields(self)}
        for key in kwargs:
            if key not in known:
                raise ConfigValidationError(
                    f"Unknown configuration field: {key}", field_name=key
                )
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EscaperConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected so that typos in config files surface early.
        """
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration data must be a JSON object")
        return cls().override(**data)

    @classmethod
    def from_json(cls, json_str: str) -> "EscaperConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "EscaperConfig":
        """Load configuration from a JSON file."""
        path = Path(config_path)
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Could not read config file {path}: {e}") from e
        return cls.from_json(content)
