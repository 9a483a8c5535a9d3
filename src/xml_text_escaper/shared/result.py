"""Result objects and statistics for XML text escaping.

This module defines the counters an escaper maintains while it runs and the
result object returned by the whole-file API helpers.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional


@dataclass
class EscapeStatistics:
    """Counters describing one escaper's work so far.

    Attributes:
        units_read: Code units pulled from the underlying source
        units_written: Code units handed out through read()
        entities_substituted: Characters replaced by an entity reference
        surrogate_pairs: Well-formed surrogate pairs passed through
        illegal_dropped: Illegal or unpaired code units silently removed
    """

    units_read: int = 0
    units_written: int = 0
    entities_substituted: int = 0
    surrogate_pairs: int = 0
    illegal_dropped: int = 0

    @property
    def expansion_ratio(self) -> float:
        """Output units per input unit."""
        if self.units_read == 0:
            return 0.0
        return self.units_written / self.units_read

    def merge(self, other: "EscapeStatistics") -> None:
        """Add another escaper's counters to this one."""
        self.units_read += other.units_read
        self.units_written += other.units_written
        self.entities_substituted += other.entities_substituted
        self.surrogate_pairs += other.surrogate_pairs
        self.illegal_dropped += other.illegal_dropped

    def to_dict(self) -> Dict[str, Any]:
        """Convert statistics to dictionary representation."""
        return {
            "units_read": self.units_read,
            "units_written": self.units_written,
            "entities_substituted": self.entities_substituted,
            "surrogate_pairs": self.surrogate_pairs,
            "illegal_dropped": self.illegal_dropped,
            "expansion_ratio": self.expansion_ratio,
        }


@dataclass
class EscapeResult:
    """Outcome of escaping a whole file.

    Attributes:
        statistics: Counters collected while escaping
        text: Escaped text when no output path was given
        source_path: File that was read
        output_path: File that was written, if any
        processing_time_ms: Wall-clock time spent escaping
    """

    statistics: EscapeStatistics = field(default_factory=EscapeStatistics)
    text: Optional[str] = None
    source_path: Optional[Path] = None
    output_path: Optional[Path] = None
    processing_time_ms: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary representation (without the text)."""
        return {
            "source_path": str(self.source_path) if self.source_path else None,
            "output_path": str(self.output_path) if self.output_path else None,
            "processing_time_ms": self.processing_time_ms,
            "statistics": self.statistics.to_dict(),
        }
