"""Performance profiling tools for XML text escaping.

Provides timing, throughput, and resident-memory tracking for escaping runs, and a
benchmark that streams a large generated input through the escaper to confirm that
memory stays flat regardless of input size.
"""

import json
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import psutil

from xml_text_escaper.character.classification import is_legal_code_unit
from xml_text_escaper.character.entities import XML_ENTITIES
from xml_text_escaper.character.escaper import XmlTextEscaper
from xml_text_escaper.shared.logging import get_logger


@dataclass
class ProfilingSession:
    """Measurements for a single profiled run."""

    session_id: str
    start_time: float
    end_time: float = 0.0
    input_size: int = 0  # code units
    memory_start: int = 0  # bytes
    memory_end: int = 0  # bytes
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def total_duration_ms(self) -> float:
        """Total session duration in milliseconds."""
        return (self.end_time - self.start_time) * 1000

    @property
    def memory_delta(self) -> int:
        """Resident memory change in bytes."""
        return self.memory_end - self.memory_start

    @property
    def units_per_second(self) -> float:
        """Input code units processed per second."""
        duration_s = self.end_time - self.start_time
        if duration_s <= 0:
            return 0.0
        return self.input_size / duration_s

    def to_dict(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "input_size": self.input_size,
            "total_duration_ms": self.total_duration_ms,
            "units_per_second": self.units_per_second,
            "memory_delta": self.memory_delta,
            "metadata": self.metadata,
        }


@dataclass
class PerformanceReport:
    """Summary over several profiling sessions."""

    sessions: List[ProfilingSession]
    generation_time: float

    @property
    def session_count(self) -> int:
        return len(self.sessions)

    @property
    def average_duration_ms(self) -> float:
        if not self.sessions:
            return 0.0
        return sum(s.total_duration_ms for s in self.sessions) / len(self.sessions)

    @property
    def max_memory_delta(self) -> int:
        if not self.sessions:
            return 0
        return max(s.memory_delta for s in self.sessions)


class PerformanceProfiler:
    """Profiler for escaping operations.

    Examples:
        >>> profiler = PerformanceProfiler()
        >>> with profiler.profile("run1", input_size=len(text)) as session:
        ...     escape_text(text)
        >>> report = profiler.generate_report()
    """

    def __init__(self, enable_memory_tracking: bool = True):
        """Initialize performance profiler.

        Args:
            enable_memory_tracking: Whether to sample resident memory with psutil
        """
        self.enable_memory_tracking = enable_memory_tracking
        self.sessions: List[ProfilingSession] = []
        self._process = psutil.Process() if enable_memory_tracking else None
        self.logger = get_logger(__name__, None, "performance_profiler")

    def _resident_memory(self) -> int:
        if self._process is None:
            return 0
        return self._process.memory_info().rss

    def start_session(self, session_id: str, input_size: int = 0) -> ProfilingSession:
        """Start a new profiling session."""
        session = ProfilingSession(
            session_id=session_id,
            start_time=time.time(),
            input_size=input_size,
            memory_start=self._resident_memory(),
        )
        self.logger.debug(
            "Started profiling session",
            extra={"session_id": session_id, "input_size": input_size}
        )
        return session

    def end_session(self, session: ProfilingSession) -> None:
        """End a profiling session and store results."""
        session.end_time = time.time()
        session.memory_end = self._resident_memory()
        self.sessions.append(session)
        self.logger.info(
            "Ended profiling session",
            extra={
                "session_id": session.session_id,
                "duration_ms": session.total_duration_ms,
                "memory_delta": session.memory_delta,
            }
        )

    def profile(self, session_id: str, input_size: int = 0) -> "SessionProfiler":
        """Context manager that profiles the enclosed block."""
        return SessionProfiler(self, session_id, input_size)

    def generate_report(self) -> PerformanceReport:
        return PerformanceReport(sessions=self.sessions.copy(), generation_time=time.time())

    def save_report(self, report: PerformanceReport, output_path: Path) -> None:
        """Save performance report to a JSON file."""
        report_data = {
            "generation_time": report.generation_time,
            "summary": {
                "session_count": report.session_count,
                "average_duration_ms": report.average_duration_ms,
                "max_memory_delta": report.max_memory_delta,
            },
            "sessions": [session.to_dict() for session in report.sessions],
        }
        output_path.write_text(json.dumps(report_data, indent=2))

    def clear_sessions(self) -> None:
        self.sessions.clear()


class SessionProfiler:
    """Context manager for profiling a block of code."""

    def __init__(self, profiler: PerformanceProfiler, session_id: str, input_size: int):
        self.profiler = profiler
        self.session_id = session_id
        self.input_size = input_size
        self.session: Optional[ProfilingSession] = None

    def __enter__(self) -> ProfilingSession:
        self.session = self.profiler.start_session(self.session_id, self.input_size)
        return self.session

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self.session is not None:
            self.profiler.end_session(self.session)


class RepeatingSource:
    """Code-unit source producing ``unit`` ``count`` times without storing the input."""

    def __init__(self, unit: str, count: int) -> None:
        if len(unit) != 1:
            raise ValueError("unit must be a single code unit")
        if count < 0:
            raise ValueError("count must be >= 0")
        self.unit = unit
        self.remaining = count
        self.closed = False

    def peek(self) -> Optional[str]:
        return self.unit if self.remaining > 0 else None

    def read(self) -> Optional[str]:
        if self.remaining <= 0:
            return None
        self.remaining -= 1
        return self.unit

    def close(self) -> None:
        self.closed = True


def benchmark_escaper(
    count: int,
    unit: str = "&",
    profiler: Optional[PerformanceProfiler] = None,
) -> ProfilingSession:
    """Stream ``count`` copies of ``unit`` through the escaper and measure it.

    The output is counted, never stored, so the memory delta reflects only the
    escaper's own buffering.

    Returns:
        Session whose metadata holds ``output_length``, ``expected_length``,
        and ``max_buffer_size``
    """
    profiler = profiler or PerformanceProfiler()
    # Illegal units are dropped
    expected_per_unit = len(XML_ENTITIES.get(unit, unit)) if is_legal_code_unit(ord(unit)) else 0

    with profiler.profile(f"escape_{count}x{ord(unit):04X}", input_size=count) as session:
        output_length = 0
        max_buffer_size = 0
        with XmlTextEscaper(RepeatingSource(unit, count)) as escaper:
            while escaper.peek() is not None:
                max_buffer_size = max(max_buffer_size, escaper.buffered)
                escaper.read()
                output_length += 1
        session.metadata.update({
            "output_length": output_length,
            "expected_length": count * expected_per_unit,
            "max_buffer_size": max_buffer_size,
        })

    return session
