"""Developer tools for XML Text Escaper.

This module provides performance profiling for escaping runs.
"""

from .profiling import (
    PerformanceProfiler,
    PerformanceReport,
    ProfilingSession,
    RepeatingSource,
    benchmark_escaper,
)

__all__ = [
    "PerformanceProfiler",
    "PerformanceReport",
    "ProfilingSession",
    "RepeatingSource",
    "benchmark_escaper",
]
