"""Operation counters and timings for detection runs."""

import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterator

from .logging import get_logger

logger = get_logger("metrics")


@dataclass
class TimingStats:
    """Statistics for timing measurements."""

    count: int = 0
    total_time: float = 0.0
    min_time: float = float("inf")
    max_time: float = 0.0

    def add(self, duration: float) -> None:
        """Add a timing measurement."""
        self.count += 1
        self.total_time += duration
        self.min_time = min(self.min_time, duration)
        self.max_time = max(self.max_time, duration)

    @property
    def avg_time(self) -> float:
        """Calculate average time."""
        return self.total_time / self.count if self.count > 0 else 0.0


@dataclass
class OperationMetrics:
    """Counters, error tallies and timings for one process.

    Fallback counters (``evidence_unavailable``, ``malformed_segment``,
    ``detector_failure``) let operators tell a genuinely clean document
    from one whose evidence was substituted with zeros.
    """

    timing: dict[str, TimingStats] = field(default_factory=dict)
    counters: dict[str, int] = field(default_factory=dict)
    errors: dict[str, int] = field(default_factory=dict)

    def record_timing(self, operation: str, duration: float) -> None:
        """Record timing for an operation."""
        if operation not in self.timing:
            self.timing[operation] = TimingStats()
        self.timing[operation].add(duration)

    def increment(self, counter: str, value: int = 1) -> None:
        """Increment a counter."""
        self.counters[counter] = self.counters.get(counter, 0) + value

    def record_error(self, error_type: str) -> None:
        """Record an error occurrence."""
        self.errors[error_type] = self.errors.get(error_type, 0) + 1

    def summary(self) -> dict[str, Any]:
        """Get a summary of all metrics."""
        return {
            "timing": {
                name: {
                    "count": stats.count,
                    "total": stats.total_time,
                    "avg": stats.avg_time,
                    "min": stats.min_time if stats.min_time != float("inf") else 0,
                    "max": stats.max_time,
                }
                for name, stats in self.timing.items()
            },
            "counters": dict(self.counters),
            "errors": dict(self.errors),
        }


# Global metrics instance
_operation_metrics: OperationMetrics | None = None


def get_operation_metrics() -> OperationMetrics:
    """Get or create the global operation metrics instance."""
    global _operation_metrics
    if _operation_metrics is None:
        _operation_metrics = OperationMetrics()
    return _operation_metrics


def reset_operation_metrics() -> OperationMetrics:
    """Replace the global metrics with a fresh instance."""
    global _operation_metrics
    _operation_metrics = OperationMetrics()
    return _operation_metrics


@contextmanager
def timed_operation(name: str) -> Iterator[None]:
    """Context manager for timing an operation.

    Usage:
        with timed_operation("llm_inference"):
            # do work
    """
    metrics = get_operation_metrics()
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        metrics.record_timing(name, duration)
        logger.debug(f"{name}: {duration:.3f}s")


def format_duration(seconds: float) -> str:
    """Format duration in human-readable format."""
    if seconds < 60:
        return f"{seconds:.1f}s"
    elif seconds < 3600:
        minutes = seconds / 60
        return f"{minutes:.1f}m"
    else:
        hours = seconds / 3600
        return f"{hours:.1f}h"
