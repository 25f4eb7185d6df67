"""Logging and metrics helpers."""

from .logging import EvidenceAudit, LogContext, SubstitutedEvidence, get_logger, setup_logging
from .metrics import (
    OperationMetrics,
    format_duration,
    get_operation_metrics,
    reset_operation_metrics,
    timed_operation,
)

__all__ = [
    "EvidenceAudit",
    "LogContext",
    "SubstitutedEvidence",
    "get_logger",
    "setup_logging",
    "OperationMetrics",
    "format_duration",
    "get_operation_metrics",
    "reset_operation_metrics",
    "timed_operation",
]
