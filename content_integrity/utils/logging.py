"""Logging configuration for Content Integrity.

Substituted evidence is logged with an ``evidence_source`` attribute on
the record. :class:`EvidenceAudit` collects
those records during a run so that a "nothing found" verdict can be reported
together with the calls whose evidence was replaced by zeros.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "content_integrity"

# Global console instance; stdout stays free for command output
console = Console(stderr=True)

_FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(evidence_source)s | %(message)s"


class _EvidenceSourceDefault(logging.Filter):
    """Give records without an evidence source a placeholder for the file format."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "evidence_source"):
            record.evidence_source = "-"
        return True


def setup_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO",
    log_file: Path | None = None,
) -> logging.Logger:
    """Configure the package logger.

    Terminal output goes through rich. The optional log file records every
    level, with the evidence source of substituted calls in its own column.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, level))
    logger.handlers.clear()

    rich_handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        markup=True,
        rich_tracebacks=True,
    )
    rich_handler.setLevel(getattr(logging, level))
    rich_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(rich_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.addFilter(_EvidenceSourceDefault())
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)
        # The file must see debug records even when the terminal does not
        logger.setLevel(logging.DEBUG)

    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger under the ``content_integrity.`` namespace."""
    if name:
        return logging.getLogger(f"{ROOT_LOGGER}.{name}")
    return logging.getLogger(ROOT_LOGGER)


@dataclass(frozen=True)
class SubstitutedEvidence:
    """One external call or detector whose result was replaced by zero evidence."""

    source: str
    level: str
    message: str


class EvidenceAudit(logging.Handler):
    """Collects substituted-evidence records from the package loggers.

    Usage:
        with EvidenceAudit() as audit:
            await orchestrator.analyze(text)
        for item in audit.substitutions:
            ...
    """

    def __init__(self) -> None:
        super().__init__(level=logging.WARNING)
        self.substitutions: list[SubstitutedEvidence] = []
        self._previous_level: int | None = None

    def emit(self, record: logging.LogRecord) -> None:
        source = getattr(record, "evidence_source", None)
        if source is None:
            return
        self.substitutions.append(
            SubstitutedEvidence(source=source, level=record.levelname, message=record.getMessage())
        )

    def attach(self) -> "EvidenceAudit":
        logger = logging.getLogger(ROOT_LOGGER)
        # Substitutions are audited even when the terminal shows errors only
        if logger.getEffectiveLevel() > logging.WARNING:
            self._previous_level = logger.level
            logger.setLevel(logging.WARNING)
        logger.addHandler(self)
        return self

    def detach(self) -> None:
        logger = logging.getLogger(ROOT_LOGGER)
        logger.removeHandler(self)
        if self._previous_level is not None:
            logger.setLevel(self._previous_level)
            self._previous_level = None

    def __enter__(self) -> "EvidenceAudit":
        return self.attach()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.detach()


class LogContext:
    """Log the start and end of a stage with its elapsed time."""

    def __init__(self, message: str, logger: logging.Logger | None = None):
        self.message = message
        self.logger = logger or get_logger()
        self._started = 0.0

    def __enter__(self) -> "LogContext":
        self._started = time.perf_counter()
        self.logger.info(f"[bold blue]>>>[/bold blue] {self.message}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        elapsed = time.perf_counter() - self._started
        if exc_type:
            self.logger.error(
                f"[bold red]<<<[/bold red] {self.message} [FAILED after {elapsed:.2f}s]"
            )
        else:
            self.logger.info(
                f"[bold green]<<<[/bold green] {self.message} [DONE in {elapsed:.2f}s]"
            )
