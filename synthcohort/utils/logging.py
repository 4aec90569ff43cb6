"""
Structured logging configuration for SynthCohort.

Uses structlog for structured, contextual logging.
"""

import logging
import sys
from typing import Any

import structlog


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    include_timestamp: bool = True,
) -> None:
    """
    Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: If True, output logs as JSON
        include_timestamp: If True, include timestamp in logs
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper()),
    )

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class SimulationLogger:
    """
    Specialized logger for simulation events.

    Provides convenience methods for common simulation logging patterns.

    Usage:
        logger = SimulationLogger(worker_id=0)
        logger.simulation_started("2020-01-01", "2030-01-01", agents=500)
        logger.simulation_progress("2024-06-01", 40.0)
    """

    def __init__(self, worker_id: int = 0):
        """
        Initialize the simulation logger.

        Args:
            worker_id: Worker process identifier
        """
        self.worker_id = worker_id
        self._logger = structlog.get_logger().bind(worker_id=worker_id)

    def simulation_started(self, start_date: str, end_date: str, **kwargs: Any) -> None:
        """Log simulation start."""
        self._logger.info(
            "simulation_started",
            start_date=start_date,
            end_date=end_date,
            **kwargs,
        )

    def simulation_completed(self, elapsed_seconds: float, **kwargs: Any) -> None:
        """Log simulation completion."""
        self._logger.info(
            "simulation_completed",
            elapsed_seconds=elapsed_seconds,
            **kwargs,
        )

    def simulation_progress(
        self,
        current_date: str,
        progress_pct: float,
        **kwargs: Any,
    ) -> None:
        """Log simulation progress."""
        self._logger.info(
            "simulation_progress",
            current_date=current_date,
            progress_pct=f"{progress_pct:.1f}%",
            **kwargs,
        )
