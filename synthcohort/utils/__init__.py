"""
Utility modules for SynthCohort.

Provides:
- Time conversion utilities
- Structured logging configuration
"""

from synthcohort.utils.time_conversion import (
    DAYS_PER_YEAR,
    days_between,
    years_elapsed,
    add_days,
    add_years,
    add_months,
    get_age,
    get_age_in_months,
)
from synthcohort.utils.logging import configure_logging, SimulationLogger

__all__ = [
    # Time conversion
    "DAYS_PER_YEAR",
    "days_between",
    "years_elapsed",
    "add_days",
    "add_years",
    "add_months",
    "get_age",
    "get_age_in_months",
    # Logging
    "configure_logging",
    "SimulationLogger",
]
