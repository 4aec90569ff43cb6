"""
Time conversion utilities for SynthCohort.

Provides date manipulation functions used throughout the simulation.
"""

from datetime import date, timedelta
from dateutil.relativedelta import relativedelta


# Episode windows use a fixed 365-day year
DAYS_PER_YEAR = 365


def days_between(start: date, end: date) -> int:
    """
    Calculate the number of days between two dates.

    Args:
        start: Start date
        end: End date

    Returns:
        Number of days (positive if end > start)
    """
    return (end - start).days


def years_elapsed(start: date, end: date) -> float:
    """
    Fractional number of fixed-length years between two dates.

    Args:
        start: Start date
        end: End date

    Returns:
        Elapsed days divided by DAYS_PER_YEAR
    """
    return days_between(start, end) / DAYS_PER_YEAR


def add_days(d: date, days: int) -> date:
    """
    Add days to a date.

    Args:
        d: Base date
        days: Number of days to add (can be negative)

    Returns:
        New date
    """
    return d + timedelta(days=days)


def add_years(d: date, years: int) -> date:
    """
    Add fixed-length years (DAYS_PER_YEAR days each) to a date.

    Args:
        d: Base date
        years: Number of years to add

    Returns:
        New date
    """
    return d + timedelta(days=DAYS_PER_YEAR * years)


def add_months(d: date, months: int) -> date:
    """
    Add months to a date.

    Handles end-of-month edge cases (e.g., Jan 31 + 1 month = Feb 28).

    Args:
        d: Base date
        months: Number of months to add (can be negative)

    Returns:
        New date
    """
    return d + relativedelta(months=months)


def get_age(date_of_birth: date, as_of_date: date) -> int:
    """
    Calculate age in complete years.

    Args:
        date_of_birth: Birth date
        as_of_date: Date to calculate age as of

    Returns:
        Age in complete years
    """
    age = as_of_date.year - date_of_birth.year

    # Adjust if birthday hasn't occurred yet this year
    if (as_of_date.month, as_of_date.day) < (date_of_birth.month, date_of_birth.day):
        age -= 1

    return max(0, age)


def get_age_in_months(date_of_birth: date, as_of_date: date) -> int:
    """
    Calculate age in complete calendar months.

    Args:
        date_of_birth: Birth date
        as_of_date: Date to calculate age as of

    Returns:
        Age in complete months
    """
    delta = relativedelta(as_of_date, date_of_birth)
    return max(0, delta.years * 12 + delta.months)
