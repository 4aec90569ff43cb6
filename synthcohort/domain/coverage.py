"""
Coverage history models for SynthCohort.

An agent's coverage is a sequence of one-year records, each naming a
primary and a secondary payer. Payers are referenced by name so records
stay valid when agents are shipped between worker processes.
"""

from datetime import date

from pydantic import BaseModel, Field

from synthcohort.utils.time_conversion import add_months


COVERAGE_TERM_MONTHS = 12


class CoverageRecord(BaseModel):
    """A payer assignment covering the half-open interval [start, end)."""

    start: date
    end: date
    primary: str = Field(..., min_length=1)
    secondary: str = Field(..., min_length=1)

    def covers(self, time: date) -> bool:
        """Whether this record covers the given instant."""
        return self.start <= time < self.end

    model_config = {"frozen": True}


class CoverageHistory:
    """
    Time-ordered coverage records for one agent.

    A payer is current until the record covering it expires; a new decision
    is needed whenever no record covers the current instant.
    """

    def __init__(self) -> None:
        self.records: list[CoverageRecord] = []
        self._premium_months_paid: set[tuple[int, int]] = set()

    def record_at_time(self, time: date) -> CoverageRecord | None:
        """Get the record covering a time, if any."""
        for record in reversed(self.records):
            if record.covers(time):
                return record
            if record.end <= time:
                break
        return None

    def payer_at_time(self, time: date) -> str | None:
        """Name of the primary payer covering a time, if any."""
        record = self.record_at_time(time)
        return record.primary if record else None

    def secondary_payer_at_time(self, time: date) -> str | None:
        """Name of the secondary payer covering a time, if any."""
        record = self.record_at_time(time)
        return record.secondary if record else None

    def last_record(self) -> CoverageRecord | None:
        """Most recent coverage record."""
        return self.records[-1] if self.records else None

    def set_payer_at_time(self, time: date, primary: str, secondary: str) -> CoverageRecord:
        """
        Record payers covering the agent for one year from a time.

        Args:
            time: Start of coverage
            primary: Primary payer name
            secondary: Secondary payer name

        Returns:
            The new coverage record

        Raises:
            ValueError: If the time precedes the latest record's start
        """
        last = self.last_record()
        if last is not None and time < last.start:
            raise ValueError(
                f"Coverage at {time.isoformat()} precedes existing record "
                f"starting {last.start.isoformat()}"
            )

        record = CoverageRecord(
            start=time,
            end=add_months(time, COVERAGE_TERM_MONTHS),
            primary=primary,
            secondary=secondary,
        )
        self.records.append(record)
        return record

    def premium_paid_for_month(self, time: date) -> bool:
        """Whether the premium for the month containing time has been paid."""
        return (time.year, time.month) in self._premium_months_paid

    def mark_premium_paid(self, time: date) -> None:
        """Mark the premium for the month containing time as paid."""
        self._premium_months_paid.add((time.year, time.month))
