"""
Weight management episode model for SynthCohort.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any

from synthcohort.domain.enums import WeightManagementPhase
from synthcohort.utils.time_conversion import years_elapsed


LOSS_PHASE_YEARS = 1
EPISODE_YEARS = 5


@dataclass(frozen=True)
class WeightManagementEpisode:
    """
    One contiguous period of active weight management.

    Every field is sampled or captured once, on entry. The episode is
    frozen: a fresh entry creates a new instance, and exit removes the
    instance from the agent, so all fields appear and disappear together.
    """

    start_time: date
    pre_management_weight: float
    loss_fraction: float
    adheres: bool
    long_term_success: bool
    entry_weight_percentile: float = 0.5

    @property
    def minimum_weight(self) -> float:
        """Weight reached at the end of the loss phase."""
        return self.pre_management_weight * (1 - self.loss_fraction)

    def years_elapsed(self, time: date) -> float:
        """Fixed-length years since the episode started."""
        return years_elapsed(self.start_time, time)

    def phase_at(self, time: date) -> WeightManagementPhase:
        """
        Phase of the episode at the given time.

        Phase boundaries are inclusive: exactly one year after the start is
        still the loss phase and exactly five years is still regression.
        """
        elapsed = self.years_elapsed(time)
        if elapsed <= LOSS_PHASE_YEARS:
            return WeightManagementPhase.LOSS
        if elapsed <= EPISODE_YEARS:
            return WeightManagementPhase.REGRESSION
        return WeightManagementPhase.RESOLVED

    def as_attributes(self) -> dict[str, Any]:
        """Flat attribute view of the episode."""
        return {
            "active": True,
            "start_time": self.start_time,
            "pre_management_weight": self.pre_management_weight,
            "loss_fraction": self.loss_fraction,
            "adheres": self.adheres,
            "long_term_success": self.long_term_success,
        }
