"""
Agent model for SynthCohort.

An agent is one synthetic patient: fixed identity, socioeconomic and
clinical fields, time-indexed vital signs, a weight management episode,
coverage history and its own random stream.
"""

import math
from bisect import bisect_right
from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID

from numpy.random import Generator as RNG

from synthcohort.domain.coverage import CoverageHistory
from synthcohort.domain.enums import CoverageStatus, Gender, VitalSign, WeightManagementPhase
from synthcohort.domain.weight import WeightManagementEpisode
from synthcohort.utils.time_conversion import get_age, get_age_in_months


# Measurements that must stay finite and non-negative
BODY_MEASUREMENTS = frozenset({VitalSign.WEIGHT, VitalSign.HEIGHT, VitalSign.BMI})

WEIGHT_MANAGEMENT_KEYS = (
    "active",
    "start_time",
    "pre_management_weight",
    "loss_fraction",
    "adheres",
    "long_term_success",
)


class MissingAttributeError(KeyError):
    """
    Raised when a phase computation needs agent data that is absent.

    Indicates a broken state-machine invariant for one agent; the tick
    driver aborts that agent's evaluation for the tick and logs it.
    """

    def __init__(self, agent_id: UUID, attribute: str, time: date):
        self.agent_id = agent_id
        self.attribute = attribute
        self.time = time
        super().__init__(attribute)

    def __str__(self) -> str:
        return (
            f"Agent {self.agent_id} is missing {self.attribute!r} "
            f"at {self.time.isoformat()}"
        )


class VitalSignStore:
    """
    Time-indexed vital sign values.

    Values are read as of a time (most recent entry at or before it) and
    written at the current tick only: a write may overwrite the latest
    entry or append a later one, never rewrite history.
    """

    def __init__(self) -> None:
        self._times: dict[VitalSign, list[date]] = {}
        self._values: dict[VitalSign, dict[date, float]] = {}

    def get(self, sign: VitalSign, time: date) -> float | None:
        """Most recent value at or before time, or None."""
        times = self._times.get(sign)
        if not times:
            return None
        idx = bisect_right(times, time)
        if idx == 0:
            return None
        return self._values[sign][times[idx - 1]]

    def set(self, sign: VitalSign, time: date, value: float) -> None:
        """
        Record a value at a time.

        Raises:
            ValueError: If time precedes the latest entry, or a body
                measurement is non-finite or negative
        """
        if sign in BODY_MEASUREMENTS and (not math.isfinite(value) or value < 0):
            raise ValueError(f"Invalid {sign.value} value: {value}")

        times = self._times.setdefault(sign, [])
        values = self._values.setdefault(sign, {})
        if times and time < times[-1]:
            raise ValueError(
                f"Cannot write {sign.value} at {time.isoformat()}: "
                f"latest entry is {times[-1].isoformat()}"
            )
        if not times or times[-1] != time:
            times.append(time)
        values[time] = float(value)

    def history(self, sign: VitalSign) -> list[tuple[date, float]]:
        """All recorded (time, value) pairs for a sign."""
        return [(t, self._values[sign][t]) for t in self._times.get(sign, [])]


class Agent:
    """
    A simulated individual.

    Usage:
        agent = Agent(uuid4(), date(1980, 5, 1), Gender.FEMALE, rng, income=45000)
        agent.set_vital_sign(VitalSign.WEIGHT, date(2020, 1, 1), 82.0)
        age = agent.age_in_years(date(2020, 1, 1))
    """

    def __init__(
        self,
        agent_id: UUID,
        birth_date: date,
        gender: Gender,
        rng: RNG,
        income: int = 0,
        occupation_level: float = 0.0,
        pregnant: bool = False,
        blindness: bool = False,
        end_stage_renal_disease: bool = False,
        death_date: date | None = None,
    ):
        """
        Initialize the agent.

        Args:
            agent_id: Unique identifier
            birth_date: Date of birth
            gender: Gender (selects growth chart curves)
            rng: Random stream owned by this agent
            income: Annual income ($)
            occupation_level: Occupation level, 0 (lowest) to 1 (highest)
            pregnant: Currently pregnant
            blindness: Legally blind
            end_stage_renal_disease: Has end-stage renal disease
            death_date: Date of death, if already determined
        """
        self.agent_id = agent_id
        self.birth_date = birth_date
        self.gender = Gender(gender)
        self.rng = rng
        self.income = income
        self.occupation_level = occupation_level
        self.pregnant = pregnant
        self.blindness = blindness
        self.end_stage_renal_disease = end_stage_renal_disease
        self.death_date = death_date

        self.vital_signs = VitalSignStore()
        self.weight_management: WeightManagementEpisode | None = None
        self.coverage = CoverageHistory()
        self.coverage_status: CoverageStatus | None = None
        self.quality_of_life: dict[int, float] = {}
        self.premium_expenses = Decimal("0")

    # Derived demographics

    def alive(self, time: date) -> bool:
        """Whether the agent is alive at a time."""
        return self.death_date is None or time < self.death_date

    def age_in_years(self, time: date) -> int:
        """Age in complete years."""
        return get_age(self.birth_date, time)

    def age_in_months(self, time: date) -> int:
        """Age in complete months."""
        return get_age_in_months(self.birth_date, time)

    def quality_of_life_for_year(self, year: int) -> float:
        """Quality-of-life score for a year (1.0 when none was recorded)."""
        return self.quality_of_life.get(year, 1.0)

    # Randomness

    def rand(self) -> float:
        """Uniform draw from [0, 1)."""
        return float(self.rng.random())

    def rand_range(self, low: float, high: float) -> float:
        """Uniform draw from [low, high)."""
        return float(self.rng.uniform(low, high))

    # Vital signs

    def get_vital_sign(self, sign: VitalSign, time: date) -> float:
        """
        Get a vital sign that must be present.

        Raises:
            MissingAttributeError: If no value is recorded at or before time
        """
        value = self.vital_signs.get(sign, time)
        if value is None:
            raise MissingAttributeError(self.agent_id, sign.value, time)
        return value

    def set_vital_sign(self, sign: VitalSign, time: date, value: float) -> None:
        """Record a vital sign at the current time."""
        self.vital_signs.set(sign, time, value)

    # Weight management

    @property
    def active_weight_management(self) -> bool:
        """Whether a weight management episode is active."""
        return self.weight_management is not None

    def weight_management_phase(self, time: date) -> WeightManagementPhase:
        """Phase of the current episode, or INACTIVE without one."""
        if self.weight_management is None:
            return WeightManagementPhase.INACTIVE
        return self.weight_management.phase_at(time)

    def weight_management_attributes(self) -> dict[str, Any]:
        """
        Flat attribute view of the weight management state.

        Every key in WEIGHT_MANAGEMENT_KEYS is present while an episode is
        active and none is present otherwise.
        """
        if self.weight_management is None:
            return {}
        return self.weight_management.as_attributes()

    def __repr__(self) -> str:
        return f"Agent(agent_id={self.agent_id}, birth_date={self.birth_date.isoformat()})"
