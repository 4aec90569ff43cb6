"""
Payer domain models for SynthCohort.

Payers are insurance programs or carriers. Each payer carries aggregate
statistics across every agent it covers.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID

from synthcohort.domain.enums import GovernmentProgram

if TYPE_CHECKING:
    from synthcohort.domain.agent import Agent


@dataclass
class PayerStats:
    """
    Aggregate statistics for one payer.

    Every field is an accumulator: contributions from different agents are
    only ever added, so stats collected by separate workers combine with
    merge() in any order.
    """

    customer_years: int = 0
    customers: set[UUID] = field(default_factory=set)
    qols_by_year: dict[int, float] = field(default_factory=lambda: defaultdict(float))
    revenue: Decimal = Decimal("0")

    @property
    def unique_customers(self) -> int:
        """Number of distinct agents ever covered."""
        return len(self.customers)

    def merge(self, other: "PayerStats") -> "PayerStats":
        """
        Combine two sets of statistics into a new instance.

        Args:
            other: Statistics to merge with

        Returns:
            New PayerStats holding the combined totals
        """
        qols: dict[int, float] = defaultdict(float)
        for source in (self.qols_by_year, other.qols_by_year):
            for year, score in source.items():
                qols[year] += score

        return PayerStats(
            customer_years=self.customer_years + other.customer_years,
            customers=self.customers | other.customers,
            qols_by_year=qols,
            revenue=self.revenue + other.revenue,
        )

    __add__ = merge


class Payer:
    """
    An insurance program or carrier.

    Government payers are identified by their program; their eligibility is
    decided by EligibilityRules. Private payers accept agents within their
    configured age band.
    """

    def __init__(
        self,
        name: str,
        program: GovernmentProgram | None = None,
        monthly_premium: Decimal = Decimal("0"),
        min_age: int = 0,
        max_age: int = 140,
    ):
        """
        Initialize the payer.

        Args:
            name: Display name
            program: Government program, or None for a private carrier
            monthly_premium: Monthly premium charged per covered agent
            min_age: Minimum accepted age (private payers)
            max_age: Maximum accepted age (private payers)
        """
        self.name = name
        self.program = program
        self.monthly_premium = Decimal(monthly_premium)
        self.min_age = min_age
        self.max_age = max_age
        self.stats = PayerStats()

    @property
    def is_government(self) -> bool:
        """Whether this payer is a government program."""
        return self.program is not None

    @property
    def yearly_premium(self) -> Decimal:
        """Premium cost over a full year of coverage."""
        return self.monthly_premium * 12

    def increment_customers(self, agent: "Agent") -> None:
        """Count one year of coverage for an agent."""
        self.stats.customer_years += 1
        self.stats.customers.add(agent.agent_id)

    def add_quality_of_life(self, year: int, score: float) -> None:
        """Accumulate a covered agent's quality-of-life score for a year."""
        self.stats.qols_by_year[year] += score

    def record_premium(self, amount: Decimal) -> None:
        """Accumulate premium revenue."""
        self.stats.revenue += amount

    def __repr__(self) -> str:
        kind = self.program.value if self.program else "Private"
        return f"Payer(name={self.name!r}, kind={kind})"


# Display name of the sentinel payer for agents without coverage
NO_INSURANCE_NAME = "No Insurance"


class PayerRegistry:
    """
    Registry of the payers available to one worker.

    Usage:
        registry = PayerRegistry(government={GovernmentProgram.MEDICARE: medicare},
                                 private=[carrier_a, carrier_b])
        medicare = registry.get_government(GovernmentProgram.MEDICARE)
        payer = registry.get("Carrier A")
    """

    def __init__(
        self,
        government: dict[GovernmentProgram, Payer],
        private: list[Payer],
        no_insurance: Payer | None = None,
    ):
        """
        Initialize the registry.

        Args:
            government: Government payers keyed by program
            private: Private carriers
            no_insurance: Sentinel for uninsured agents (default: a fresh
                sentinel so each registry keeps its own statistics)
        """
        self.government = dict(government)
        self.private = list(private)
        self.no_insurance = no_insurance or Payer(NO_INSURANCE_NAME)

        self._by_name: dict[str, Payer] = {}
        for payer in [*self.government.values(), *self.private, self.no_insurance]:
            if payer.name in self._by_name:
                raise ValueError(f"Duplicate payer name: {payer.name}")
            self._by_name[payer.name] = payer

    def get_government(self, program: GovernmentProgram) -> Payer | None:
        """Get the payer running a government program, if configured."""
        return self.government.get(program)

    def get(self, name: str) -> Payer:
        """
        Look up a payer by display name.

        Raises:
            KeyError: If no payer has that name
        """
        return self._by_name[name]

    def is_no_insurance(self, payer: Payer) -> bool:
        """Whether a payer is the uninsured sentinel."""
        return payer is self.no_insurance

    def all_payers(self) -> list[Payer]:
        """All payers including the uninsured sentinel."""
        return list(self._by_name.values())

    def collect_stats(self) -> dict[str, PayerStats]:
        """Snapshot of every payer's statistics keyed by name."""
        return {name: payer.stats for name, payer in self._by_name.items()}


def merge_payer_stats(*collections: dict[str, PayerStats]) -> dict[str, PayerStats]:
    """
    Merge per-worker payer statistics.

    Args:
        *collections: Results of PayerRegistry.collect_stats() from each worker

    Returns:
        Combined statistics keyed by payer name
    """
    merged: dict[str, PayerStats] = {}
    for collection in collections:
        for name, stats in collection.items():
            merged[name] = merged[name].merge(stats) if name in merged else stats.merge(PayerStats())
    return merged
